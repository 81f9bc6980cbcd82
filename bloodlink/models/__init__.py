# Re-export Beanie documents
from .donor import Donor
from .blood_request import BloodRequest, DonorDetails
from .message import Message
from .inventory import InventoryItem
