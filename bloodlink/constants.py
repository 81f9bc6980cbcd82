from enum import Enum


class BloodGroup(str, Enum):
    """The 8 ABO/Rh blood groups."""
    O_NEG = "O-"
    O_POS = "O+"
    A_NEG = "A-"
    A_POS = "A+"
    B_NEG = "B-"
    B_POS = "B+"
    AB_NEG = "AB-"
    AB_POS = "AB+"


BLOOD_GROUPS = [g.value for g in BloodGroup]


class RequestStatus(str, Enum):
    """Blood request lifecycle: pending -> accepted (terminal)."""
    PENDING = "pending"
    ACCEPTED = "accepted"


class Urgency(str, Enum):
    NORMAL = "normal"
    URGENT = "urgent"
    CRITICAL = "critical"


# Sender label on donor-found messages
SYSTEM_SENDER = "BloodLink"
