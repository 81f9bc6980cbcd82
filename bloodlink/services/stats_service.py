from typing import Dict

from bloodlink.constants import RequestStatus
from bloodlink.models import BloodRequest, Donor


async def get_overview_stats() -> Dict[str, int]:
    """Donors registered and requests still pending."""
    donors = await Donor.find_all().count()
    open_requests = await BloodRequest.find(BloodRequest.status == RequestStatus.PENDING.value).count()
    return {"donorsCount": donors, "openRequestsCount": open_requests}
