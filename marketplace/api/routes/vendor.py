"""Vendor-only endpoints."""

from fastapi import APIRouter, Depends

from marketplace.api.deps import get_services, vendor_caller
from marketplace.api.services import Services
from shared.models.common import Caller

router = APIRouter(prefix="/api/vendor", tags=["vendor"])


@router.get("/dashboard")
def vendor_dashboard(caller: Caller = Depends(vendor_caller),
                     services: Services = Depends(get_services)):
    return {"success": True, "stats": services.dashboard.vendor_stats(caller).model_dump()}
