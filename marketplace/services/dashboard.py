"""Dashboard Service - platform and vendor aggregates."""

import logging

from marketplace.dal.shop_dal import ShopDAL
from marketplace.services.access import require_admin, require_catalog_access
from marketplace.services.base import BaseService
from marketplace.utils.datetime_utils import month_start, utc_now
from shared.models.common import Caller
from shared.models.shop import PlatformStats, VendorStats

logger = logging.getLogger(__name__)


class DashboardService(BaseService):

    def __init__(self, database=None, kafka=None):
        super().__init__(database, kafka)
        self._dal = ShopDAL()

    def platform_stats(self, caller: Caller) -> PlatformStats:
        require_admin(caller)
        with self._read() as conn:
            return self._dal.platform_stats(conn, since=month_start(utc_now()))

    def vendor_stats(self, caller: Caller) -> VendorStats:
        """Totals across the shops the caller owns or works for."""
        require_catalog_access(caller)
        with self._read() as conn:
            return self._dal.vendor_stats(conn, caller.shop_ids)
