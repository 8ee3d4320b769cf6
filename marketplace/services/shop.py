"""Shop & Vendor Service - admin approval workflow."""

import logging

from marketplace.dal.shop_dal import ShopDAL
from marketplace.services.access import require_admin
from marketplace.services.base import BaseService
from marketplace.utils.datetime_utils import utc_now
from shared.errors import NotFoundError
from shared.kafka.topics import EventType
from shared.models.common import Caller, Page
from shared.models.shop import Shop, ShopListQuery, Vendor, VendorStatus

logger = logging.getLogger(__name__)


class ShopService(BaseService):
    """Handles shop and vendor DB operations. Every operation is admin-only."""

    def __init__(self, database=None, kafka=None):
        super().__init__(database, kafka)
        self._dal = ShopDAL()

    def get_page(self, caller: Caller, query: ShopListQuery) -> Page:
        require_admin(caller)
        with self._read() as conn:
            return self._dal.execute_query(conn, [], query)

    def get(self, caller: Caller, shop_id: str) -> Shop:
        require_admin(caller)
        with self._read() as conn:
            shop = self._dal.get(conn, shop_id)
        if shop is None:
            raise NotFoundError("Shop not found.")
        return shop

    def update_status(self, caller: Caller, body) -> Shop:
        """`body` is an UpdateShopStatusRequest."""
        require_admin(caller)
        with self._write() as conn:
            if self._dal.get(conn, body.id) is None:
                raise NotFoundError("Shop not found.")
            self._dal.update_status(conn, body.id, body.status.value)
            shop = self._dal.get(conn, body.id)

        self._publish(EventType.SHOP_STATUS_CHANGED, body.id, {"shop_id": body.id, "status": body.status.value})
        return shop

    def update_vendor_status(self, caller: Caller, body) -> Vendor:
        """`body` is an UpdateVendorStatusRequest; activation stamps approved_at."""
        require_admin(caller)
        values = {"status": body.status.value}
        if body.status == VendorStatus.ACTIVE:
            values["approved_at"] = utc_now()

        with self._write() as conn:
            if self._dal.get_vendor(conn, body.vendor_id) is None:
                raise NotFoundError("Vendor not found.")
            self._dal.update_vendor(conn, body.vendor_id, values)
            vendor = self._dal.get_vendor(conn, body.vendor_id)

        self._publish(
            EventType.VENDOR_STATUS_CHANGED, body.vendor_id,
            {"vendor_id": body.vendor_id, "status": body.status.value},
        )
        return vendor
