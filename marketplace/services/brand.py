"""Brand Service."""

from marketplace.dal.brand_dal import BrandDAL
from marketplace.services.facet import FacetService
from shared.kafka.topics import EventType


class BrandService(FacetService):
    dal_class = BrandDAL
    label = "brand"
    created_event = EventType.BRAND_CREATED
    updated_event = EventType.BRAND_UPDATED
    deleted_event = EventType.BRAND_DELETED
    nullable_fields = ("description", "logo", "website")
