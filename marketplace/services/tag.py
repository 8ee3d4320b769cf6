"""Tag Service."""

from marketplace.dal.tag_dal import TagDAL
from marketplace.services.facet import FacetService
from shared.kafka.topics import EventType


class TagService(FacetService):
    dal_class = TagDAL
    label = "tag"
    created_event = EventType.TAG_CREATED
    updated_event = EventType.TAG_UPDATED
    deleted_event = EventType.TAG_DELETED
    nullable_fields = ("description",)
