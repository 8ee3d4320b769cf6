"""Attribute Service - attributes own an ordered list of values."""

from marketplace.dal.attribute_dal import AttributeDAL
from marketplace.services.facet import FacetService
from shared.kafka.topics import EventType


class AttributeService(FacetService):
    dal_class = AttributeDAL
    label = "attribute"
    article = "an"
    created_event = EventType.ATTRIBUTE_CREATED
    updated_event = EventType.ATTRIBUTE_UPDATED
    deleted_event = EventType.ATTRIBUTE_DELETED
    related_fields = ("values",)

    def _write_related(self, conn, entity_id, body, creating):
        # on update, values are replaced only when the request carries them
        if creating or body.values is not None:
            self._dal.replace_values(conn, entity_id, body.values)
