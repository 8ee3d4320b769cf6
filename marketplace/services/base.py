"""Plumbing shared by the catalog services."""

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Any, Iterator, Optional

from pydantic import BaseModel
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError

from marketplace.dal.base import exists_with
from marketplace.db.connection import Database, get_database
from marketplace.db.tables import shops
from marketplace.kafka.producer import KafkaProducer, get_kafka_producer
from shared.errors import DuplicateError, NotFoundError, UnexpectedError

logger = logging.getLogger(__name__)


def patch_values(body: BaseModel, nullable=(), exclude=("id",)) -> dict[str, Any]:
    """Fields the client actually sent, ready to write.

    Unset fields are left out so they keep their stored value, as are
    explicit nulls for fields not listed in ``nullable``. Enums are written
    as their value.
    """
    values = body.model_dump(exclude_unset=True, exclude=set(exclude))
    return {
        key: value.value if isinstance(value, Enum) else value
        for key, value in values.items()
        if value is not None or key in nullable
    }


def is_unique_violation(error: IntegrityError) -> bool:
    text = str(error.orig).lower()
    return "unique" in text or "duplicate" in text


class BaseService:
    """Database and Kafka handles plus the write/publish pattern.

    A mutation runs inside ``self._write(...)``; its event is published
    with ``self._publish(...)`` only after that block has committed.
    """

    def __init__(self, database: Optional[Database] = None, kafka: Optional[KafkaProducer] = None):
        self._db = database if database is not None else get_database()
        self._kafka = kafka if kafka is not None else get_kafka_producer()

    @contextmanager
    def _read(self) -> Iterator[Connection]:
        with self._db.get_connection() as conn:
            yield conn

    @contextmanager
    def _write(self, duplicate_message: str = "This record already exists.") -> Iterator[Connection]:
        try:
            with self._db.transaction() as conn:
                yield conn
        except IntegrityError as e:
            if is_unique_violation(e):
                raise DuplicateError(duplicate_message) from e
            logger.error(f"Integrity error: {e.orig}")
            raise UnexpectedError("The change conflicts with related records.") from e

    def _publish(self, event_type: str, entity_id: str, data: dict) -> None:
        self._kafka.emit(event_type=event_type, entity_id=entity_id, data=data)
        logger.info(f"[{event_type.upper().replace('.', '_')}] {entity_id}")

    @staticmethod
    def _require_shop(conn: Connection, shop_id: str) -> None:
        if not exists_with(conn, shops, shops.c.id == shop_id):
            raise NotFoundError("Shop not found.")
