"""Kafka configuration for the catalog event producer."""

import os

from pydantic import BaseModel, Field


class KafkaConfig(BaseModel):
    """Kafka configuration from environment variables."""

    bootstrap_servers: str = Field(default="localhost:9092")
    client_id: str = Field(default="marketplace")
    enabled: bool = Field(default=True)

    @classmethod
    def from_env(cls, client_id: str = "marketplace") -> "KafkaConfig":
        return cls(
            bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            client_id=os.getenv("KAFKA_CLIENT_ID", client_id),
            enabled=os.getenv("KAFKA_ENABLED", "true").lower() in ("1", "true", "yes"),
        )

    def to_producer_config(self) -> dict:
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "client.id": self.client_id,
            "acks": "all",
            "enable.idempotence": True,
        }
