import json

import pytest

from marketplace.kafka import producer as producer_module
from marketplace.kafka.producer import KafkaProducer
from shared.kafka.config import KafkaConfig
from shared.kafka.topics import EventType, Topic


class FakeProducer:
    def __init__(self, config):
        self.config = config
        self.produced = []
        self.polls = 0

    def produce(self, topic, value=None, key=None, callback=None):
        self.produced.append({"topic": topic, "value": value, "key": key})

    def poll(self, timeout):
        self.polls += 1

    def flush(self, timeout):
        return 0


@pytest.fixture
def fake_producer(monkeypatch):
    created = []

    def factory(config):
        instance = FakeProducer(config)
        created.append(instance)
        return instance

    monkeypatch.setattr(producer_module, "Producer", factory)
    return created


def test_emit_wraps_event_and_routes_by_type(fake_producer):
    producer = KafkaProducer(KafkaConfig(bootstrap_servers="broker:9092", client_id="tests"))
    producer.emit(EventType.COUPON_STATUS_CHANGED, entity_id="c-1", data={"status": "inactive"})

    backend = fake_producer[0]
    assert backend.config["bootstrap.servers"] == "broker:9092"
    assert backend.config["client.id"] == "tests"

    message = backend.produced[0]
    assert message["topic"] == Topic.COUPON
    assert message["key"] == b"c-1"
    event = json.loads(message["value"])
    assert event["event_type"] == "coupon.status_changed"
    assert event["entity_id"] == "c-1"
    assert event["data"] == {"status": "inactive"}
    assert event["event_id"] and event["timestamp"]
    assert backend.polls == 1


def test_disabled_producer_drops_messages(fake_producer):
    producer = KafkaProducer(KafkaConfig(enabled=False))
    assert producer.enabled is False
    producer.emit(EventType.BRAND_CREATED, entity_id="b-1", data={})
    assert producer.flush() == 0
    assert fake_producer == []


def test_unknown_event_type_is_rejected():
    with pytest.raises(ValueError):
        Topic.for_event("invoice.created")


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("KAFKA_BOOTSTRAP_SERVERS", "kafka:29092")
    monkeypatch.setenv("KAFKA_ENABLED", "false")
    config = KafkaConfig.from_env()
    assert config.bootstrap_servers == "kafka:29092"
    assert config.enabled is False
    assert config.to_producer_config()["acks"] == "all"


def test_full_local_queue_drops_event(fake_producer, monkeypatch, caplog):
    producer = KafkaProducer(KafkaConfig())

    def full_queue(*args, **kwargs):
        raise BufferError("Local: Queue full")

    monkeypatch.setattr(fake_producer[0], "produce", full_queue)
    with caplog.at_level("ERROR", logger="marketplace.kafka.producer"):
        producer.emit(EventType.PRODUCT_CREATED, entity_id="p-1", data={})

    assert fake_producer[0].polls == 0
    assert "Failed to queue product.created" in caplog.text
