import pytest
from loguru import logger

from local_sync.application.events import LoguruEventSink
from local_sync.shared.constants.sync_constants import SyncEvent


@pytest.fixture
def captured():
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


def test_fields_are_bound_as_extra(captured):
    LoguruEventSink().error(SyncEvent.BATCH_EMPTY, batch=["uuid-a"])

    record = captured[-1]
    assert record["level"].name == "ERROR"
    assert record["extra"]["event"] == "batch_empty"
    assert record["extra"]["batch"] == ["uuid-a"]
    assert record["extra"]["component"] == "local_sync"
    assert record["message"] == "batch_empty | batch=['uuid-a']"


def test_event_without_fields(captured):
    LoguruEventSink().info(SyncEvent.CONNECTIONS_CLOSED)

    assert captured[-1]["message"] == "connections_closed"
    assert captured[-1]["level"].name == "INFO"


def test_warning_level(captured):
    LoguruEventSink().warning(SyncEvent.DUPLICATE_KEYS, entity="asset", keys=["uuid-a"])

    assert captured[-1]["level"].name == "WARNING"
    assert captured[-1]["extra"]["keys"] == ["uuid-a"]
