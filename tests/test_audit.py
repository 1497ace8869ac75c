import asyncio
import logging
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from scoreguard.anticheat import AuditLogger
from scoreguard.anticheat.audit import build_entry
from scoreguard.database.audit_store import AuditStore
from scoreguard.database.kafka_manager import KafkaManager
from scoreguard.kafka.processor import MessageProcessor
from scoreguard.models.response import Reason, ValidationResult
from scoreguard.models.score import ScoreSubmission

from .conftest import FakeDatabase


def _entry():
    submission = ScoreSubmission(user_id="u1", game_id="snake", score=2_000_000, session_id="s1")
    result = ValidationResult.reject(Reason.SCORE_EXCEEDS_MAXIMUM, {"score": 2_000_000})
    return build_entry(submission, result)


def test_build_entry():
    payload = _entry().to_dict()
    assert payload["type"] == "suspicious_score"
    assert payload["reason"] == "score_exceeds_maximum"
    assert payload["severity"] == "critical"
    assert payload["session_id"] == "s1"
    assert payload["details"] == {"score": 2_000_000}
    assert payload["timestamp"] > 0


@pytest.mark.asyncio
async def test_record_returns_before_publish_completes():
    gate = asyncio.Event()

    async def slow_send(topic, value):
        await gate.wait()

    manager = MagicMock(send_message=AsyncMock(side_effect=slow_send))
    audit = AuditLogger(manager, topic="audit")
    task = audit.record(_entry())
    assert not task.done()

    gate.set()
    await audit.drain()
    topic, payload = manager.send_message.await_args.args
    assert topic == "audit"
    assert payload["reason"] == "score_exceeds_maximum"


@pytest.mark.asyncio
async def test_publish_failure_is_swallowed(caplog):
    manager = MagicMock(send_message=AsyncMock(side_effect=RuntimeError("broker down")))
    audit = AuditLogger(manager)
    with caplog.at_level(logging.ERROR):
        audit.record(_entry())
        await audit.drain()
    assert "Failed to publish audit entry" in caplog.text


def test_record_without_loop_does_not_raise():
    audit = AuditLogger(MagicMock())
    assert audit.record(_entry()) is None


@pytest.mark.asyncio
async def test_processor_writes_batch():
    store = MagicMock(insert_batch=AsyncMock())
    processor = MessageProcessor(store)
    messages = {"tp0": [SimpleNamespace(value=_entry().to_dict()), SimpleNamespace(value={"bad": 1})]}
    assert await processor.process_messages(messages) is True
    entries = store.insert_batch.await_args.args[0]
    assert [e.reason for e in entries] == ["score_exceeds_maximum"]


@pytest.mark.asyncio
async def test_processor_reports_store_failure():
    store = MagicMock(insert_batch=AsyncMock(side_effect=RuntimeError("db down")))
    processor = MessageProcessor(store)
    messages = {"tp0": [SimpleNamespace(value=_entry().to_dict())]}
    assert await processor.process_messages(messages) is False
    assert await processor.process_messages({}) is False


@pytest.mark.asyncio
async def test_audit_store_inserts_rows():
    db = FakeDatabase()
    await AuditStore(db).insert_batch([_entry()])
    rows = db.conn.executemany.await_args.args[1]
    assert rows[0][:6] == ("u1", "snake", "s1", "2000000", "score_exceeds_maximum", "critical")
    assert rows[0][6] == '{"score": 2000000}'
    assert db.held == 0


@pytest.mark.asyncio
async def test_kafka_send_retries_then_succeeds():
    manager = KafkaManager()
    manager._initialized = True
    manager.retry_delay = 0
    manager.producer = MagicMock(send=AsyncMock(side_effect=[RuntimeError("timeout"), None]))
    await manager.send_message("audit", {"a": 1})
    assert manager.producer.send.await_count == 2


@pytest.mark.asyncio
async def test_kafka_send_gives_up_after_max_retries():
    manager = KafkaManager()
    manager._initialized = True
    manager.retry_delay = 0
    manager.producer = MagicMock(send=AsyncMock(side_effect=RuntimeError("timeout")))
    with pytest.raises(RuntimeError):
        await manager.send_message("audit", {"a": 1})
    assert manager.producer.send.await_count == manager.max_retries
