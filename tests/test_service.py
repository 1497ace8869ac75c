import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from scoreguard.anticheat import AntiCheatService
from scoreguard.config import AntiCheatConfig
from scoreguard.database import BanRegistry
from scoreguard.models.response import Reason, Severity

from .conftest import FakeConnection, FakeDatabase

def _ban_registry(banned=False):
    registry = MagicMock()
    registry.is_banned = AsyncMock(return_value=banned)
    registry.ban = AsyncMock()
    return registry

@pytest.fixture()
def collaborators():
    return {
        "ban_registry": _ban_registry(),
        "audit_logger": MagicMock(),
        "score_store": MagicMock(save_score=AsyncMock()),
    }

@pytest.fixture()
def wired(config, sessions, collaborators):
    return AntiCheatService(config, sessions=sessions, **collaborators)

@pytest.mark.asyncio
async def test_valid_score_is_persisted(wired, collaborators):
    result = await wired.submit_score({"user_id": "u1", "game_id": "snake", "score": 500, "duration": 15000})
    assert result.valid is True
    rec = collaborators["score_store"].save_score.await_args.args[0]
    assert (rec.user_id, rec.game_id, rec.score) == ("u1", "snake", 500)
    collaborators["audit_logger"].record.assert_not_called()

@pytest.mark.asyncio
async def test_flagged_score_is_audited_not_persisted(wired, collaborators):
    sid = wired.start_session("u1", "snake")
    result = await wired.submit_score({"user_id": "u1", "game_id": "snake", "score": 50_000, "session_id": sid})
    assert result.reason == Reason.INSUFFICIENT_ACTIONS
    collaborators["score_store"].save_score.assert_not_called()
    entry = collaborators["audit_logger"].record.call_args.args[0]
    assert entry.reason == "insufficient_actions"
    assert entry.severity == "warning"
    assert entry.session_id == sid
    collaborators["ban_registry"].ban.assert_not_called()

@pytest.mark.asyncio
async def test_client_errors_are_not_audited(wired, collaborators):
    result = await wired.submit_score({"user_id": "u1", "game_id": "snake", "score": "lots"})
    assert result.severity == Severity.ERROR
    collaborators["audit_logger"].record.assert_not_called()

@pytest.mark.asyncio
async def test_critical_verdict_escalates_to_ban(wired, collaborators, config):
    sid = wired.start_session("u1", "snake")
    result = await wired.submit_score({"user_id": "u1", "game_id": "snake", "score": 2_000_000, "session_id": sid})
    assert result.severity == Severity.CRITICAL
    collaborators["ban_registry"].ban.assert_awaited_once_with(
        "u1", "score_exceeds_maximum", config.critical_ban_hours
    )
    collaborators["audit_logger"].record.assert_called_once()

@pytest.mark.asyncio
async def test_sessionless_critical_verdict_does_not_ban(wired, collaborators):
    result = await wired.submit_score({"user_id": "victim", "game_id": "snake", "score": 2_000_000})
    assert result.reason == Reason.SCORE_EXCEEDS_MAXIMUM
    collaborators["ban_registry"].ban.assert_not_called()
    collaborators["audit_logger"].record.assert_called_once()

@pytest.mark.asyncio
async def test_critical_verdict_on_someone_elses_session_does_not_ban(wired, collaborators):
    sid = wired.start_session("attacker", "snake")
    await wired.submit_score({"user_id": "victim", "game_id": "snake", "score": 2_000_000, "session_id": sid})
    collaborators["ban_registry"].ban.assert_not_called()

@pytest.mark.asyncio
async def test_escalation_can_be_disabled(sessions, collaborators):
    config = AntiCheatConfig(checksum_secret="s", auto_ban_on_critical=False)
    service = AntiCheatService(config, sessions=sessions, **collaborators)
    sid = service.start_session("u1", "snake")
    await service.submit_score({"user_id": "u1", "game_id": "snake", "score": 2_000_000, "session_id": sid})
    collaborators["ban_registry"].ban.assert_not_called()

@pytest.mark.asyncio
async def test_failed_escalation_keeps_verdict(wired, collaborators):
    collaborators["ban_registry"].ban.side_effect = RuntimeError("db down")
    sid = wired.start_session("u1", "snake")
    result = await wired.submit_score({"user_id": "u1", "game_id": "snake", "score": 2_000_000, "session_id": sid})
    assert result.reason == Reason.SCORE_EXCEEDS_MAXIMUM
    collaborators["ban_registry"].ban.assert_awaited_once()

@pytest.mark.asyncio
async def test_malformed_ids_get_a_verdict(wired, collaborators):
    result = await wired.submit_score({"user_id": 123, "game_id": "snake", "score": 5})
    assert result.reason == Reason.MISSING_REQUIRED_FIELDS
    collaborators["ban_registry"].is_banned.assert_not_called()


@pytest.mark.asyncio
async def test_banned_user_short_circuits(config, sessions, collaborators):
    collaborators["ban_registry"] = _ban_registry(banned=True)
    service = AntiCheatService(config, sessions=sessions, **collaborators)
    result = await service.submit_score({"user_id": "u1", "game_id": "snake", "score": 500})
    assert result.valid is False
    assert result.reason == Reason.USER_BANNED
    assert result.severity == Severity.CRITICAL
    collaborators["score_store"].save_score.assert_not_called()

@pytest.mark.asyncio
async def test_ban_store_outage_does_not_block_gameplay(config, sessions, caplog):
    conn = FakeConnection()
    conn.fetchrow.side_effect = ConnectionError("store unavailable")
    store = MagicMock(save_score=AsyncMock())
    service = AntiCheatService(config, sessions=sessions,
                               ban_registry=BanRegistry(FakeDatabase(conn)), score_store=store)

    with caplog.at_level(logging.ERROR):
        assert await service.is_user_banned("u1") is False
        result = await service.submit_score({"user_id": "u1", "game_id": "snake", "score": 500})

    assert result.valid is True
    store.save_score.assert_awaited_once()
    assert any(r.name == "scoreguard" and "failing open" in r.message for r in caplog.records)
    assert not any(r.name == "scoreguard.security" for r in caplog.records)

@pytest.mark.asyncio
async def test_no_collaborators(service):
    assert await service.is_user_banned("u1") is False
    result = await service.submit_score({"user_id": "u1", "game_id": "snake", "score": 10})
    assert result.valid is True

def test_record_progress_feeds_score_history(service):
    sid = service.start_session("u1", "snake")
    assert service.record_progress(sid, 40) is True
    assert service.sessions.get(sid).score_history[0].score == 40
    assert service.record_action("missing", "eat") is False
