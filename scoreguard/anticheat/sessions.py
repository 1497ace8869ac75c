import secrets
import time
import uuid
from typing import Any, Callable, Dict, Optional
from ..models.data import ActionRecord, ScoreSnapshot, Session
from ..logger import get_logger

logger = get_logger()

SESSION_TIMEOUT_MS = 30 * 60 * 1000

def _now_ms() -> float:
    return time.time() * 1000

class SessionStore:
    """
    In-process registry of active play sessions.

    Sessions are transient play telemetry: they live only as long as this
    process, so a deployment running several instances needs sticky routing
    or a shared store for validation to see the session it started.

    Expired sessions are swept synchronously from ``create``; there is no
    background timer. Mutations never await, so they are atomic with
    respect to each other on a single event loop.
    """

    def __init__(self, timeout_ms: float = SESSION_TIMEOUT_MS,
                 clock: Callable[[], float] = _now_ms):
        self.timeout_ms = timeout_ms
        self._clock = clock
        self._sessions: Dict[str, Session] = {}

    def now(self) -> float:
        return self._clock()

    def create(self, user_id: str, game_id: str) -> str:
        """Open a session and return its id"""
        now = self.now()
        session_id = f"{user_id}_{game_id}_{int(now)}_{uuid.uuid4().hex[:8]}"
        self._sessions[session_id] = Session(
            session_id=session_id,
            user_id=user_id,
            game_id=game_id,
            start_time=now,
            checksum_seed=secrets.token_hex(8)
        )
        self.sweep_expired(now)
        return session_id

    def get(self, session_id: str) -> Optional[Session]:
        return self._sessions.get(session_id)

    def record_action(self, session_id: str, action_type: str, data: Any = None) -> bool:
        session = self._sessions.get(session_id)
        if session is None:
            return False
        session.actions.append(ActionRecord(action_type, data, self.now()))
        return True

    def record_score(self, session_id: str, score: float) -> bool:
        session = self._sessions.get(session_id)
        if session is None:
            return False
        session.score_history.append(ScoreSnapshot(score, self.now()))
        return True

    def is_expired(self, session: Session, now: Optional[float] = None) -> bool:
        if now is None:
            now = self.now()
        return session.age(now) > self.timeout_ms

    def sweep_expired(self, now: Optional[float] = None) -> int:
        """Drop every session older than the timeout; returns how many went"""
        if now is None:
            now = self.now()
        expired = [sid for sid, s in self._sessions.items() if self.is_expired(s, now)]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.debug(f"Swept {len(expired)} expired sessions")
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)
