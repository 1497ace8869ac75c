from datetime import datetime
from typing import Any, Dict, FrozenSet, List, Optional
from pydantic import BaseModel, ConfigDict
import time

class GameConfig(BaseModel):
    """Validation thresholds of one game. Durations are in milliseconds."""
    model_config = ConfigDict(frozen=True)

    max_score: float
    min_duration_ms: float
    max_score_per_second: float
    suspicious_patterns: FrozenSet[str] = frozenset()

class ActionRecord:
    __slots__ = ('type', 'data', 'timestamp')
    def __init__(self, type: str, data: Any, timestamp: float):
        self.type = type
        self.data = data
        self.timestamp = timestamp

    def to_dict(self):
        return {
            'type': self.type,
            'data': self.data,
            'timestamp': self.timestamp
        }

class ScoreSnapshot:
    __slots__ = ('score', 'timestamp')
    def __init__(self, score: float, timestamp: float):
        self.score = score
        self.timestamp = timestamp

class Session:
    """One tracked play attempt. Timestamps are epoch milliseconds."""
    __slots__ = ('session_id', 'user_id', 'game_id', '_start_time',
                 'actions', 'score_history', 'checksum_seed')

    def __init__(self, session_id: str, user_id: str, game_id: str,
                 start_time: float, checksum_seed: str):
        self.session_id = session_id
        self.user_id = user_id
        self.game_id = game_id
        self._start_time = start_time
        self.actions: List[ActionRecord] = []
        self.score_history: List[ScoreSnapshot] = []
        self.checksum_seed = checksum_seed

    @property
    def start_time(self) -> float:
        return self._start_time

    def age(self, now: float) -> float:
        return now - self._start_time

class ScoreRec:
    """A verified score on its way to the leaderboard table."""
    __slots__ = ('user_id', 'game_id', 'score', 'timestamp')
    def __init__(self, data: dict):
        self.user_id = data['user_id']
        self.game_id = data['game_id']
        self.score = float(data['score'])
        if data.get('timestamp') is None:
            self.timestamp = time.time()
        elif isinstance(data['timestamp'], datetime):
            self.timestamp = data['timestamp'].timestamp()
        else:
            self.timestamp = float(data['timestamp'])

    def to_dict(self):
        return {
            'user_id': self.user_id,
            'game_id': self.game_id,
            'score': self.score,
            'timestamp': self.timestamp
        }

class Leader:
    __slots__ = ('user_id', 'score')
    def __init__(self, user_id: str, score: float):
        self.user_id = user_id
        self.score = score

class AuditEntry:
    __slots__ = ('user_id', 'game_id', 'score', 'session_id',
                 'reason', 'severity', 'details', 'timestamp')
    def __init__(self, data: Dict[str, Any]):
        self.user_id = data.get('user_id')
        self.game_id = data.get('game_id')
        self.score = data.get('score')
        self.session_id = data.get('session_id')
        self.reason = data['reason']
        self.severity = data['severity']
        self.details = data.get('details')
        self.timestamp = float(data.get('timestamp') or time.time())

    def to_dict(self):
        return {
            'type': 'suspicious_score',
            'user_id': self.user_id,
            'game_id': self.game_id,
            'score': self.score,
            'session_id': self.session_id,
            'reason': self.reason,
            'severity': self.severity,
            'details': self.details,
            'timestamp': self.timestamp
        }

class BanRecord:
    __slots__ = ('user_id', 'reason', 'expires_at')
    def __init__(self, user_id: str, reason: Optional[str], expires_at: Optional[datetime]):
        self.user_id = user_id
        self.reason = reason
        self.expires_at = expires_at

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at < now
