from enum import Enum
from pydantic import BaseModel
from typing import Any, Dict, List, Literal, Optional

class Severity(str, Enum):
    ERROR = 'error'
    WARNING = 'warning'
    CRITICAL = 'critical'

class Reason(str, Enum):
    MISSING_REQUIRED_FIELDS = 'missing_required_fields'
    INVALID_SCORE_TYPE = 'invalid_score_type'
    UNKNOWN_GAME = 'unknown_game'
    SCORE_EXCEEDS_MAXIMUM = 'score_exceeds_maximum'
    SESSION_NOT_FOUND = 'session_not_found'
    SESSION_EXPIRED = 'session_expired'
    INSUFFICIENT_ACTIONS = 'insufficient_actions'
    SUSPICIOUS_SCORE_JUMP = 'suspicious_score_jump'
    IMPOSSIBLE_DURATION = 'impossible_duration'
    SUSPICIOUS_SCORE_RATE = 'suspicious_score_rate'
    INVALID_CHECKSUM = 'invalid_checksum'
    # raised by the service before validation, never by the validator
    USER_BANNED = 'user_banned'

REASON_SEVERITY = {
    Reason.MISSING_REQUIRED_FIELDS: Severity.ERROR,
    Reason.INVALID_SCORE_TYPE: Severity.ERROR,
    Reason.UNKNOWN_GAME: Severity.WARNING,
    Reason.SCORE_EXCEEDS_MAXIMUM: Severity.CRITICAL,
    Reason.SESSION_NOT_FOUND: Severity.WARNING,
    Reason.SESSION_EXPIRED: Severity.WARNING,
    Reason.INSUFFICIENT_ACTIONS: Severity.WARNING,
    Reason.SUSPICIOUS_SCORE_JUMP: Severity.WARNING,
    Reason.IMPOSSIBLE_DURATION: Severity.WARNING,
    Reason.SUSPICIOUS_SCORE_RATE: Severity.WARNING,
    Reason.INVALID_CHECKSUM: Severity.CRITICAL,
    Reason.USER_BANNED: Severity.CRITICAL,
}

class ValidationResult(BaseModel):
    valid: bool
    reason: Optional[Reason] = None
    severity: Optional[Severity] = None
    details: Optional[Dict[str, Any]] = None
    verified: Optional[bool] = None

    @classmethod
    def reject(cls, reason: Reason, details: Optional[Dict[str, Any]] = None) -> 'ValidationResult':
        return cls(valid=False, reason=reason, severity=REASON_SEVERITY[reason], details=details)

    @classmethod
    def accept(cls, verified: Optional[bool] = None) -> 'ValidationResult':
        return cls(valid=True, verified=verified)

    @property
    def flagged(self) -> bool:
        """Rejections that point at the player rather than a client bug."""
        return not self.valid and self.severity in (Severity.WARNING, Severity.CRITICAL)

    def to_wire(self, expose_details: bool = True) -> Dict[str, Any]:
        exclude = None if expose_details else {'details'}
        return self.model_dump(mode='json', exclude_none=True, exclude=exclude)

class SessionResponse(BaseModel):
    session_id: str

class RecordResponse(BaseModel):
    recorded: bool

class BanStatusResponse(BaseModel):
    user_id: str
    banned: bool

class LeaderboardEntry(BaseModel):
    user_id: str
    score: float
    rank: int

class LeaderboardResponse(BaseModel):
    game_id: str
    entries: List[LeaderboardEntry]

class HealthResponse(BaseModel):
    status: Literal["healthy"] = "healthy"
    uptime: float
