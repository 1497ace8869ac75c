import math
from typing import Any, Mapping, Optional, Union
from ..config import AntiCheatConfig, HeuristicThresholds
from ..models.data import GameConfig
from ..models.response import Reason, ValidationResult
from ..models.score import ScoreSubmission
from .checksum import ChecksumGenerator
from .games import GameConfigRegistry
from .sessions import SessionStore

def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)

def _is_valid_score(score: Any) -> bool:
    return _is_number(score) and score >= 0

def _is_id(value: Any) -> bool:
    return isinstance(value, str) and bool(value)

class ScoreValidator:
    """
    Runs the check battery over a score submission.

    Checks run cheapest first and stop at the first failure: shape and
    range, game lookup, absolute ceiling, session heuristics, duration,
    score rate, then the checksum. Expected business conditions are
    returned as a ValidationResult, never raised.
    """

    def __init__(self, registry: GameConfigRegistry, sessions: SessionStore,
                 checksums: ChecksumGenerator, config: AntiCheatConfig):
        self.registry = registry
        self.sessions = sessions
        self.checksums = checksums
        self.config = config

    def validate_score(self, submission: Union[ScoreSubmission, Mapping[str, Any]]) -> ValidationResult:
        if not isinstance(submission, ScoreSubmission):
            submission = ScoreSubmission.model_validate(submission)

        score = submission.score
        if not _is_id(submission.user_id) or not _is_id(submission.game_id) or score is None:
            return ValidationResult.reject(Reason.MISSING_REQUIRED_FIELDS)

        # session_id and checksum are optional but must be strings when sent
        for optional in (submission.session_id, submission.checksum):
            if optional is not None and not isinstance(optional, str):
                return ValidationResult.reject(Reason.MISSING_REQUIRED_FIELDS)

        if not _is_valid_score(score):
            return ValidationResult.reject(Reason.INVALID_SCORE_TYPE)

        if submission.duration is not None and not _is_number(submission.duration):
            return ValidationResult.reject(Reason.INVALID_SCORE_TYPE)

        game = self.registry.get(submission.game_id)
        if game is None:
            return ValidationResult.reject(Reason.UNKNOWN_GAME)

        if score > game.max_score:
            return ValidationResult.reject(
                Reason.SCORE_EXCEEDS_MAXIMUM,
                {'score': score, 'max_score': game.max_score}
            )

        if submission.session_id:
            session_result = self.validate_session(
                submission.session_id, score, submission.duration,
                self.config.thresholds_for(submission.game_id)
            )
            if not session_result.valid:
                return session_result

        timing_result = self._check_timing(game, score, submission.duration)
        if timing_result is not None:
            return timing_result

        if submission.checksum and submission.session_id:
            session = self.sessions.get(submission.session_id)
            if session is not None and not self.checksums.verify(session, score, submission.checksum):
                return ValidationResult.reject(Reason.INVALID_CHECKSUM)

        return ValidationResult.accept(verified=True)

    def validate_session(self, session_id: str, score: float, duration: Optional[float] = None,
                         thresholds: Optional[HeuristicThresholds] = None) -> ValidationResult:
        """Session-bound heuristics; ``valid`` here only means this stage passed."""
        session = self.sessions.get(session_id)
        if session is None:
            return ValidationResult.reject(Reason.SESSION_NOT_FOUND)

        now = self.sessions.now()
        if self.sessions.is_expired(session, now):
            return ValidationResult.reject(Reason.SESSION_EXPIRED)

        if thresholds is None:
            thresholds = self.config.thresholds_for(session.game_id)

        # Roughly one recorded action per score_per_action points
        min_actions = math.floor(score / thresholds.score_per_action)
        if len(session.actions) < min_actions and min_actions > thresholds.min_action_floor:
            return ValidationResult.reject(
                Reason.INSUFFICIENT_ACTIONS,
                {'action_count': len(session.actions), 'expected_min': min_actions}
            )

        if session.score_history:
            last = session.score_history[-1]
            score_jump = score - last.score
            time_delta = now - last.timestamp
            if score_jump > thresholds.max_score_jump and time_delta < thresholds.score_jump_window_ms:
                return ValidationResult.reject(
                    Reason.SUSPICIOUS_SCORE_JUMP,
                    {'score_jump': score_jump, 'time_delta': time_delta}
                )

        return ValidationResult.accept()

    def _check_timing(self, game: GameConfig, score: float,
                      duration: Optional[float]) -> Optional[ValidationResult]:
        # 0 means the run was not timed
        if not duration:
            return None

        if duration < game.min_duration_ms:
            return ValidationResult.reject(
                Reason.IMPOSSIBLE_DURATION,
                {'duration': duration, 'min_duration': game.min_duration_ms}
            )

        if duration > 0:
            score_per_second = score / (duration / 1000)
            if score_per_second > game.max_score_per_second:
                return ValidationResult.reject(
                    Reason.SUSPICIOUS_SCORE_RATE,
                    {'score_per_second': score_per_second,
                     'max_score_per_second': game.max_score_per_second}
                )
        return None
