from typing import Any, Mapping, Optional, Union
from ..config import AntiCheatConfig
from ..logger import SECURITY, get_logger
from ..models.data import ScoreRec
from ..models.response import Reason, Severity, ValidationResult
from ..models.score import ScoreSubmission
from .audit import AuditLogger, build_entry
from .checksum import ChecksumGenerator
from .games import GameConfigRegistry
from .sessions import SessionStore
from .validator import ScoreValidator

logger = get_logger()
security_logger = get_logger(SECURITY)

class AntiCheatService:
    """
    Entry points of the score gatekeeper.

    The session store, registry and validator are in-process and
    synchronous; the ban registry, audit logger and score store are the
    I/O collaborators. Any collaborator may be None, in which case its
    step is skipped.
    """

    def __init__(self, config: AntiCheatConfig,
                 registry: Optional[GameConfigRegistry] = None,
                 sessions: Optional[SessionStore] = None,
                 ban_registry=None,
                 audit_logger: Optional[AuditLogger] = None,
                 score_store=None):
        self.config = config
        self.registry = registry or GameConfigRegistry()
        self.sessions = sessions or SessionStore(timeout_ms=config.session_timeout_ms)
        self.checksums = ChecksumGenerator(config.checksum_secret)
        self.validator = ScoreValidator(self.registry, self.sessions, self.checksums, config)
        self.ban_registry = ban_registry
        self.audit_logger = audit_logger
        self.score_store = score_store

    def start_session(self, user_id: str, game_id: str) -> str:
        session_id = self.sessions.create(user_id, game_id)
        logger.info(f"Started session {session_id}")
        return session_id

    def record_action(self, session_id: str, action_type: str, data: Any = None) -> bool:
        return self.sessions.record_action(session_id, action_type, data)

    def record_progress(self, session_id: str, score: float) -> bool:
        return self.sessions.record_score(session_id, score)

    def issue_checksum(self, session_id: str, score) -> Optional[str]:
        session = self.sessions.get(session_id)
        if session is None:
            return None
        return self.checksums.generate(session, score)

    def validate_score(self, submission: Union[ScoreSubmission, Mapping[str, Any]]) -> ValidationResult:
        return self.validator.validate_score(submission)

    async def is_user_banned(self, user_id: str) -> bool:
        if self.ban_registry is None:
            return False
        return await self.ban_registry.is_banned(user_id)

    async def submit_score(self, submission: Union[ScoreSubmission, Mapping[str, Any]]) -> ValidationResult:
        """
        Ban check, validation, audit, escalation, then persistence.

        The score is stored only when the verdict is valid. Flagged verdicts
        are handed to the audit logger without waiting on it.
        """
        if not isinstance(submission, ScoreSubmission):
            submission = ScoreSubmission.model_validate(submission)

        if isinstance(submission.user_id, str) and submission.user_id \
                and await self.is_user_banned(submission.user_id):
            result = ValidationResult.reject(Reason.USER_BANNED)
            security_logger.warning(f"Rejected score from banned user {submission.user_id}")
            return result

        result = self.validator.validate_score(submission)

        if not result.valid:
            self._log_rejection(submission, result)
            if result.flagged and self.audit_logger is not None:
                self.audit_logger.record(build_entry(submission, result))
            if result.severity == Severity.CRITICAL:
                await self._escalate(submission, result)
            return result

        if self.score_store is not None:
            await self.score_store.save_score(ScoreRec({
                'user_id': submission.user_id,
                'game_id': submission.game_id,
                'score': submission.score,
            }))
        logger.info(f"Accepted score {submission.score} for {submission.user_id} in {submission.game_id}")
        return result

    async def _escalate(self, submission: ScoreSubmission, result: ValidationResult):
        if not self.config.auto_ban_on_critical or self.ban_registry is None:
            return
        if not self._owns_session(submission):
            security_logger.warning(
                f"Critical verdict for {submission.user_id} without an owned session, not banning"
            )
            return
        try:
            await self.ban_registry.ban(
                submission.user_id, result.reason.value, self.config.critical_ban_hours
            )
        except Exception as e:
            logger.error(f"Failed to ban user {submission.user_id}: {e}")

    def _owns_session(self, submission: ScoreSubmission) -> bool:
        """The user id is client-supplied; only a live session started under it binds it."""
        if not isinstance(submission.session_id, str) or not submission.session_id:
            return False
        session = self.sessions.get(submission.session_id)
        return session is not None and session.user_id == submission.user_id

    def _log_rejection(self, submission: ScoreSubmission, result: ValidationResult):
        message = (f"Score rejected: {result.reason.value} ({result.severity.value}) "
                   f"user={submission.user_id} game={submission.game_id} score={submission.score}")
        if result.severity == Severity.ERROR:
            logger.info(message)
        else:
            security_logger.warning(message)
