import asyncio
import time
from typing import Any, Dict, Optional, Set
from ..config import kafka
from ..logger import get_logger
from ..models.data import AuditEntry
from ..models.response import ValidationResult
from ..models.score import ScoreSubmission

logger = get_logger()

def build_entry(submission: ScoreSubmission, result: ValidationResult) -> AuditEntry:
    return AuditEntry({
        'user_id': submission.user_id,
        'game_id': submission.game_id,
        'score': submission.score,
        'session_id': submission.session_id,
        'reason': result.reason.value,
        'severity': result.severity.value,
        'details': result.details,
        'timestamp': time.time()
    })

class AuditLogger:
    """
    Fire-and-forget publisher of flagged submissions to the audit topic.

    ``record`` schedules the publish and returns at once; a failed publish
    is logged and never reaches the caller.
    """

    def __init__(self, kafka_manager, topic: str = kafka.audit_topic):
        self.kafka_manager = kafka_manager
        self.topic = topic
        self._pending: Set[asyncio.Task] = set()

    def record(self, entry: AuditEntry) -> Optional[asyncio.Task]:
        payload = entry.to_dict()
        try:
            task = asyncio.get_running_loop().create_task(self._publish(payload))
        except RuntimeError:
            logger.error("No running event loop, audit entry not published")
            return None
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _publish(self, payload: Dict[str, Any]):
        try:
            await self.kafka_manager.send_message(self.topic, payload)
        except Exception as e:
            logger.error(f"Failed to publish audit entry ({payload['reason']}): {e}")

    async def drain(self):
        """Wait for in-flight publishes, used on shutdown"""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
