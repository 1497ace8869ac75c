from ..logger import get_logger
from ..models.data import AuditEntry

logger = get_logger()

class MessageProcessor:
    """Turns consumed audit messages into rows of ``security_logs``."""

    def __init__(self, audit_store):
        self.audit_store = audit_store

    async def process_messages(self, messages) -> bool:
        """Write every message of a poll; False leaves offsets uncommitted"""
        if not messages:
            return False

        entries = []
        for tp, msgs in messages.items():
            for msg in msgs:
                try:
                    entries.append(AuditEntry(msg.value))
                except Exception as e:
                    # malformed entries are dropped
                    logger.error(f"Skipping malformed audit message at {tp}: {e}")

        if not entries:
            return True

        try:
            await self.audit_store.insert_batch(entries)
            logger.info(f"Stored batch of {len(entries)} audit entries")
            return True
        except Exception as e:
            logger.error(f"Error storing audit batch: {e}")
            return False
