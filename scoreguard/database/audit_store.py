import asyncio
import json
from typing import List
from ..models.data import AuditEntry
from ..logger import get_logger

logger = get_logger()

class AuditStore:
    """Append-only sink of flagged submissions in ``security_logs``."""

    def __init__(self, db_connection, max_retries: int = 3, retry_delay: int = 1):
        self.db = db_connection
        self.max_retries = max_retries
        self.retry_delay = retry_delay

    async def insert_batch(self, entries: List[AuditEntry]):
        """Write a batch of audit entries in a single transaction"""
        retry_count = 0
        while retry_count < self.max_retries:
            try:
                await self.db.acquire_connection_semaphore()
                try:
                    async with self.db.pool.acquire() as conn:
                        async with conn.transaction():
                            await conn.executemany('''
                                INSERT INTO security_logs
                                    (user_id, game_id, session_id, score, reason, severity, details, timestamp)
                                VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
                            ''', [
                                (
                                    entry.user_id,
                                    entry.game_id,
                                    entry.session_id,
                                    None if entry.score is None else str(entry.score),
                                    entry.reason,
                                    entry.severity,
                                    json.dumps(entry.details) if entry.details is not None else None,
                                    entry.timestamp
                                )
                                for entry in entries
                            ])
                    return
                finally:
                    self.db.release_connection_semaphore()
            except Exception as e:
                retry_count += 1
                logger.error(f"Audit write error (attempt {retry_count}/{self.max_retries}): {e}")
                if retry_count < self.max_retries:
                    await asyncio.sleep(self.retry_delay * retry_count)
                else:
                    raise
