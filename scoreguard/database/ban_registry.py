from datetime import datetime, timedelta, timezone
from typing import Callable, Optional
from ..models.data import BanRecord
from ..logger import get_logger

logger = get_logger()

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

class BanRegistry:
    """
    Ban records in PostgreSQL.

    ``is_banned`` fails open: when the store cannot be reached the user is
    treated as not banned and the outage is logged as an operational event.
    Gameplay availability wins over strict enforcement here.
    """

    def __init__(self, db_connection, clock: Callable[[], datetime] = _utcnow):
        self.db = db_connection
        self._clock = clock

    async def is_banned(self, user_id: str) -> bool:
        try:
            await self.db.acquire_connection_semaphore()
            try:
                async with self.db.pool.acquire() as conn:
                    row = await conn.fetchrow('''
                        SELECT user_id, reason, expires_at
                        FROM bans
                        WHERE user_id = $1
                    ''', user_id)
                    if row is None:
                        return False

                    record = BanRecord(row['user_id'], row['reason'], row['expires_at'])
                    if record.is_expired(self._clock()):
                        await conn.execute('DELETE FROM bans WHERE user_id = $1', user_id)
                        logger.info(f"Removed expired ban for user {user_id}")
                        return False
                    return True
            finally:
                self.db.release_connection_semaphore()
        except Exception as e:
            logger.error(f"Ban check failed for user {user_id}, failing open: {e}")
            return False

    async def ban(self, user_id: str, reason: str, hours: Optional[int] = None):
        """Ban a user; ``hours=None`` bans permanently"""
        expires_at = self._clock() + timedelta(hours=hours) if hours else None
        await self.db.acquire_connection_semaphore()
        try:
            async with self.db.pool.acquire() as conn:
                await conn.execute('''
                    INSERT INTO bans (user_id, reason, expires_at)
                    VALUES ($1, $2, $3)
                    ON CONFLICT (user_id)
                    DO UPDATE SET reason = $2, expires_at = $3, created_at = now()
                ''', user_id, reason, expires_at)
        finally:
            self.db.release_connection_semaphore()
        logger.info(f"Banned user {user_id} ({reason}) until {expires_at or 'forever'}")

    async def unban(self, user_id: str) -> bool:
        await self.db.acquire_connection_semaphore()
        try:
            async with self.db.pool.acquire() as conn:
                status = await conn.execute('DELETE FROM bans WHERE user_id = $1', user_id)
        finally:
            self.db.release_connection_semaphore()
        return status.endswith(' 1')
