from typing import List
from ..models.data import Leader, ScoreRec
from ..logger import get_logger

logger = get_logger()

class ScoreManager:
    """Verified scores, best per user and game."""

    def __init__(self, db_connection):
        self.db = db_connection

    async def save_score(self, rec: ScoreRec):
        """Keep the user's best score for the game"""
        await self.db.acquire_connection_semaphore()
        try:
            async with self.db.pool.acquire() as conn:
                await conn.execute('''
                    INSERT INTO scores (user_id, game_id, score, timestamp)
                    VALUES ($1, $2, $3, $4)
                    ON CONFLICT (user_id, game_id)
                    DO UPDATE SET
                        score = GREATEST(scores.score, $3),
                        timestamp = $4
                    WHERE scores.score < $3
                ''', rec.user_id, rec.game_id, rec.score, rec.timestamp)
        finally:
            self.db.release_connection_semaphore()
        logger.debug(f"Saved verified score {rec.to_dict()}")

    async def get_top_k(self, game_id: str, k: int) -> List[Leader]:
        """Get top k verified scores for a game"""
        await self.db.acquire_connection_semaphore()
        try:
            async with self.db.pool.acquire() as conn:
                rows = await conn.fetch('''
                    SELECT user_id, score
                    FROM scores
                    WHERE game_id = $1
                    ORDER BY score DESC
                    LIMIT $2
                ''', game_id, k)
                return [Leader(row['user_id'], row['score']) for row in rows]
        finally:
            self.db.release_connection_semaphore()
