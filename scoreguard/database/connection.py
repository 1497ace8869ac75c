import asyncpg
import asyncio
from ..config import database
from ..logger import get_logger

logger = get_logger()

SCHEMA = (
    '''
    CREATE TABLE IF NOT EXISTS bans (
        user_id VARCHAR(100) PRIMARY KEY,
        reason VARCHAR(100),
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        expires_at TIMESTAMPTZ
    )
    ''',
    '''
    CREATE TABLE IF NOT EXISTS security_logs (
        id SERIAL PRIMARY KEY,
        user_id VARCHAR(100),
        game_id VARCHAR(100),
        session_id VARCHAR(200),
        score TEXT,
        reason VARCHAR(50) NOT NULL,
        severity VARCHAR(10) NOT NULL,
        details JSONB,
        timestamp DOUBLE PRECISION NOT NULL
    )
    ''',
    '''
    CREATE INDEX IF NOT EXISTS idx_security_logs_user
    ON security_logs(user_id, timestamp DESC)
    ''',
    '''
    CREATE TABLE IF NOT EXISTS scores (
        id SERIAL PRIMARY KEY,
        user_id VARCHAR(100) NOT NULL,
        game_id VARCHAR(100) NOT NULL,
        score DOUBLE PRECISION NOT NULL,
        timestamp DOUBLE PRECISION NOT NULL,
        UNIQUE(user_id, game_id)
    )
    ''',
    '''
    CREATE INDEX IF NOT EXISTS idx_scores_game_score
    ON scores(game_id, score DESC)
    ''',
)

class DatabaseConnection:
    def __init__(self, max_concurrent_queries: int = 50):
        self.pool = None
        self.max_concurrent_queries = max_concurrent_queries
        self._connection_semaphore = None
        self._initialized = False
        self._init_lock = asyncio.Lock()

    async def initialize(self):
        """Create the pool and the tables"""
        if self._initialized:
            return

        async with self._init_lock:
            if self._initialized:  # Double check after acquiring lock
                return

            try:
                self.pool = await asyncpg.create_pool(
                    host=database.HOST,
                    port=database.PORT,
                    database=database.DATABASE,
                    user=database.USER,
                    password=database.PASSWORD,
                    min_size=5,
                    max_size=50,
                    command_timeout=10,
                    max_inactive_connection_lifetime=300.0,
                    setup=self._setup_connection
                )
                self._connection_semaphore = asyncio.Semaphore(self.max_concurrent_queries)

                async with self.pool.acquire() as conn:
                    for statement in SCHEMA:
                        await conn.execute(statement)

                self._initialized = True
                logger.info("Database connection initialized successfully")
            except Exception as e:
                logger.error(f"Failed to initialize database connection: {e}")
                await self.close()
                raise

    async def _setup_connection(self, connection):
        """Per-connection timeouts"""
        await connection.execute('SET statement_timeout = 30000')
        await connection.execute('SET idle_in_transaction_session_timeout = 30000')
        await connection.execute('SET lock_timeout = 10000')

    async def close(self):
        if self.pool:
            await self.pool.close()
        self.pool = None
        self._initialized = False

    async def acquire_connection_semaphore(self):
        """Acquire the query semaphore"""
        if not self._initialized:
            await self.initialize()
        return await self._connection_semaphore.acquire()

    def release_connection_semaphore(self):
        """Release the query semaphore"""
        self._connection_semaphore.release()
