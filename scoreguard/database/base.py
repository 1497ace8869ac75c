import asyncio
from ..kafka import AuditProcessor
from .audit_store import AuditStore
from .ban_registry import BanRegistry
from .connection import DatabaseConnection
from .kafka_manager import KafkaManager
from .rate_limiter import RateLimiter
from .score_manager import ScoreManager
from ..config import kafka
from ..logger import get_logger

logger = get_logger()

class DatabaseManager:
    """Owns every external connection of the service."""
    _instance = None
    _lock = asyncio.Lock()

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(DatabaseManager, cls).__new__(cls)
            cls._instance.db_connection = DatabaseConnection()
            cls._instance.kafka_manager = KafkaManager()
            cls._instance.rate_limiter = RateLimiter()
            cls._instance.ban_registry = BanRegistry(cls._instance.db_connection)
            cls._instance.score_manager = ScoreManager(cls._instance.db_connection)
            cls._instance.audit_store = AuditStore(
                cls._instance.db_connection,
                max_retries=kafka.max_retries,
                retry_delay=kafka.retry_delay
            )
            cls._instance.audit_processor = None
            cls._instance._initialized = False
        return cls._instance

    @classmethod
    async def get_instance(cls):
        """Get the singleton instance of DatabaseManager"""
        if cls._instance is None:
            async with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    async def initialize(self):
        """Initialize all components"""
        if self._initialized:
            return

        try:
            await self.db_connection.initialize()
            await self.kafka_manager.initialize()
            await self.rate_limiter.initialize()

            self.audit_processor = AuditProcessor(self.audit_store)
            await self.audit_processor.start()

            self._initialized = True
            logger.info("Database manager initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize database manager: {e}")
            await self.close()
            raise

    async def close(self):
        """Close all connections and stop processors"""
        if self.audit_processor:
            await self.audit_processor.stop()
            self.audit_processor = None
        await self.kafka_manager.close()
        await self.rate_limiter.close()
        await self.db_connection.close()
        self._initialized = False
        # Reset the singleton instance
        DatabaseManager._instance = None
