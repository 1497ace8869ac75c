from ..anticheat import AntiCheatService, AuditLogger
from ..config import anticheat
from ..database import DatabaseManager
from ..logger import get_logger
import asyncio

logger = get_logger()

async def startup_event(app):
    """Connect collaborators and publish the service on app.state"""
    try:
        db = await DatabaseManager.get_instance()
        await db.initialize()
        app.state.db = db
        app.state.rate_limiter = db.rate_limiter
        app.state.score_store = db.score_manager
        app.state.service = AntiCheatService(
            anticheat,
            ban_registry=db.ban_registry,
            audit_logger=AuditLogger(db.kafka_manager),
            score_store=db.score_manager
        )
        logger.info("Score guard initialized")
    except Exception as e:
        logger.error(f"Failed to initialize score guard: {e}")
        raise

async def shutdown_event(app):
    """Flush pending audit entries and close connections"""
    service = getattr(app.state, 'service', None)
    db = getattr(app.state, 'db', None)
    try:
        async with asyncio.timeout(5.0):
            if service is not None and service.audit_logger is not None:
                await service.audit_logger.drain()
            if db is not None:
                await db.close()
            logger.info("Connections closed")
    except asyncio.TimeoutError:
        logger.warning("Shutdown timed out, some audit entries may be lost")
    except Exception as e:
        logger.error(f"Error during shutdown: {e}")
