import asyncio
from ..logger import get_logger
from .consumer import KafkaConsumer
from .processor import MessageProcessor

logger = get_logger()

class AuditProcessor:
    """Background loop draining the audit topic into the audit store."""

    def __init__(self, audit_store, consumer: KafkaConsumer = None):
        self.consumer = consumer or KafkaConsumer()
        self.processor = MessageProcessor(audit_store)
        self.processing = False
        self._task = None

    async def start(self):
        """Start the audit processor"""
        self.processing = True
        await self.consumer.initialize()
        self._task = asyncio.create_task(self._process_messages())

    async def _process_messages(self):
        """Main loop with reconnection on connection errors"""
        while self.processing:
            try:
                if not self.consumer.consumer:
                    logger.info("Consumer not initialized, attempting to initialize...")
                    await self.consumer.initialize()
                    continue

                messages = await self.consumer.get_messages()
                if not messages:
                    continue

                if await self.processor.process_messages(messages):
                    await self.consumer.commit()

            except asyncio.CancelledError:
                raise
            except asyncio.TimeoutError:
                continue
            except (ConnectionError, OSError) as e:
                logger.error(f"Audit consumer connection error, reconnecting: {e}")
                await self.consumer.stop()
                await asyncio.sleep(self.consumer.retry_delay)
            except Exception as e:
                logger.error(f"Error in audit processing: {e}")
                await asyncio.sleep(1)

    async def stop(self):
        """Stop the processor and wait for the loop to exit"""
        logger.info("Stopping audit processor...")
        self.processing = False
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        await self.consumer.stop()
        logger.info("Audit processor stopped")
