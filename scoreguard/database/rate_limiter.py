import time
import uuid
from typing import Callable, Dict, Optional
from redis.asyncio import Redis
from ..config import rate_limit, redis as redis_config
from ..logger import get_logger

logger = get_logger()

class RateLimitStatus:
    __slots__ = ('allowed', 'remaining', 'reset_time')
    def __init__(self, allowed: bool, remaining: int, reset_time: float):
        self.allowed = allowed
        self.remaining = remaining
        self.reset_time = reset_time

# action -> (max requests, window seconds)
RATE_LIMITS: Dict[str, tuple] = {
    'score': (rate_limit.score_max_requests, rate_limit.score_window_seconds),
}
DEFAULT_LIMIT = (10, 60)

class RateLimiter:
    """
    Sliding-window request log per user and action, kept in a Redis sorted
    set. Redis failures allow the request.
    """

    def __init__(self, client: Optional[Redis] = None,
                 clock: Callable[[], float] = time.time):
        self.redis = client
        self._clock = clock

    async def initialize(self):
        if self.redis is None:
            self.redis = Redis(
                host=redis_config.HOST,
                port=redis_config.PORT,
                decode_responses=True,
                socket_timeout=5,
                socket_connect_timeout=5,
                retry_on_timeout=True
            )

    async def close(self):
        if self.redis is not None:
            await self.redis.aclose()

    async def check(self, user_id: str, action: str = 'score') -> RateLimitStatus:
        """
        Log the request and count the window in one MULTI/EXEC, so concurrent
        submissions cannot all see a count below the limit. A request over
        the limit takes its own entry back out.
        """
        max_requests, window_seconds = RATE_LIMITS.get(action, DEFAULT_LIMIT)
        now = self._clock()
        key = f"rate_limit:{user_id}_{action}"
        member = f"{now}-{uuid.uuid4().hex[:8]}"
        try:
            async with self.redis.pipeline(transaction=True) as pipe:
                pipe.zremrangebyscore(key, 0, now - window_seconds)
                pipe.zadd(key, {member: now})
                pipe.zcard(key)
                pipe.zrange(key, 0, 0, withscores=True)
                pipe.expire(key, window_seconds)
                _, _, count, oldest, _ = await pipe.execute()

            if count > max_requests:
                await self.redis.zrem(key, member)
                reset_time = (oldest[0][1] if oldest else now) + window_seconds
                return RateLimitStatus(False, 0, reset_time)

            return RateLimitStatus(True, max_requests - count, now + window_seconds)
        except Exception as e:
            logger.error(f"Rate limit check error for {key}, allowing request: {e}")
            return RateLimitStatus(True, 0, now)
