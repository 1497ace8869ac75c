from .base import DatabaseManager
from .ban_registry import BanRegistry
from .rate_limiter import RateLimiter

__all__ = ["DatabaseManager", "BanRegistry", "RateLimiter"]
