from .audit import AuditLogger
from .checksum import ChecksumGenerator
from .games import GAME_CONFIGS, GameConfigRegistry
from .service import AntiCheatService
from .sessions import SESSION_TIMEOUT_MS, SessionStore
from .validator import ScoreValidator

__all__ = [
    "AntiCheatService",
    "AuditLogger",
    "ChecksumGenerator",
    "GAME_CONFIGS",
    "GameConfigRegistry",
    "SESSION_TIMEOUT_MS",
    "ScoreValidator",
    "SessionStore",
]
