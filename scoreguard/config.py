from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Dict
import os
import json

class DatabaseConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='POSTGRES_')

    HOST: str = os.getenv('POSTGRES_HOST', 'localhost')
    PORT: int = int(os.getenv('POSTGRES_PORT', 5432))
    DATABASE: str = os.getenv('POSTGRES_DB', 'scoreguard')
    USER: str = os.getenv('POSTGRES_USER', 'postgres')
    PASSWORD: str = os.getenv('POSTGRES_PASSWORD', 'postgres')

database = DatabaseConfig()

class KafkaConfig(BaseSettings):
    bootstrap_servers: str = os.getenv('KAFKA_BOOTSTRAP_SERVERS', 'localhost:9092')
    audit_topic: str = 'security_logs'
    group_id: str = 'scoreguard_audit'
    producer_config: dict = {
        'bootstrap_servers': os.getenv('KAFKA_BOOTSTRAP_SERVERS', 'localhost:9092'),
        'value_serializer': lambda v: json.dumps(v, default=str).encode('utf-8'),
        'request_timeout_ms': 1000,
        'retry_backoff_ms': 100,
        'security_protocol': "PLAINTEXT",
        'client_id': 'scoreguard-producer'
    }
    batch_size: int = 100
    max_retries: int = 3
    retry_delay: int = 1

kafka = KafkaConfig()

class RedisConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='REDIS_')

    HOST: str = os.getenv('REDIS_HOST', 'localhost')
    PORT: int = int(os.getenv('REDIS_PORT', 6379))

redis = RedisConfig()

class RateLimitConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='RATE_LIMIT_')

    score_max_requests: int = 10
    score_window_seconds: int = 60

rate_limit = RateLimitConfig()

class HeuristicThresholds(BaseModel):
    """Tunable constants of the session heuristics."""
    score_per_action: int = 1000
    min_action_floor: int = 5
    max_score_jump: float = 10_000
    score_jump_window_ms: float = 1000

class AntiCheatConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='ANTICHEAT_')

    session_timeout_ms: int = 30 * 60 * 1000
    checksum_secret: str = 'change-me'
    heuristics: HeuristicThresholds = HeuristicThresholds()
    # JSON object in the environment, e.g. {"tetris": {"max_score_jump": 50000}}
    game_heuristics: Dict[str, HeuristicThresholds] = {}
    expose_details: bool = False
    auto_ban_on_critical: bool = True
    critical_ban_hours: int = 24

    def thresholds_for(self, game_id: str) -> HeuristicThresholds:
        return self.game_heuristics.get(game_id, self.heuristics)

anticheat = AntiCheatConfig()
