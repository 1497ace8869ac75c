import pytest
from pydantic import ValidationError

from scoreguard.anticheat import GAME_CONFIGS, GameConfigRegistry
from scoreguard.models.data import GameConfig


def test_known_game_thresholds():
    snake = GameConfigRegistry().get("snake")
    assert snake.max_score == 1_000_000
    assert snake.min_duration_ms == 10_000
    assert snake.max_score_per_second == 100
    assert "perfect_score" in snake.suspicious_patterns


def test_unknown_game_is_none():
    assert GameConfigRegistry().get("unknown_game_xyz") is None
    assert GameConfigRegistry().get(None) is None


def test_every_game_has_positive_limits():
    for game_id, cfg in GAME_CONFIGS.items():
        assert cfg.max_score > 0, game_id
        assert cfg.min_duration_ms > 0, game_id
        assert cfg.max_score_per_second > 0, game_id


def test_configs_are_immutable():
    with pytest.raises(ValidationError):
        GAME_CONFIGS["snake"].max_score = 5


def test_custom_table_replaces_defaults():
    registry = GameConfigRegistry({
        "pong": GameConfig(max_score=21, min_duration_ms=1000, max_score_per_second=1)
    })
    assert registry.get("pong").max_score == 21
    assert registry.get("snake") is None
