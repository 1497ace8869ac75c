from typing import Dict, Mapping, Optional
from ..models.data import GameConfig

GAME_CONFIGS: Dict[str, GameConfig] = {
    'snake': GameConfig(
        max_score=1_000_000,
        min_duration_ms=10_000,
        max_score_per_second=100,
        suspicious_patterns=frozenset({'perfect_score', 'impossible_time'}),
    ),
    '2048': GameConfig(
        max_score=10_000_000,
        min_duration_ms=30_000,
        max_score_per_second=5000,
        suspicious_patterns=frozenset({'instant_win'}),
    ),
    'breakout': GameConfig(
        max_score=500_000,
        min_duration_ms=60_000,
        max_score_per_second=2000,
        suspicious_patterns=frozenset({'all_bricks_instant'}),
    ),
    'tetris': GameConfig(
        max_score=5_000_000,
        min_duration_ms=60_000,
        max_score_per_second=1000,
        suspicious_patterns=frozenset({'impossible_tetris'}),
    ),
    'minesweeper': GameConfig(
        max_score=100_000,
        min_duration_ms=5_000,
        max_score_per_second=500,
        suspicious_patterns=frozenset({'instant_solve'}),
    ),
    'pacman': GameConfig(
        max_score=2_000_000,
        min_duration_ms=60_000,
        max_score_per_second=3000,
        suspicious_patterns=frozenset({'ghost_collision_none'}),
    ),
    'asteroids': GameConfig(
        max_score=1_000_000,
        min_duration_ms=30_000,
        max_score_per_second=500,
        suspicious_patterns=frozenset({'impossible_dodge'}),
    ),
    'tower-defense': GameConfig(
        max_score=10_000_000,
        min_duration_ms=120_000,
        max_score_per_second=5000,
        suspicious_patterns=frozenset({'instant_wave_clear'}),
    ),
    'rhythm': GameConfig(
        max_score=1_000_000,
        min_duration_ms=60_000,
        max_score_per_second=1000,
        suspicious_patterns=frozenset({'perfect_timing_all'}),
    ),
    'roguelike': GameConfig(
        max_score=500_000,
        min_duration_ms=120_000,
        max_score_per_second=200,
        suspicious_patterns=frozenset({'invincible'}),
    ),
    'toonshooter': GameConfig(
        max_score=1_000_000,
        min_duration_ms=30_000,
        max_score_per_second=1000,
        suspicious_patterns=frozenset({'aimbot'}),
    ),
}

class GameConfigRegistry:
    """Read-only lookup of per-game thresholds."""

    def __init__(self, configs: Optional[Mapping[str, GameConfig]] = None):
        self._configs = dict(GAME_CONFIGS if configs is None else configs)

    def get(self, game_id: str) -> Optional[GameConfig]:
        return self._configs.get(game_id)

