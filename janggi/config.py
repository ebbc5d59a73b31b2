"""Game configuration and server settings."""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

from .board import Formation
from .geometry import Side


class GameMode(Enum):
    AI = "ai"          # Human against the engine
    LOCAL = "local"    # Two humans on one board


class Difficulty(Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


DIFFICULTY_DEPTH = {
    Difficulty.EASY: 2,
    Difficulty.MEDIUM: 3,
    Difficulty.HARD: 4,
}


@dataclass(frozen=True)
class GameConfig:
    """Choices made once at game creation."""

    mode: GameMode = GameMode.AI
    difficulty: Difficulty = Difficulty.MEDIUM
    player_side: Side = Side.CHO
    cho_formation: Formation = Formation.INNER
    han_formation: Formation = Formation.INNER

    @property
    def depth(self) -> int:
        return DIFFICULTY_DEPTH[self.difficulty]

    @property
    def engine_side(self) -> Optional[Side]:
        """Side played by the engine, or None in local mode."""
        if self.mode is GameMode.LOCAL:
            return None
        return self.player_side.opponent


@dataclass(frozen=True)
class Settings:
    """Server settings, read from JANGGI_* environment variables."""

    host: str = "0.0.0.0"
    port: int = 8000
    default_difficulty: Difficulty = Difficulty.MEDIUM
    search_workers: int = 4
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            host=env.get("JANGGI_HOST", defaults.host),
            port=int(env.get("JANGGI_PORT", defaults.port)),
            default_difficulty=Difficulty(
                env.get("JANGGI_DEFAULT_DIFFICULTY", defaults.default_difficulty.value)
            ),
            search_workers=int(env.get("JANGGI_SEARCH_WORKERS", defaults.search_workers)),
            log_level=env.get("JANGGI_LOG_LEVEL", defaults.log_level).upper(),
        )
