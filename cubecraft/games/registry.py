"""
Game configuration registry.

Maps game ids to GameConfig records. The module-level registry is filled
with the built-in games when `cubecraft.games` is imported; further games
can be registered at runtime.
"""

import logging
from collections.abc import Iterator

from cubecraft.config import settings
from cubecraft.models.failure import CubeValidationError, NotFoundError
from cubecraft.models.game_config import GameConfig

logger = logging.getLogger(__name__)

DEFAULT_GAME_ID = settings.default_game_id


def validate_config(config: GameConfig) -> None:
    """Reject records the engine cannot work with."""
    if not config.id or not config.name:
        raise CubeValidationError("Game config needs an id and a name")
    if not config.deck_zones:
        raise CubeValidationError(
            f"Game config {config.id} needs at least one deck zone",
            detail="The first zone is treated as the main deck.",
        )
    zone_ids = [zone.id for zone in config.deck_zones]
    if len(set(zone_ids)) != len(zone_ids):
        raise CubeValidationError(f"Game config {config.id} has duplicate zone ids")


class GameRegistry:
    """Registration-ordered map of game id to GameConfig."""

    def __init__(self) -> None:
        self._configs: dict[str, GameConfig] = {}

    def register(self, config: GameConfig) -> None:
        """Add a game, replacing (with a warning) any game with the same id."""
        validate_config(config)
        if config.id in self._configs:
            logger.warning("Game config %s already registered, overwriting", config.id)
        self._configs[config.id] = config

    def unregister(self, game_id: str) -> bool:
        return self._configs.pop(game_id, None) is not None

    def get(self, game_id: str) -> GameConfig:
        config = self._configs.get(game_id)
        if config is None:
            raise NotFoundError("game", game_id, available=self.ids())
        return config

    def get_or_none(self, game_id: str) -> GameConfig | None:
        return self._configs.get(game_id)

    def ids(self) -> list[str]:
        return list(self._configs)

    def list(self) -> list[GameConfig]:
        return list(self._configs.values())

    def __contains__(self, game_id: object) -> bool:
        return game_id in self._configs

    def __iter__(self) -> Iterator[GameConfig]:
        return iter(self.list())

    def __len__(self) -> int:
        return len(self._configs)


default_registry = GameRegistry()


def register_game(config: GameConfig) -> None:
    default_registry.register(config)


def get_game_config(game_id: str) -> GameConfig:
    """Look up a game; raises NotFoundError listing the known ids."""
    return default_registry.get(game_id)


def get_game_config_or_none(game_id: str) -> GameConfig | None:
    return default_registry.get_or_none(game_id)


def list_game_configs() -> list[GameConfig]:
    return default_registry.list()


def get_default_game_config() -> GameConfig:
    return default_registry.get(DEFAULT_GAME_ID)
