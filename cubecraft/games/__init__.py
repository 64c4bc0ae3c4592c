from cubecraft.games.arkham import ARKHAM_CONFIG
from cubecraft.games.hearthstone import HEARTHSTONE_CONFIG
from cubecraft.games.mtg import MTG_CONFIG
from cubecraft.games.pokemon import POKEMON_CONFIG
from cubecraft.games.registry import (
    DEFAULT_GAME_ID,
    GameRegistry,
    default_registry,
    get_default_game_config,
    get_game_config,
    get_game_config_or_none,
    list_game_configs,
    register_game,
)
from cubecraft.games.yugioh import YUGIOH_CONFIG

BUILTIN_GAMES = (YUGIOH_CONFIG, MTG_CONFIG, POKEMON_CONFIG, HEARTHSTONE_CONFIG, ARKHAM_CONFIG)

for _config in BUILTIN_GAMES:
    if _config.id not in default_registry:
        default_registry.register(_config)

__all__ = [
    "ARKHAM_CONFIG",
    "BUILTIN_GAMES",
    "DEFAULT_GAME_ID",
    "GameRegistry",
    "HEARTHSTONE_CONFIG",
    "MTG_CONFIG",
    "POKEMON_CONFIG",
    "YUGIOH_CONFIG",
    "default_registry",
    "get_default_game_config",
    "get_game_config",
    "get_game_config_or_none",
    "list_game_configs",
    "register_game",
]
