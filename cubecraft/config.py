from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "CubeCraft"
    debug: bool = False

    database_url: str = "postgresql+asyncpg://localhost:5432/cubecraft"

    # Card catalogs are stored as <catalog_dir>/<game_id>.json
    catalog_dir: str = "data/catalogs"

    # Bundled read-only cubes are stored as <cubes_dir>/<cube_id>.json
    cubes_dir: str = "data/cubes"

    default_game_id: str = "yugioh"


settings = Settings()


# =============================================================================
# CUBE EDITING LIMITS
# =============================================================================

# Undo history depth, oldest entries are evicted first
MAX_HISTORY_ENTRIES = 50

# Card scores are clamped into this closed range
MIN_SCORE = 0
MAX_SCORE = 100

# Score assigned to cards with no explicit score in exports
DEFAULT_EXPORT_SCORE = 50

# Cube ids with this prefix live in the database, everything else is bundled
DATABASE_CUBE_PREFIX = "db:"
