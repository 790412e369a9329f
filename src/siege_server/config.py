"""Configuration management using Pydantic settings."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "KEEP SIEGE"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Battle
    battle_seed: str = "keep-siege"
    log_capacity: int = 100
    display_cap: int = 256  # hostiles per archetype returned to renderers

    # Leaderboard
    leaderboard_dir: Path = Path("./data/leaderboard")
    post_id: str = "local"
    player_name: str = "anonymous"


settings = Settings()
