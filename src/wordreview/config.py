"""Configuration settings for the review scheduler."""
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Define base directory
BASE_DIR = Path(__file__).parent.parent.parent

# Load environment variables from .env file
env_file = ".env.test" if os.getenv("ENV") == "test" else ".env"
load_dotenv(env_file)


# Define data directories from environment variables
DATA_DIR = Path(os.getenv("DATA_DIR", "./data"))

VALID_LOG_ROTATIONS = {"S", "M", "H", "D", "MIDNIGHT"} | {f"W{day}" for day in range(7)}


def ensure_directories() -> None:
    """Ensure all required directories exist."""
    directories = [
        DATA_DIR,
    ]

    for directory in directories:
        directory.mkdir(parents=True, exist_ok=True)


@dataclass
class PathSettings:
    """Path configuration settings."""
    base_dir: Path = BASE_DIR
    data_dir: Path = DATA_DIR


@dataclass
class DatabaseSettings:
    """Database configuration settings."""
    url: str = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR / 'wordreview.db'}")
    echo: bool = os.getenv("DATABASE_ECHO", "false").lower() == "true"


@dataclass
class LoggingSettings:
    """Logging configuration settings."""
    level: str = os.getenv("LOG_LEVEL", "INFO")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    dir: Optional[str] = os.getenv("LOG_DIR", None)
    rotation: str = os.getenv("LOG_ROTATION", "midnight")
    interval: int = int(os.getenv("LOG_INTERVAL", "1"))
    backup_count: int = int(os.getenv("LOG_BACKUP_COUNT", "7"))


def get_path_settings() -> PathSettings:
    """Get path settings."""
    return PathSettings()


def get_database_settings() -> DatabaseSettings:
    """Get database settings."""
    return DatabaseSettings()


def get_logging_settings() -> LoggingSettings:
    """Get logging settings."""
    return LoggingSettings()


@dataclass
class Settings:
    """Main settings class that combines all configuration settings."""
    paths: PathSettings = field(default_factory=get_path_settings)
    database: DatabaseSettings = field(default_factory=get_database_settings)
    logging: LoggingSettings = field(default_factory=get_logging_settings)

    def validate(self) -> None:
        """Validate settings and raise ValueError if invalid."""
        if not self.database.url:
            raise ValueError("DATABASE_URL is required")

        if not isinstance(logging.getLevelName(self.logging.level.upper()), int):
            raise ValueError(f"LOG_LEVEL {self.logging.level!r} is not a valid logging level")

        if self.logging.rotation.upper() not in VALID_LOG_ROTATIONS:
            raise ValueError(f"LOG_ROTATION must be one of {sorted(VALID_LOG_ROTATIONS)}")

        if self.logging.interval < 1:
            raise ValueError("LOG_INTERVAL must be positive")

        if self.logging.backup_count < 0:
            raise ValueError("LOG_BACKUP_COUNT cannot be negative")


# Create global settings instance
settings = Settings()
settings.validate()
