# ==============================================
# Configuration Management
# ==============================================
#
# PURPOSE:
#   Load all configuration from environment variables / .env file.
#   Provides typed config objects to the driver, the CLI and the
#   MongoDB source.
#
# CLASSES:
# --------
# - MongoConfig (dataclass)
#     host: str            (default "localhost")
#     port: int            (default 27017)
#     user: str | None     (default None)
#     password: str | None (default None)
#     database: str        (default "test")
#     collection: str | None (default None)
#
# - ParserConfig (dataclass)
#     sample_size: int     (default 1000)
#     strict: bool         (default False)
#     json_indent: int     (default 2)
#
# - AppConfig (dataclass)
#     mongo: MongoConfig
#     parser: ParserConfig
#     metadata_dir: str    (default "metadata/")
#     log_level: str       (default "INFO")
#
# FUNCTIONS:
# ----------
# - get_config() -> AppConfig
#     Load .env using python-dotenv, construct AppConfig.
#     Returns the same singleton on repeated calls.
#
# - reset_config() -> None
#     Drop the singleton so the next get_config() reads the env again.
#
# USAGE:
# ------
#   from schema_parser.config import get_config
#   config = get_config()
#   print(config.mongo.host)
#   print(config.parser.sample_size)
#
# ==============================================

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

TRUE_VARIANTS = {"1", "true", "yes", "on"}


@dataclass
class MongoConfig:
    """MongoDB connection used by the `sample` command."""
    host: str = "localhost"
    port: int = 27017
    user: Optional[str] = None
    password: Optional[str] = None
    database: str = "test"
    collection: Optional[str] = None


@dataclass
class ParserConfig:
    """Schema parser behaviour."""
    sample_size: int = 1000
    strict: bool = False  # Raise ConflictError on type conflicts
    json_indent: int = 2


@dataclass
class AppConfig:
    """Main application configuration."""
    mongo: MongoConfig = field(default_factory=MongoConfig)
    parser: ParserConfig = field(default_factory=ParserConfig)
    metadata_dir: str = "metadata/"
    log_level: str = "INFO"


# Singleton instance
_config_instance: Optional[AppConfig] = None


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in TRUE_VARIANTS


def get_config() -> AppConfig:
    """
    Load configuration from environment variables / .env file.
    Returns the same singleton instance on repeated calls.

    Returns:
        AppConfig: Application configuration
    """
    global _config_instance

    if _config_instance is not None:
        return _config_instance

    # Load .env file from project root
    env_path = Path(__file__).parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)

    # Build MongoDB configuration
    mongo_config = MongoConfig(
        host=os.getenv("MONGO_HOST", "localhost"),
        port=int(os.getenv("MONGO_PORT", "27017")),
        user=os.getenv("MONGO_USER") or None,
        password=os.getenv("MONGO_PASSWORD") or None,
        database=os.getenv("MONGO_DATABASE", "test"),
        collection=os.getenv("MONGO_COLLECTION") or None,
    )

    # Build parser configuration
    parser_config = ParserConfig(
        sample_size=int(os.getenv("SAMPLE_SIZE", "1000")),
        strict=_env_bool("STRICT_CONFLICTS", False),
        json_indent=int(os.getenv("JSON_INDENT", "2")),
    )

    _config_instance = AppConfig(
        mongo=mongo_config,
        parser=parser_config,
        metadata_dir=os.getenv("METADATA_DIR", "metadata/"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )

    return _config_instance


def reset_config() -> None:
    """Forget the cached configuration (used by tests)."""
    global _config_instance
    _config_instance = None
