"""
config.py
=========
Environment driven settings for the itinerary engine and its HTTP surface.

All os.getenv() calls live here; the rest of the code imports `settings`.
"""

import logging
import os
import sys
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


_base_dir = os.path.abspath(os.path.dirname(__file__))
_default_db = f"sqlite:///{os.path.join(_base_dir, 'instance', 'reference.db')}"


@dataclass
class Settings:
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    # static | database | http
    reference_provider: str = os.getenv("REFERENCE_PROVIDER", "static")
    database_url: str = os.getenv("DATABASE_URL", _default_db)
    reference_api_url: str = os.getenv("REFERENCE_API_URL", "")
    reference_api_key: str = os.getenv("REFERENCE_API_KEY", "")
    reference_timeout: float = float(os.getenv("REFERENCE_TIMEOUT", "5"))
    enrichment_timeout: float = float(os.getenv("ENRICHMENT_TIMEOUT", "10"))
    format_fallback: bool = _env_bool("FORMAT_FALLBACK", True)
    secret_key: str = os.getenv("SECRET_KEY", "change-me-in-production")


settings = Settings()


def setup_logging(level: int | str = logging.INFO, stream=None) -> None:
    """Console logging with module names and line numbers."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    log_format = "%(asctime)s [%(levelname)s] %(name)s %(funcName)s():%(lineno)d - %(message)s"

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(log_format, datefmt="%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(handler)

    # requests' connection pool is noisy at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
