# config.py
# Runtime settings for Resale Radar, read from the environment / .env file.

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


# -----------------------------
# Defaults
# -----------------------------

APP_TITLE: str = "Resale Radar"

DEFAULT_MODEL: str = "gemini-3-flash-preview"
DEFAULT_TEMPERATURE: float = 0.2

DEFAULT_COUNTRY: str = "Angola"
DEFAULT_CITY: str = "Luanda"
DEFAULT_CURRENCY: str = "Kz"

DEFAULT_GEOLOCATION_URL: str = "http://ip-api.com/json/"
DEFAULT_LOCATION_TIMEOUT: float = 5.0

# Minimum number of trends requested from the model
DEFAULT_MIN_TRENDS: int = 8


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    temperature: float = DEFAULT_TEMPERATURE

    country: str = DEFAULT_COUNTRY
    city: str = DEFAULT_CITY
    currency: str = DEFAULT_CURRENCY

    # Fixed coordinates override the IP lookup when both are set
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    geolocation_url: str = DEFAULT_GEOLOCATION_URL
    location_timeout: float = DEFAULT_LOCATION_TIMEOUT

    min_trends: int = DEFAULT_MIN_TRENDS


def _env_float(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {name}={raw!r}, using {default}")
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={raw!r}, using {default}")
        return default


def load_settings() -> Settings:
    """
    Build Settings from the process environment.
    A local .env file is loaded first (python-dotenv), existing variables win.
    """
    load_dotenv()

    return Settings(
        api_key=os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY"),
        model=os.getenv("GEMINI_MODEL", DEFAULT_MODEL),
        temperature=_env_float("GEMINI_TEMPERATURE", DEFAULT_TEMPERATURE),
        country=os.getenv("MARKET_COUNTRY", DEFAULT_COUNTRY),
        city=os.getenv("MARKET_CITY", DEFAULT_CITY),
        currency=os.getenv("MARKET_CURRENCY", DEFAULT_CURRENCY),
        latitude=_env_float("MARKET_LATITUDE", None),
        longitude=_env_float("MARKET_LONGITUDE", None),
        geolocation_url=os.getenv("GEOLOCATION_URL", DEFAULT_GEOLOCATION_URL),
        location_timeout=_env_float("LOCATION_TIMEOUT_SECONDS", DEFAULT_LOCATION_TIMEOUT),
        min_trends=_env_int("MIN_TRENDS", DEFAULT_MIN_TRENDS),
    )
