# location_probe.py

import logging
from typing import Optional

import requests

from resale_radar.config import Settings, load_settings
from resale_radar.schemas import Coordinates

logger = logging.getLogger(__name__)


def _coords_from_settings(settings: Settings) -> Optional[Coordinates]:
    if settings.latitude is None or settings.longitude is None:
        return None
    return Coordinates(latitude=settings.latitude, longitude=settings.longitude)


def _coords_from_payload(payload) -> Optional[Coordinates]:
    """ip-api style body: {"status": "success", "lat": .., "lon": ..}"""
    if not isinstance(payload, dict):
        return None

    status = payload.get("status")
    if status is not None and status != "success":
        logger.warning(f"Geolocation refused: {payload.get('message', status)}")
        return None

    lat = payload.get("lat", payload.get("latitude"))
    lon = payload.get("lon", payload.get("longitude"))
    try:
        return Coordinates(latitude=float(lat), longitude=float(lon))
    except (TypeError, ValueError):
        logger.warning(f"Geolocation response without usable coordinates: {payload}")
        return None


def acquire(settings: Optional[Settings] = None, session=None) -> Optional[Coordinates]:
    """
    Best-effort location lookup. Never raises.

    Configured MARKET_LATITUDE/MARKET_LONGITUDE win; otherwise one request
    to the IP geolocation endpoint; connect and each read are bounded
    by `settings.location_timeout`.
    Any failure means "no location hint" and is only logged.
    """
    settings = settings or load_settings()

    fixed = _coords_from_settings(settings)
    if fixed is not None:
        return fixed

    http = session or requests
    try:
        # (connect, read): each phase is bounded, a trickling body is not cut off
        timeout = (settings.location_timeout, settings.location_timeout)
        r = http.get(settings.geolocation_url, timeout=timeout)
        r.raise_for_status()
        payload = r.json()
    except requests.Timeout:
        logger.warning(f"Geolocation timed out after {settings.location_timeout}s")
        return None
    except (requests.RequestException, ValueError) as e:
        logger.warning(f"Geolocation unavailable: {e}")
        return None

    coords = _coords_from_payload(payload)
    if coords is not None:
        logger.info(f"Location hint: {coords.latitude:.3f}, {coords.longitude:.3f}")
    return coords
