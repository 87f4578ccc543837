"""
Typed records exchanged between the location probe, the insight fetcher
and the dashboard view.
"""

from resale_radar.schemas.market import (  # noqa: F401
    EMPTY_INSIGHT,
    Coordinates,
    MarketInsight,
    Platform,
    ProvenanceReference,
    Trend,
    WebSource,
)
