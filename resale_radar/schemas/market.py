"""
Market insight schema.

Everything here is created once from a provider response and never
mutated afterwards, hence frozen dataclasses and tuples.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class Platform(str, Enum):
    ALIEXPRESS = "AliExpress"
    SHEIN = "Shein"
    ALIBABA = "Alibaba"

    @classmethod
    def normalize(cls, value) -> str:
        """Return the canonical platform name for `value`, or the stripped input if unknown."""
        text = str(value or "").strip()
        for platform in cls:
            if text.lower() == platform.value.lower():
                return platform.value
        return text


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class Trend:
    id: str
    name: str
    platform: str                  # canonical Platform value when recognised, raw text otherwise
    category: str
    description: str
    popularity_score: int          # expected 0-100, not enforced
    estimated_source_price: str    # free-form, e.g. "15.000 Kz"
    estimated_resale_price: str
    estimated_profit: str
    tags: Tuple[str, ...] = ()


@dataclass(frozen=True)
class MarketInsight:
    title: Optional[str] = None
    summary: Optional[str] = None
    trends: Tuple[Trend, ...] = field(default_factory=tuple)


# Returned by the parser when the payload is empty or malformed
EMPTY_INSIGHT = MarketInsight()


@dataclass(frozen=True)
class WebSource:
    uri: str
    title: str


@dataclass(frozen=True)
class ProvenanceReference:
    web: Optional[WebSource] = None
