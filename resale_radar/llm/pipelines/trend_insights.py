"""
trend_insights.py (Pipeline)
----------------------------
Asks Gemini for the current cross-border resale opportunities of the
destination market and turns the answer into a MarketInsight plus the
grounding links Gemini used.

Provides:
- build_prompt(location)
- parse_insight(text)        # lenient, falls back to EMPTY_INSIGHT
- extract_sources(response)
- TrendInsightsPipeline.fetch(location)
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from resale_radar.config import Settings, load_settings
from resale_radar.errors import ConfigError, FetchError
from resale_radar.llm.models.gemini_client import GeminiLLMClient
from resale_radar.schemas import (
    EMPTY_INSIGHT,
    Coordinates,
    MarketInsight,
    Platform,
    ProvenanceReference,
    Trend,
    WebSource,
)

logger = logging.getLogger(__name__)

# Field names used by older prompt versions that priced everything in Kz
PRICE_ALIASES = {
    "estimatedSourcePrice": ("estimatedSourcePrice", "estimatedPriceKz"),
    "estimatedResalePrice": ("estimatedResalePrice", "estimatedResalePriceKz"),
    "estimatedProfit": ("estimatedProfit", "potentialProfitKz"),
}


@dataclass
class InsightResult:
    insight: MarketInsight
    sources: Tuple[ProvenanceReference, ...]


def build_prompt(settings: Settings, location: Optional[Coordinates] = None) -> str:
    platforms = ", ".join(p.value for p in Platform)
    prompt = f"""
Analyse, in real time, the products most imported and bought by consumers in {settings.country} on the platforms {platforms}.
Consider current trends and the logistics of shipping to {settings.country}.

IMPORTANT: For each product you must research and estimate the local resale price in {settings.country}
(informal markets, Facebook/Instagram shops and physical stores in {settings.city}).
All prices are in {settings.currency}.

Return the data strictly as JSON with the following structure:
{{
  "title": "Imports and Resale Analysis - {settings.country}",
  "summary": "Executive summary of consumer behaviour and resale profit opportunities.",
  "trends": [
    {{
      "id": "1",
      "name": "Product name",
      "platform": "{' | '.join(p.value for p in Platform)}",
      "category": "Electronics | Fashion | Home",
      "description": "Why this product is popular and what its resale potential is.",
      "popularityScore": 0-100,
      "estimatedSourcePrice": "Import price in {settings.currency}",
      "estimatedResalePrice": "Estimated resale price in {settings.country} ({settings.currency})",
      "estimatedProfit": "Estimated gross profit per unit ({settings.currency})",
      "tags": ["Tag1", "Tag2"]
    }}
  ]
}}
Generate at least {settings.min_trends} varied trends.
"""
    if location is not None:
        prompt += (
            f"\nThe user is located near latitude {location.latitude:.4f}, "
            f"longitude {location.longitude:.4f}; favour sources relevant to that area.\n"
        )
    return prompt


def _clean_json_text(text: str) -> str:
    """Removes markdown code fences around the JSON body."""
    text = text.strip()
    text = re.sub(r"^```[a-zA-Z]*\s*", "", text)
    text = re.sub(r"\s*```$", "", text)
    return text.strip()


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _as_score(value: Any) -> int:
    try:
        return int(round(float(value)))
    except (TypeError, ValueError, OverflowError):
        return 0


def _first_present(raw: Dict[str, Any], keys) -> str:
    for key in keys:
        if raw.get(key) is not None:
            return _as_str(raw[key])
    return ""


def _parse_trend(raw: Dict[str, Any], position: int) -> Trend:
    tags = raw.get("tags") or []
    if not isinstance(tags, (list, tuple)):
        tags = [tags]

    return Trend(
        id=_as_str(raw.get("id")) or str(position),
        name=_as_str(raw.get("name")),
        platform=Platform.normalize(raw.get("platform")),
        category=_as_str(raw.get("category")),
        description=_as_str(raw.get("description")),
        popularity_score=_as_score(raw.get("popularityScore")),
        estimated_source_price=_first_present(raw, PRICE_ALIASES["estimatedSourcePrice"]),
        estimated_resale_price=_first_present(raw, PRICE_ALIASES["estimatedResalePrice"]),
        estimated_profit=_first_present(raw, PRICE_ALIASES["estimatedProfit"]),
        tags=tuple(_as_str(t) for t in tags),
    )


def parse_insight(text: Optional[str]) -> MarketInsight:
    """
    Turn the model's JSON body into a MarketInsight.
    Empty or unparsable bodies return EMPTY_INSIGHT instead of raising.
    """
    if not text or not text.strip():
        logger.warning("Empty Gemini response, using empty insight")
        return EMPTY_INSIGHT

    try:
        data = json.loads(_clean_json_text(text))
    except (ValueError, RecursionError) as e:
        logger.warning(f"Insight parsing failed: {e}\nRaw response: {text[:500]}")
        return EMPTY_INSIGHT

    if not isinstance(data, dict):
        logger.warning(f"Insight payload is {type(data).__name__}, expected object")
        return EMPTY_INSIGHT

    raw_trends = data.get("trends")
    if not isinstance(raw_trends, list):
        raw_trends = []

    trends = tuple(
        _parse_trend(raw, i)
        for i, raw in enumerate(raw_trends, start=1)
        if isinstance(raw, dict)
    )

    title = data.get("title")
    summary = data.get("summary")
    return MarketInsight(
        title=_as_str(title) if title is not None else None,
        summary=_as_str(summary) if summary is not None else None,
        trends=trends,
    )


def extract_sources(response) -> Tuple[ProvenanceReference, ...]:
    """Grounding chunks of the first candidate; missing metadata means no sources."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return ()

    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []

    sources = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        uri = getattr(web, "uri", None)
        if web is None or not uri:
            sources.append(ProvenanceReference(web=None))
            continue
        sources.append(
            ProvenanceReference(web=WebSource(uri=uri, title=getattr(web, "title", None) or uri))
        )
    return tuple(sources)


class TrendInsightsPipeline:
    def __init__(self, llm_client=None, settings: Optional[Settings] = None):
        """
        llm_client: must provide `.generate(prompt, location) -> response`
        Compatible with GeminiLLMClient. Created lazily when omitted.
        """
        self.settings = settings or load_settings()
        self.llm_client = llm_client

    def _client(self):
        if self.llm_client is None:
            try:
                self.llm_client = GeminiLLMClient(self.settings)
            except ConfigError as e:
                raise FetchError(str(e)) from e
        return self.llm_client

    def fetch(self, location: Optional[Coordinates] = None) -> InsightResult:
        prompt = build_prompt(self.settings, location)
        response = self._client().generate(prompt, location)

        insight = parse_insight(getattr(response, "text", None))
        if insight is EMPTY_INSIGHT:
            # malformed body: empty insight, no sources
            sources = ()
        else:
            sources = extract_sources(response)

        logger.info(f"Fetched {len(insight.trends)} trends, {len(sources)} sources")
        return InsightResult(insight=insight, sources=sources)

    def __call__(self, location: Optional[Coordinates] = None) -> InsightResult:
        return self.fetch(location)
