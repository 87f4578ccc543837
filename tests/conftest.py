from types import SimpleNamespace

import pytest

from resale_radar.config import Settings
from resale_radar.schemas import Trend


def make_trend(i=1, platform="AliExpress", category="Electronics", score=50, **overrides):
    fields = dict(
        id=str(i),
        name=f"Product {i}",
        platform=platform,
        category=category,
        description="Popular item",
        popularity_score=score,
        estimated_source_price="10.000 Kz",
        estimated_resale_price="25.000 Kz",
        estimated_profit="15.000 Kz",
        tags=("gadget", "summer"),
    )
    fields.update(overrides)
    return Trend(**fields)


def fake_response(text, chunks=None):
    """Mimics the google-genai response surface the pipeline reads."""
    if chunks is None:
        candidates = [SimpleNamespace(grounding_metadata=None)]
    else:
        candidates = [SimpleNamespace(grounding_metadata=SimpleNamespace(grounding_chunks=chunks))]
    return SimpleNamespace(text=text, candidates=candidates)


def web_chunk(uri, title):
    return SimpleNamespace(web=SimpleNamespace(uri=uri, title=title))


class FakeLLMClient:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def generate(self, prompt, location=None):
        self.calls.append((prompt, location))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def settings():
    return Settings(api_key=None)
