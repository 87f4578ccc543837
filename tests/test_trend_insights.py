import json

import pytest

from resale_radar.errors import FetchError
from resale_radar.llm.pipelines.trend_insights import (
    TrendInsightsPipeline,
    build_prompt,
    extract_sources,
    parse_insight,
)
from resale_radar.schemas import EMPTY_INSIGHT, Coordinates, WebSource
from tests.conftest import FakeLLMClient, fake_response, web_chunk

PAYLOAD = {
    "title": "Imports and Resale Analysis - Angola",
    "summary": "Phones and fashion lead.",
    "trends": [
        {
            "id": "a1",
            "name": "Wireless earbuds",
            "platform": "AliExpress",
            "category": "Electronics",
            "description": "Cheap and in demand",
            "popularityScore": 92,
            "estimatedSourcePrice": "8.000 Kz",
            "estimatedResalePrice": "20.000 Kz",
            "estimatedProfit": "12.000 Kz",
            "tags": ["audio", "gift"],
        },
        {
            "name": "Summer dress",
            "platform": "shein",
            "category": "Fashion",
            "description": "Fast fashion",
            "popularityScore": "75.4",
            "estimatedPriceKz": "6.000 Kz",
            "estimatedResalePriceKz": "15.000 Kz",
            "potentialProfitKz": "9.000 Kz",
            "tags": "dress",
        },
    ],
}


def test_parse_full_payload():
    insight = parse_insight(json.dumps(PAYLOAD))

    assert insight.title == "Imports and Resale Analysis - Angola"
    assert insight.summary == "Phones and fashion lead."
    assert len(insight.trends) == 2

    first = insight.trends[0]
    assert first.id == "a1"
    assert first.popularity_score == 92
    assert first.estimated_profit == "12.000 Kz"
    assert first.tags == ("audio", "gift")


def test_parse_accepts_legacy_price_fields_and_loose_values():
    dress = parse_insight(json.dumps(PAYLOAD)).trends[1]

    assert dress.id == "2"
    assert dress.platform == "Shein"
    assert dress.popularity_score == 75
    assert dress.estimated_source_price == "6.000 Kz"
    assert dress.estimated_resale_price == "15.000 Kz"
    assert dress.estimated_profit == "9.000 Kz"
    assert dress.tags == ("dress",)


def test_parse_strips_code_fences():
    text = "```json\n" + json.dumps(PAYLOAD) + "\n```"

    assert len(parse_insight(text).trends) == 2


def test_parse_keeps_out_of_range_scores():
    payload = {"trends": [{"name": "x", "popularityScore": 250}, {"name": "y", "popularityScore": "n/a"}]}
    trends = parse_insight(json.dumps(payload)).trends

    assert [t.popularity_score for t in trends] == [250, 0]


@pytest.mark.parametrize("text", [None, "", "   ", "not json", "[1, 2, 3]", "{\"title\": "])
def test_malformed_text_falls_back_to_empty_insight(text):
    assert parse_insight(text) is EMPTY_INSIGHT


def test_non_list_trends_and_non_object_entries():
    assert parse_insight(json.dumps({"title": "T", "trends": "oops"})).trends == ()
    assert len(parse_insight(json.dumps({"trends": [1, "x", {"name": "ok"}]})).trends) == 1


def test_extract_sources_keeps_entries_without_web():
    response = fake_response("{}", chunks=[web_chunk("https://a.example", "A"), object()])
    sources = extract_sources(response)

    assert len(sources) == 2
    assert sources[0].web == WebSource(uri="https://a.example", title="A")
    assert sources[1].web is None


def test_extract_sources_without_metadata():
    assert extract_sources(fake_response("{}")) == ()
    assert extract_sources(object()) == ()


def test_prompt_mentions_market_and_minimum_trends(settings):
    prompt = build_prompt(settings)

    assert "Angola" in prompt
    assert "Luanda" in prompt
    assert "at least 8" in prompt
    assert "estimatedResalePrice" in prompt
    assert "latitude" not in prompt


def test_prompt_includes_location_hint(settings):
    prompt = build_prompt(settings, Coordinates(-8.8383, 13.2344))

    assert "latitude -8.8383" in prompt


def test_fetch_sends_one_request_and_parses(settings):
    client = FakeLLMClient(fake_response(json.dumps(PAYLOAD), [web_chunk("https://a.example", "A")]))
    pipeline = TrendInsightsPipeline(llm_client=client, settings=settings)
    location = Coordinates(1.0, 2.0)

    result = pipeline.fetch(location)

    assert len(client.calls) == 1
    assert client.calls[0][1] == location
    assert len(result.insight.trends) == 2
    assert len(result.sources) == 1


def test_fetch_with_malformed_body_succeeds_empty(settings):
    response = fake_response("garbage", [web_chunk("https://a.example", "A")])
    pipeline = TrendInsightsPipeline(llm_client=FakeLLMClient(response), settings=settings)

    result = pipeline.fetch(None)

    assert result.insight is EMPTY_INSIGHT
    assert result.sources == ()


def test_fetch_propagates_fetch_error(settings):
    error = FetchError("boom")
    pipeline = TrendInsightsPipeline(llm_client=FakeLLMClient(error=error), settings=settings)

    with pytest.raises(FetchError) as exc_info:
        pipeline.fetch(None)
    assert exc_info.value is error


def test_missing_api_key_is_a_fetch_error(settings):
    pipeline = TrendInsightsPipeline(settings=settings)

    with pytest.raises(FetchError, match="GEMINI_API_KEY"):
        pipeline.fetch(None)


@pytest.mark.parametrize("score", ["1e999", "-1e999", "NaN"])
def test_unrepresentable_scores_become_zero(score):
    payload = json.dumps({"trends": [{"name": "x", "popularityScore": score}]})

    assert parse_insight(payload).trends[0].popularity_score == 0


def test_infinity_literal_score_becomes_zero():
    trends = parse_insight('{"trends": [{"name": "x", "popularityScore": Infinity}]}').trends

    assert trends[0].popularity_score == 0


def test_deeply_nested_body_falls_back_to_empty_insight():
    assert parse_insight("[" * 100000 + "]" * 100000) is EMPTY_INSIGHT


def test_empty_object_keeps_sources(settings):
    response = fake_response("{}", [web_chunk("https://a.example", "A")])
    pipeline = TrendInsightsPipeline(llm_client=FakeLLMClient(response), settings=settings)

    result = pipeline.fetch(None)

    assert result.insight.trends == ()
    assert len(result.sources) == 1


def test_unknown_platform_kept_as_raw_text():
    payload = {"trends": [{"platform": " ALIBABA "}, {"platform": "Temu"}, {}]}
    platforms = [t.platform for t in parse_insight(json.dumps(payload)).trends]

    assert platforms == ["Alibaba", "Temu", ""]
