import httpx
import pytest

from baydistance.catalog.loader import find_place, load_places
from baydistance.config.settings import get_settings
from baydistance.domain.models import GeoPoint
from baydistance.ingestion.llm_client import LlmClient
from baydistance.ingestion.places_client import PlacesClient
from baydistance.recommender.recommend import build_recommendation_prompt, find_parking, recommend_places


class StubLlmClient:
    def __init__(self, reply: str | None = None, error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply or ""


class StubPlacesClient:
    def __init__(self, results=None, error: Exception | None = None):
        self.results = results or []
        self.error = error
        self.points: list[GeoPoint] = []

    def nearby_parking(self, point: GeoPoint):
        self.points.append(point)
        if self.error is not None:
            raise self.error
        return self.results


def _berkeley():
    return find_place(load_places(), "Berkeley")


def test_recommend_places_parsed():
    llm = StubLlmClient('[{"name": "UC Botanical Garden", "description": "Gardens.", "category": "park"}]')
    result = recommend_places(_berkeley(), settings=get_settings(), llm_client=llm)

    assert result.status == "parsed"
    assert result.city == "Berkeley"
    assert [i.name for i in result.items] == ["UC Botanical Garden"]
    assert "Berkeley" in llm.prompts[0]


def test_recommend_places_falls_back_on_upstream_error():
    llm = StubLlmClient(error=RuntimeError("LLM API key is not configured"))
    result = recommend_places(_berkeley(), settings=get_settings(), llm_client=llm)

    assert result.status == "fallback"
    assert "not configured" in result.reason
    assert result.items


def test_recommend_places_falls_back_on_garbage():
    result = recommend_places(_berkeley(), settings=get_settings(), llm_client=StubLlmClient("no idea"))
    assert result.status == "fallback"
    assert result.items


def test_build_recommendation_prompt_mentions_count():
    prompt = build_recommendation_prompt("Oakland", 3)
    assert "3 points of interest" in prompt
    assert "Oakland" in prompt


def test_find_parking_parsed_uses_city_center():
    place = _berkeley()
    stub = StubPlacesClient(
        [{"name": "Center St Garage", "geometry": {"location": {"lat": 37.8700, "lng": -122.2700}}}]
    )
    result = find_parking(place, settings=get_settings(), places_client=stub)

    assert stub.points == [place.location]
    assert result.status == "parsed"
    assert result.items[0].name == "Center St Garage"
    assert result.items[0].distance_miles < 1


def test_find_parking_falls_back_on_http_error():
    request = httpx.Request("GET", "https://example.test")
    stub = StubPlacesClient(error=httpx.ConnectError("down", request=request))
    result = find_parking(_berkeley(), settings=get_settings(), places_client=stub)

    assert result.status == "fallback"
    assert result.items == []
    assert "down" in result.reason


def test_find_parking_falls_back_on_malformed_rows():
    stub = StubPlacesClient([{"name": "Lot", "geometry": "oops"}, {"name": "Garage", "opening_hours": "24h"}])
    result = find_parking(_berkeley(), settings=get_settings(), places_client=stub)

    assert result.status == "fallback"
    assert result.items == []


def test_llm_client_requires_key():
    settings = get_settings()
    llm = settings.ingestion.llm.model_copy(update={"api_key": None})
    settings = settings.model_copy(update={"ingestion": settings.ingestion.model_copy(update={"llm": llm})})
    with pytest.raises(RuntimeError, match="not configured"):
        LlmClient(settings).complete("hi")


def test_llm_client_extracts_message(monkeypatch):
    settings = get_settings()
    llm = settings.ingestion.llm.model_copy(update={"api_key": "test-key"})
    settings = settings.model_copy(update={"ingestion": settings.ingestion.model_copy(update={"llm": llm})})
    calls = []

    def fake_post_json(url, *, payload, headers=None, timeout_seconds=15):
        calls.append((url, payload, headers))
        return {"choices": [{"message": {"role": "assistant", "content": "[]"}}]}

    monkeypatch.setattr("baydistance.ingestion.llm_client.post_json", fake_post_json)

    assert LlmClient(settings).complete("hello") == "[]"
    url, payload, headers = calls[0]
    assert url == settings.ingestion.llm.base_url
    assert payload["messages"][-1] == {"role": "user", "content": "hello"}
    assert headers == {"Authorization": "Bearer test-key"}


def test_places_client_status_handling(monkeypatch):
    settings = get_settings()
    places = settings.ingestion.places.model_copy(update={"api_key": "test-key"})
    settings = settings.model_copy(update={"ingestion": settings.ingestion.model_copy(update={"places": places})})
    point = GeoPoint(lat=37.8715, lon=-122.2730)
    replies = iter(
        [
            {"status": "OK", "results": [{"name": "Lot"}, "junk"]},
            {"status": "ZERO_RESULTS", "results": []},
            {"status": "REQUEST_DENIED", "error_message": "bad key"},
        ]
    )
    seen_params = []

    def fake_get_json(url, *, params=None, headers=None, timeout_seconds=15):  # noqa: ARG001
        seen_params.append(params)
        return next(replies)

    monkeypatch.setattr("baydistance.ingestion.places_client.get_json", fake_get_json)
    client = PlacesClient(settings)

    assert client.nearby_parking(point) == [{"name": "Lot"}]
    assert seen_params[0]["type"] == "parking"
    assert seen_params[0]["location"] == "37.8715,-122.273"
    assert client.nearby_parking(point) == []
    with pytest.raises(RuntimeError, match="REQUEST_DENIED"):
        client.nearby_parking(point)
