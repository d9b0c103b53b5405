"""HTTP-level tests for the travel service, run against the mock provider."""

import json

import pytest
from fastapi.testclient import TestClient

from companion.errors import RateLimitError, ServerError
from services.travel_service import main
from services.travel_service.orchestrator import build_orchestrator


@pytest.fixture
def client(monkeypatch, recording_sleep):
    monkeypatch.setenv("LLM_PROVIDER", "mock")
    monkeypatch.setenv("OPENAI_MODEL", "gpt-4")
    with TestClient(main.app) as test_client:
        main.orchestrator = build_orchestrator(main.cfg, main.provider, sleep=recording_sleep)
        yield test_client


@pytest.fixture
def backend(client):
    return main.provider


class TestHealth:

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok", "service": "travel_service"}

    def test_prometheus_metrics(self, client):
        response = client.get("/metrics")
        assert response.status_code == 200
        assert "llm_calls_total" in response.text


class TestItineraryEndpoint:

    def test_returns_parsed_days(self, client, backend):
        backend.enqueue("## Day 1\n### Morning\nHike\n### Evening\nTapas")

        response = client.post(
            "/api/travel/itinerary",
            json={"destination": "Granada", "travelerProfile": {"budget": "low"}},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["destination"] == "Granada"
        assert body["itinerary"][0]["morning"] == "Hike"
        assert "generatedAt" in body

    def test_profile_defaults_are_merged(self, client, backend):
        backend.enqueue("## Day 1\n### Morning\nHike")
        client.post(
            "/api/travel/itinerary",
            json={"destination": "Granada", "travelerProfile": {"budget": "luxury"}},
        )
        prompt = backend.requests[-1].payload
        assert '"budget": "luxury"' in prompt
        assert '"travelStyle": "balanced"' in prompt

    def test_null_profile_uses_defaults(self, client, backend):
        backend.enqueue("## Day 1\n### Morning\nHike")

        response = client.post(
            "/api/travel/itinerary",
            json={"destination": "Granada", "travelerProfile": None},
        )

        assert response.status_code == 200
        prompt = backend.requests[-1].payload
        assert '"budget": "moderate"' in prompt
        assert '"interests": [\n    "general"\n  ]' in prompt

    def test_missing_destination_is_400(self, client, backend):
        response = client.post("/api/travel/itinerary", json={"travelerProfile": {}})
        assert response.status_code == 400
        assert backend.call_count == 0


class TestInsightsEndpoint:

    def test_structured_insights(self, client, backend):
        backend.enqueue('```json {"historical_context": "Tokugawa"} ```')
        response = client.get("/api/travel/cultural-insights/Tokyo")
        assert response.status_code == 200
        assert response.json()["insights"] == {"historical_context": "Tokugawa"}

    def test_rate_limit_exhaustion_is_429(self, client, backend):
        backend.enqueue(*[RateLimitError("slow down", 429)] * 4)
        response = client.get("/api/travel/cultural-insights/Tokyo")
        assert response.status_code == 429
        assert "Rate limit" in response.json()["message"]

    def test_server_failure_is_502(self, client, backend):
        backend.enqueue(*[ServerError("boom", 500)] * 4)
        response = client.get("/api/travel/cultural-insights/Paris")
        assert response.status_code == 502
        assert response.json()["error"] == "Generation failed"


class TestTranslateEndpoint:

    def test_structured_translation(self, client, backend):
        backend.enqueue(
            json.dumps(
                {
                    "translation": "Bonjour",
                    "translation_notes": "Informal",
                    "cultural_adaptations": "None",
                }
            )
        )

        response = client.post(
            "/api/travel/translate",
            json={"text": "Hello", "sourceLang": "en", "targetLang": "fr"},
        )

        body = response.json()
        assert body["translatedText"] == "Bonjour"
        assert body["translationNotes"] == "Informal"
        assert body["culturalAdaptations"] == "None"

    def test_plain_translation(self, client, backend):
        backend.enqueue("Hallo")
        response = client.post(
            "/api/travel/translate",
            json={"text": "Hello", "sourceLang": "en", "targetLang": "de"},
        )
        body = response.json()
        assert body["translatedText"] == "Hallo"
        assert "translationNotes" not in body

    def test_incomplete_request_is_400(self, client):
        response = client.post("/api/travel/translate", json={"text": "Hello"})
        assert response.status_code == 400


class TestChatAndAdmin:

    def test_chat_keeps_session(self, client, backend):
        backend.enqueue("First reply", "Second reply")

        first = client.post("/api/travel/chat", json={"message": "Hi"}).json()
        second = client.post(
            "/api/travel/chat",
            json={"sessionId": first["sessionId"], "message": "And then?"},
        ).json()

        assert second["sessionId"] == first["sessionId"]
        assert second["conversationLength"] == 4

    def test_forget_session(self, client, backend):
        backend.enqueue("Reply")
        session_id = client.post("/api/travel/chat", json={"message": "Hi"}).json()["sessionId"]

        assert client.delete(f"/api/travel/sessions/{session_id}").status_code == 200
        assert client.delete(f"/api/travel/sessions/{session_id}").status_code == 404

    def test_performance_and_cache_reset(self, client, backend):
        backend.enqueue("{}", "{}")
        client.get("/api/travel/cultural-insights/Rome")
        client.get("/api/travel/cultural-insights/Rome")

        perf = client.get("/api/travel/performance").json()
        assert perf["totalCalls"] == 1
        assert perf["successRate"] == 100

        assert client.delete("/api/travel/cache").json() == {"status": "cleared"}
        client.get("/api/travel/cultural-insights/Rome")
        assert backend.call_count == 2
