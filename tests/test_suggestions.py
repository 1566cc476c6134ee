"""Tests for AI square and bet suggestions (fake OpenAI-compatible client)."""

import json
from types import SimpleNamespace
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient
from openai import OpenAIError

from bingo.features.suggestions.services import SuggestionService

API = "/api/v1"


class FakeCompletions:
    def __init__(self, content: Optional[str] = None, error: Optional[Exception] = None):
        self.content = content
        self.error = error
        self.calls: List[dict] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def fake_client(content: Optional[str] = None, error: Optional[Exception] = None) -> SimpleNamespace:
    return SimpleNamespace(chat=SimpleNamespace(completions=FakeCompletions(content, error)))


def _squares_json(*texts: str) -> str:
    return json.dumps({"squares": [{"text": t, "description": f"About {t}"} for t in texts]})


# -----------------------------
# Service
# -----------------------------
def test_squares_are_cleaned_and_truncated() -> None:
    client = fake_client(_squares_json("Dance", "  ", "Hold hands", "dance", "Kiss", "Wink"))
    svc = SuggestionService(client=client, model="test-model")

    squares = svc.generate_squares("date night", 2, existing_texts=["KISS"])
    assert [s.text for s in squares] == ["Dance", "Hold hands"]

    call = client.chat.completions.calls[0]
    assert call["model"] == "test-model"
    assert call["response_format"] == {"type": "json_object"}
    assert "KISS" in call["messages"][1]["content"]


def test_existing_texts_are_deduplicated_case_insensitive() -> None:
    svc = SuggestionService(client=fake_client(_squares_json("Kiss", "Wink")), model="m")
    assert [s.text for s in svc.generate_squares("x", 5, existing_texts=["kiss"])] == ["Wink"]


def test_rating_and_mood_shape_the_prompt() -> None:
    client = fake_client(_squares_json("Dance"))
    SuggestionService(client=client, model="m").generate_squares("trip", 1, rating="pg", mood="friends-trip")
    system = client.chat.completions.calls[0]["messages"][0]["content"]
    assert "wholesome" in system
    assert "friends on a trip" in system


@pytest.mark.parametrize(
    "content",
    ["not json", json.dumps({"items": []}), json.dumps({"squares": "nope"}), "", None],
)
def test_malformed_square_response_yields_empty(content) -> None:
    svc = SuggestionService(client=fake_client(content), model="m")
    assert svc.generate_squares("x", 3) == []


def test_transport_failure_yields_empty() -> None:
    svc = SuggestionService(client=fake_client(error=OpenAIError("connection reset")), model="m")
    assert svc.generate_squares("x", 3) == []
    assert svc.generate_bet_ideas("x") == []


def test_no_client_yields_empty() -> None:
    svc = SuggestionService(client=None, model="m")
    assert svc.generate_squares("x", 3) == []
    assert svc.generate_bet_ideas("x") == []


def test_bets_trimmed_and_bounded() -> None:
    content = json.dumps({"bets": ["Loser cooks", " ", "Loser cooks", "Back rub", "Pick the movie"]})
    svc = SuggestionService(client=fake_client(content), model="m")
    assert svc.generate_bet_ideas("dinner", count=2) == ["Loser cooks", "Back rub"]


# -----------------------------
# API
# -----------------------------
def test_suggestions_endpoint(client: TestClient, app, auth_headers) -> None:
    app.state.ai_client = fake_client(_squares_json("Dance", "Kiss"))
    response = client.post(
        f"{API}/ai/suggestions",
        json={"theme": "date", "count": 2, "existing": [], "rating": "r", "mood": "couples"},
        headers=auth_headers("alice"),
    )
    assert response.status_code == 200
    assert response.json() == {
        "squares": [
            {"text": "Dance", "description": "About Dance"},
            {"text": "Kiss", "description": "About Kiss"},
        ]
    }


def test_suggestions_endpoint_failure_is_not_an_error(client: TestClient, app, auth_headers) -> None:
    app.state.ai_client = fake_client(error=OpenAIError("boom"))
    response = client.post(f"{API}/ai/bet-suggestion", json={"theme": "date"}, headers=auth_headers("alice"))
    assert response.status_code == 200
    assert response.json() == {"bets": []}


def test_suggestion_count_bounds(client: TestClient, auth_headers) -> None:
    headers = auth_headers("alice")
    assert client.post(f"{API}/ai/suggestions", json={"count": 0}, headers=headers).status_code == 422
    assert client.post(f"{API}/ai/suggestions", json={"count": 26}, headers=headers).status_code == 422
    assert client.post(f"{API}/ai/bet-suggestion", json={"count": 11}, headers=headers).status_code == 422


def test_suggestions_require_identity(client: TestClient) -> None:
    assert client.post(f"{API}/ai/suggestions", json={"theme": "x"}).status_code == 401
