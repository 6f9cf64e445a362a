"""Calculator API tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from betleague.api.server import app


@pytest.fixture()
def client() -> TestClient:
    return TestClient(app)


def _leg(idx: int, american_odds: int, **overrides) -> dict:
    leg = {
        "id": idx,
        "game_id": f"g{idx}",
        "market_type": "spreads",
        "outcome_name": f"Team {idx}",
        "outcome_point": -3.5,
        "bookmaker": "MockBook",
        "american_odds": american_odds,
    }
    leg.update(overrides)
    return leg


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/version").json()["weekly_budget"] == 100.0


def test_convert_odds(client: TestClient) -> None:
    body = client.post("/odds/convert", json={"american_odds": 150}).json()
    assert body == {"american_odds": 150, "display": "+150", "decimal_odds": 2.5, "implied_prob": 0.4}
    assert client.post("/odds/convert", json={"american_odds": 0}).status_code == 422


def test_best_odds(client: TestClient) -> None:
    quotes = [
        {"bookmaker": "A", "american_odds": -120},
        {"bookmaker": "B", "american_odds": -105},
        {"bookmaker": "C", "american_odds": 100},
    ]
    body = client.post("/odds/best", json={"quotes": quotes}).json()
    assert body["bookmaker"] == "C"
    assert body["index"] == 2
    assert body["decimal_odds"] == 2.0
    assert client.post("/odds/best", json={"quotes": []}).status_code == 422


def test_calculate_parlay(client: TestClient) -> None:
    payload = {"stake": 10, "legs": [_leg(1, 150), _leg(2, -110, outcome_point=3.5)]}
    body = client.post("/parlays/calculate", json=payload).json()
    assert body["decimal_odds"] == 4.7727
    assert body["payout"] == 47.73
    assert body["profit"] == 37.73
    assert body["can_place"] is True
    assert [leg["description"] for leg in body["legs"]] == ["Team 1 -3.5", "Team 2 +3.5"]
    assert body["legs"][0]["odds"] == "+150"
    assert body["legs"][0]["market"] == "Spread"


def test_calculate_parlay_rejects_bad_leg_sets(client: TestClient) -> None:
    single = client.post("/parlays/calculate", json={"stake": 10, "legs": [_leg(1, 150)]}).json()
    assert single["can_place"] is False
    assert client.post("/parlays/calculate", json={"stake": 10, "legs": []}).status_code == 400
    too_many = [_leg(idx, -110) for idx in range(11)]
    assert client.post("/parlays/calculate", json={"stake": 10, "legs": too_many}).status_code == 400
    locked = [_leg(1, 150), _leg(2, -110, is_locked=True)]
    response = client.post("/parlays/calculate", json={"stake": 10, "legs": locked})
    assert response.status_code == 400
    assert "locked" in response.json()["detail"]
