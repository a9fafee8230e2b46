import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from blockroute.config import settings
from blockroute.data import blocks_repository
from blockroute.main import create_app
from blockroute.services.routing import service as routing_service
from blockroute.services.routing.distance import DistanceService
from blockroute.services.routing.worker import RouteWorker


def _record(bid: int, nome: str, horario: str, lat: float, lon: float, data: str = "2026-02-14") -> dict:
    return {
        "id": bid,
        "nome": nome,
        "data": data,
        "horario": horario,
        "horario_fim": None,
        "local": "Centro",
        "endereco": "",
        "latitude": str(lat),
        "longitude": str(lon),
        "categoria_evento": "bloco",
        "total_favoritos": 0,
    }


@pytest.fixture(autouse=True)
def clear_block_cache():
    blocks_repository.clear_block_caches()
    yield
    blocks_repository.clear_block_caches()


@pytest.fixture
def api_client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    records = [
        _record(1, "Cordão da Bola Preta", "12:00", -22.9068, -43.1729),
        _record(2, "Simpatia é Quase Amor", "16:00", -22.9838, -43.2096),
        _record(3, "Orquestra Voadora", "20:05", -22.9130, -43.1750),
        _record(4, "Bangalafumenga", "09:00", -22.9711, -43.1822, data="2099-01-01"),
    ]
    path = tmp_path / "blocks.json"
    path.write_text(json.dumps(records, ensure_ascii=False), encoding="utf-8")
    monkeypatch.setattr(settings, "blocks_file", path)

    worker = RouteWorker(max_workers=1, timeout=10, distance_service=DistanceService())
    monkeypatch.setattr(routing_service, "get_route_worker", lambda: worker)
    yield TestClient(create_app())
    worker.shutdown()


def test_health(api_client: TestClient):
    assert api_client.get("/api/health").json() == {"status": "ok"}
    data_health = api_client.get("/api/health/data").json()
    assert data_health["healthy"] is True
    assert data_health["blocks"] == 4


def test_list_and_search_blocks(api_client: TestClient):
    response = api_client.get("/api/blocks", params={"date": "2026-02-14"})
    assert response.status_code == 200
    payload = response.json()
    assert payload["count"] == 3
    assert [b["id"] for b in payload["blocks"]] == [1, 2, 3]

    searched = api_client.get("/api/blocks", params={"q": "cordao"}).json()
    assert [b["id"] for b in searched["blocks"]] == [1]


def test_read_block(api_client: TestClient):
    response = api_client.get("/api/blocks/3")
    assert response.status_code == 200
    assert response.json()["start_time"] == "20:05"
    assert api_client.get("/api/blocks/42").status_code == 404


def test_available_dates(api_client: TestClient):
    payload = api_client.get("/api/blocks/dates").json()
    assert "2099-01-01" in payload["dates"]
    assert payload["default_date"] in payload["dates"]


def test_suggest_routes_endpoint(api_client: TestClient):
    response = api_client.post("/api/routes/suggest", json={"start_block_id": 1, "min_gap_hours": 4})

    assert response.status_code == 200
    payload = response.json()
    assert payload["min_gap_minutes"] == 240
    assert payload["routes"][0]["block_ids"] == [1, 2, 3]
    assert payload["routes"][0]["is_fallback"] is False
    assert payload["next_immediate_block"]["id"] == 2


def test_suggest_routes_unknown_block_is_bad_request(api_client: TestClient):
    response = api_client.post("/api/routes/suggest", json={"start_block_id": 404, "min_gap_hours": 4})

    assert response.status_code == 400
    assert "404" in response.json()["detail"]


def test_clear_distance_cache(api_client: TestClient):
    response = api_client.post("/api/routes/cache/clear")

    assert response.status_code == 200
    assert response.json()["cleared_entries"] >= 0
