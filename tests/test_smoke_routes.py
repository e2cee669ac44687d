from app import create_app
from app_services import AppServiceConfig, AppServices


def test_health_and_cors_headers(client):
    health = client.get("/health")
    assert health.status_code == 200
    assert health.get_json()["status"] == "ok"
    assert health.headers["Access-Control-Allow-Origin"] == "http://localhost:3000"

    preflight = client.options("/api/sessions")
    assert preflight.status_code == 200
    assert "PUT" in preflight.headers["Access-Control-Allow-Methods"]


def test_debug_dump_is_hidden_by_default(client):
    response = client.get("/api/debug/sessions")
    assert response.status_code == 404


def test_debug_dump_when_enabled(fetcher):
    config = AppServiceConfig(
        environment="development",
        quote_api_key="test-key",
        debug_dump_enabled=True,
    )
    app = create_app(services=AppServices(config, fetcher=fetcher))
    client = app.test_client()

    client.post("/api/sessions", json={"code": 4521, "capacity": 2, "prompt_count": 1})
    client.put("/api/sessions/4521/players", json={"username": "alice"})

    response = client.get("/api/debug/sessions")
    assert response.status_code == 200
    sessions = response.get_json()["sessions"]
    assert list(sessions) == ["4521"]
    assert sessions["4521"]["users"] == ["alice"]
    assert sessions["4521"]["created_at"] <= sessions["4521"]["updated_at"]


def test_production_cors_origin(fetcher):
    config = AppServiceConfig(environment="production", quote_api_key="k")
    app = create_app(services=AppServices(config, fetcher=fetcher))
    response = app.test_client().get("/health")
    assert response.headers["Access-Control-Allow-Origin"] == "https://mindspring.surge.sh"
