"""
Tests for the health route hook.
"""

from fastapi.testclient import TestClient

from apiboot.core.config import ServerConfig
from apiboot.interfaces.health import register_health
from apiboot.main import create_app


def test_health_under_base_path() -> None:
    """The health route is mounted under the base path."""
    app = create_app(ServerConfig(base_path="/api/v1", route_hooks=(register_health,)))
    response = TestClient(app).get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_openapi_documents_error_envelope() -> None:
    """The OpenAPI schema documents the error envelope."""
    app = create_app(ServerConfig(route_hooks=(register_health,)))
    schemas = app.openapi()["components"]["schemas"]
    assert set(schemas["ErrorResponse"]["properties"]) == {"errorCode", "message", "data"}


def test_openapi_without_error_handler() -> None:
    """Without the classifier no envelope is documented."""
    app = create_app(ServerConfig(enable_error_handler=False, route_hooks=(register_health,)))
    schemas = app.openapi().get("components", {}).get("schemas", {})
    assert "ErrorResponse" not in schemas
