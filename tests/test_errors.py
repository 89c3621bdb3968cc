"""Tests for the JSON error handlers."""

from unittest.mock import patch

from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient
from pydantic import BaseModel

from src.config import Settings
from src.errors import register_exception_handlers


class Payload(BaseModel):
    count: int


def build_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/teapot")
    async def teapot():
        raise HTTPException(status_code=418, detail="I'm a teapot")

    @app.post("/payload")
    async def payload(data: Payload):
        return data

    @app.get("/boom")
    async def boom():
        raise RuntimeError("kaboom")

    return app


def test_http_exception_uses_message_key():
    client = TestClient(build_app())
    response = client.get("/teapot")
    assert response.status_code == 418
    assert response.json() == {"message": "I'm a teapot"}


def test_validation_error_is_400():
    client = TestClient(build_app())
    response = client.post("/payload", json={"count": "many"})
    assert response.status_code == 400
    assert response.json()["message"].startswith("count:")


def test_unknown_route_is_404_message():
    client = TestClient(build_app())
    response = client.get("/nowhere")
    assert response.status_code == 404
    assert response.json() == {"message": "Not Found"}


def test_unhandled_error_includes_stack_outside_production():
    client = TestClient(build_app(), raise_server_exceptions=False)
    with patch("src.errors.get_settings", return_value=Settings(environment="development")):
        response = client.get("/boom")
    assert response.status_code == 500
    body = response.json()
    assert body["message"] == "kaboom"
    assert "RuntimeError" in body["stack"]


def test_unhandled_error_hides_stack_in_production():
    client = TestClient(build_app(), raise_server_exceptions=False)
    production = Settings(
        environment="production",
        jwt_secret="real-secret",
        database_url="postgresql://u:p@db.internal/app",
    )
    with patch("src.errors.get_settings", return_value=production):
        response = client.get("/boom")
    assert response.status_code == 500
    assert response.json() == {"message": "kaboom", "stack": None}
