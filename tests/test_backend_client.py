from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from dbdesign.models.schemas import SourceRequest
from dbdesign.services.backend_client import (
    DESIGN_FAILED_MESSAGE,
    LOGIN_FAILED_MESSAGE,
    AuthError,
    DesignBackendClient,
    DesignError,
)

DESIGN_BODY = {
    "designRecommendations": {
        "tables": [{"name": "Users", "columns": [{"name": "id", "type": "int", "nullable": False}]}]
    }
}


def _run(coro):  # noqa: ANN001
    return asyncio.run(coro)


def _client(handler) -> DesignBackendClient:  # noqa: ANN001
    return DesignBackendClient(base_url="http://backend.test", transport=httpx.MockTransport(handler))


def test_login_posts_credentials_and_returns_token():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"token": "opaque-token"})

    token = _run(_client(handler).login("ada", "secret"))

    assert token == "opaque-token"
    assert seen[0].url.path == "/api/login"
    assert json.loads(seen[0].content) == {"username": "ada", "password": "secret"}


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(401, json={"error": "bad credentials"}),
        httpx.Response(500, text="boom"),
        httpx.Response(200, text="not json"),
        httpx.Response(200, json={"unexpected": True}),
    ],
)
def test_login_failures_collapse_to_auth_error(response: httpx.Response):
    with pytest.raises(AuthError) as excinfo:
        _run(_client(lambda request: response).login("ada", "secret"))
    assert excinfo.value.message == LOGIN_FAILED_MESSAGE


def test_login_transport_error_is_auth_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(AuthError):
        _run(_client(handler).login("ada", "secret"))


def test_generate_design_sends_bearer_token_and_csv_path():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=DESIGN_BODY)

    request = SourceRequest(sourceType="csv", connectionString="/data/x.csv")
    body = _run(_client(handler).generate_design(request, "tok-1"))

    assert body == DESIGN_BODY
    sent = seen[0]
    assert sent.url.path == "/api/generate-design"
    assert sent.headers["Authorization"] == "Bearer tok-1"
    payload = json.loads(sent.content)
    assert payload == {
        "sourceType": "csv",
        "connectionString": "/data/x.csv",
        "sourceConfig": {"path": "/data/x.csv"},
    }
    assert "url" not in payload["sourceConfig"]


@pytest.mark.parametrize(
    ("source_type", "expected"),
    [
        ("api", {"url": "https://example.com/data"}),
        ("prompt", {}),
        ("database", {}),
    ],
)
def test_source_config_only_carries_matching_key(source_type: str, expected: dict):
    request = SourceRequest(sourceType=source_type, connectionString="https://example.com/data")
    assert request.to_payload()["sourceConfig"] == expected


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(401, json={"error": "expired"}),
        httpx.Response(200, json={"designRecommendations": {}}),
        httpx.Response(200, json=[1, 2, 3]),
        httpx.Response(200, text="<html>"),
    ],
)
def test_generate_design_failures_collapse_to_design_error(response: httpx.Response):
    request = SourceRequest(sourceType="prompt", connectionString="a blog with comments")
    with pytest.raises(DesignError) as excinfo:
        _run(_client(lambda req: response).generate_design(request, "tok"))
    assert str(excinfo.value) == DESIGN_FAILED_MESSAGE


def test_client_rejects_base_url_without_scheme():
    with pytest.raises(RuntimeError):
        DesignBackendClient(base_url="localhost:3000")
