"""Shared test fixtures for messenger-driver."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest

from messenger_driver.audit import AuditLogger
from messenger_driver.config import DriverConfig
from messenger_driver.envelope import InboundEnvelope
from messenger_driver.verifier import compute_signature

APP_SECRET = "test_app_secret"
PAGE_TOKEN = "test_page_token"
VERIFY_TOKEN = "test_verify_token"
API_URL = "https://graph.test/v2.6/"


def make_payload(
    sender_id: str | None = "1254459154682919",
    text: str = "hello",
    include_message: bool = True,
) -> dict[str, Any]:
    event: dict[str, Any] = {
        "recipient": {"id": "PAGE_ID"},
        "timestamp": 1458692752478,
    }
    if sender_id is not None:
        event["sender"] = {"id": sender_id}
    if include_message:
        event["message"] = {"mid": "mid.1457764197618:41d102a3e1ae206a38", "text": text}
    return {
        "object": "page",
        "entry": [{"id": "PAGE_ID", "time": 1458692752478, "messaging": [event]}],
    }


def make_envelope(
    payload: dict[str, Any] | None = None,
    app_secret: str | None = APP_SECRET,
    signature: str | None = None,
) -> InboundEnvelope:
    """Signed envelope; pass ``signature`` to override the computed header."""
    body = json.dumps(payload if payload is not None else make_payload()).encode()
    headers: dict[str, str] = {}
    if signature is not None:
        headers["X-Hub-Signature"] = signature
    elif app_secret:
        headers["X-Hub-Signature"] = compute_signature(body, app_secret)
    return InboundEnvelope.from_request(body, headers)


def make_config(**kwargs: Any) -> DriverConfig:
    defaults: dict[str, Any] = {
        "page_token": PAGE_TOKEN,
        "verify_token": VERIFY_TOKEN,
        "app_secret": APP_SECRET,
        "api_url": API_URL,
    }
    defaults.update(kwargs)
    return DriverConfig(**defaults)


class GraphStub:
    """Records requests and answers them from a handler."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []
        self._handler = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        return self._handler(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def graph_ok() -> GraphStub:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, json={"first_name": "Peter", "last_name": "Chang"})
        return httpx.Response(200, json={"recipient_id": "1254459154682919", "message_id": "mid.1"})

    return GraphStub(handler)


@pytest.fixture
def mock_audit_logger() -> MagicMock:
    return MagicMock(spec=AuditLogger)
