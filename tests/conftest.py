"""Shared test fixtures: fake vendor APIs served through httpx.MockTransport."""

import json
from typing import Any, Callable, List, Optional

import httpx
import pytest

from crm_mcp.config import ServerConfig


class FakeVendor:
    """Request-counting stand-in for a vendor REST API.

    Answers every request with the same canned response unless a handler
    is given, in which case the handler builds the response.
    """

    def __init__(
        self,
        status_code: int = 200,
        json_body: Any = None,
        text: Optional[str] = None,
        handler: Optional[Callable[[httpx.Request], httpx.Response]] = None,
    ):
        self.status_code = status_code
        self.json_body = json_body
        self.text = text
        self.handler = handler
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.handler:
            return self.handler(request)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        if self.json_body is None:
            return httpx.Response(self.status_code)
        return httpx.Response(self.status_code, json=self.json_body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


def echo_with_id(key: Optional[str], identifier: Any) -> Callable[[httpx.Request], httpx.Response]:
    """Handler echoing the JSON body back with an id added, optionally wrapped under key"""

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else {}
        body["id"] = identifier
        return httpx.Response(201, json={key: body} if key else body)

    return handler


@pytest.fixture
def fake_vendor() -> Callable[..., FakeVendor]:
    """Factory fixture for FakeVendor instances."""
    return FakeVendor


@pytest.fixture
def make_adapter():
    """Factory fixture building an adapter wired to a fake vendor.

    Usage:
        adapter = make_adapter(GoHighLevelAdapter, vendor)
        adapter = make_adapter(PipedriveAdapter, vendor, credential="tok")
    """

    def _make(adapter_cls, vendor: FakeVendor, credential: Optional[str] = None, **config):
        server_config = ServerConfig(
            vendor=adapter_cls.platform_name,
            credential=credential,
            credential_env=adapter_cls.credential_env,
            **config
        )
        return adapter_cls(server_config, client=vendor.client())

    return _make
