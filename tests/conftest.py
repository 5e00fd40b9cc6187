"""Shared fixtures: an in-memory Terraform API served through httpx.MockTransport."""

from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import httpx
import pytest

from terraform_mcp.client import ClientProvider
from terraform_mcp.tools import ToolContext

TFE_ADDRESS = "https://tfe.test"

Route = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class FakeTerraformAPI:
    """Routes requests by (method, path) and records every request it sees."""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Route] = {}
        self.requests: List[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        status: int = 200,
        json: Optional[Any] = None,
        text: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        if json is not None:
            response = httpx.Response(status, json=json, headers=headers)
        else:
            response = httpx.Response(status, text=text or "", headers=headers)
        self.routes[(method, path)] = response

    def add_handler(self, method: str, path: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.routes[(method, path)] = handler

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"errors": [{"status": "404", "title": "not found"}]})
        if callable(route):
            return route(request)
        return route

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


@pytest.fixture
def api():
    """Fake Terraform API with no routes (every path is a 404)."""
    return FakeTerraformAPI()


@pytest.fixture
def provider(api):
    """ClientProvider whose clients talk to the fake API."""
    return ClientProvider(address=TFE_ADDRESS, token="test-token", transport=api.transport)


@pytest.fixture
def context(provider):
    """ToolContext for handler tests."""
    return ToolContext(client_provider=provider)


@pytest.fixture
def tokenless_context():
    """ToolContext whose provider cannot create a client."""
    return ToolContext(client_provider=ClientProvider(address=TFE_ADDRESS, token=None))


def jsonapi_resource(resource_type: str, resource_id: str, **attributes) -> Dict[str, Any]:
    """Build a single-resource JSON:API document."""
    return {
        "data": {
            "id": resource_id,
            "type": resource_type,
            "attributes": attributes,
        }
    }
