"""
Async client for the HCP Terraform / Terraform Enterprise API (v2).

Thin wrapper over httpx.AsyncClient that returns decoded JSON:API documents
(or raw text for logs) and maps HTTP failures onto TfeError/NotFoundError.
Retries are not performed here; a failed call surfaces immediately.
"""

import logging
from typing import Any, Dict, Iterable, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_ADDRESS = "https://app.terraform.io"
API_PATH = "/api/v2"
JSONAPI_CONTENT_TYPE = "application/vnd.api+json"
DEFAULT_TIMEOUT = 30.0

RUN_TYPES = ("plan_and_apply", "plan_only", "refresh_state", "destroy")


class TfeError(Exception):
    """A call to the Terraform API failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class NotFoundError(TfeError):
    """The requested resource does not exist or is not visible to the token."""


def build_http_client(
    address: str,
    token: str,
    timeout: float = DEFAULT_TIMEOUT,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Create the httpx connection pool for one API address and token."""
    return httpx.AsyncClient(
        base_url=f"{address.rstrip('/')}{API_PATH}",
        headers={
            "Authorization": f"Bearer {token}",
            "Content-Type": JSONAPI_CONTENT_TYPE,
            "Accept": JSONAPI_CONTENT_TYPE,
        },
        timeout=timeout,
        follow_redirects=True,
        transport=transport,
    )


class TfeClient:
    """
    Terraform API client scoped to one address and token.

    Args:
        address: Base address, e.g. ``https://app.terraform.io``
        token: API token sent as a bearer token
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport (used by tests)
        http: Existing connection pool to share. The client does not close
            a pool it was given; its owner does.
    """

    def __init__(
        self,
        address: str = DEFAULT_ADDRESS,
        token: str = "",
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        http: Optional[httpx.AsyncClient] = None,
    ):
        self.address = address.rstrip("/")
        self._owns_http = http is None
        if http is None:
            http = build_http_client(self.address, token, timeout, transport)
        self._http = http

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> "TfeClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Transport helpers
    # ------------------------------------------------------------------

    async def _send(self, request: httpx.Request) -> httpx.Response:
        try:
            response = await self._http.send(request)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.debug("%s %s -> %s", request.method, request.url, status)
            if status == 404:
                raise NotFoundError(f"resource not found: {request.url.path}", status) from e
            raise TfeError(f"request failed with status {status}: {request.url.path}", status) from e
        except httpx.RequestError as e:
            raise TfeError(f"request to {request.url} failed: {e}") from e
        return response

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        request = self._http.build_request(method, path, params=params, json=json)
        return await self._send(request)

    async def _get_document(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        response = await self._request("GET", path, params=params)
        try:
            return response.json()
        except ValueError as e:
            raise TfeError(f"invalid JSON in response from {path}") from e

    async def _read_log(self, resource_path: str) -> str:
        document = await self._get_document(resource_path)
        attributes = (document.get("data") or {}).get("attributes") or {}
        log_url = attributes.get("log-read-url")
        if not log_url:
            raise TfeError(f"no log available for {resource_path}")

        # The log URL is a pre-signed archivist URL; do not forward the token.
        request = self._http.build_request("GET", log_url)
        request.headers.pop("Authorization", None)
        response = await self._send(request)
        return response.text

    @staticmethod
    def _list_params(
        page_number: int,
        page_size: int,
        statuses: Iterable[str] = (),
        user: str = "",
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "page[number]": page_number,
            "page[size]": page_size,
        }
        statuses = [status for status in statuses if status]
        if statuses:
            params["filter[status]"] = ",".join(statuses)
        if user:
            params["search[user]"] = user
        return params

    # ------------------------------------------------------------------
    # Plans and applies
    # ------------------------------------------------------------------

    async def read_plan(self, plan_id: str) -> Dict[str, Any]:
        return await self._get_document(f"/plans/{plan_id}")

    async def read_plan_json_output(self, plan_id: str) -> str:
        response = await self._request("GET", f"/plans/{plan_id}/json-output")
        return response.text

    async def plan_logs(self, plan_id: str) -> str:
        return await self._read_log(f"/plans/{plan_id}")

    async def read_apply(self, apply_id: str) -> Dict[str, Any]:
        return await self._get_document(f"/applies/{apply_id}")

    async def apply_logs(self, apply_id: str) -> str:
        return await self._read_log(f"/applies/{apply_id}")

    # ------------------------------------------------------------------
    # Runs and workspaces
    # ------------------------------------------------------------------

    async def read_run(self, run_id: str) -> Dict[str, Any]:
        return await self._get_document(f"/runs/{run_id}")

    async def read_workspace(self, organization: str, workspace_name: str) -> Dict[str, Any]:
        return await self._get_document(
            f"/organizations/{organization}/workspaces/{workspace_name}"
        )

    async def list_runs(
        self,
        workspace_id: str,
        page_number: int = 1,
        page_size: int = 20,
        statuses: Iterable[str] = (),
        user: str = "",
    ) -> Dict[str, Any]:
        params = self._list_params(page_number, page_size, statuses, user)
        return await self._get_document(f"/workspaces/{workspace_id}/runs", params=params)

    async def list_runs_for_organization(
        self,
        organization: str,
        page_number: int = 1,
        page_size: int = 20,
        statuses: Iterable[str] = (),
        user: str = "",
    ) -> Dict[str, Any]:
        params = self._list_params(page_number, page_size, statuses, user)
        return await self._get_document(f"/organizations/{organization}/runs", params=params)

    async def create_run(
        self,
        workspace_id: str,
        message: str = "",
        run_type: str = "plan_and_apply",
    ) -> Dict[str, Any]:
        if run_type not in RUN_TYPES:
            raise ValueError(
                f"Invalid run type '{run_type}'. Must be one of: {', '.join(RUN_TYPES)}"
            )

        attributes: Dict[str, Any] = {}
        if message:
            attributes["message"] = message
        if run_type == "plan_only":
            attributes["plan-only"] = True
        elif run_type == "refresh_state":
            attributes["refresh-only"] = True
        elif run_type == "destroy":
            attributes["is-destroy"] = True

        payload = {
            "data": {
                "type": "runs",
                "attributes": attributes,
                "relationships": {
                    "workspace": {"data": {"type": "workspaces", "id": workspace_id}},
                },
            }
        }
        response = await self._request("POST", "/runs", json=payload)
        try:
            return response.json()
        except ValueError as e:
            raise TfeError("invalid JSON in create run response") from e
