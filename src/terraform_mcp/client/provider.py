"""Per-session Terraform API clients."""

import logging
from collections import OrderedDict
from typing import Optional

import httpx

from .tfe import DEFAULT_ADDRESS, DEFAULT_TIMEOUT, TfeClient, build_http_client

logger = logging.getLogger(__name__)

DEFAULT_MAX_SESSIONS = 256


class ClientUnavailableError(Exception):
    """No Terraform API client can be created for the session."""


class ClientProvider:
    """
    Hands out one TfeClient per MCP session.

    Every session client shares a single httpx connection pool, created on
    first use. Session clients own no connections, so the least recently
    used ones are dropped once ``max_sessions`` is exceeded. aclose() closes
    the pool; the server calls it on shutdown.

    Args:
        address: Terraform API address
        token: API token; without one no client can be created
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport for the shared pool (tests)
        max_sessions: Number of session clients kept in the cache
    """

    def __init__(
        self,
        address: str = DEFAULT_ADDRESS,
        token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
    ):
        if max_sessions < 1:
            raise ValueError(f"max_sessions must be at least 1, got {max_sessions}")
        self.address = address
        self.timeout = timeout
        self.max_sessions = max_sessions
        self._token = token
        self._transport = transport
        self._http: Optional[httpx.AsyncClient] = None
        self._clients: "OrderedDict[str, TfeClient]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._clients)

    @property
    def is_closed(self) -> bool:
        return self._http is None or self._http.is_closed

    def get_client(self, session_id: str = "default") -> TfeClient:
        """
        Return the client for ``session_id``, creating it on first use.

        Raises:
            ClientUnavailableError: If no API token is configured
        """
        client = self._clients.get(session_id)
        if client is not None:
            self._clients.move_to_end(session_id)
            return client

        if not self._token:
            raise ClientUnavailableError(
                "no Terraform API token configured (set TFE_TOKEN)"
            )

        if self._http is None or self._http.is_closed:
            self._http = build_http_client(
                self.address, self._token, self.timeout, self._transport
            )

        client = TfeClient(address=self.address, http=self._http)
        self._clients[session_id] = client
        if len(self._clients) > self.max_sessions:
            evicted, _ = self._clients.popitem(last=False)
            logger.debug("Dropped Terraform client for session %s", evicted)
        logger.debug("Created Terraform client for session %s (%s)", session_id, self.address)
        return client

    async def aclose(self) -> None:
        """Drop every session client and close the shared connection pool."""
        self._clients.clear()
        http, self._http = self._http, None
        if http is not None:
            await http.aclose()
