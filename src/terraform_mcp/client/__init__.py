"""
Terraform API client layer.

- tfe.py: async HTTP client for the v2 API and its error types
- provider.py: per-session client creation and caching
"""

from .provider import ClientProvider, ClientUnavailableError
from .tfe import DEFAULT_ADDRESS, NotFoundError, TfeClient, TfeError

__all__ = [
    "DEFAULT_ADDRESS",
    "ClientProvider",
    "ClientUnavailableError",
    "NotFoundError",
    "TfeClient",
    "TfeError",
]
