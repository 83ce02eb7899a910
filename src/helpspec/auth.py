"""Static HTTP Basic authentication for the local service.

The service accepts a single account: a fixed user name (``riot`` by
default) and a per-session secret. The secret is resolved once from its
source descriptor and turned into an ``Authorization: Basic <encoded>``
header per :rfc:`7617`.
"""

from __future__ import annotations

import base64

from helpspec.config import resolve_credential
from helpspec.exceptions import AuthError
from helpspec.models import ServiceConfig


class AuthResult:
    """Container for the headers to inject into every introspection request.

    Example::

        result = AuthResult(headers={"Authorization": "Basic cmlvdDpzZWNyZXQ="})
    """

    def __init__(self, headers: dict[str, str] | None = None):
        self.headers = headers or {}


def basic_auth_header(username: str, secret: str) -> str:
    """Return the ``Authorization`` header value for *username* and *secret*."""
    encoded = base64.b64encode(f"{username}:{secret}".encode("utf-8")).decode("ascii")
    return f"Basic {encoded}"


def authenticate(service: ServiceConfig) -> AuthResult:
    """Resolve the service secret and build the Basic auth header.

    Raises:
        ConfigError: If the secret source cannot be resolved.
        AuthError: If the resolved secret is empty.
    """
    secret = resolve_credential(service.secret_source)
    if not secret:
        raise AuthError(f"Empty service secret (source: {service.secret_source})")
    return AuthResult(headers={"Authorization": basic_auth_header(service.username, secret)})
