"""Asynchronous client for the local service's introspection endpoints.

:class:`HelpClient` wraps :class:`httpx.AsyncClient` with basic-auth
injection, retry with exponential backoff and typed error mapping. The three
payloads a run needs are fetched concurrently by :meth:`HelpClient.fetch_all`;
:func:`fetch_introspection` is the blocking entry point used by the CLI.

The service listens on loopback with a self-signed certificate, so TLS
verification follows :attr:`~helpspec.models.ServiceConfig.verify_ssl`
(off by default).
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import httpx

from helpspec.auth import AuthResult, authenticate
from helpspec.client.response import extract_payload, load_saved_payloads
from helpspec.exceptions import (
    AuthError,
    ConnectionError_,
    InvalidUsageError,
    NotFoundError,
    ServerError,
)
from helpspec.models import IntrospectionPayloads, ServiceConfig
from helpspec.output import get_output

HELP_FORMATS = ("Brief", "Console", "Full")


class HelpClient:
    """Asynchronous client for ``/help`` and the application-info endpoint.

    Must be used as an async context manager.

    Args:
        service: Connection settings (host, port, timeouts, paths).
        auth_result: Headers to send with every request. When ``None`` they
            are derived from ``service.secret_source`` on enter.
        transport: Optional httpx transport, e.g. :class:`httpx.MockTransport`.

    Example::

        async with HelpClient(ServiceConfig(port=51234)) as client:
            console = await client.fetch_help("Console")
    """

    def __init__(
        self,
        service: ServiceConfig,
        auth_result: Optional[AuthResult] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if service.port is None:
            raise InvalidUsageError(
                "No service port configured (use --port, HELPSPEC_PORT or PORT)"
            )
        self._service = service
        self._auth_result = auth_result
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def base_url(self) -> str:
        return self._service.base_url

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> HelpClient:
        if self._auth_result is None:
            self._auth_result = authenticate(self._service)
        self._client = httpx.AsyncClient(
            base_url=self._service.base_url,
            timeout=self._service.timeout,
            verify=self._service.verify_ssl,
            headers=self._auth_result.headers,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # Introspection calls
    # ------------------------------------------------------------------ #

    async def fetch_help(self, format: str) -> dict[str, Any]:
        """Fetch ``/help?format=<format>`` and return the decoded payload.

        Raises:
            AuthError, NotFoundError, ServerError, ConnectionError_: On
                transport or HTTP failure.
            IntrospectionError: If the body is not a JSON object.
        """
        if format not in HELP_FORMATS:
            raise InvalidUsageError(
                f"Unknown help format {format!r} (expected one of {', '.join(HELP_FORMATS)})"
            )
        response = await self.request("GET", self._service.help_path, params={"format": format})
        return extract_payload(response, f"{format} help")

    async def fetch_app_info(self) -> dict[str, Any]:
        """Fetch the application-info payload; ``{}`` when the path is disabled."""
        if not self._service.app_info_path:
            return {}
        response = await self.request("GET", self._service.app_info_path)
        return extract_payload(response, "application info")

    async def fetch_all(self) -> IntrospectionPayloads:
        """Fetch application info, Console help and Full help concurrently."""
        get_output().info(f"Fetching introspection payloads from {self.base_url}")
        app_info, console, full = await asyncio.gather(
            self.fetch_app_info(),
            self.fetch_help("Console"),
            self.fetch_help("Full"),
        )
        return IntrospectionPayloads(
            console=console, full=full, app_info=app_info, base_url=self.base_url
        )

    # ------------------------------------------------------------------ #
    # Transport
    # ------------------------------------------------------------------ #

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
    ) -> httpx.Response:
        """Send a request with retry and map error statuses to exceptions.

        Raises:
            AuthError: On 401 / 403.
            NotFoundError: On 404.
            ServerError: On any other error status, after retries for 5xx.
            ConnectionError_: On network / timeout errors after all retries.
        """
        response = await self._execute_with_retry(method, path, params or {})
        self._map_response_error(response)
        return response

    async def _execute_with_retry(
        self,
        method: str,
        path: str,
        params: dict[str, Any],
    ) -> httpx.Response:
        """Retry 5xx and connection errors up to ``max_retries`` times (1 s, 2 s, 4 s, ...)."""
        assert self._client is not None, "Client not initialised -- use as async context manager"

        max_retries = self._service.max_retries
        output = get_output()

        for attempt in range(max_retries + 1):
            try:
                response = await self._client.request(method, path, params=params)
            except (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError) as exc:
                if attempt < max_retries:
                    delay = 2 ** attempt
                    output.debug(
                        f"Connection error: {exc}, retrying in {delay}s "
                        f"(attempt {attempt + 1}/{max_retries})"
                    )
                    await asyncio.sleep(delay)
                    continue
                raise ConnectionError_(
                    f"Connection to {self._service.base_url} failed after "
                    f"{max_retries + 1} attempts: {exc}"
                ) from exc

            if response.status_code >= 500 and attempt < max_retries:
                delay = 2 ** attempt
                output.debug(
                    f"Server error {response.status_code}, retrying in {delay}s "
                    f"(attempt {attempt + 1}/{max_retries})"
                )
                await asyncio.sleep(delay)
                continue
            return response

        raise ServerError("Request failed after all retries")  # pragma: no cover

    def _map_response_error(self, response: httpx.Response) -> None:
        status = response.status_code
        if status < 400:
            return

        try:
            detail = response.json()
            if isinstance(detail, dict):
                msg = detail.get("message") or detail.get("error") or detail.get("detail") or ""
            else:
                msg = str(detail)
        except ValueError:
            msg = response.text[:200] if response.text else ""

        prefix = f"HTTP {status} from {response.request.url.path}"
        full_msg = f"{prefix}: {msg}" if msg else prefix

        if status in (401, 403):
            raise AuthError(full_msg)
        if status == 404:
            raise NotFoundError(full_msg)
        raise ServerError(full_msg)


def fetch_introspection(
    service: ServiceConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> IntrospectionPayloads:
    """Blocking wrapper around :meth:`HelpClient.fetch_all`."""

    async def _run() -> IntrospectionPayloads:
        async with HelpClient(service, transport=transport) as client:
            return await client.fetch_all()

    return asyncio.run(_run())


def load_payloads(
    service: ServiceConfig,
    input_dir: Optional[str] = None,
) -> IntrospectionPayloads:
    """Read saved payloads from *input_dir*, or fetch them live when it is ``None``."""
    if input_dir:
        get_output().debug(f"Reading saved payloads from {input_dir}")
        return load_saved_payloads(input_dir)
    return fetch_introspection(service)
