"""Introspection client for helpspec.

:class:`HelpClient` fetches the Console and Full help payloads and the
application info from the local service over :mod:`httpx`;
:func:`load_saved_payloads` reads the same payloads back from a directory
written by ``helpspec dump``.

Example::

    from helpspec.client import fetch_introspection

    payloads = fetch_introspection(settings.service)
"""

from helpspec.client.async_client import HelpClient, fetch_introspection, load_payloads
from helpspec.client.response import extract_payload, load_saved_payloads

__all__ = [
    "HelpClient",
    "extract_payload",
    "fetch_introspection",
    "load_payloads",
    "load_saved_payloads",
]
