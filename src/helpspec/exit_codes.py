"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~helpspec.exceptions.HelpspecError` subclass, so a
wrapper script can tell a refused connection from a rejected secret without
parsing stderr.

Example::

    $ helpspec generate
    $ echo $?
    3   # EXIT_AUTH_FAILURE -- the service rejected the secret
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required values."""

EXIT_AUTH_FAILURE = 3
"""The local service rejected the credentials (HTTP 401/403)."""

EXIT_NOT_FOUND = 4
"""The introspection endpoint does not exist (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The local service answered with an unexpected HTTP error status."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, connection refused)."""

EXIT_INTROSPECTION_ERROR = 7
"""An introspection payload was missing or could not be decoded."""
