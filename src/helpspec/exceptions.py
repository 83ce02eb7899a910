"""Exception hierarchy for helpspec.

All exceptions inherit from :class:`HelpspecError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`helpspec.exit_codes`.
The top-level handler in :func:`helpspec.app.main` catches ``HelpspecError``
and exits with the matching code; anything else produces a crash log.

Only fatal conditions are raised. Recoverable problems inside the
translators (a function without a URL, an unreadable usage token) are
reported as diagnostics and the offending item is skipped.

Subclass hierarchy::

    HelpspecError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- AuthError           (exit 3)
    +-- NotFoundError       (exit 4)
    +-- ServerError         (exit 5)
    +-- ConnectionError_    (exit 6)
    +-- IntrospectionError  (exit 7)
    +-- ConfigError         (exit 1)
    +-- ArtifactWriteError  (exit 1)
"""

from helpspec.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INTROSPECTION_ERROR,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)


class HelpspecError(Exception):
    """Base exception for all helpspec errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(HelpspecError):
    """Raised for invalid CLI arguments or missing required values (e.g. no port)."""

    exit_code = EXIT_INVALID_USAGE


class AuthError(HelpspecError):
    """Raised when the local service rejects the basic-auth secret."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(HelpspecError):
    """Raised when the service returns HTTP 404 for an introspection path."""

    exit_code = EXIT_NOT_FOUND


class ServerError(HelpspecError):
    """Raised for any other HTTP error status returned by the service."""

    exit_code = EXIT_SERVER_ERROR


class ConnectionError_(HelpspecError):
    """Raised on network-level failures (timeout, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class IntrospectionError(HelpspecError):
    """Raised when an introspection payload is not valid JSON or has the wrong shape."""

    exit_code = EXIT_INTROSPECTION_ERROR


class ConfigError(HelpspecError):
    """Raised for configuration problems (invalid JSON, bad credential sources, bad overrides)."""

    exit_code = EXIT_GENERIC_FAILURE


class ArtifactWriteError(HelpspecError):
    """Raised when a generated artifact cannot be written to disk."""

    exit_code = EXIT_GENERIC_FAILURE
