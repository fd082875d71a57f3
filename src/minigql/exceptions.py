"""Exception hierarchy for minigql.

All exceptions inherit from :class:`MiniGQLError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`minigql.exit_codes`.
The CLI entry point in :func:`minigql.app.main` catches ``MiniGQLError``
and exits with the appropriate code.

Transport failures are deliberately *not* part of this hierarchy: whatever
the injected transport raises is propagated unchanged once all attempts
are used up.

Subclass hierarchy::

    MiniGQLError (exit 1)
    +-- ConfigurationError  (exit 2)
    +-- HttpStatusError     (exit 4)
        +-- ServerError     (exit 5)
"""

from __future__ import annotations

from minigql.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_HTTP_ERROR,
    EXIT_INVALID_USAGE,
    EXIT_SERVER_ERROR,
)


class MiniGQLError(Exception):
    """Base exception for all minigql errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigurationError(MiniGQLError):
    """Raised for invalid client construction arguments, a missing query or
    mutation at call time, and unreadable configuration files.

    Always raised before any network activity takes place.
    """

    exit_code = EXIT_INVALID_USAGE


class HttpStatusError(MiniGQLError):
    """Raised when the endpoint answers with a status that is neither ok nor retryable.

    The message is the status code followed by the status text, e.g.
    ``"400 Bad Request"``.

    Attributes:
        status: The HTTP status code.
        status_text: The HTTP reason phrase (may be empty).
    """

    exit_code = EXIT_HTTP_ERROR

    def __init__(self, status: int, status_text: str = ""):
        super().__init__(f"{status} {status_text}".rstrip())
        self.status = status
        self.status_text = status_text


class ServerError(HttpStatusError):
    """Raised when the last attempt of a request still got an HTTP 5xx."""

    exit_code = EXIT_SERVER_ERROR
