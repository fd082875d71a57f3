"""Numeric process exit codes for the ``minigql`` command line.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~minigql.exceptions.MiniGQLError` subclass.
Shell scripts can inspect the exit code to determine the failure class
without parsing stderr.

Example::

    $ minigql query '{ viewer { login } }'
    $ echo $?
    4   # EXIT_HTTP_ERROR -- the endpoint answered with a 4xx status
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or configuration."""

EXIT_HTTP_ERROR = 4
"""The endpoint answered with a non-retryable HTTP status (4xx and similar)."""

EXIT_SERVER_ERROR = 5
"""The endpoint kept answering with HTTP 5xx until all attempts were used."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""
