"""Typer application and CLI entry point for minigql.

Registers the ``query``, ``mutate``, and ``config show`` commands. Each
request command resolves the effective configuration (flags, environment,
config file), sends the request through a :class:`~minigql.client.GraphQLClient`
backed by :class:`~minigql.transport.HttpxTransport`, and renders the
decoded body on stdout.

Library log records are routed to stderr through
:class:`~minigql.output.OutputLogHandler`; ``--verbose`` turns on the
client's debug lines (attempts, retries, cache hits).

See Also:
    :mod:`minigql.config`: Configuration resolution.
    :mod:`minigql.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import httpx
import typer

from minigql import __version__
from minigql.exceptions import ConfigurationError, MiniGQLError
from minigql.exit_codes import EXIT_CONNECTION_ERROR, EXIT_GENERIC_FAILURE
from minigql.models import GlobalConfig
from minigql.output import OutputLogHandler, error, format_response, info

app = typer.Typer(
    name="minigql",
    help="Send GraphQL queries and mutations over HTTP.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

config_app = typer.Typer(no_args_is_help=True)
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"minigql {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
    config_file: Optional[Path] = typer.Option(
        None, "--config", help="Config file to use instead of the default one."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~minigql.output.OutputManager`, wires the
    ``minigql`` logger to it, and stores shared options in ``ctx.obj``.
    """
    from minigql.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    _configure_logging(verbose)

    ctx.ensure_object(dict)
    ctx.obj["config_file"] = config_file
    ctx.obj["format_flag"] = None if fmt == OutputFormat.AUTO else fmt.value
    ctx.obj["no_color"] = no_color
    ctx.obj["quiet"] = quiet
    ctx.obj["verbose"] = verbose


def _apply_output_format(config: GlobalConfig, obj: dict[str, Any]) -> None:
    """Honour the config file output format unless --json or --plain was given."""
    from minigql.output import OutputFormat, OutputManager, set_output

    if obj.get("format_flag") is not None or config.output.format == OutputFormat.AUTO.value:
        return
    try:
        fmt = OutputFormat(config.output.format)
    except ValueError as exc:
        raise ConfigurationError(
            f"Unknown output format in config: {config.output.format!r}"
        ) from exc
    set_output(
        OutputManager(
            format=fmt,
            no_color=obj.get("no_color", False),
            quiet=obj.get("quiet", False),
            verbose=obj.get("verbose", False),
        )
    )


def _configure_logging(verbose: bool) -> None:
    """Attach a single :class:`OutputLogHandler` to the package logger."""
    log = logging.getLogger("minigql")
    for handler in list(log.handlers):
        if isinstance(handler, OutputLogHandler):
            log.removeHandler(handler)
    log.addHandler(OutputLogHandler())
    log.setLevel(logging.DEBUG if verbose else logging.WARNING)
    log.propagate = False


# ------------------------------------------------------------------ #
# Request commands
# ------------------------------------------------------------------ #


_VARIABLES_OPTION = typer.Option(
    None, "--variables", "-V", help="Query variables as a JSON object."
)
_HEADER_OPTION = typer.Option(
    None, "--header", "-H", help="Extra header as 'Name: value'. Repeatable."
)
_URI_OPTION = typer.Option(None, "--uri", "-u", help="GraphQL endpoint URI.")
_RETRY_OPTION = typer.Option(
    None, "--retry", min=0, help="Extra attempts on 5xx responses and network errors."
)


@app.command("query")
def query_command(
    ctx: typer.Context,
    query: str = typer.Argument(help="Query text, or '-' to read it from stdin."),
    variables: Optional[str] = _VARIABLES_OPTION,
    header: Optional[list[str]] = _HEADER_OPTION,
    uri: Optional[str] = _URI_OPTION,
    retry: Optional[int] = _RETRY_OPTION,
) -> None:
    """Run a GraphQL query and print the response body.

    Example::

        minigql query '{ viewer { login } }' -u https://example.com/graphql
        minigql --json query 'query($id: ID!) { node(id: $id) { id } }' -V '{"id": "1"}'
    """
    _run(ctx, query, variables, header, uri, retry, mutation=False)


@app.command("mutate")
def mutate_command(
    ctx: typer.Context,
    mutation: str = typer.Argument(help="Mutation text, or '-' to read it from stdin."),
    variables: Optional[str] = _VARIABLES_OPTION,
    header: Optional[list[str]] = _HEADER_OPTION,
    uri: Optional[str] = _URI_OPTION,
    retry: Optional[int] = _RETRY_OPTION,
) -> None:
    """Run a GraphQL mutation and print the response body.

    Mutation responses are never cached.
    """
    _run(ctx, mutation, variables, header, uri, retry, mutation=True)


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show the resolved configuration (config file, environment, defaults)."""
    from minigql.config import global_config_path, resolve_config

    obj = ctx.obj or {}
    try:
        config = resolve_config(path=obj.get("config_file"))
        _apply_output_format(config, obj)
    except MiniGQLError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code)
    info(f"Config file: {obj.get('config_file') or global_config_path()}")
    format_response(config.model_dump(mode="json"))


def _run(
    ctx: typer.Context,
    text: str,
    variables: Optional[str],
    headers: Optional[list[str]],
    uri: Optional[str],
    retry: Optional[int],
    mutation: bool,
) -> None:
    """Resolve configuration, execute one request, and render the result."""
    from minigql.config import resolve_config

    obj = ctx.obj or {}
    try:
        config = resolve_config(
            cli_uri=uri,
            cli_retry=retry,
            cli_format=obj.get("format_flag"),
            path=obj.get("config_file"),
        )
        if not config.uri:
            raise ConfigurationError(
                "No endpoint configured: pass --uri or set MINIGQL_URI"
            )
        _apply_output_format(config, obj)
        if text == "-":
            text = sys.stdin.read()
        parsed_variables = _parse_variables(variables)
        parsed_headers = {**config.headers, **_parse_headers(headers or [])}

        result = asyncio.run(
            _execute(config, text, parsed_variables, parsed_headers, mutation)
        )
    except MiniGQLError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code)
    except httpx.HTTPError as exc:
        error(f"Connection failed: {exc}")
        raise typer.Exit(code=EXIT_CONNECTION_ERROR)

    format_response(result)


async def _execute(
    config: GlobalConfig,
    text: str,
    variables: Optional[dict[str, Any]],
    headers: dict[str, str],
    mutation: bool,
) -> Any:
    from minigql.client import GraphQLClient

    async with _build_transport(config) as transport:
        client = GraphQLClient(config.uri, transport=transport, retry=config.retry)
        if mutation:
            return await client.mutate(text, variables, headers)
        return await client.query(text, variables, headers)


def _build_transport(config: GlobalConfig) -> Any:
    """Create the transport used by the request commands."""
    from minigql.transport import HttpxTransport

    return HttpxTransport(timeout=config.timeout)


def _parse_variables(raw: Optional[str]) -> Optional[dict[str, Any]]:
    """Parse ``--variables`` as a JSON object."""
    if raw is None:
        return None
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"--variables is not valid JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise ConfigurationError("--variables must be a JSON object")
    return parsed


def _parse_headers(raw: list[str]) -> dict[str, str]:
    """Parse repeated ``Name: value`` header options."""
    headers: dict[str, str] = {}
    for item in raw:
        name, sep, value = item.partition(":")
        if not sep or not name.strip():
            raise ConfigurationError(f"Invalid header {item!r}: expected 'Name: value'")
        headers[name.strip()] = value.strip()
    return headers


def main() -> None:
    """CLI entry point invoked by the ``minigql`` console script.

    Expected failures are reported by the commands themselves with a
    specific exit code. Anything else is reported as an unexpected error
    and exits with :data:`~minigql.exit_codes.EXIT_GENERIC_FAILURE`.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
