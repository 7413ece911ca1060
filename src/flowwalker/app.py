"""Typer application and CLI entry point for flowwalker.

The whole tool is a single command::

    flowwalker [OPTIONS] EMAIL PASSWORD [START_URL]

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs a SIGINT handler, invokes the Typer app,
and turns unexpected exceptions into a crash log under the data
directory.

See Also:
    :mod:`flowwalker.walker`: The flow itself.
    :mod:`flowwalker.exit_codes`: What each exit status means.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from flowwalker import __version__
from flowwalker.client import FlowSession
from flowwalker.config import resolve_settings
from flowwalker.exceptions import FlowWalkerError, VerificationError
from flowwalker.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INTERRUPTED
from flowwalker.models import Credentials, FlowOutcome
from flowwalker.output import OutputFormat, OutputManager, error, get_output, set_output
from flowwalker.walker import walk


app = typer.Typer(
    name="flowwalker",
    help="Drive an OpenID Connect login flow end-to-end and verify the result.",
    add_completion=False,
    rich_markup_mode="rich",
)

SUCCESS_BANNER = "=== SUCCESS: OIDC flow completed ==="


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"flowwalker {__version__}")
        raise typer.Exit()


@app.command()
def walk_command(
    email: str = typer.Argument(help="Email address to log in with."),
    password: str = typer.Argument(help="Password for EMAIL."),
    start_url: Optional[str] = typer.Argument(
        None,
        help="URL the flow starts from. Defaults to $FLOWWALKER_START_URL, "
        "then http://localhost:8082/login.",
        show_default=False,
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Print the outcome as JSON on stdout."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress progress output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show every redirect hop and a step summary."
    ),
    insecure: bool = typer.Option(
        False, "--insecure", help="Skip TLS certificate verification."
    ),
) -> None:
    """Log in as EMAIL and check that the flow ends on a successful login page.

    Exits 0 when the final page contains the success marker, 3 when it does
    not, and 6 when any request fails at the network level.
    """
    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    output = OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    set_output(output)

    try:
        settings = resolve_settings(cli_start_url=start_url, cli_insecure=insecure)
        if not settings.verify_ssl:
            output.warning("TLS certificate verification is disabled.")
        credentials = Credentials(email=email, password=password)

        with FlowSession(settings) as session:
            outcome = walk(session, credentials, settings)

        _report(outcome)
        if not outcome.success:
            raise VerificationError(
                f"Did not see success message. Final URL: {outcome.final_url}"
            )
    except FlowWalkerError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def _report(outcome: FlowOutcome) -> None:
    """Write the outcome: JSON on stdout, or the human report on stderr."""
    output = get_output()

    if output.format == OutputFormat.JSON:
        output.print_json(outcome.model_dump(mode="json"))
    elif output.is_verbose:
        output.print_table(
            ["step", "method", "url", "landed at", "status", "redirects"],
            [
                [
                    step.label,
                    step.method,
                    step.url,
                    step.final_url,
                    str(step.status_code),
                    str(step.redirects),
                ]
                for step in outcome.steps
            ],
            title="Flow steps",
        )
    output.debug(f"{outcome.post_count} form submission(s) made")

    if outcome.success:
        output.success(SUCCESS_BANNER)
    else:
        output.detail(f"URL: {outcome.final_url}")
        output.detail("Body preview:")
        output.detail(outcome.preview)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from flowwalker.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``flowwalker`` console script.

    :class:`~flowwalker.exceptions.FlowWalkerError` instances that escape
    the command cause a clean exit with the error's ``exit_code``. All
    other exceptions produce a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as exc:
        if isinstance(exc, FlowWalkerError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
