"""
Command line interface for the trac_digest tool.

This module defines the ``main`` function which is used as the entry
point when executing the ``tracdigest`` command. It orchestrates
configuration loading, downloading the revision log, changeset
extraction, component resolution and report rendering. Progress is
reported on stderr so that the report itself can be piped from stdout.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import List, Optional

import click

from trac_digest import __version__
from trac_digest.changesets.extractor import extract_changesets
from trac_digest.changesets.resolver import TicketLookup, resolve_components
from trac_digest.config.loader import ConfigError, load_config
from trac_digest.report.renderer import render_report
from trac_digest.trac.client import TracClient, TracError

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_INVALID_USAGE = 2
EXIT_LOG_FAILURE = 3
EXIT_CONFIG_ERROR = 5
EXIT_OUTPUT_FAILURE = 6


# ---------------------------------------------------------------------------
# Progress and status display utilities
# ---------------------------------------------------------------------------

class ProgressIndicator:
    """Report the start and duration of a step on stderr."""

    def __init__(self, message: str):
        self.message = message
        self.start_time = None

    def __enter__(self):
        self.start_time = time.time()
        click.echo(f"→ {self.message}...", err=True)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            elapsed = time.time() - self.start_time
            click.echo(f"  ✓ Done ({elapsed:.1f}s)", err=True)
        return False


def print_step(step_num: int, total_steps: int, message: str):
    """Print a step indicator."""
    click.echo(f"\n{'='*60}", err=True)
    click.echo(f"Step {step_num}/{total_steps}: {message}", err=True)
    click.echo(f"{'='*60}", err=True)


def print_info(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}ℹ {message}", err=True)


def print_success(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}✓ {message}", err=True)


def print_warning(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}⚠ {message}", err=True)


def print_error(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}✗ {message}", err=True)


def enable_package_logging() -> None:
    """Let the package's module loggers reach the handlers set up by the CLI.

    Module loggers are created with propagation disabled so that library
    use stays silent; the CLI turns it back on once the root logger has
    been configured.
    """
    package = __name__.split(".")[0]
    for name, item in list(logging.root.manager.loggerDict.items()):
        if isinstance(item, logging.Logger) and (name == package or name.startswith(f"{package}.")):
            item.propagate = True


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


def report_failed_lookups(lookups: List[TicketLookup]) -> None:
    """Warn about tickets whose component could not be determined."""
    failed = [lookup for lookup in lookups if not lookup.ok]
    if not failed:
        return
    print_warning(f"{_plural(len(failed), 'ticket')} could not be resolved; affected changesets may be listed under Misc")
    for lookup in failed:
        print_info(f"#{lookup.ticket}: {lookup.error}", indent=1)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

@click.command()
@click.option("--start", "--to", "start", type=int, required=True, help="Newest revision to include.")
@click.option("--stop", "--from", "stop", type=int, required=True, help="Oldest revision to include.")
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Maximum number of revisions to request (default 400).")
@click.option("--base-url", default=None, help="Root URL of the Trac environment.")
@click.option("--workers", type=click.IntRange(min=1), default=None, help="Maximum number of concurrent ticket lookups.")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the report to this file instead of stdout.",
)
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="tracdigest")
def main(
    start: int,
    stop: int,
    limit: Optional[int],
    base_url: Optional[str],
    workers: Optional[int],
    output: Optional[Path],
    verbose: bool,
) -> None:
    """Build a categorized markdown changelog from a Trac revision log.

    Changesets between START and STOP are grouped by the component of
    the tickets they reference, and everyone credited is thanked.
    """
    # Use force=True so handlers are reconfigured on repeated invocations
    # (important for tests).
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        force=True,
    )
    enable_package_logging()

    ctx = click.get_current_context(silent=True)

    total_steps = 5
    current_step = 0

    try:
        # Step 1: Load configuration
        current_step += 1
        print_step(current_step, total_steps, "Loading Configuration")

        try:
            config = load_config()
        except ConfigError as exc:
            print_error(f"Configuration error: {exc}")
            raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

        client = TracClient(
            base_url=base_url or config["base_url"],
            request_timeout=float(config["request_timeout"]),
            user_agent=config["user_agent"],
        )
        limit = limit if limit is not None else config["limit"]
        workers = workers if workers is not None else config["max_workers"]
        print_success("Configuration loaded")
        print_info(f"Trac: {client.base_url}", indent=1)
        print_info(f"Revisions: {start} to {stop} (limit {limit})", indent=1)

        # Step 2: Download the revision log
        current_step += 1
        print_step(current_step, total_steps, "Downloading Revision Log")

        try:
            with ProgressIndicator(f"Downloading {client.log_url(start, stop, limit)}"):
                log_markup = client.fetch_log(start, stop, limit)
        except TracError as exc:
            print_error(f"Error downloading revision log: {exc}")
            raise click.exceptions.Exit(EXIT_LOG_FAILURE)

        # Step 3: Extract changesets
        current_step += 1
        print_step(current_step, total_steps, "Processing Changesets")

        changesets = extract_changesets(log_markup)
        if not changesets:
            print_warning("No changesets found in the requested range; the report will be empty.")
        else:
            print_success(f"Found {_plural(len(changesets), 'changeset')}")

        # Step 4: Resolve components
        current_step += 1
        print_step(current_step, total_steps, "Resolving Components")

        with ProgressIndicator("Looking up ticket components"):
            lookups = resolve_components(changesets, client.fetch_component, max_workers=workers)
        resolved = sum(1 for lookup in lookups if lookup.ok)
        print_success(f"Resolved {resolved}/{_plural(len(lookups), 'ticket')}")
        report_failed_lookups(lookups)

        # Step 5: Render the report
        current_step += 1
        print_step(current_step, total_steps, "Rendering Report")

        report = render_report(changesets)
        if output is None:
            click.echo(report, nl=False)
        else:
            try:
                output.write_text(report, encoding="utf-8")
            except OSError as exc:
                print_error(f"Could not write report to {output}: {exc}")
                raise click.exceptions.Exit(EXIT_OUTPUT_FAILURE)
            print_success(f"Report written to {output}")

        raise click.exceptions.Exit(EXIT_SUCCESS)

    except click.exceptions.Exit:
        raise
    except Exception as exc:
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        ctx.exit(EXIT_GENERIC_ERROR)
