"""Command line entry point.

USAGE:
    absurdio demo [--interval S] [--fail-after N] [--drain-timeout S]
    absurdio help [topic]

Exit status: 0 for help, 1 when a group terminates with a failure report,
70 for a contract violation (a Never-typed task produced a value), 2 for
usage errors, 130 on Ctrl-C.
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Sequence
from typing import TextIO

import click
from pydantic import ValidationError

from absurdio.foundation.config import get_settings
from absurdio.foundation.errors import ImpossibleStateError, SupervisionError
from absurdio.runtime.observability import configure_logging, get_logger

from .topics import TOPICS

EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_SOFTWARE = 70
EXIT_INTERRUPTED = 130


@click.group()
@click.version_option(package_name="absurdio")
def cli() -> None:
    """Fail-fast supervision of forever-running tasks."""
    try:
        settings = get_settings()
    except ValidationError as e:
        raise click.UsageError(f"invalid ABSURDIO_* settings ({e.error_count()} errors)\n{e}") from e
    configure_logging(settings.logging.format, settings.log_level, colors=settings.logging.colors)


@cli.command("demo")
@click.option("--interval", type=click.FloatRange(min=0, min_open=True), default=None,
              help="Seconds between ticks.")
@click.option("--fail-after", type=click.IntRange(min=1), default=None,
              help="Counter value that fails the counter task.")
@click.option("--drain-timeout", type=click.FloatRange(min=0), default=None,
              help="Seconds cancelled tasks get to unwind.")
@click.pass_context
def demo_command(ctx: click.Context, interval: float | None, fail_after: int | None,
                 drain_timeout: float | None) -> None:
    """Run the heartbeat/counter group until the counter fails."""
    ctx.exit(run_demo(interval, fail_after, drain_timeout))


@cli.command("help")
@click.argument("topic", required=False)
@click.pass_context
def help_command(ctx: click.Context, topic: str | None) -> None:
    """Show a help topic, or the list of topics."""
    ctx.exit(show_help(topic))


def show_help(topic: str | None, out: TextIO | None = None) -> int:
    """Print a topic, or the topic list when ``topic`` is None."""
    if topic is None:
        click.echo(TOPICS["help"].strip(), file=out)
        return 0
    if (text := TOPICS.get(topic.lower())) is None:
        click.echo(f"Unknown topic: {topic}. Available: {', '.join(sorted(TOPICS))}", err=True)
        return EXIT_USAGE
    click.echo(text.strip(), file=out)
    return 0


def run_demo(interval: float | None = None, fail_after: int | None = None, drain_timeout: float | None = None) -> int:
    """Run the demo group and translate its failure into an exit status."""
    from absurdio.examples import main_inner

    base = get_settings()
    settings = base.model_copy(update={
        "demo": base.demo.model_copy(update={k: v for k, v in
                                             {"interval": interval, "fail_after": fail_after}.items() if v is not None}),
        "supervisor": base.supervisor.model_copy(update={} if drain_timeout is None else {"drain_timeout": drain_timeout}),
    })

    log = get_logger("absurdio.cli")
    try:
        with log.scope(command="demo"):
            asyncio.run(main_inner(settings))
    except SupervisionError as e:
        click.echo(f"error: {e.report.render()}", err=True)
        return EXIT_FAILURE
    except ImpossibleStateError as e:
        log.critical("contract violation", error=str(e))
        click.echo(f"fatal: {e}", err=True)
        return EXIT_SOFTWARE
    except KeyboardInterrupt:
        return EXIT_INTERRUPTED
    raise AssertionError("unreachable: the demo group never exits normally")


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI on ``argv`` without exiting the interpreter. Returns the exit status."""
    try:
        status = cli.main(args=list(argv) if argv is not None else sys.argv[1:], prog_name="absurdio",
                          standalone_mode=False)
    except click.ClickException as e:
        e.show()
        return e.exit_code
    except click.Abort:
        click.echo("Aborted!", err=True)
        return EXIT_INTERRUPTED
    return status if isinstance(status, int) else 0
