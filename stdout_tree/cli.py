#!/usr/bin/env python3
"""
cli.py

Command-line interface for printing traces as trees: run the bundled
example programs, or browse a SQLite telemetry DB.
"""
import os
import click
from rich.console import Console

from stdout_tree import demo
from stdout_tree.buffer import TraceBuffer
from stdout_tree.exporters import telemetry_db
from stdout_tree.exporters.view_tree import TreePrinter
from stdout_tree.logging_config import setup_logging
from stdout_tree.telemetry import new_pipeline

timing_option = click.option(
    "--timing-column-width", type=click.FloatRange(0, 1), default=None,
    help="Fraction of the terminal used by timing bars [default: 0.2]",
)


@click.group()
@click.option(
    "--log-level", envvar="STDOUT_TREE_LOG_LEVEL", default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    help="Log level for diagnostics written to stderr",
)
def main(log_level):
    """Print OpenTelemetry traces as trees."""
    setup_logging(log_level)


@main.command(name="demo")
@click.argument("program", type=click.Choice(["readme", "fibonacci"]), default="readme")
@click.option("-n", default=5, show_default=True, help="How many fibonacci numbers to compute")
@click.option("--debug", is_flag=True, help="Record debug events in the fibonacci program")
@timing_option
def demo_command(program, n, debug, timing_column_width):
    """Run an example program and print its trace."""
    builder = new_pipeline()
    if timing_column_width is not None:
        builder = builder.with_timing_column_width(timing_column_width)
    with builder.install_simple(set_global=False) as tracer:
        if program == "readme":
            demo.readme(tracer)
        else:
            demo.fibonacci(tracer, n, debug=debug)


@main.command()
@click.option("--db", "-d", "db_path", default=None, help="Path to telemetry.db")
@click.option("--trace", "-t", "trace_id", default=None, help="Trace ID to print [default: all]")
@timing_option
def view(db_path, trace_id, timing_column_width):
    """Print traces stored in a telemetry DB."""
    if db_path is None:
        # Locate telemetry databases under XDG_DATA_HOME or default
        xdg_data_home = os.environ.get("XDG_DATA_HOME", os.path.expanduser("~/.local/share"))
        dbs = telemetry_db.find_databases(xdg_data_home)
        if not dbs:
            click.echo("No telemetry databases found.", err=True)
            raise SystemExit(1)
        click.echo("Available databases:")
        for idx, (service, path) in enumerate(dbs, start=1):
            click.echo(f"  [{idx}] {service} ({path})")
        db_choice = click.prompt(
            "Select database", type=click.IntRange(1, len(dbs))
        )
        _, db_path = dbs[db_choice - 1]
    elif not os.path.isfile(db_path):
        click.echo(f"No telemetry database at {db_path}.", err=True)
        raise SystemExit(1)

    spans = telemetry_db.load_spans(db_path, trace_id)
    if not spans:
        click.echo(f"No spans found for trace {trace_id!r}." if trace_id else "No spans found.", err=True)
        raise SystemExit(1)

    buffer = TraceBuffer(TreePrinter(Console(highlight=False), timing_column_width))
    # Children first, so every root arrives with its subtree already buffered
    buffer.ingest(sorted(spans, key=lambda span: span.is_root))
    buffer.drain()


if __name__ == "__main__":
    main()
