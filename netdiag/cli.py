"""Main CLI entry point for netdiag."""

import logging
import sys

import click

from netdiag import __version__
from netdiag.config import LOG_FORMAT, LOG_LEVEL


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose):
    """Netdiag: network latency and liveness diagnostics for node clusters."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else LOG_LEVEL,
        format=LOG_FORMAT,
    )


@main.command()
@click.argument("snapshot", type=click.Path(exists=True))
@click.option("--node-ids", default=None,
              help="Comma-separated node ids to show (default: all).")
@click.option("--locality", default=None,
              help="Regex; nodes whose locality matches are hidden.")
@click.option("--format", "output_format", type=click.Choice(["table", "json"]), default="table",
              help="Output format.")
@click.option("--output", "-o", type=click.Path(), default=None,
              help="Output file path for json (stdout if not specified).")
def report(snapshot, node_ids, locality, output_format, output):
    """Print the network diagnostics report for a snapshot.

    SNAPSHOT is a JSON file with node statuses and liveness.
    """
    from netdiag.report.cli import run_report
    sys.exit(run_report(snapshot, node_ids, locality, output_format, output))


@main.command()
@click.argument("snapshot", type=click.Path(exists=True))
@click.option("--node-ids", default=None,
              help="Comma-separated node ids to include (default: all).")
@click.option("--locality", default=None,
              help="Regex; nodes whose locality matches are excluded.")
def stats(snapshot, node_ids, locality):
    """Print latency mean, standard deviation and band thresholds."""
    from netdiag.report.cli import run_stats
    sys.exit(run_stats(snapshot, node_ids, locality))


if __name__ == "__main__":
    main()
