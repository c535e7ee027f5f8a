"""CLI runner for the network diagnostics report.

Loads a snapshot, runs the engine and prints the report: active filters,
latency heat map, legend, stale nodes and missing connections.
"""

from __future__ import annotations

import json
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from netdiag.collection.parser import load_snapshot
from netdiag.config import BAND_STYLES, LATENCY_DECIMALS, MAX_TABLE_ROWS
from netdiag.engine import DiagnosticsResult, compute_diagnostics_from_text
from netdiag.errors import SnapshotError
from netdiag.filters import describe_filter
from netdiag.models import Band, Identity, PairClassification

console = Console()


def _ms(value: float) -> str:
    return f"{value:.{LATENCY_DECIMALS}f}ms"


def _node_label(identity: Identity, stale_ids: frozenset[int]) -> Text:
    style = "bold yellow" if identity.node_id in stale_ids else "bold"
    return Text(f"n{identity.node_id}", style=style)


def _cell(cell: PairClassification) -> Text:
    style = BAND_STYLES.get(cell.band.value, "")
    if cell.band == Band.SELF:
        return Text("-", style=style)
    if cell.band == Band.NO_CONNECTION:
        return Text("X", style=style)
    return Text(_ms(cell.latency_ms), style=style)


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

def _print_filters(result: DiagnosticsResult) -> None:
    lines = describe_filter(result.node_filter)
    if lines:
        console.print(Panel(Text("\n".join(lines)), title="Filters", border_style="blue"))


def _print_latency_table(result: DiagnosticsResult) -> None:
    table = Table(title="Latencies", show_header=True, header_style="bold cyan")
    table.add_column("")
    for identity in result.display_identities:
        table.add_column(_node_label(identity, result.stale_ids), justify="right")

    for identity, row in zip(result.display_identities, result.latency_matrix()):
        table.add_row(_node_label(identity, result.stale_ids), *(_cell(c) for c in row))
    console.print(table)


def _print_legend(result: DiagnosticsResult) -> None:
    entries = result.legend()
    if not entries:
        console.print("  [yellow]Not enough healthy latencies to compute statistics.[/yellow]")
        return
    table = Table(title="Legend", show_header=True, header_style="bold cyan")
    for entry in entries:
        table.add_column(entry.label, justify="center")
    table.add_row(*(
        Text(_ms(e.value_ms), style=BAND_STYLES.get(e.band.value, "")) for e in entries
    ))
    console.print(table)


def _print_stale_table(result: DiagnosticsResult) -> None:
    if not result.stale_identities:
        return
    table = Table(title="Stale Nodes", show_header=True, header_style="bold yellow")
    table.add_column("Node")
    table.add_column("Address")
    table.add_column("Locality")
    table.add_column("Last Updated")
    for identity in result.stale_identities[:MAX_TABLE_ROWS]:
        table.add_row(
            f"n{identity.node_id}",
            Text(identity.address),
            Text(identity.locality),
            identity.last_updated.isoformat() if identity.last_updated else "",
        )
    console.print(table)
    if len(result.stale_identities) > MAX_TABLE_ROWS:
        console.print(f"  [dim]... and {len(result.stale_identities) - MAX_TABLE_ROWS} more[/dim]")


def _print_no_connection_table(result: DiagnosticsResult) -> None:
    if not result.no_connections:
        return
    table = Table(title="No Connections", show_header=True, header_style="bold red")
    for column in ("From Node", "From Address", "From Locality",
                   "To Node", "To Address", "To Locality"):
        table.add_column(column)
    for nc in result.no_connections[:MAX_TABLE_ROWS]:
        table.add_row(
            f"n{nc.source.node_id}", Text(nc.source.address), Text(nc.source.locality),
            f"n{nc.target.node_id}", Text(nc.target.address), Text(nc.target.locality),
        )
    console.print(table)
    if len(result.no_connections) > MAX_TABLE_ROWS:
        console.print(f"  [dim]... and {len(result.no_connections) - MAX_TABLE_ROWS} more[/dim]")


def print_report(result: DiagnosticsResult) -> None:
    console.print(Panel("Network Diagnostics", border_style="green"))
    if not result.loaded:
        console.print("[yellow]Snapshot has no node statuses or liveness data.[/yellow]")
        return

    _print_filters(result)
    if result.is_empty:
        console.print("[bold]No nodes match the filters[/bold]")
    else:
        _print_latency_table(result)
        _print_legend(result)
    _print_stale_table(result)
    _print_no_connection_table(result)


def print_stats(result: DiagnosticsResult) -> None:
    if result.stats is None:
        console.print("[yellow]Latency statistics undefined (fewer than two samples).[/yellow]")
        return
    stats = result.stats
    overview = (
        f"Samples: [bold]{stats.sample_count}[/bold]  |  "
        f"Mean: [bold]{_ms(stats.mean)}[/bold]  |  "
        f"Stddev: [bold]{_ms(stats.stddev)}[/bold]"
    )
    console.print(Panel(overview, title="Latency Statistics", border_style="green"))
    _print_legend(result)


# ---------------------------------------------------------------------------
# Runners
# ---------------------------------------------------------------------------

def _load_result(snapshot_file: str, node_ids: str | None, locality: str | None) -> DiagnosticsResult | None:
    try:
        snapshot = load_snapshot(snapshot_file)
    except SnapshotError as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return None
    return compute_diagnostics_from_text(snapshot, node_ids, locality)


def run_report(
    snapshot_file: str,
    node_ids: str | None = None,
    locality: str | None = None,
    output_format: str = "table",
    output: str | None = None,
) -> int:
    """Run the report and return a process exit code."""
    result = _load_result(snapshot_file, node_ids, locality)
    if result is None:
        return 1

    if output_format == "json":
        payload = json.dumps(result.to_dict(), indent=2)
        if output:
            output_path = Path(output)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(payload, encoding="utf-8")
            console.print(f"  Report written to [bold green]{escape(str(output_path))}[/bold green]")
        else:
            click.echo(payload)
        return 0

    print_report(result)
    return 0


def run_stats(snapshot_file: str, node_ids: str | None = None, locality: str | None = None) -> int:
    result = _load_result(snapshot_file, node_ids, locality)
    if result is None:
        return 1
    print_stats(result)
    return 0

