from __future__ import annotations

from typing import List, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from record_view.catalog import FieldCatalog
from record_view.utils.profiler import ProfileStats


def catalog_table(catalog: FieldCatalog) -> Table:
    """Build a table listing every selectable field of a record type."""
    table = Table(
        title=f"{catalog.record_type.__qualname__} fields",
        box=box.ROUNDED,
        caption=f"Identifiers: {catalog.fields.__name__}",
    )
    table.add_column("#", justify="right", style="magenta")
    table.add_column("Identifier", style="cyan", no_wrap=True)
    table.add_column("Field", style="green")
    table.add_column("Key", style="yellow")
    table.add_column("Kind", style="blue")

    for entry in catalog:
        table.add_row(
            str(entry.rank),
            entry.identifier.name,
            entry.name,
            entry.key,
            "computed" if entry.computed else "declared",
        )
    return table


def bench_table(results: List[ProfileStats], baseline: Optional[str] = None) -> Table:
    """
    Build a table comparing benchmark runs.

    When `baseline` names one of the runs, a relative-speed column is added.
    """
    base = next((r for r in results if r.label == baseline), None)

    table = Table(
        title="View Serialization Benchmark",
        box=box.ROUNDED,
        caption="Sorted by throughput (descending)",
    )
    table.add_column("Run", style="cyan", no_wrap=True)
    table.add_column("Fields", justify="right", style="magenta")
    table.add_column("Iterations", justify="right", style="blue")
    table.add_column("Duration (s)", justify="right", style="green")
    table.add_column("Throughput (ops/s)", justify="right", style="bold green")
    table.add_column("µs/op", justify="right", style="green")
    table.add_column("Peak Memory (MB)", justify="right", style="yellow")
    table.add_column("CPU %", justify="right", style="red")
    if base is not None:
        table.add_column("vs " + base.label, justify="right", style="bold")

    for res in sorted(results, key=lambda r: r.ops_per_sec, reverse=True):
        mem_mb = (res.peak_rss_bytes or 0) / (1024 * 1024)
        row = [
            res.label,
            str(res.extra.get("fields", "")),
            f"{res.iterations:,}",
            f"{res.duration_seconds:.3f}",
            f"{res.ops_per_sec:,.0f}",
            f"{res.usec_per_op:.2f}",
            f"{mem_mb:.2f}",
            f"{res.cpu_percent or 0.0:.1f}",
        ]
        if base is not None:
            ratio = res.ops_per_sec / base.ops_per_sec if base.ops_per_sec else 0.0
            row.append(f"{ratio:.2f}x")
        table.add_row(*row)
    return table


def print_catalog(catalog: FieldCatalog, console: Optional[Console] = None) -> None:
    (console or Console()).print(catalog_table(catalog))


def print_bench(results: List[ProfileStats], baseline: Optional[str] = None, console: Optional[Console] = None) -> None:
    console = console or Console()
    if not results:
        console.print("[yellow]No results to display.[/yellow]")
        return
    console.print(bench_table(results, baseline))


__all__ = ["bench_table", "catalog_table", "print_bench", "print_catalog"]
