from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .algorithms import ALGORITHMS, TITLES, run_algorithm
from .gantt import build_rich_gantt, render_gantt, render_title
from .metrics import summarize_rows
from .models import ScheduleResult
from .workload_io import WorkloadError, load_workload

logger = logging.getLogger("scheduler_sim")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scheduler-sim",
        description="CPU scheduling simulator (FCFS, SJF, Priority, Round Robin).",
    )
    parser.add_argument(
        "workload",
        help="Path to the workload file: CSV rows of pid,burst,arrival[,priority] (or a .json list).",
    )
    parser.add_argument(
        "--algorithm",
        "-a",
        nargs="+",
        type=str.lower,
        choices=list(ALGORITHMS),
        default=list(ALGORITHMS),
        help="Algorithms to run, in order (default: fcfs sjf priority rr).",
    )
    parser.add_argument(
        "--compare",
        action="store_true",
        help="Finish with a table comparing the averages of every algorithm run.",
    )
    parser.add_argument(
        "--plain",
        action="store_true",
        help="Draw Gantt charts as plain text instead of a coloured panel.",
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", "-v", action="store_true", help="Log scheduling decisions.")
    verbosity.add_argument("--quiet", "-q", action="store_true", help="Only log errors.")

    return parser


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.ERROR if quiet else logging.WARNING
    handler = RichHandler(console=Console(stderr=True), show_path=False, show_time=False)
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False


def _schedule_table(result: ScheduleResult) -> Table:
    system = result.system
    footer = {}
    if system is not None:
        footer = {
            "Wait": f"Average\n{system.avg_waiting:.2f}",
            "Turnaround": f"Average\n{system.avg_turnaround:.2f}",
            "Exit": f"Throughput\n{system.throughput:.2f}/t",
        }

    table = Table(title="Schedule table", box=box.SIMPLE_HEAVY, show_footer=system is not None)
    for h in ["ID", "Priority", "Burst", "Arrival", "Wait", "Turnaround", "Exit"]:
        justify = "center" if h in {"ID", "Priority"} else "right"
        table.add_column(h, justify=justify, footer=footer.get(h, ""))

    for r in result.rows:
        table.add_row(
            str(r.pid),
            str(r.priority),
            str(r.burst_time),
            str(r.arrival_time),
            str(r.waiting_time),
            str(r.turnaround_time),
            str(r.completion_time),
        )
    return table


def _print_result(console: Console, title: str, result: ScheduleResult, plain: bool = False) -> None:
    console.print(render_title(title), markup=False, highlight=False)

    if plain:
        console.print(render_gantt(result.timeline), markup=False, highlight=False)
    else:
        console.print(build_rich_gantt(result.timeline, max_width=console.width))
    console.print()

    console.print(_schedule_table(result))
    if result.quantum is not None:
        console.print(f"[dim]Quantum: {result.quantum}[/dim]")
    console.print()


def _print_comparison(console: Console, results: List[ScheduleResult]) -> None:
    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY, show_edge=False)
    summary_table.add_column("Algorithm", no_wrap=True)
    summary_table.add_column("Avg wait", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Throughput", justify="right")
    summary_table.add_column("Makespan", justify="right")
    summary_table.add_column("CPU %", justify="right")

    for result in results:
        summary = summarize_rows(result.rows)
        name = result.algorithm if result.quantum is None else f"{result.algorithm} (q={result.quantum})"
        system = result.system
        summary_table.add_row(
            name,
            f"{summary['avg_waiting']:.2f}",
            f"{summary['avg_turnaround']:.2f}",
            "" if system is None else f"{system.throughput:.3f}",
            "" if system is None else str(system.makespan),
            "" if system is None else f"{system.cpu_utilization * 100:.1f}",
        )

    console.print(summary_table)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet)

    try:
        processes = load_workload(Path(args.workload))
    except WorkloadError as exc:
        logger.error("%s", exc)
        return 1

    console = Console()
    results: List[ScheduleResult] = []
    for name in args.algorithm:
        result = run_algorithm(name, processes)
        _print_result(console, TITLES[name], result, plain=args.plain)
        results.append(result)

    if args.compare:
        _print_comparison(console, results)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
