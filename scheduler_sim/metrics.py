from __future__ import annotations

import math
from typing import List, Optional

from .models import Process, ScheduleResult, ScheduleRow, SystemMetrics


def make_row(p: Process, waiting_time: int, completion_time: int) -> ScheduleRow:
    """
    Build the table row for a finished process. Turnaround is derived as
    wait + burst so the row always satisfies completion = arrival + turnaround.
    """
    return ScheduleRow(
        pid=p.pid,
        priority=p.priority,
        burst_time=p.burst_time,
        arrival_time=p.arrival_time,
        waiting_time=waiting_time,
        turnaround_time=waiting_time + p.burst_time,
        completion_time=completion_time,
    )


def compute_system_metrics(result: ScheduleResult, elapsed: Optional[int] = None) -> SystemMetrics:
    """
    Compute averages, throughput, makespan and CPU utilization given populated rows
    and timeline slices.

    ``elapsed`` is the time span throughput is measured over; it defaults to
    the last completion time. An empty result yields NaN averages and
    throughput rather than a misleading zero.
    """
    rows = result.rows
    cpu_busy_time = sum(slice_.duration for slice_ in result.timeline)

    if not rows:
        system = SystemMetrics(
            avg_waiting=math.nan,
            avg_turnaround=math.nan,
            throughput=math.nan,
            makespan=0,
            elapsed=elapsed or 0,
            cpu_utilization=math.nan,
        )
        result.system = system
        return system

    n = len(rows)
    makespan = max(r.completion_time for r in rows)
    if elapsed is None:
        elapsed = makespan

    system = SystemMetrics(
        avg_waiting=sum(r.waiting_time for r in rows) / n,
        avg_turnaround=sum(r.turnaround_time for r in rows) / n,
        throughput=n / elapsed,
        makespan=makespan,
        elapsed=elapsed,
        cpu_utilization=cpu_busy_time / elapsed,
    )
    result.system = system
    return system


def summarize_rows(rows: List[ScheduleRow]) -> dict:
    """
    Return averages of the key per-process metrics for quick comparison.
    """
    if not rows:
        return {"avg_waiting": math.nan, "avg_turnaround": math.nan}

    n = len(rows)
    return {
        "avg_waiting": sum(r.waiting_time for r in rows) / n,
        "avg_turnaround": sum(r.turnaround_time for r in rows) / n,
    }
