from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from .models import Process, ScheduleResult, ScheduledSlice, ScheduleRow
from .metrics import compute_system_metrics, make_row

logger = logging.getLogger(__name__)

# Round-robin time slice. Fixed for every run; callers cannot override it.
ROUND_ROBIN_QUANTUM = 3


def _rows_by_pid(rows: List[ScheduleRow]) -> List[ScheduleRow]:
    return sorted(rows, key=lambda r: r.pid)


def schedule_fcfs(processes: Sequence[Process]) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.

    Processes run in the order given; the list is not sorted by arrival.
    If the next process has not arrived yet the CPU sits idle until it does.
    """
    time = 0
    timeline: List[ScheduledSlice] = []
    rows: List[ScheduleRow] = []

    for p in processes:
        if time < p.arrival_time:
            logger.debug("fcfs: idle %d..%d waiting for pid %d", time, p.arrival_time, p.pid)
            time = p.arrival_time

        start_time = time
        waiting_time = start_time - p.arrival_time
        completion_time = start_time + p.burst_time

        timeline.append(ScheduledSlice(pid=p.pid, start_time=start_time, end_time=completion_time))
        rows.append(make_row(p, waiting_time, completion_time))

        time = completion_time

    result = ScheduleResult(algorithm="FCFS", quantum=None, rows=rows, timeline=timeline)
    compute_system_metrics(result)
    return result


def select_shortest_remaining(
    processes: Sequence[Process], remaining: Sequence[int], time: int
) -> Optional[int]:
    """
    Index of the arrived, unfinished process with the smallest remaining
    burst, or None if nothing can run at ``time``. Ties go to the process
    listed first.
    """
    shortest: Optional[int] = None
    for i, p in enumerate(processes):
        if p.arrival_time > time or remaining[i] <= 0:
            continue
        if shortest is None or remaining[i] < remaining[shortest]:
            shortest = i
    return shortest


def schedule_sjf(processes: Sequence[Process]) -> ScheduleResult:
    """
    Shortest Job First, preemptive (shortest remaining time).

    The clock advances one unit at a time. Every unit the arrived process
    with the least remaining burst gets the CPU, so a newly arrived shorter
    job preempts the running one. Consecutive units of the same process are
    merged into a single Gantt slice.
    """
    remaining = [p.burst_time for p in processes]
    completions = [0] * len(processes)
    waiting = [0] * len(processes)

    time = 0
    completed = 0
    last: Optional[int] = None
    timeline: List[ScheduledSlice] = []

    while completed < len(processes):
        current = select_shortest_remaining(processes, remaining, time)
        if current is None:
            time += 1
            last = None
            continue

        p = processes[current]
        if current == last and timeline[-1].end_time == time:
            timeline[-1].end_time = time + 1
        else:
            if last is not None:
                logger.debug("sjf: t=%d pid %d preempts pid %d", time, p.pid, processes[last].pid)
            timeline.append(ScheduledSlice(pid=p.pid, start_time=time, end_time=time + 1))
        last = current

        remaining[current] -= 1
        time += 1

        if remaining[current] == 0:
            completed += 1
            completions[current] = time
            waiting[current] = max(0, time - p.burst_time - p.arrival_time)
            # A finished process never continues its slice.
            last = None
            logger.debug("sjf: pid %d completes at t=%d", p.pid, time)

    rows = [make_row(p, waiting[i], completions[i]) for i, p in enumerate(processes)]
    result = ScheduleResult(algorithm="SJF (preemptive)", quantum=None, rows=_rows_by_pid(rows), timeline=timeline)
    compute_system_metrics(result)
    return result


def by_priority_descending(p: Process) -> int:
    """Sort key placing the most urgent (highest priority) process first."""
    return -p.priority


def select_highest_priority(waiting: Sequence[Process], time: int) -> Optional[int]:
    """
    Position in ``waiting`` of the arrived process with the highest priority,
    or None if none has arrived by ``time``. Ties go to the earliest entry.
    """
    best: Optional[int] = None
    for i, p in enumerate(waiting):
        if p.arrival_time > time:
            continue
        if best is None or p.priority > waiting[best].priority:
            best = i
    return best


def schedule_priority(processes: Sequence[Process]) -> ScheduleResult:
    """
    Static Priority scheduling (non-preemptive).

    Higher numeric priority means more urgent. Among arrived processes the
    most urgent runs to completion; equal priorities keep input order.
    """
    # sorted() is stable, so equal priorities keep their input order.
    waiting: List[Process] = sorted(processes, key=by_priority_descending)

    time = 0
    timeline: List[ScheduledSlice] = []
    rows: List[ScheduleRow] = []

    while waiting:
        idx = select_highest_priority(waiting, time)
        if idx is None:
            time += 1
            continue

        p = waiting.pop(idx)
        start_time = time
        waiting_time = max(0, time - p.arrival_time)
        completion_time = time + p.burst_time

        timeline.append(ScheduledSlice(pid=p.pid, start_time=start_time, end_time=completion_time))
        rows.append(make_row(p, waiting_time, completion_time))
        logger.debug("priority: pid %d (priority %d) runs %d..%d", p.pid, p.priority, start_time, completion_time)

        time = completion_time

    result = ScheduleResult(algorithm="Priority (static)", quantum=None, rows=_rows_by_pid(rows), timeline=timeline)
    compute_system_metrics(result)
    return result


def schedule_rr(processes: Sequence[Process]) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum.

    Processes are visited in input order, pass after pass, each getting at
    most one quantum per pass until every burst is exhausted. Arrival times
    only affect the reported wait and turnaround, not the visiting order.

    Throughput is measured over the final clock plus one extra quantum.
    """
    quantum = ROUND_ROBIN_QUANTUM
    remaining = [p.burst_time for p in processes]
    completions = [0] * len(processes)

    time = 0
    timeline: List[ScheduledSlice] = []

    while any(rt > 0 for rt in remaining):
        for i, p in enumerate(processes):
            if remaining[i] <= 0:
                continue

            run_time = min(quantum, remaining[i])
            timeline.append(ScheduledSlice(pid=p.pid, start_time=time, end_time=time + run_time))
            time += run_time
            remaining[i] -= run_time

            if remaining[i] == 0:
                completions[i] = time
                logger.debug("rr: pid %d completes at t=%d", p.pid, time)

    time += quantum

    rows = []
    for i, p in enumerate(processes):
        turnaround_time = completions[i] - p.arrival_time
        rows.append(make_row(p, turnaround_time - p.burst_time, completions[i]))

    result = ScheduleResult(algorithm="Round Robin", quantum=quantum, rows=_rows_by_pid(rows), timeline=timeline)
    compute_system_metrics(result, elapsed=time)
    return result


ALGORITHMS = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "priority": schedule_priority,
    "rr": schedule_rr,
}

TITLES: Dict[str, str] = {
    "fcfs": "First-come, first-serve",
    "sjf": "Shortest-job-first",
    "priority": "Priority",
    "rr": "Round-robin",
}


def run_algorithm(name: str, processes: Sequence[Process]) -> ScheduleResult:
    """
    Dispatch to the requested algorithm by its short name.
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise ValueError(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})")

    func = ALGORITHMS[name]
    logger.debug("running %s on %d processes", name, len(processes))
    return func(processes)


def run_all(processes: Sequence[Process], names: Optional[Sequence[str]] = None) -> List[ScheduleResult]:
    """
    Run several algorithms over the same workload, in report order
    (FCFS, SJF, Priority, Round Robin) unless ``names`` says otherwise.
    """
    if names is None:
        names = list(ALGORITHMS)
    return [run_algorithm(name, processes) for name in names]
