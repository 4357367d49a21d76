"""
Scheduler simulation package.

Runs a fixed workload through FCFS, preemptive SJF, Priority and Round Robin
scheduling and reports per-process timings, Gantt timelines and averages.
"""

__all__ = ["algorithms", "cli", "gantt", "metrics", "models", "workload_io"]
