from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Sequence

from .models import Process

logger = logging.getLogger(__name__)

CSV_FIELDS = ("pid", "burst", "arrival", "priority")


class WorkloadError(ValueError):
    """Base class for anything that stops a workload from loading."""


class WorkloadOpenError(WorkloadError):
    """The workload file could not be opened or read."""


class WorkloadFormatError(WorkloadError):
    """The file is readable but its structure or values are invalid."""


class FieldParseError(WorkloadError):
    """A field that must be an integer is not one."""

    def __init__(self, field: str, value: object, line: Optional[int] = None):
        self.field = field
        self.value = value
        self.line = line
        where = f" on line {line}" if line is not None else ""
        super().__init__(f"Field '{field}'{where} is not an integer: {value!r}")


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a CSV or JSON file into a list of Process objects.

    CSV files have no header; each row is ``pid,burst,arrival[,priority]``.
    Files ending in ``.json`` hold a list of objects with the same keys.
    The order of the file is preserved.
    """
    path = Path(path)

    try:
        with path.open("r", encoding="utf-8", newline="") as f:
            if path.suffix.lower() == ".json":
                processes = _load_json(f)
            else:
                processes = _load_csv(f)
    except OSError as exc:
        raise WorkloadOpenError(f"Cannot open workload file {path}: {exc.strerror or exc}") from exc
    except UnicodeDecodeError as exc:
        raise WorkloadOpenError(f"Workload file {path} is not UTF-8 text") from exc

    _validate(processes)
    logger.info("loaded %d processes from %s", len(processes), path)
    return processes


def _load_csv(lines: Iterable[str]) -> List[Process]:
    processes: List[Process] = []
    reader = csv.reader(lines)
    try:
        for row in reader:
            fields = [value.strip() for value in row]
            if not any(fields) or fields[0].startswith("#"):
                continue
            processes.append(_process_from_row(fields, reader.line_num))
    except csv.Error as exc:
        raise WorkloadFormatError(f"Malformed CSV on line {reader.line_num}: {exc}") from exc
    return processes


def _process_from_row(fields: Sequence[str], line: int) -> Process:
    if len(fields) not in (3, 4):
        raise WorkloadFormatError(
            f"Line {line}: expected 3 or 4 fields (pid,burst,arrival[,priority]), got {len(fields)}"
        )

    values = {}
    for name, raw in zip(CSV_FIELDS, fields):
        values[name] = _to_int(name, raw, line)

    return Process(
        pid=values["pid"],
        burst_time=values["burst"],
        arrival_time=values["arrival"],
        priority=values.get("priority", 0),
    )


def _load_json(f) -> List[Process]:
    try:
        raw = json.load(f)
    except json.JSONDecodeError as exc:
        raise WorkloadFormatError(f"Malformed JSON: {exc}") from exc

    if not isinstance(raw, list):
        raise WorkloadFormatError("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _process_from_mapping(mapping: Mapping) -> Process:
    if not isinstance(mapping, Mapping):
        raise WorkloadFormatError(f"Invalid process entry: {mapping!r}")

    try:
        pid = _to_int("pid", mapping["pid"])
        burst = _to_int("burst", mapping["burst"])
        arrival = _to_int("arrival", mapping["arrival"])
    except KeyError as exc:
        raise WorkloadFormatError(f"Process entry {mapping!r} is missing {exc.args[0]!r}") from exc

    priority_val = mapping.get("priority")
    priority = _to_int("priority", priority_val) if priority_val not in (None, "") else 0

    return Process(pid=pid, burst_time=burst, arrival_time=arrival, priority=priority)


def _to_int(field: str, value: object, line: Optional[int] = None) -> int:
    # bool is an int subclass but never a valid field value
    if isinstance(value, bool):
        raise FieldParseError(field, value, line)
    if isinstance(value, int):
        return value
    try:
        return int(str(value), 10)
    except ValueError as exc:
        raise FieldParseError(field, value, line) from exc


def _validate(processes: Sequence[Process]) -> None:
    seen = set()
    for p in processes:
        if p.pid <= 0:
            raise WorkloadFormatError(f"Process id must be positive, got {p.pid}")
        if p.pid in seen:
            raise WorkloadFormatError(f"Duplicate process id {p.pid}")
        if p.arrival_time < 0:
            raise WorkloadFormatError(f"Process {p.pid}: arrival time must be >= 0, got {p.arrival_time}")
        if p.burst_time <= 0:
            raise WorkloadFormatError(f"Process {p.pid}: burst duration must be > 0, got {p.burst_time}")
        seen.add(p.pid)
