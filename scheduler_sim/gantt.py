from __future__ import annotations

from typing import Dict, List, NamedTuple, Optional

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduledSlice

LABEL_WIDTH = 8
PALETTE = ("red", "green", "yellow", "blue", "magenta", "cyan")


def render_title(title: str) -> str:
    """
    Banner printed above each algorithm's report.
    """
    rule = "-" * (len(title) * 2)
    return "\n".join([rule, " " * (len(title) // 2) + " " + title, rule])


def render_gantt(slices: List[ScheduledSlice]) -> str:
    """
    Plain-text Gantt chart: one centred PID label per slice between ``|``
    separators, then the start time of every slice followed by the stop
    time of the last one. Slices are shown in timeline order; idle gaps
    are not drawn.
    """
    if not slices:
        return "Gantt schedule\n(no execution)"

    labels = "|"
    for sl in slices:
        pid = str(sl.pid)
        padding = " " * ((LABEL_WIDTH - len(pid)) // 2)
        labels += f"{padding}{pid}{padding}|"

    time_marks = "\t".join(str(sl.start_time) for sl in slices)
    time_marks += f"\t{slices[-1].end_time}"

    return "\n".join(["Gantt schedule", labels, time_marks])

# Columns the panel border and padding add around the chart.
PANEL_FRAME = 4


class GanttCell(NamedTuple):
    pid: Optional[int]  # None marks idle CPU time
    start_time: int
    end_time: int
    width: int

    @property
    def label(self) -> str:
        return "" if self.pid is None else str(self.pid)


def _segments(slices: List[ScheduledSlice]) -> List[tuple]:
    segments = []
    cursor = 0
    for sl in sorted(slices, key=lambda s: (s.start_time, s.end_time)):
        if sl.start_time > cursor:
            segments.append((None, cursor, sl.start_time))
        segments.append((sl.pid, sl.start_time, sl.end_time))
        cursor = max(cursor, sl.end_time)
    return segments


def layout_gantt(slices: List[ScheduledSlice], max_width: Optional[int] = None) -> List[List[GanttCell]]:
    """
    Lay the timeline out as rows ("bands") of cells for the coloured chart.

    A cell is never narrower than its PID label or its start time plus one
    space, so neither is ever cut short. Time is drawn one column per unit
    and scaled down when the chart would not fit in ``max_width`` columns;
    whatever still does not fit continues on the next band.
    """
    segments = _segments(slices)
    if not segments:
        return []

    end = segments[-1][2]
    budget = None if max_width is None else max(1, max_width - PANEL_FRAME)

    def min_width(pid: Optional[int], start: int) -> int:
        label = "" if pid is None else str(pid)
        return max(len(label), len(str(start))) + 1

    scale = 1.0
    natural = sum(max(min_width(pid, s), e - s) for pid, s, e in segments) + len(str(end))
    if budget is not None and natural > budget and end > 0:
        scale = max(0.0, budget - len(str(end)) - 1) / end

    cells = [
        GanttCell(pid, s, e, max(min_width(pid, s), int(round((e - s) * scale))))
        for pid, s, e in segments
    ]

    bands: List[List[GanttCell]] = [[]]
    used = 0
    for cell in cells:
        needed = cell.width + len(str(cell.end_time))
        if bands[-1] and budget is not None and used + needed > budget:
            bands.append([])
            used = 0
        bands[-1].append(cell)
        used += cell.width
    return bands


def build_rich_gantt(slices: List[ScheduledSlice], max_width: Optional[int] = None) -> Panel:
    """
    Coloured Gantt chart with the PID under each bar and the start time of
    every cell beneath it, closed by the final stop time. Idle time shows
    as dots. Pass the console width as ``max_width`` to keep every band on
    one line.
    """
    bands = layout_gantt(slices, max_width)
    if not bands:
        return Panel("No execution", title="Gantt schedule")

    colours: Dict[int, str] = {}
    grid = Table.grid(padding=(0, 0))

    for n, band in enumerate(bands):
        if n:
            grid.add_row(Text(""))

        bar = Text()
        labels = Text()
        marks = ""
        for cell in band:
            if cell.pid is None:
                bar.append("." * cell.width, style="dim")
                labels.append(" " * cell.width)
            else:
                colour = colours.setdefault(cell.pid, PALETTE[len(colours) % len(PALETTE)])
                bar.append(" " * cell.width, style=f"on {colour}")
                labels.append(cell.label.ljust(cell.width), style=f"bold {colour}")
            marks += str(cell.start_time).ljust(cell.width)
        marks += str(band[-1].end_time)

        grid.add_row(bar)
        grid.add_row(labels)
        grid.add_row(Text(marks))

    return Panel.fit(grid, title="Gantt schedule")
