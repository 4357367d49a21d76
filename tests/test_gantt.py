import re

from rich.console import Console
from rich.panel import Panel

from scheduler_sim.algorithms import schedule_rr, schedule_sjf
from scheduler_sim.gantt import build_rich_gantt, layout_gantt, render_gantt, render_title
from scheduler_sim.models import Process, ScheduledSlice


def _slices():
    return [
        ScheduledSlice(pid=1, start_time=0, end_time=5),
        ScheduledSlice(pid=2, start_time=5, end_time=8),
        ScheduledSlice(pid=12, start_time=10, end_time=12),
    ]


def _render(panel, width=80):
    console = Console(record=True, width=width)
    console.print(panel)
    return console.export_text()


def test_render_title():
    lines = render_title("FCFS").splitlines()
    assert lines == ["--------", "   FCFS", "--------"]


def test_render_gantt_labels_and_times():
    lines = render_gantt(_slices()).splitlines()
    assert lines[0] == "Gantt schedule"
    assert lines[1] == "|   1   |   2   |   12   |"
    assert lines[2] == "0\t5\t10\t12"


def test_render_gantt_empty():
    assert "no execution" in render_gantt([])


def test_build_rich_gantt():
    panel = build_rich_gantt(_slices())
    assert isinstance(panel, Panel)

    text = _render(panel)
    assert "Gantt schedule" in text
    assert "12" in text
    assert ".." in text  # idle gap between 8 and 10
    assert re.search(r"0\s+5\s+8\s+10\s+12", text)


def test_build_rich_gantt_empty():
    assert "No execution" in _render(build_rich_gantt([]))


def test_layout_keeps_multi_digit_pid_on_short_slice():
    res = schedule_rr([Process(12, burst_time=4, arrival_time=0), Process(3, burst_time=3, arrival_time=0)])
    (band,) = layout_gantt(res.timeline, max_width=80)
    assert [(c.pid, c.start_time, c.end_time) for c in band] == [(12, 0, 3), (3, 3, 6), (12, 6, 7)]
    assert all(c.width > len(c.label) for c in band)

    lines = _render(build_rich_gantt(res.timeline, max_width=80)).splitlines()
    assert any(re.search(r"12\s+3\s+12", line) for line in lines)
    assert any(re.search(r"0\s+3\s+6\s+7", line) for line in lines)


def test_long_timeline_is_scaled_to_width():
    res = schedule_sjf([Process(1, burst_time=60, arrival_time=0), Process(12, burst_time=40, arrival_time=0)])
    bands = layout_gantt(res.timeline, max_width=80)
    assert len(bands) == 1
    assert sum(c.width for c in bands[0]) + len("100") <= 80 - 4

    lines = _render(build_rich_gantt(res.timeline, max_width=80)).splitlines()
    assert all(len(line) <= 80 for line in lines)
    assert any(re.search(r"^\W*12\s+1\s*\W*$", line) for line in lines)
    assert any(re.search(r"0\s+40\s+100", line) for line in lines)


def test_many_slices_continue_on_next_band():
    slices = [ScheduledSlice(pid=100 + i, start_time=i, end_time=i + 1) for i in range(40)]
    bands = layout_gantt(slices, max_width=40)
    assert len(bands) > 1
    assert [c.pid for band in bands for c in band] == [s.pid for s in slices]
    for band in bands:
        assert sum(c.width for c in band) + len(str(band[-1].end_time)) <= 40 - 4

    lines = _render(build_rich_gantt(slices, max_width=40), width=40).splitlines()
    assert all(len(line) <= 40 for line in lines)
    assert "139" in "".join(lines)
