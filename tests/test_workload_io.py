from pathlib import Path

import pytest

from scheduler_sim.workload_io import (
    FieldParseError,
    WorkloadError,
    WorkloadFormatError,
    WorkloadOpenError,
    load_workload,
)
from scheduler_sim.models import Process


def test_load_csv(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("1,5,0,2\n2,3,1\n")
    procs = load_workload(p)
    assert procs == [
        Process(1, burst_time=5, arrival_time=0, priority=2),
        Process(2, burst_time=3, arrival_time=1, priority=0),
    ]


def test_load_csv_skips_blank_and_comment_lines(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("# pid,burst,arrival,priority\n\n 3 , 4 , 2 \n")
    procs = load_workload(p)
    assert procs == [Process(3, burst_time=4, arrival_time=2)]


def test_load_csv_keeps_file_order(tmp_path: Path):
    p = tmp_path / "w.txt"
    p.write_text("2,1,5\n1,1,0\n")
    assert [proc.pid for proc in load_workload(p)] == [2, 1]


def test_load_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":1,"burst":3,"arrival":0,"priority":1},'
                 '{"pid":2,"burst":2,"arrival":"1"}]')
    procs = load_workload(p)
    assert isinstance(procs[0], Process)
    assert procs[0].priority == 1
    assert procs[1].priority == 0
    assert procs[1].arrival_time == 1


def test_missing_file(tmp_path: Path):
    with pytest.raises(WorkloadOpenError):
        load_workload(tmp_path / "nope.csv")


def test_non_integer_field(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("1,5,0\n2,x,0\n")
    with pytest.raises(FieldParseError) as info:
        load_workload(p)
    assert info.value.field == "burst"
    assert info.value.line == 2
    assert isinstance(info.value, WorkloadError)


@pytest.mark.parametrize(
    "content",
    [
        "1,5\n",
        "1,5,0,1,9\n",
        "1,5,0\n1,2,0\n",
        "1,0,0\n",
        "1,5,-1\n",
        "0,5,0\n",
    ],
)
def test_invalid_csv_rows(tmp_path: Path, content: str):
    p = tmp_path / "w.csv"
    p.write_text(content)
    with pytest.raises(WorkloadFormatError):
        load_workload(p)


def test_invalid_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('{"pid": 1}')
    with pytest.raises(WorkloadFormatError):
        load_workload(p)

    p.write_text('[{"pid": 1, "burst": 2}]')
    with pytest.raises(WorkloadFormatError):
        load_workload(p)

    p.write_text("[1, 2")
    with pytest.raises(WorkloadFormatError):
        load_workload(p)
