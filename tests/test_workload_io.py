from pathlib import Path

import pytest

from scheduler_sim.models import Process
from scheduler_sim.workload_io import WorkloadError, load_workload, parse_record


def test_load_delimited(tmp_path: Path):
    p = tmp_path / "fcfs.txt"
    p.write_text("1,0,22,5,1,2\n3,12,12,5,1,2\n\n# comment\n2, 9, 11, 0, 0, 0\n")
    procs = load_workload(p)
    assert isinstance(procs[0], Process)
    assert [x.pid for x in procs] == [1, 3, 2]
    assert procs[0].io_interval == 5
    assert procs[0].quantum == 2
    assert procs[2].io_interval is None
    assert procs[2].quantum is None


def test_parse_record_clamps_out_of_range_values():
    p = parse_record([4, -3, -10, -1, 0, -5])
    assert p.arrival_time == 0
    assert p.total_burst == 0
    assert p.remaining_burst == 0
    assert p.io_interval is None
    assert p.io_duration is None
    assert p.quantum is None


def test_parse_record_wrong_field_count():
    with pytest.raises(WorkloadError, match="Expected 6 fields"):
        parse_record([1, 0, 5])


def test_malformed_line_is_fatal(tmp_path: Path):
    p = tmp_path / "bad.txt"
    p.write_text("1,0,5,0,0,0\n2,x,5,0,0,0\n")
    with pytest.raises(WorkloadError, match=":2: invalid process record"):
        load_workload(p)


def test_short_line_is_fatal(tmp_path: Path):
    p = tmp_path / "short.txt"
    p.write_text("1,0,5\n")
    with pytest.raises(WorkloadError):
        load_workload(p)


def test_missing_file(tmp_path: Path):
    with pytest.raises(WorkloadError, match="not found"):
        load_workload(tmp_path / "nope.txt")


def test_duplicate_pid(tmp_path: Path):
    p = tmp_path / "dup.txt"
    p.write_text("1,0,5,0,0,0\n1,2,5,0,0,0\n")
    with pytest.raises(WorkloadError, match="duplicate pid 1"):
        load_workload(p)


def test_load_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":1,"arrival_time":0,"total_burst":3,"quantum":2},'
                 '{"pid":2,"arrival_time":-1,"total_burst":2,"io_interval":1,"io_duration":4}]')
    procs = load_workload(p)
    assert procs[0].quantum == 2
    assert procs[0].io_interval is None
    assert procs[1].arrival_time == 0
    assert procs[1].io_duration == 4


def test_json_must_be_a_list(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('{"pid": 1}')
    with pytest.raises(WorkloadError, match="must be a list"):
        load_workload(p)


def test_json_entry_missing_field(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid": 1, "arrival_time": 0}]')
    with pytest.raises(WorkloadError, match="invalid process entry"):
        load_workload(p)
