from pathlib import Path

from scheduler_sim.models import Process, ProcessState, TraceEntry
from scheduler_sim.policies import Policy
from scheduler_sim.simulation import run_simulation
from scheduler_sim.trace import format_entry, header_lines, open_trace


def test_header_lines():
    assert header_lines(Policy.SRTF) == [
        "--- SHORTEST REMAINING TIME FIRST SCHEDULING SIMULATION ---",
        "time\tpid\told state\tnew state",
    ]


def test_format_entry():
    entry = TraceEntry(time=5, pid=1, old_state=ProcessState.RUNNING, new_state=ProcessState.TERMINATED)
    assert format_entry(entry) == "5\t1\tRUNNING\t\tTERMINATED"


def test_format_entry_unknown_state():
    entry = TraceEntry(time=0, pid=2, old_state=42, new_state=ProcessState.READY)
    assert format_entry(entry) == "0\t2\tUNKNOWN\t\tREADY"


def test_writer_writes_header_and_lines(tmp_path: Path):
    out = tmp_path / "fcfs_results.txt"
    with open_trace(out) as writer:
        writer.write_header(Policy.FCFS)
        run_simulation([Process(1, arrival_time=0, total_burst=5)], Policy.FCFS, sink=writer)
    assert writer.lines_written == 3
    assert out.read_text() == (
        "--- FIRST COME FIRST SERVE SCHEDULING SIMULATION ---\n"
        "time\tpid\told state\tnew state\n"
        "0\t1\tNEW\t\tREADY\n"
        "0\t1\tREADY\t\tRUNNING\n"
        "5\t1\tRUNNING\t\tTERMINATED\n"
    )


def test_append_keeps_previous_runs(tmp_path: Path):
    out = tmp_path / "nested" / "trace.txt"
    for _ in range(2):
        with open_trace(out, append=True) as writer:
            writer.write_header(Policy.SJF)
    assert out.read_text().count("SHORTEST JOB FIRST") == 2

    with open_trace(out) as writer:
        writer.write_header(Policy.SJF)
    assert out.read_text().count("SHORTEST JOB FIRST") == 1
