from scheduler_sim.metrics import (
    build_timeline,
    compute_process_metrics,
    compute_system_metrics,
    summarize_process_metrics,
)
from scheduler_sim.models import Process, ScheduledSlice
from scheduler_sim.policies import Policy
from scheduler_sim.simulation import run_simulation


def _two_fcfs():
    return run_simulation(
        [Process(1, arrival_time=0, total_burst=5), Process(2, arrival_time=1, total_burst=3)],
        Policy.FCFS,
    )


def test_timeline_from_trace():
    assert build_timeline(_two_fcfs().trace) == [
        ScheduledSlice(pid=1, start_time=0, end_time=5),
        ScheduledSlice(pid=2, start_time=5, end_time=8),
    ]


def test_process_metrics_fcfs():
    m1, m2 = compute_process_metrics(_two_fcfs())
    assert (m1.first_run, m1.completion_time, m1.turnaround_time, m1.ready_wait_time) == (0, 5, 5, 0)
    assert (m2.first_run, m2.completion_time, m2.turnaround_time, m2.ready_wait_time) == (5, 8, 7, 4)
    assert m2.response_time == 4


def test_process_metrics_count_io_time():
    result = run_simulation([Process(1, arrival_time=0, total_burst=5, io_interval=2, io_duration=3)], Policy.FCFS)
    (m,) = compute_process_metrics(result)
    assert m.io_time == 6
    assert m.ready_wait_time == 0
    assert m.completion_time == 11

    system = compute_system_metrics(result)
    assert system.makespan == 11
    assert system.cpu_busy_time == 5


def test_system_metrics():
    system = compute_system_metrics(_two_fcfs())
    assert system.makespan == 8
    assert system.cpu_busy_time == 8
    assert system.cpu_utilization == 1.0
    assert system.throughput == 2 / 8


def test_summary_skips_unfinished_processes():
    result = run_simulation(
        [Process(1, arrival_time=0, total_burst=5, io_interval=2), Process(2, arrival_time=0, total_burst=4)],
        Policy.FCFS,
    )
    summary = summarize_process_metrics(compute_process_metrics(result))
    # only pid 2 finishes: ready 0..2, runs 2..6
    assert summary == {"avg_ready_wait": 2.0, "avg_turnaround": 6.0, "avg_response": 2.0}


def test_summary_of_nothing():
    assert summarize_process_metrics([]) == {"avg_ready_wait": 0.0, "avg_turnaround": 0.0, "avg_response": 0.0}
