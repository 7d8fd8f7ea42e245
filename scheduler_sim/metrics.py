from __future__ import annotations

from typing import Dict, List

from .models import ProcessMetrics, ProcessState, ScheduledSlice, SystemMetrics, TraceEntry
from .simulation import SimulationResult


def build_timeline(trace: List[TraceEntry]) -> List[ScheduledSlice]:
    """
    Reconstruct CPU slices from the trace: a slice opens on READY -> RUNNING
    and closes on the next transition out of RUNNING.
    """
    slices: List[ScheduledSlice] = []
    open_slice: Dict[int, int] = {}

    for entry in trace:
        if entry.new_state is ProcessState.RUNNING:
            open_slice[entry.pid] = entry.time
        elif entry.old_state is ProcessState.RUNNING and entry.pid in open_slice:
            start = open_slice.pop(entry.pid)
            slices.append(ScheduledSlice(pid=entry.pid, start_time=start, end_time=entry.time))

    return slices


def compute_process_metrics(result: SimulationResult) -> List[ProcessMetrics]:
    """
    Per-process timings derived from the trace of one run, ordered by pid.
    """
    metrics = {
        p.pid: ProcessMetrics(pid=p.pid, arrival_time=p.arrival_time, total_burst=p.total_burst)
        for p in result.processes
    }
    ready_since: Dict[int, int] = {}
    waiting_since: Dict[int, int] = {}

    for entry in result.trace:
        m = metrics[entry.pid]

        if entry.old_state is ProcessState.READY:
            m.ready_wait_time += entry.time - ready_since.pop(entry.pid)
        elif entry.old_state is ProcessState.WAITING:
            m.io_time += entry.time - waiting_since.pop(entry.pid)

        if entry.new_state is ProcessState.READY:
            ready_since[entry.pid] = entry.time
        elif entry.new_state is ProcessState.WAITING:
            waiting_since[entry.pid] = entry.time
        elif entry.new_state is ProcessState.RUNNING and m.first_run is None:
            m.first_run = entry.time
            m.response_time = entry.time - m.arrival_time
        elif entry.new_state is ProcessState.TERMINATED:
            m.completion_time = entry.time
            m.turnaround_time = entry.time - m.arrival_time

    return [metrics[pid] for pid in sorted(metrics)]


def compute_system_metrics(result: SimulationResult) -> SystemMetrics:
    """
    Throughput and CPU utilization over the whole run.
    """
    makespan = result.end_time
    cpu_busy_time = sum(s.end_time - s.start_time for s in build_timeline(result.trace))
    finished = len(result.queues.terminated)

    throughput = finished / makespan if makespan > 0 else 0.0
    cpu_utilization = cpu_busy_time / makespan if makespan > 0 else 0.0

    return SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        makespan=makespan,
        throughput=throughput,
        cpu_utilization=cpu_utilization,
    )


def summarize_process_metrics(processes: List[ProcessMetrics]) -> dict:
    """
    Averages of the key per-process metrics, over processes that finished.
    """
    done = [p for p in processes if p.completion_time is not None]
    if not done:
        return {"avg_ready_wait": 0.0, "avg_turnaround": 0.0, "avg_response": 0.0}

    n = len(done)
    return {
        "avg_ready_wait": sum(p.ready_wait_time for p in done) / n,
        "avg_turnaround": sum(p.turnaround_time for p in done) / n,
        "avg_response": sum(p.response_time for p in done) / n,
    }
