"""
Scheduler simulation package.

A discrete-event simulator of a single-CPU process scheduler: processes move
through NEW, READY, RUNNING, WAITING and TERMINATED under a FCFS, SJF or SRTF
ready-queue policy, optionally preempted by a per-process time quantum.
"""

__all__ = [
    "cli",
    "engine",
    "gantt",
    "metrics",
    "models",
    "policies",
    "simulation",
    "trace",
    "workload_io",
]
