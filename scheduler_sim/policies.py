from __future__ import annotations

from enum import Enum
from typing import List

from .models import Process


class Policy(Enum):
    """
    Ready-queue ordering policies.

    Round robin is not a policy of its own: any process with a quantum is
    preempted under whichever policy is active.
    """

    FCFS = "fcfs"
    SJF = "sjf"
    SRTF = "srtf"

    @property
    def title(self) -> str:
        return _TITLES[self]

    @property
    def resorts_ready(self) -> bool:
        # FCFS leaves Ready in insertion order.
        return self is not Policy.FCFS

    def sort_key(self, process: Process) -> int:
        if self is Policy.SJF:
            return process.total_burst
        if self is Policy.SRTF:
            return process.remaining_burst
        return process.arrival_time


_TITLES = {
    Policy.FCFS: "FIRST COME FIRST SERVE",
    Policy.SJF: "SHORTEST JOB FIRST",
    Policy.SRTF: "SHORTEST REMAINING TIME FIRST",
}


def get_policy(name: str) -> Policy:
    """
    Look up a policy by name (fcfs, sjf, srtf), case-insensitively.
    """
    try:
        return Policy(name.lower())
    except ValueError:
        choices = ", ".join(p.value for p in Policy)
        raise ValueError(f"Unknown scheduling policy '{name}' (choose from {choices})") from None


def sort_by_arrival(queue: List[Process]) -> None:
    queue.sort(key=Policy.FCFS.sort_key)


def resort_ready(queue: List[Process], policy: Policy) -> None:
    """
    Re-sort the Ready queue after an insertion. The sort is stable, so ties
    keep their current relative order.
    """
    if policy.resorts_ready:
        queue.sort(key=policy.sort_key)
