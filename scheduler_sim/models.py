from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterator, List, Optional


class ProcessState(Enum):
    NEW = "NEW"
    READY = "READY"
    RUNNING = "RUNNING"
    WAITING = "WAITING"
    TERMINATED = "TERMINATED"


UNKNOWN_STATE = "UNKNOWN"


def state_name(state) -> str:
    """
    Name used for a state in trace output; anything that is not a
    ProcessState is reported as UNKNOWN.
    """
    if isinstance(state, ProcessState):
        return state.value
    return UNKNOWN_STATE


class TransitionKind(Enum):
    """
    The only legal edges of the process lifecycle.
    """

    NEW_TO_READY = (ProcessState.NEW, ProcessState.READY)
    READY_TO_RUNNING = (ProcessState.READY, ProcessState.RUNNING)
    RUNNING_TO_WAITING = (ProcessState.RUNNING, ProcessState.WAITING)
    RUNNING_TO_TERMINATED = (ProcessState.RUNNING, ProcessState.TERMINATED)
    WAITING_TO_READY = (ProcessState.WAITING, ProcessState.READY)
    RUNNING_TO_READY = (ProcessState.RUNNING, ProcessState.READY)

    @property
    def source(self) -> ProcessState:
        return self.value[0]

    @property
    def destination(self) -> ProcessState:
        return self.value[1]

    @property
    def resorts_ready(self) -> bool:
        return self.destination is ProcessState.READY

    @property
    def label(self) -> str:
        return f"{self.source.value.lower()}-{self.destination.value.lower()}"


@dataclass
class Process:
    """
    One simulated unit of work.

    ``None`` in io_interval, io_duration or quantum means "never": no I/O,
    or no preemption for this process.
    """

    pid: int
    arrival_time: int
    total_burst: int
    io_interval: Optional[int] = None
    io_duration: Optional[int] = None
    quantum: Optional[int] = None
    remaining_burst: int = field(init=False, default=0)
    last_scheduled_at: Optional[int] = field(init=False, default=None)
    last_io_started_at: Optional[int] = field(init=False, default=None)

    def __post_init__(self) -> None:
        self.remaining_burst = self.total_burst

    def fresh(self) -> "Process":
        """Copy of the descriptor with all run bookkeeping reset."""
        return replace(self)


@dataclass(frozen=True)
class Transition:
    kind: TransitionKind
    time: int

    @property
    def source(self) -> ProcessState:
        return self.kind.source

    @property
    def destination(self) -> ProcessState:
        return self.kind.destination


@dataclass(frozen=True)
class TraceEntry:
    time: int
    pid: int
    old_state: ProcessState
    new_state: ProcessState


@dataclass
class QueueSet:
    """
    The five state queues of one simulation run.

    Processes only ever move from the head of one queue to the tail of
    another, so each process is in exactly one queue at a time.
    """

    new: List[Process] = field(default_factory=list)
    ready: List[Process] = field(default_factory=list)
    running: List[Process] = field(default_factory=list)
    waiting: List[Process] = field(default_factory=list)
    terminated: List[Process] = field(default_factory=list)

    @classmethod
    def from_processes(cls, processes: List[Process]) -> "QueueSet":
        return cls(new=list(processes))

    def queue(self, state: ProcessState) -> List[Process]:
        return {
            ProcessState.NEW: self.new,
            ProcessState.READY: self.ready,
            ProcessState.RUNNING: self.running,
            ProcessState.WAITING: self.waiting,
            ProcessState.TERMINATED: self.terminated,
        }[state]

    def move(self, source: ProcessState, destination: ProcessState) -> Process:
        from_queue = self.queue(source)
        to_queue = self.queue(destination)
        if not from_queue:
            raise RuntimeError(f"Cannot move from empty {source.value} queue")
        if destination is ProcessState.RUNNING and to_queue:
            raise RuntimeError("CPU is busy: RUNNING queue already holds a process")

        process = from_queue.pop(0)
        to_queue.append(process)
        return process

    def processes(self) -> Iterator[Process]:
        for state in ProcessState:
            yield from self.queue(state)

    @property
    def all_terminated(self) -> bool:
        return not (self.new or self.ready or self.running or self.waiting)


@dataclass
class ScheduledSlice:
    """
    One contiguous slice of CPU time for a process in the Gantt chart.
    """

    pid: int
    start_time: int
    end_time: int


@dataclass
class ProcessMetrics:
    pid: int
    arrival_time: int
    total_burst: int
    first_run: Optional[int] = None
    completion_time: Optional[int] = None
    turnaround_time: Optional[int] = None
    response_time: Optional[int] = None
    ready_wait_time: int = 0
    io_time: int = 0


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    makespan: int
    throughput: float
    cpu_utilization: float
