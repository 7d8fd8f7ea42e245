from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .engine import REFERENCE_TIE_BREAK, TraceSink, advance, select_next
from .models import Process, QueueSet, TraceEntry, TransitionKind
from .policies import Policy, sort_by_arrival

logger = logging.getLogger(__name__)

INITIAL_TIME = 0


@dataclass
class SimulationResult:
    policy: Policy
    queues: QueueSet
    trace: List[TraceEntry] = field(default_factory=list)
    end_time: int = INITIAL_TIME
    truncated: bool = False

    @property
    def completed(self) -> bool:
        return self.queues.all_terminated

    @property
    def unterminated(self) -> List[int]:
        """PIDs of processes that never reached TERMINATED."""
        finished = {p.pid for p in self.queues.terminated}
        return [p.pid for p in self.queues.processes() if p.pid not in finished]

    @property
    def processes(self) -> List[Process]:
        return sorted(self.queues.processes(), key=lambda p: p.pid)


def run_simulation(
    processes: List[Process],
    policy: Policy,
    sink: Optional[TraceSink] = None,
    tie_break: Sequence[TransitionKind] = REFERENCE_TIE_BREAK,
    max_time: Optional[int] = None,
) -> SimulationResult:
    """
    Run one simulation from time 0 until no event is pending.

    Each run works on fresh copies of the given processes, so the same
    workload can be simulated under several policies. When ``max_time`` is
    set, the run stops before any event later than it.
    """
    queues = QueueSet.from_processes([p.fresh() for p in processes])
    sort_by_arrival(queues.new)

    result = SimulationResult(policy=policy, queues=queues)
    now = INITIAL_TIME

    def record(entry: TraceEntry) -> None:
        result.trace.append(entry)
        if sink is not None:
            sink(entry)

    while True:
        if max_time is not None:
            upcoming = select_next(queues, now, tie_break)
            if upcoming is not None and upcoming.time > max_time:
                result.truncated = True
                logger.warning("%s run stopped at t=%d (ceiling %d)", policy.name, now, max_time)
                break

        nxt = advance(queues, policy, now, sink=record, tie_break=tie_break)
        if nxt is None:
            break
        now = nxt

    result.end_time = now

    if not result.truncated and not result.completed:
        logger.warning(
            "%s run ended with %d process(es) never terminated: %s",
            policy.name,
            len(result.unterminated),
            ", ".join(str(pid) for pid in result.unterminated),
        )

    return result
