"""
Event selection and transition execution.

Given the queue set and the current simulated time, the engine finds the
single next transition (the pending event with the smallest time), applies
it to the queues and reports the new time. Time jumps from event to event;
nothing happens between them.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, Optional, Sequence, Tuple

from .models import Process, QueueSet, TraceEntry, Transition, TransitionKind
from .policies import Policy, resort_ready

logger = logging.getLogger(__name__)

TraceSink = Callable[[TraceEntry], None]

# Order in which simultaneous events fire. WAITING_TO_READY is checked
# before READY_TO_RUNNING; the order is kept as-is so traces stay
# reproducible, and callers wanting another order pass their own.
REFERENCE_TIE_BREAK: Tuple[TransitionKind, ...] = (
    TransitionKind.WAITING_TO_READY,
    TransitionKind.NEW_TO_READY,
    TransitionKind.RUNNING_TO_READY,
    TransitionKind.RUNNING_TO_WAITING,
    TransitionKind.RUNNING_TO_TERMINATED,
    TransitionKind.READY_TO_RUNNING,
)


def validate_tie_break(order: Iterable[TransitionKind]) -> Tuple[TransitionKind, ...]:
    """
    Check that a tie-break order names every transition kind exactly once.
    """
    order = tuple(order)
    if len(order) != len(TransitionKind) or set(order) != set(TransitionKind):
        expected = ", ".join(kind.label for kind in REFERENCE_TIE_BREAK)
        raise ValueError(f"Tie-break order must list each transition exactly once ({expected})")
    return order


def parse_tie_break(text: str) -> Tuple[TransitionKind, ...]:
    """
    Parse a comma-separated tie-break order. Each item is either a kind
    label such as ``waiting-ready`` or an enum name such as
    ``WAITING_TO_READY``.
    """
    by_name: Dict[str, TransitionKind] = {}
    for kind in TransitionKind:
        by_name[kind.label] = kind
        by_name[kind.name.lower()] = kind

    kinds = []
    for item in text.split(","):
        key = item.strip().lower()
        if key not in by_name:
            raise ValueError(f"Unknown transition '{item.strip()}' in tie-break order")
        kinds.append(by_name[key])
    return validate_tie_break(kinds)


def _head(queue) -> Optional[Process]:
    return queue[0] if queue else None


def _after(start: Optional[int], delta: Optional[int]) -> Optional[int]:
    if start is None or delta is None:
        return None
    return start + delta


def candidate_times(queues: QueueSet, now: int) -> Dict[TransitionKind, Optional[int]]:
    """
    Due time of every transition kind; None when the transition cannot
    happen from the current queue contents.
    """
    new = _head(queues.new)
    ready = _head(queues.ready)
    running = _head(queues.running)
    waiting = _head(queues.waiting)

    times: Dict[TransitionKind, Optional[int]] = dict.fromkeys(TransitionKind)

    if new is not None:
        # New is kept arrival-sorted, so its head is the next arrival.
        times[TransitionKind.NEW_TO_READY] = new.arrival_time
    if ready is not None and running is None:
        times[TransitionKind.READY_TO_RUNNING] = max(now, ready.arrival_time)
    if running is not None:
        started = running.last_scheduled_at
        times[TransitionKind.RUNNING_TO_WAITING] = _after(started, running.io_interval)
        times[TransitionKind.RUNNING_TO_TERMINATED] = _after(started, running.remaining_burst)
        times[TransitionKind.RUNNING_TO_READY] = _after(started, running.quantum)
    if waiting is not None:
        times[TransitionKind.WAITING_TO_READY] = _after(waiting.last_io_started_at, waiting.io_duration)

    return times


def select_next(
    queues: QueueSet,
    now: int,
    tie_break: Sequence[TransitionKind] = REFERENCE_TIE_BREAK,
) -> Optional[Transition]:
    """
    The next transition to fire, or None when no event is pending.
    """
    times = candidate_times(queues, now)
    pending = [t for t in times.values() if t is not None]
    if not pending:
        return None

    earliest = min(pending)
    for kind in tie_break:
        if times[kind] == earliest:
            return Transition(kind=kind, time=earliest)

    raise ValueError("Tie-break order does not cover every transition kind")


def apply_transition(queues: QueueSet, transition: Transition, policy: Policy) -> TraceEntry:
    """
    Move the head of the source queue to the tail of the destination queue
    and update the moved process's bookkeeping.
    """
    kind = transition.kind
    now = transition.time
    process = queues.move(kind.source, kind.destination)

    if kind is TransitionKind.READY_TO_RUNNING:
        process.last_scheduled_at = now
    elif kind is TransitionKind.RUNNING_TO_TERMINATED:
        process.remaining_burst = 0
    elif kind is TransitionKind.RUNNING_TO_WAITING:
        process.remaining_burst -= process.io_interval
        process.last_io_started_at = now
    elif kind is TransitionKind.RUNNING_TO_READY:
        process.remaining_burst -= process.quantum

    if kind.resorts_ready:
        resort_ready(queues.ready, policy)

    logger.debug(
        "t=%d pid=%d %s -> %s (remaining=%d)",
        now,
        process.pid,
        kind.source.value,
        kind.destination.value,
        process.remaining_burst,
    )
    return TraceEntry(time=now, pid=process.pid, old_state=kind.source, new_state=kind.destination)


def advance(
    queues: QueueSet,
    policy: Policy,
    now: int,
    sink: Optional[TraceSink] = None,
    tie_break: Sequence[TransitionKind] = REFERENCE_TIE_BREAK,
) -> Optional[int]:
    """
    Fire the next event and return the new simulated time.

    Returns None once no event is pending, which ends the run. Every other
    call applies exactly one transition.
    """
    transition = select_next(queues, now, tie_break)
    if transition is None:
        return None

    entry = apply_transition(queues, transition, policy)
    if sink is not None:
        sink(entry)
    return transition.time
