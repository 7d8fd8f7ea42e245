from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, TextIO

from .models import TraceEntry, state_name
from .policies import Policy

COLUMN_HEADER = "time\tpid\told state\tnew state"


def header_lines(policy: Policy) -> List[str]:
    return [
        f"--- {policy.title} SCHEDULING SIMULATION ---",
        COLUMN_HEADER,
    ]


def format_entry(entry: TraceEntry) -> str:
    return f"{entry.time}\t{entry.pid}\t{state_name(entry.old_state)}\t\t{state_name(entry.new_state)}"


class TraceWriter:
    """
    Trace sink writing one line per transition to a text stream.

    Instances are callable so they can be handed straight to the engine.
    """

    def __init__(self, stream: TextIO):
        self.stream = stream
        self.lines_written = 0

    def write_header(self, policy: Policy) -> None:
        for line in header_lines(policy):
            self.stream.write(line + "\n")

    def __call__(self, entry: TraceEntry) -> None:
        self.stream.write(format_entry(entry) + "\n")
        self.lines_written += 1


@contextmanager
def open_trace(path: str | Path, append: bool = False) -> Iterator[TraceWriter]:
    path = Path(path)
    if path.parent != Path("."):
        path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a" if append else "w", encoding="utf-8") as f:
        yield TraceWriter(f)
