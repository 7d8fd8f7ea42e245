from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from .models import Process

FIELDS = ("pid", "arrival_time", "total_burst", "io_interval", "io_duration", "quantum")


class WorkloadError(ValueError):
    """Raised when a workload source is missing or malformed."""


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload into a list of Process objects, in file order.

    ``.json`` files hold a list of process objects; anything else is read
    as comma-delimited text with one six-field record per line:
    ``pid,arrival_time,total_burst,io_interval,io_duration,quantum``.
    """
    path = Path(path)
    if not path.is_file():
        raise WorkloadError(f"Workload not found: {path}")

    if path.suffix.lower() == ".json":
        processes = _load_json(path)
    else:
        processes = _load_delimited(path)

    _check_unique_pids(processes, path)
    return processes


def parse_record(values: Sequence[int]) -> Process:
    """
    Build a Process from six integers, clamping out-of-range values.

    A non-positive io_interval, io_duration or quantum means "never";
    negative total_burst and arrival_time become 0.
    """
    if len(values) != len(FIELDS):
        raise WorkloadError(f"Expected {len(FIELDS)} fields, got {len(values)}")

    pid, arrival_time, total_burst, io_interval, io_duration, quantum = values
    return Process(
        pid=pid,
        arrival_time=max(arrival_time, 0),
        total_burst=max(total_burst, 0),
        io_interval=_positive_or_none(io_interval),
        io_duration=_positive_or_none(io_duration),
        quantum=_positive_or_none(quantum),
    )


def _positive_or_none(value: Optional[int]) -> Optional[int]:
    if value is None or value <= 0:
        return None
    return value


def _load_delimited(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        for line_no, row in enumerate(csv.reader(f), start=1):
            if not row or not "".join(row).strip() or row[0].lstrip().startswith("#"):
                continue
            try:
                values = [int(field) for field in row]
                processes.append(parse_record(values))
            except ValueError as exc:
                raise WorkloadError(f"{path}:{line_no}: invalid process record {row!r}") from exc
    return processes


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise WorkloadError(f"{path}: invalid JSON ({exc})") from exc

    if not isinstance(raw, list):
        raise WorkloadError("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry, path) for entry in raw]


def _process_from_mapping(mapping: Mapping, path: Path) -> Process:
    try:
        values = [int(mapping[name]) for name in FIELDS[:3]]
        for name in FIELDS[3:]:
            value = mapping.get(name)
            values.append(0 if value in (None, "") else int(value))
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise WorkloadError(f"{path}: invalid process entry {mapping!r}") from exc

    return parse_record(values)


def _check_unique_pids(processes: List[Process], path: Path) -> None:
    seen = set()
    for p in processes:
        if p.pid in seen:
            raise WorkloadError(f"{path}: duplicate pid {p.pid}")
        seen.add(p.pid)
