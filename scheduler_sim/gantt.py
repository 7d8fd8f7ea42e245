from __future__ import annotations

from typing import Dict, List, Tuple

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduledSlice

COLORS = ["red", "green", "yellow", "blue", "magenta", "cyan"]


def build_gantt_rows(slices: List[ScheduledSlice]) -> Tuple[Text, Text, List[int]]:
    """
    Bar and label rows of the chart, one column per time unit, plus the
    slice boundary times. Idle CPU time shows as dots.

    Zero-length slices use no CPU time and are left out, so column N of
    the bar is always time N.
    """
    slices = sorted(
        (s for s in slices if s.end_time > s.start_time),
        key=lambda s: (s.start_time, s.end_time),
    )
    pid_to_color: Dict[int, str] = {}

    bar = Text()
    labels = Text()
    marks = [0]
    last_time = 0

    for sl in slices:
        gap = sl.start_time - last_time
        if gap > 0:
            bar.append("." * gap, style="dim")
            labels.append(" " * gap)
            marks.append(sl.start_time)

        color = pid_to_color.setdefault(sl.pid, COLORS[len(pid_to_color) % len(COLORS)])
        width = sl.end_time - sl.start_time
        bar.append(" " * width, style=f"on {color}")
        labels.append(str(sl.pid)[:width].ljust(width), style="bold")

        last_time = sl.end_time
        marks.append(sl.end_time)

    return bar, labels, list(dict.fromkeys(marks))


def build_rich_gantt(slices: List[ScheduledSlice], title: str = "CPU timeline") -> Tuple[Panel, str]:
    """
    Build a Rich Panel with a colored CPU Gantt chart, plus a line of time
    marks for the slice boundaries.
    """
    bar, labels, marks = build_gantt_rows(slices)
    if not bar:
        return Panel("CPU never ran", title=title), ""

    grid = Table.grid(padding=(0, 0))
    grid.add_row(bar)
    grid.add_row(labels)

    time_marks = " ".join(str(m) for m in marks)
    return Panel.fit(grid, title=title), time_marks
