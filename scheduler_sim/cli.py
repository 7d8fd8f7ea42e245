from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .engine import REFERENCE_TIE_BREAK, parse_tie_break
from .gantt import build_rich_gantt
from .metrics import build_timeline, compute_process_metrics, compute_system_metrics, summarize_process_metrics
from .policies import Policy, get_policy
from .simulation import SimulationResult, run_simulation
from .trace import open_trace
from .workload_io import load_workload

logger = logging.getLogger(__name__)

# Default input/output pairs for the batch command, one per policy.
BATCH_FILES = {
    Policy.FCFS: ("fcfs.txt", "fcfs_results.txt"),
    Policy.SJF: ("sjf.txt", "sjf_results.txt"),
    Policy.SRTF: ("srtf.txt", "srtf_results.txt"),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scheduler-sim",
        description="Discrete-event single-CPU scheduling simulator (FCFS, SJF, SRTF, per-process quantum).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every transition as it is applied.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Simulate one policy on a workload and write its trace.")
    run_parser.add_argument(
        "--policy",
        "-p",
        required=True,
        help="Ready-queue policy (fcfs, sjf, srtf).",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to a comma-delimited or JSON workload file.",
    )
    run_parser.add_argument(
        "--output",
        "-o",
        default=None,
        help="Trace file to write (default: <policy>_results.txt).",
    )
    run_parser.add_argument(
        "--append",
        action="store_true",
        help="Append to the trace file instead of overwriting it.",
    )
    run_parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only write the trace; skip the summary tables.",
    )
    _add_engine_options(run_parser)

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run several policies on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to a comma-delimited or JSON workload file.",
    )
    compare_parser.add_argument(
        "--policies",
        "-p",
        nargs="+",
        default=[p.value for p in Policy],
        help="Policies to compare (default: fcfs sjf srtf).",
    )
    _add_engine_options(compare_parser)

    batch_parser = subparsers.add_parser(
        "batch",
        help="Run fcfs.txt, sjf.txt and srtf.txt with their policies, writing <policy>_results.txt.",
    )
    batch_parser.add_argument(
        "--input-dir",
        default=".",
        help="Directory holding the input files (default: current directory).",
    )
    batch_parser.add_argument(
        "--output-dir",
        default=".",
        help="Directory for the trace files (default: current directory).",
    )
    _add_engine_options(batch_parser)

    return parser


def _add_engine_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--tie-break",
        default=None,
        help=(
            "Comma-separated order for simultaneous events "
            f"(default: {','.join(kind.label for kind in REFERENCE_TIE_BREAK)})."
        ),
    )
    parser.add_argument(
        "--max-time",
        type=int,
        default=None,
        help="Stop the simulation before any event later than this time.",
    )


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False, markup=False)],
        force=True,
    )


def _print_result(result: SimulationResult, console: Console) -> None:
    console.print(f"[bold]Policy:[/bold] {result.policy.title}")
    console.print(f"[bold]Transitions:[/bold] {len(result.trace)}  [bold]End time:[/bold] {result.end_time}")
    if result.truncated:
        console.print("[yellow]Run stopped at the --max-time ceiling.[/yellow]")
    elif not result.completed:
        stuck = ", ".join(str(pid) for pid in result.unterminated)
        console.print(f"[yellow]Never terminated:[/yellow] {stuck}")

    console.print()

    panel, time_marks = build_rich_gantt(build_timeline(result.trace))
    console.print(panel)
    if time_marks:
        console.print(time_marks)

    console.print()

    headers = ["PID", "Arrive", "Burst", "First run", "Complete", "Ready wait", "I/O", "Turnaround", "Response"]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        proc_table.add_column(h, justify="center" if h == "PID" else "right")

    for m in compute_process_metrics(result):
        proc_table.add_row(
            str(m.pid),
            str(m.arrival_time),
            str(m.total_burst),
            _cell(m.first_run),
            _cell(m.completion_time),
            str(m.ready_wait_time),
            str(m.io_time),
            _cell(m.turnaround_time),
            _cell(m.response_time),
        )

    console.print(proc_table)
    console.print()

    summary = summarize_process_metrics(compute_process_metrics(result))
    system = compute_system_metrics(result)

    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")
    sys_table.add_row("Avg ready wait", f"{summary['avg_ready_wait']:.2f}")
    sys_table.add_row("Avg turnaround", f"{summary['avg_turnaround']:.2f}")
    sys_table.add_row("Avg response", f"{summary['avg_response']:.2f}")
    sys_table.add_row("Throughput (proc/time)", f"{system.throughput:.3f}")
    sys_table.add_row("CPU utilization", f"{system.cpu_utilization*100:.1f}%")

    console.print(sys_table)


def _cell(value: Optional[int]) -> str:
    return "-" if value is None else str(value)


def _run(args: argparse.Namespace, console: Console) -> int:
    policy = get_policy(args.policy)
    tie_break = parse_tie_break(args.tie_break) if args.tie_break else REFERENCE_TIE_BREAK
    processes = load_workload(args.workload)
    output = Path(args.output or BATCH_FILES[policy][1])

    with open_trace(output, append=args.append) as writer:
        writer.write_header(policy)
        result = run_simulation(processes, policy, sink=writer, tie_break=tie_break, max_time=args.max_time)

    if not args.quiet:
        _print_result(result, console)
    console.print(f"{policy.name} simulation trace written to: {output}")
    return 0


def _compare(args: argparse.Namespace, console: Console) -> int:
    policies: List[Policy] = [get_policy(name) for name in args.policies]
    tie_break = parse_tie_break(args.tie_break) if args.tie_break else REFERENCE_TIE_BREAK
    processes = load_workload(args.workload)

    summary_table = Table(title=f"Policy comparison: {args.workload}", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Policy")
    summary_table.add_column("End time", justify="right")
    summary_table.add_column("Avg ready wait", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")
    summary_table.add_column("CPU utilization", justify="right")

    for policy in policies:
        result = run_simulation(processes, policy, tie_break=tie_break, max_time=args.max_time)
        summary = summarize_process_metrics(compute_process_metrics(result))
        system = compute_system_metrics(result)
        summary_table.add_row(
            policy.name,
            str(result.end_time),
            f"{summary['avg_ready_wait']:.2f}",
            f"{summary['avg_turnaround']:.2f}",
            f"{summary['avg_response']:.2f}",
            f"{system.cpu_utilization*100:.1f}%",
        )

    console.print(summary_table)
    return 0


def _batch(args: argparse.Namespace, console: Console) -> int:
    tie_break = parse_tie_break(args.tie_break) if args.tie_break else REFERENCE_TIE_BREAK
    input_dir = Path(args.input_dir)
    output_dir = Path(args.output_dir)

    for policy, (input_name, output_name) in BATCH_FILES.items():
        processes = load_workload(input_dir / input_name)
        logger.info("Finished reading %s (%d processes)", input_dir / input_name, len(processes))
        output = output_dir / output_name
        with open_trace(output) as writer:
            writer.write_header(policy)
            run_simulation(processes, policy, sink=writer, tie_break=tie_break, max_time=args.max_time)
        console.print(f"{policy.name} simulation trace written to: {output}")

    return 0


COMMANDS = {
    "run": _run,
    "compare": _compare,
    "batch": _batch,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    console = Console()

    try:
        return COMMANDS[args.command](args, console)
    except ValueError as exc:
        console.print(f"Error: {exc}", style="red", markup=False, soft_wrap=True)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
