from __future__ import annotations

from typing import List, Optional, Dict, Sequence
import os

import matplotlib.pyplot as plt
import pandas as pd

from .core import Process
from .utils import Timeline

IDLE_COLOR = "#bbbbbb"

RESULT_COLUMNS = ["PID", "Arrival", "Burst", "Priority", "Completion", "Turnaround", "Waiting"]


def ensure_dir(path: str) -> None:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)


def _block_width(duration: int) -> int:
    return max(4, duration * 2)


def format_gantt_chart(timeline: Timeline) -> str:
    """Render the timeline as a text Gantt chart with time markers."""
    if not timeline.segments:
        return "No Gantt chart data to display."

    widths = [_block_width(seg.duration) for seg in timeline]
    border = " " + "".join("-" * w + " " for w in widths)

    labels = "|"
    for seg, w in zip(timeline, widths):
        if seg.is_idle:
            labels += f"{'IDLE':>{w}}|"
        else:
            labels += f" P{seg.pid:<{w - 2}}|"

    markers = f"{timeline.segments[0].start}"
    for seg, w in zip(timeline, widths):
        markers += f"{seg.end:>{w + 1}}"

    return "\n".join(["===== GANTT CHART =====", "", border, labels, border, markers])


def format_results_table(
    processes: Sequence[Process],
    avg_waiting: Optional[float] = None,
    avg_turnaround: Optional[float] = None,
) -> str:
    sep = "+-----+----------+-------+----------+------------+------------+----------+"
    lines = [
        sep,
        "| PID |  Arrival | Burst | Priority | Completion | Turnaround |  Waiting |",
        sep,
    ]
    for p in processes:
        lines.append(
            f"| {p.pid:>3} | {p.arrival_time:>8} | {p.burst_time:>5} | {p.priority:>8} "
            f"| {p.completion_time:>10} | {p.turnaround_time:>10} | {p.waiting_time:>8} |"
        )
    lines.append(sep)
    if avg_waiting is not None and avg_turnaround is not None:
        lines.append("")
        lines.append(f"Average Waiting Time: {avg_waiting:.2f}")
        lines.append(f"Average Turnaround Time: {avg_turnaround:.2f}")
    return "\n".join(lines)


def format_process_table(processes: Sequence[Process]) -> str:
    if not processes:
        return "No processes loaded."
    sep = "+-----+----------+-------+----------+"
    lines = ["===== LOADED PROCESSES =====", sep, "| PID |  Arrival | Burst | Priority |", sep]
    for p in processes:
        lines.append(f"| {p.pid:>3} | {p.arrival_time:>8} | {p.burst_time:>5} | {p.priority:>8} |")
    lines.append(sep)
    lines.append(f"Total: {len(processes)} processes")
    return "\n".join(lines)


def results_frame(processes: Sequence[Process]) -> pd.DataFrame:
    rows = [
        [p.pid, p.arrival_time, p.burst_time, p.priority, p.completion_time, p.turnaround_time, p.waiting_time]
        for p in processes
    ]
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


def comparison_frame(results) -> pd.DataFrame:
    """One row per SimulationResult, indexed by policy name."""
    df = pd.DataFrame([
        {
            "policy": r.policy,
            "avg_waiting": r.avg_waiting_time,
            "avg_turnaround": r.avg_turnaround_time,
            "makespan": r.summary.makespan,
            "cpu_utilization": r.summary.cpu_utilization,
            "throughput": r.summary.throughput,
        }
        for r in results
    ])
    return df.set_index("policy") if not df.empty else df


def plot_gantt(timeline: Timeline, out_path: Optional[str] = None, title: str = "Gantt Chart") -> None:
    pids: List[int] = sorted({seg.pid for seg in timeline if not seg.is_idle})
    has_idle = any(seg.is_idle for seg in timeline)
    rows: List[str] = [f"P{pid}" for pid in pids] + (["IDLE"] if has_idle else [])
    y_positions: Dict[str, int] = {label: i for i, label in enumerate(rows)}

    fig, ax = plt.subplots(figsize=(12, 2 + 0.4 * max(1, len(rows))))
    cmap = plt.get_cmap("tab20")
    colors = {pid: cmap(i % 20) for i, pid in enumerate(pids)}

    for seg in timeline:
        if seg.is_idle:
            label, color = "IDLE", IDLE_COLOR
        else:
            label, color = f"P{seg.pid}", colors[seg.pid]
        ax.barh(y_positions[label], seg.duration, left=seg.start, color=color, edgecolor="black", alpha=0.9)

    ax.set_yticks(list(range(len(rows))))
    ax.set_yticklabels(rows)
    ax.invert_yaxis()
    ax.set_xlabel("Time")
    ax.set_title(title)
    ax.grid(True, axis="x", linestyle=":", alpha=0.5)
    fig.tight_layout()

    if out_path:
        try:
            ensure_dir(out_path)
            fig.savefig(out_path, dpi=150)
        finally:
            plt.close(fig)
    else:
        plt.show()
