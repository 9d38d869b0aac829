from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import List, Dict, Optional, Any, Iterator, Tuple, Sequence
import json
import csv

from .core import Process


# Timeline subject used when the CPU has nothing to run.
IDLE = None


@dataclass
class TimelineSegment:
    pid: Optional[int]
    start: int
    end: int

    @property
    def duration(self) -> int:
        return self.end - self.start

    @property
    def is_idle(self) -> bool:
        return self.pid is IDLE


class Timeline:
    """Append-only sequence of execution and idle segments (the Gantt chart).

    Consecutive appends for the same subject that touch in time are merged
    into a single segment, so a process that keeps the CPU across several
    quanta shows up as one block.
    """

    def __init__(self) -> None:
        self.segments: List[TimelineSegment] = []

    def append_or_merge(self, pid: Optional[int], start: int, end: int) -> None:
        if start > end:
            raise ValueError(f"segment ends before it starts: [{start}, {end})")
        if start == end:
            return
        if self.segments:
            last = self.segments[-1]
            if start < last.end:
                raise ValueError(f"segment starting at {start} overlaps previous segment ending at {last.end}")
            if last.pid == pid and last.end == start:
                last.end = end
                return
        self.segments.append(TimelineSegment(pid, start, end))

    def add_idle(self, start: int, end: int) -> None:
        self.append_or_merge(IDLE, start, end)

    @property
    def start_time(self) -> Optional[int]:
        return self.segments[0].start if self.segments else None

    @property
    def end_time(self) -> Optional[int]:
        return self.segments[-1].end if self.segments else None

    def segments_for(self, pid: int) -> List[TimelineSegment]:
        return [seg for seg in self.segments if seg.pid == pid]

    def to_records(self) -> List[Dict[str, Any]]:
        return [asdict(seg) for seg in self.segments]

    def export_json(self, path: str) -> None:
        with open(path, "w", encoding="utf-8") as f:
            json.dump({"timeline": self.to_records()}, f, indent=2)

    def export_csv(self, path: str) -> None:
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=["pid", "start", "end"])
            writer.writeheader()
            for row in self.to_records():
                writer.writerow(row)

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[TimelineSegment]:
        return iter(self.segments)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Timeline):
            return NotImplemented
        return self.segments == other.segments


def compute_metrics(processes: Sequence[Process]) -> Tuple[float, float]:
    """Fill in turnaround/waiting time for every process and return the averages.

    Values are recomputed from ``completion_time`` each call, so calling this
    twice gives the same result. Every process is expected to be completed;
    the average over an empty set is undefined and callers must not ask for it.
    """
    total_wt = 0
    total_tat = 0
    for p in processes:
        p.turnaround_time = p.completion_time - p.arrival_time
        p.waiting_time = p.turnaround_time - p.burst_time
        total_wt += p.waiting_time
        total_tat += p.turnaround_time
    n = len(processes)
    return total_wt / n, total_tat / n


@dataclass
class RunSummary:
    makespan: int
    cpu_busy_time: int
    idle_time: int
    cpu_utilization: float
    throughput: float


def summarize(timeline: Timeline, processes: Sequence[Process]) -> RunSummary:
    """System-wide figures derived from a finished run's timeline."""
    busy = sum(seg.duration for seg in timeline if not seg.is_idle)
    idle = sum(seg.duration for seg in timeline if seg.is_idle)
    makespan = (timeline.end_time - timeline.start_time) if timeline.segments else 0
    completed = len([p for p in processes if p.completed])
    if makespan <= 0:
        return RunSummary(makespan=0, cpu_busy_time=busy, idle_time=idle, cpu_utilization=0.0, throughput=0.0)
    return RunSummary(
        makespan=makespan,
        cpu_busy_time=busy,
        idle_time=idle,
        cpu_utilization=busy / makespan * 100.0,
        throughput=completed / makespan,
    )
