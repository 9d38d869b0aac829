"""
Scheduling strategies: preemptive Round Robin, non-preemptive
Aging-Weighted FCFS and non-preemptive Shortest Job First.

Each strategy works on a list of already cloned and reset processes and
records CPU occupancy into a Timeline. Processes are addressed by their
index in that list, so duplicate pids never confuse the bookkeeping.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from .core import Process, ProcessState, ReadyQueue
from .utils import Timeline

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AgingWeights:
    """Tunable weights for the Aging-Weighted FCFS score."""
    aging: float = 2.0
    burst: float = 0.5
    priority: float = 3.0
    tolerance: float = 0.001


class BaseScheduler(ABC):
    """Abstract base class for all schedulers."""

    name: str = ""

    @abstractmethod
    def run(self, processes: List[Process], timeline: Timeline) -> None:
        """Simulate ``processes`` to completion, appending to ``timeline``."""

    @staticmethod
    def _next_arrival(processes: List[Process], now: int) -> Optional[int]:
        """Earliest arrival after ``now`` among unfinished processes."""
        pending = [p.arrival_time for p in processes if not p.completed and p.arrival_time > now]
        return min(pending) if pending else None

    def _idle_until_next_arrival(self, processes: List[Process], timeline: Timeline, now: int) -> Optional[int]:
        """Record an idle gap up to the next arrival and return the new time."""
        next_arrival = self._next_arrival(processes, now)
        if next_arrival is None:
            return None
        logger.debug("%s: CPU idle from t=%d to t=%d", self.name, now, next_arrival)
        timeline.add_idle(now, next_arrival)
        return next_arrival

    @staticmethod
    def _complete(pcb: Process, now: int) -> None:
        pcb.completed = True
        pcb.completion_time = now
        pcb.state = ProcessState.TERMINATED

    def _run_to_completion(self, pcb: Process, timeline: Timeline, now: int) -> int:
        """Dispatch ``pcb`` non-preemptively; returns the time it finishes."""
        pcb.started = True
        pcb.state = ProcessState.RUNNING
        end = now + pcb.remaining_time
        logger.debug("%s: dispatch P%s at t=%d until t=%d", self.name, pcb.pid, now, end)
        timeline.append_or_merge(pcb.pid, now, end)
        pcb.remaining_time = 0
        self._complete(pcb, end)
        return end


class RoundRobinScheduler(BaseScheduler):
    """Preemptive Round Robin with a fixed time quantum.

    The clock starts at the earliest arrival. Processes that arrive while a
    slice is running join the queue ahead of the preempted process.
    """

    name = "RR"

    def __init__(self, time_quantum: int = 2):
        if time_quantum <= 0:
            logger.warning("Invalid time quantum %r, using 1", time_quantum)
            time_quantum = 1
        self.time_quantum = time_quantum

    def run(self, processes: List[Process], timeline: Timeline) -> None:
        n = len(processes)
        if n == 0:
            return

        queue = ReadyQueue()
        now = min(p.arrival_time for p in processes)
        finished = 0

        while finished < n:
            for i, p in enumerate(processes):
                if not p.completed and p.arrival_time <= now and i not in queue:
                    queue.push(i)
                    p.state = ProcessState.READY

            if queue.is_empty():
                next_time = self._idle_until_next_arrival(processes, timeline, now)
                if next_time is None:
                    break
                now = next_time
                continue

            idx = queue.pop()
            current = processes[idx]
            current.started = True
            current.state = ProcessState.RUNNING

            run_for = min(current.remaining_time, self.time_quantum)
            slice_start = now
            now += run_for
            current.remaining_time -= run_for
            logger.debug("RR: P%s runs t=%d..%d (remaining %d)", current.pid, slice_start, now, current.remaining_time)
            timeline.append_or_merge(current.pid, slice_start, now)

            # Arrivals during the slice go ahead of the preempted process.
            arrived = [
                i for i, p in enumerate(processes)
                if i != idx and not p.completed and slice_start < p.arrival_time <= now and i not in queue
            ]
            for i in sorted(arrived, key=lambda i: processes[i].arrival_time):
                queue.push(i)
                processes[i].state = ProcessState.READY

            if current.remaining_time == 0:
                self._complete(current, now)
                finished += 1
            else:
                current.state = ProcessState.READY
                queue.push(idx)


class AgingFCFSScheduler(BaseScheduler):
    """Non-preemptive FCFS where a waiting process gains score as it ages.

    score = wait * aging - burst * burst_weight - priority * priority_weight
    The highest score runs next. Scores within ``tolerance`` of each other are
    treated as equal and the earlier arrival wins.
    """

    name = "FCFS"

    def __init__(self, weights: Optional[AgingWeights] = None):
        self.weights = weights or AgingWeights()

    def score(self, pcb: Process, now: int) -> float:
        w = self.weights
        wait = now - pcb.arrival_time
        return wait * w.aging - pcb.burst_time * w.burst - pcb.priority * w.priority

    def select(self, processes: List[Process], now: int) -> Optional[int]:
        """Index of the process to dispatch at ``now``, or None if none has arrived."""
        tol = self.weights.tolerance
        best_idx: Optional[int] = None
        best_score = 0.0
        for i, p in enumerate(processes):
            if p.completed or p.arrival_time > now:
                continue
            s = self.score(p, now)
            if best_idx is None or s > best_score + tol:
                best_idx, best_score = i, s
            elif abs(s - best_score) <= tol and p.arrival_time < processes[best_idx].arrival_time:
                best_idx, best_score = i, s
        return best_idx

    def run(self, processes: List[Process], timeline: Timeline) -> None:
        now = 0
        finished = 0
        while finished < len(processes):
            idx = self.select(processes, now)
            if idx is None:
                next_time = self._idle_until_next_arrival(processes, timeline, now)
                if next_time is None:
                    break
                now = next_time
                continue
            now = self._run_to_completion(processes[idx], timeline, now)
            finished += 1


class SJFScheduler(BaseScheduler):
    """Non-preemptive Shortest Job First (ties: earlier arrival)."""

    name = "SJF"

    def select(self, processes: List[Process], now: int) -> Optional[int]:
        ready = [i for i, p in enumerate(processes) if not p.completed and p.arrival_time <= now]
        if not ready:
            return None
        return min(ready, key=lambda i: (processes[i].burst_time, processes[i].arrival_time))

    def run(self, processes: List[Process], timeline: Timeline) -> None:
        now = 0
        finished = 0
        while finished < len(processes):
            idx = self.select(processes, now)
            if idx is None:
                next_time = self._idle_until_next_arrival(processes, timeline, now)
                if next_time is None:
                    break
                now = next_time
                continue
            now = self._run_to_completion(processes[idx], timeline, now)
            finished += 1
