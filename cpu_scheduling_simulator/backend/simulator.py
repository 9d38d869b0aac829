from __future__ import annotations

import logging
from typing import List, Optional, Tuple
from dataclasses import dataclass

from .core import Process, clone_processes, reset_processes
from .schedulers import AgingFCFSScheduler, AgingWeights, BaseScheduler, RoundRobinScheduler, SJFScheduler
from .utils import RunSummary, Timeline, compute_metrics, summarize

logger = logging.getLogger(__name__)


@dataclass
class SimulationResult:
    policy: str
    processes: List[Process]
    timeline: Timeline
    avg_waiting_time: Optional[float]
    avg_turnaround_time: Optional[float]
    summary: RunSummary


class Scheduler:
    RR = "RR"      # preemptive Round Robin
    FCFS = "FCFS"  # non-preemptive FCFS with aging
    SJF = "SJF"    # non-preemptive Shortest Job First

    ALL = (RR, FCFS, SJF)

    LABELS = {
        RR: "Round Robin",
        FCFS: "Modified FCFS with Aging",
        SJF: "Shortest Job First",
    }


def make_scheduler(
    policy: str,
    time_quantum: int = 2,
    weights: Optional[AgingWeights] = None,
) -> BaseScheduler:
    policy = policy.upper()
    if policy == Scheduler.RR:
        return RoundRobinScheduler(time_quantum)
    if policy == Scheduler.FCFS:
        return AgingFCFSScheduler(weights)
    if policy == Scheduler.SJF:
        return SJFScheduler()
    raise ValueError(f"Unknown scheduling policy: {policy!r} (expected one of {', '.join(Scheduler.ALL)})")


def run(scheduler: BaseScheduler, processes: List[Process]) -> Tuple[Timeline, List[Process]]:
    """Run one strategy over a private copy of ``processes``.

    The input list and its records are left untouched; the returned list
    holds the working copies with completion data filled in.
    """
    working = clone_processes(processes)
    reset_processes(working)
    timeline = Timeline()
    scheduler.run(working, timeline)
    return timeline, working


def simulate(
    processes: List[Process],
    policy: str = Scheduler.RR,
    time_quantum: int = 2,
    weights: Optional[AgingWeights] = None,
) -> SimulationResult:
    scheduler = make_scheduler(policy, time_quantum=time_quantum, weights=weights)
    timeline, working = run(scheduler, processes)

    avg_wait: Optional[float] = None
    avg_tat: Optional[float] = None
    if working:
        avg_wait, avg_tat = compute_metrics(working)
    logger.debug("%s finished: %d segments, avg waiting=%s, avg turnaround=%s",
                 scheduler.name, len(timeline), avg_wait, avg_tat)

    return SimulationResult(
        policy=scheduler.name,
        processes=working,
        timeline=timeline,
        avg_waiting_time=avg_wait,
        avg_turnaround_time=avg_tat,
        summary=summarize(timeline, working),
    )


def run_all(
    processes: List[Process],
    time_quantum: int = 2,
    weights: Optional[AgingWeights] = None,
) -> List[SimulationResult]:
    """Run every policy on its own copy of ``processes``."""
    return [simulate(processes, policy, time_quantum=time_quantum, weights=weights) for policy in Scheduler.ALL]
