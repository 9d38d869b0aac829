from .core import Process, ProcessState, ReadyQueue, clone_processes, reset_processes
from .schedulers import AgingFCFSScheduler, AgingWeights, RoundRobinScheduler, SJFScheduler
from .simulator import Scheduler, SimulationResult, run, run_all, simulate
from .utils import IDLE, Timeline, TimelineSegment, compute_metrics

__all__ = [
    "Process",
    "ProcessState",
    "ReadyQueue",
    "clone_processes",
    "reset_processes",
    "AgingFCFSScheduler",
    "AgingWeights",
    "RoundRobinScheduler",
    "SJFScheduler",
    "Scheduler",
    "SimulationResult",
    "run",
    "run_all",
    "simulate",
    "IDLE",
    "Timeline",
    "TimelineSegment",
    "compute_metrics",
]
