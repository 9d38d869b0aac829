"""
Core data structures for the CPU scheduling simulator.
Includes the Process record, its lifecycle helpers and the ready queue.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, replace
from enum import Enum
from typing import Deque, Iterable, List, Optional, Set


class ProcessState(Enum):
    """Process states in the simulation."""
    NEW = "NEW"
    READY = "READY"
    RUNNING = "RUNNING"
    TERMINATED = "TERMINATED"


@dataclass
class Process:
    """Process record: static inputs plus per-run simulation state."""
    pid: int
    arrival_time: int
    burst_time: int
    priority: int = 0  # lower number = more urgent
    remaining_time: Optional[int] = None
    completion_time: int = 0
    turnaround_time: int = 0
    waiting_time: int = 0
    started: bool = False
    completed: bool = False
    state: ProcessState = ProcessState.NEW

    def __post_init__(self):
        """Initialize derived attributes."""
        self.remaining_time = self.burst_time if self.remaining_time is None else self.remaining_time


def reset_processes(processes: Iterable[Process]) -> None:
    """Restore every record's run state without touching its static inputs."""
    for p in processes:
        p.remaining_time = p.burst_time
        p.completion_time = 0
        p.turnaround_time = 0
        p.waiting_time = 0
        p.started = False
        p.completed = False
        p.state = ProcessState.NEW


def clone_processes(processes: Iterable[Process]) -> List[Process]:
    """Return an independent copy of ``processes``."""
    return [replace(p) for p in processes]


def sort_by_arrival(processes: Iterable[Process]) -> List[Process]:
    return sorted(processes, key=lambda p: p.arrival_time)


def sort_by_burst(processes: Iterable[Process]) -> List[Process]:
    return sorted(processes, key=lambda p: p.burst_time)


def sort_by_priority(processes: Iterable[Process]) -> List[Process]:
    return sorted(processes, key=lambda p: p.priority)


class ReadyQueue:
    """FIFO queue of process indices with O(1) membership checks."""

    def __init__(self):
        self._items: Deque[int] = deque()
        self._members: Set[int] = set()

    def push(self, index: int) -> bool:
        """Append ``index`` unless it is already queued. Returns True if added."""
        if index in self._members:
            return False
        self._items.append(index)
        self._members.add(index)
        return True

    def pop(self) -> Optional[int]:
        """Remove and return the head index, or None when empty."""
        if not self._items:
            return None
        index = self._items.popleft()
        self._members.discard(index)
        return index

    def is_empty(self) -> bool:
        return len(self._items) == 0

    def __contains__(self, index: object) -> bool:
        return index in self._members

    def __len__(self) -> int:
        return len(self._items)
