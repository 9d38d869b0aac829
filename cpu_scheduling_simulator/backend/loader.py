"""
Process file loading.

Input lines look like ``PID,Arrival_Time,Burst_Time[,Priority]``. Lines that
do not start with three integers (headers, comments, blanks) are ignored.
"""

from __future__ import annotations

import csv
import logging
from typing import List, Optional, Sequence

from .core import Process, sort_by_arrival

logger = logging.getLogger(__name__)


def parse_process_row(fields: Sequence[str]) -> Optional[Process]:
    """Build a Process from one CSV row, or None if it is not a process row."""
    values: List[int] = []
    for raw in list(fields)[:4]:
        try:
            values.append(int(raw.strip()))
        except ValueError:
            break
    if len(values) < 3:
        return None
    pid, arrival, burst = values[:3]
    priority = values[3] if len(values) > 3 else 0
    return Process(pid=pid, arrival_time=arrival, burst_time=burst, priority=priority)


def load_processes(path: str) -> List[Process]:
    """Read processes from ``path`` and return them sorted by arrival time.

    Rows with a negative arrival, a non-positive burst or an already seen
    pid are skipped with a warning. OSError from opening the file propagates.
    """
    procs: List[Process] = []
    seen = set()
    with open(path, newline='', encoding='utf-8') as f:
        reader = csv.reader(f)
        for line_no, row in enumerate(reader, start=1):
            proc = parse_process_row(row)
            if proc is None:
                if any(cell.strip() for cell in row):
                    logger.debug("%s:%d: not a process row, skipped", path, line_no)
                continue
            if proc.arrival_time < 0:
                logger.warning("%s:%d: P%d has negative arrival time, skipped", path, line_no, proc.pid)
                continue
            if proc.burst_time <= 0:
                logger.warning("%s:%d: P%d has non-positive burst time, skipped", path, line_no, proc.pid)
                continue
            if proc.pid in seen:
                logger.warning("%s:%d: duplicate pid %d, skipped", path, line_no, proc.pid)
                continue
            seen.add(proc.pid)
            procs.append(proc)
    logger.info("Loaded %d processes from %s", len(procs), path)
    return sort_by_arrival(procs)
