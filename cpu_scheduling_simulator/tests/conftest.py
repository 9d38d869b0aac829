import os
import sys

import matplotlib
import pytest

matplotlib.use("Agg")


def pytest_sessionstart(session):
    # Ensure project root is on sys.path so 'cpu_scheduling_simulator' can be imported
    here = os.path.dirname(os.path.abspath(__file__))
    project_root = os.path.abspath(os.path.join(here, os.pardir, os.pardir))
    if project_root not in sys.path:
        sys.path.insert(0, project_root)


@pytest.fixture
def sample_processes():
    """Mixed workload with an idle gap after P3."""
    from cpu_scheduling_simulator.backend.core import Process
    return [
        Process(pid=1, arrival_time=0, burst_time=4, priority=1),
        Process(pid=2, arrival_time=1, burst_time=3, priority=2),
        Process(pid=3, arrival_time=2, burst_time=1, priority=3),
        Process(pid=4, arrival_time=12, burst_time=2, priority=0),
        Process(pid=5, arrival_time=13, burst_time=5, priority=1),
    ]
