from __future__ import annotations

from typing import List
from dataclasses import dataclass, field

from .core import Process
from .schedulers import AgingWeights
from .simulator import simulate, run_all, Scheduler, SimulationResult


@dataclass
class SimulationConfig:
    policy: str = Scheduler.RR
    time_quantum: int = 2
    weights: AgingWeights = field(default_factory=AgingWeights)


class SchedulingEngine:
    """Runs simulations with a fixed configuration.

    Holds the policy, quantum and aging weights so callers (the terminal,
    the CLI) can load processes from any source and run them repeatedly.
    """

    def __init__(self, config: SimulationConfig | None = None):
        self.config = config or SimulationConfig()

    def run(self, processes: List[Process], policy: str | None = None) -> SimulationResult:
        """Run one policy (the configured one unless ``policy`` is given)."""
        return simulate(
            processes,
            policy=policy or self.config.policy,
            time_quantum=self.config.time_quantum,
            weights=self.config.weights,
        )

    def run_all(self, processes: List[Process]) -> List[SimulationResult]:
        return run_all(processes, time_quantum=self.config.time_quantum, weights=self.config.weights)
