from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Ensure repo root is on sys.path so this script can be executed directly
repo_root = Path(__file__).resolve().parents[2]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from cpu_scheduling_simulator.backend.engine import SchedulingEngine, SimulationConfig
from cpu_scheduling_simulator.backend.loader import load_processes
from cpu_scheduling_simulator.backend.schedulers import AgingWeights
from cpu_scheduling_simulator.backend.simulator import Scheduler
from cpu_scheduling_simulator.backend.visualizer import (
    comparison_frame,
    format_gantt_chart,
    format_results_table,
    plot_gantt,
    results_frame,
)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="CPU scheduling simulator")
    p.add_argument("--input", required=True, help="Process file: PID,Arrival,Burst[,Priority] per line")
    p.add_argument("--policy", type=str.upper, choices=list(Scheduler.ALL) + ["ALL"], default="ALL")
    p.add_argument("--quantum", type=int, default=2, help="Round Robin time quantum")
    p.add_argument("--aging-weight", type=float, default=AgingWeights.aging)
    p.add_argument("--burst-weight", type=float, default=AgingWeights.burst)
    p.add_argument("--priority-weight", type=float, default=AgingWeights.priority)
    p.add_argument("--out", type=str, default=None, help="Save the Gantt chart of the last run to this image path")
    p.add_argument("--csv", type=str, default=None, help="Save per-process results of the last run to this CSV path")
    p.add_argument("--verbose", "-v", action="store_true", help="Log scheduling decisions")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        procs = load_processes(args.input)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: could not read file '{args.input}': {e}")
        return 1
    if not procs:
        print(f"Warning: file '{args.input}' contains no valid process data.")
        return 1

    weights = AgingWeights(aging=args.aging_weight, burst=args.burst_weight, priority=args.priority_weight)
    engine = SchedulingEngine(SimulationConfig(policy=args.policy, time_quantum=args.quantum, weights=weights))
    results = engine.run_all(procs) if args.policy == "ALL" else [engine.run(procs)]

    for result in results:
        print(f"\n===== {Scheduler.LABELS[result.policy].upper()} =====")
        print(format_gantt_chart(result.timeline))
        print()
        print(format_results_table(result.processes, result.avg_waiting_time, result.avg_turnaround_time))
    if len(results) > 1:
        print("\n===== COMPARISON =====")
        print(comparison_frame(results).round(2).to_string())

    last = results[-1]
    try:
        if args.out:
            plot_gantt(last.timeline, args.out, title=f"Gantt Chart ({Scheduler.LABELS[last.policy]})")
            print(f"Saved plot to {args.out}")
        if args.csv:
            results_frame(last.processes).to_csv(args.csv, index=False)
            print(f"Saved results to {args.csv}")
    except OSError as e:
        print(f"Error: could not write output: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
