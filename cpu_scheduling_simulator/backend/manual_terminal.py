from __future__ import annotations

import shlex
from typing import List, Optional
from colorama import Fore, Style, init as colorama_init

from .core import Process, sort_by_arrival
from .engine import SchedulingEngine, SimulationConfig
from .loader import load_processes
from .simulator import Scheduler, SimulationResult
from .visualizer import comparison_frame, format_gantt_chart, format_process_table, format_results_table, plot_gantt, results_frame


class ManualTerminal:
    def __init__(self, config: Optional[SimulationConfig] = None) -> None:
        colorama_init(autoreset=True)
        self.engine = SchedulingEngine(config)
        self.processes: List[Process] = []
        self.last_result: Optional[SimulationResult] = None

    def prompt(self) -> None:
        print(Fore.CYAN + "CPU Scheduling Simulator. Type 'help' for commands.")
        while True:
            try:
                raw = input(Fore.GREEN + "> ")
            except (EOFError, KeyboardInterrupt):
                print()
                break
            if not raw.strip():
                continue
            try:
                self.handle_command(raw)
            except SystemExit:
                print("Exiting program. Goodbye!")
                break

    def handle_command(self, raw: str) -> None:
        try:
            parts = shlex.split(raw)
        except ValueError as e:
            print(Fore.RED + f"Parse error: {e}")
            return
        if not parts:
            return
        cmd, *args = parts
        cmd = cmd.lower()
        if cmd == "help":
            self._help()
        elif cmd in ("load", "reload"):
            self._load(args)
        elif cmd == "add":
            self._add(args)
        elif cmd == "list":
            self._list()
        elif cmd == "run":
            self._run(args)
        elif cmd == "quantum":
            self._quantum(args)
        elif cmd == "plot":
            self._plot(args)
        elif cmd == "export":
            self._export(args)
        elif cmd == "exit" or cmd == "quit":
            raise SystemExit(0)
        else:
            print(Fore.YELLOW + "Unknown command. Type 'help'.")

    def _help(self) -> None:
        print("Commands:")
        print("  load <file>                               load processes (PID,Arrival,Burst[,Priority])")
        print("  add <pid> <arrival> <burst> [priority]")
        print("  list")
        print("  run rr|fcfs|sjf|all                       fcfs = modified FCFS with aging")
        print(f"  quantum <q>                               Round Robin quantum (now {self.engine.config.time_quantum})")
        print("  plot <path>                               save last Gantt chart as an image")
        print("  export <path>                             save last results as CSV")
        print("  exit")

    def _load(self, args: List[str]) -> None:
        if not args:
            print(Fore.RED + "Usage: load <file>")
            return
        try:
            procs = load_processes(args[0])
        except (OSError, UnicodeDecodeError) as e:
            print(Fore.RED + f"Error: could not read file '{args[0]}': {e}")
            return
        self.processes = procs
        if procs:
            print(Fore.CYAN + f"Successfully loaded {len(procs)} processes from '{args[0]}'")
        else:
            print(Fore.YELLOW + f"Warning: file '{args[0]}' contains no valid process data.")

    def _add(self, args: List[str]) -> None:
        if len(args) < 3:
            print(Fore.RED + "Usage: add <pid> <arrival> <burst> [priority]")
            return
        try:
            pid = int(args[0])
            arrival = int(args[1])
            burst = int(args[2])
            priority = int(args[3]) if len(args) >= 4 else 0
        except ValueError:
            print(Fore.RED + "Invalid numeric values")
            return
        if arrival < 0 or burst <= 0:
            print(Fore.RED + "Arrival must be >= 0 and burst must be > 0")
            return
        if any(p.pid == pid for p in self.processes):
            print(Fore.RED + f"Process {pid} already exists")
            return
        self.processes = sort_by_arrival(self.processes + [Process(pid=pid, arrival_time=arrival, burst_time=burst, priority=priority)])
        print(Fore.CYAN + f"Process {pid} added: arrival={arrival}, burst={burst}, priority={priority}")

    def _list(self) -> None:
        print(format_process_table(self.processes))

    def _run(self, args: List[str]) -> None:
        if not self.processes:
            print(Fore.RED + "Error: no processes loaded. Use 'load <file>' first.")
            return
        which = (args[0] if args else self.engine.config.policy).upper()
        if which == "ALL":
            results = self.engine.run_all(self.processes)
        else:
            try:
                results = [self.engine.run(self.processes, policy=which)]
            except ValueError as e:
                print(Fore.RED + str(e))
                return

        for result in results:
            self._show(result)
        if len(results) > 1:
            print(Style.BRIGHT + "\n===== COMPARISON =====")
            print(comparison_frame(results).round(2).to_string())
        self.last_result = results[-1]

    def _show(self, result: SimulationResult) -> None:
        print(Style.BRIGHT + f"\n===== {Scheduler.LABELS[result.policy].upper()} =====")
        print(format_gantt_chart(result.timeline))
        print()
        print(format_results_table(result.processes, result.avg_waiting_time, result.avg_turnaround_time))
        s = result.summary
        print(f"CPU utilization: {s.cpu_utilization:.2f}%, Throughput: {s.throughput:.3f} processes/unit")

    def _quantum(self, args: List[str]) -> None:
        try:
            q = int(args[0])
        except (IndexError, ValueError):
            print(Fore.RED + "Usage: quantum <positive integer>")
            return
        if q <= 0:
            print(Fore.YELLOW + "Quantum must be positive, using 1")
            q = 1
        self.engine.config.time_quantum = q
        print(Fore.CYAN + f"Time quantum set to {q}")

    def _plot(self, args: List[str]) -> None:
        if not self.last_result:
            print("No simulation yet")
            return
        if not args:
            print(Fore.RED + "Usage: plot <path>")
            return
        r = self.last_result
        try:
            plot_gantt(r.timeline, args[0], title=f"Gantt Chart ({Scheduler.LABELS[r.policy]})")
        except OSError as e:
            print(Fore.RED + f"Error: could not save plot to '{args[0]}': {e}")
            return
        print(Fore.CYAN + f"Saved plot to {args[0]}")

    def _export(self, args: List[str]) -> None:
        if not self.last_result:
            print("No simulation yet")
            return
        if not args:
            print(Fore.RED + "Usage: export <path>")
            return
        try:
            results_frame(self.last_result.processes).to_csv(args[0], index=False)
        except OSError as e:
            print(Fore.RED + f"Error: could not save results to '{args[0]}': {e}")
            return
        print(Fore.CYAN + f"Saved results to {args[0]}")


def main() -> None:
    ManualTerminal().prompt()


if __name__ == "__main__":
    main()
