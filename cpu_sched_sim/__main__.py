from __future__ import annotations

import argparse
import logging
from typing import Sequence

from . import evaluation, workload
from .controller import Simulation
from .policies import Algorithm
from .simulator import SimulationConfig


def parse_arguments(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Simulate CPU scheduling on a random process set.")
    parser.add_argument("--processes", type=int, default=5, help="Number of processes to generate.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for process generation.")
    parser.add_argument(
        "--algorithm",
        type=str,
        default=Algorithm.FCFS.value,
        help="Scheduling algorithm: " + ", ".join(a.value for a in Algorithm) + ".",
    )
    parser.add_argument("--quantum", type=int, default=2, help="Round Robin time quantum (ticks).")
    parser.add_argument("--preemptive", action="store_true", help="Enable preemption for SJF and Priority.")
    parser.add_argument("--queues", type=int, default=3, help="Number of MLQ priority queues.")
    parser.add_argument("--compare", action="store_true", help="Compare all algorithms on the same process set.")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity.")
    return parser.parse_args(argv)


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def print_processes(simulation: Simulation) -> None:
    header_fmt = "{:<5} {:>7} {:>5} {:>8} {:>10} {:>7} {:>10}  {}"
    print(header_fmt.format("PID", "Arrival", "Burst", "Priority", "Completion", "Waiting", "Turnaround", "Segments"))
    for p in simulation.processes:
        segments = " ".join(f"[{s.start_time},{s.end_time})" for s in p.execution_history)
        print(
            header_fmt.format(
                f"P{p.pid}",
                p.arrival_time,
                p.burst_time,
                p.priority,
                p.completion_time if p.completion_time is not None else "-",
                p.waiting_time,
                p.turnaround_time if p.turnaround_time is not None else "-",
                segments,
            ),
        )


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_arguments(argv)
    configure_logging(args.verbose)

    processes = workload.random_processes(args.processes, seed=args.seed)

    if args.compare:
        results = evaluation.compare_algorithms(processes)
        print(f"Compared {len(results)} algorithms on {len(processes)} processes\n")
        header_fmt = "{:<12} {:>9} {:>9} {:>8} {:>10} {:>9}"
        row_fmt = "{:<12} {:>9.2f} {:>9.2f} {:>8.2f} {:>10.3f} {:>9d}"
        print(header_fmt.format("Algorithm", "AvgWait", "AvgTurn", "CPU%", "Throughput", "Switches"))
        for name, m in results.items():
            print(
                row_fmt.format(
                    name,
                    m.avg_waiting_time,
                    m.avg_turnaround_time,
                    m.cpu_utilization,
                    m.throughput,
                    m.context_switches,
                ),
            )
        return

    config = SimulationConfig(
        algorithm=args.algorithm,
        time_quantum=args.quantum,
        preemptive=True if args.preemptive else None,
        queue_count=args.queues,
    )
    simulation = Simulation(config=config, processes=processes)
    m = simulation.run().rounded()

    print(f"Simulated {len(processes)} processes with {config.algorithm.value} until t={simulation.current_time}\n")
    print_processes(simulation)
    print()
    print(f"Average waiting time:    {m.avg_waiting_time}")
    print(f"Average turnaround time: {m.avg_turnaround_time}")
    print(f"CPU utilization:         {m.cpu_utilization}%")
    print(f"Throughput:              {m.throughput}")
    print(f"Context switches:        {m.context_switches}")


if __name__ == "__main__":
    main()
