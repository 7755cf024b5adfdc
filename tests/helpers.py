from __future__ import annotations

from cpu_sched_sim import SimulationConfig, SimulationState, build_policy, run_to_completion
from cpu_sched_sim.workload import from_rows


def run_rows(rows, algorithm, **config):
    """Run ``rows`` of ``(arrival, burst[, priority])`` to completion and return the final state."""

    policy = build_policy(SimulationConfig(algorithm=algorithm, **config))
    return run_to_completion(SimulationState.initial(from_rows(rows)), policy)


def by_pid(state):
    return {p.pid: p for p in state.processes}


def segments(process):
    return [(s.start_time, s.end_time) for s in process.execution_history]
