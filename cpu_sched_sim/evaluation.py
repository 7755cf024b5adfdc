from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from . import metrics
from .errors import InvalidOperation
from .policies import Algorithm, build_policy
from .process import Process
from .simulator import SimulationConfig, SimulationState, run_to_completion

logger = logging.getLogger(__name__)

COMPARED_ALGORITHMS: tuple[Algorithm, ...] = (
    Algorithm.FCFS,
    Algorithm.SJF,
    Algorithm.SRT,
    Algorithm.PRIORITY,
    Algorithm.ROUND_ROBIN,
    Algorithm.HRRN,
    Algorithm.MLQ,
)


@dataclass(slots=True)
class EvaluationOutcome:
    algorithm: Algorithm
    final_state: SimulationState
    aggregate: metrics.Metrics

    @property
    def name(self) -> str:
        return self.algorithm.value


def evaluate_algorithm(
    algorithm: Algorithm | str,
    processes: Sequence[Process],
    *,
    config: Optional[SimulationConfig] = None,
) -> EvaluationOutcome:
    """Run one algorithm to completion on a private copy of ``processes``."""

    if not processes:
        msg = "cannot evaluate an empty process set"
        raise InvalidOperation(msg)
    config = config or SimulationConfig.for_comparison(algorithm)
    policy = build_policy(config)
    state = run_to_completion(SimulationState.initial(processes), policy)
    aggregate = metrics.calculate_metrics(state.processes, state.current_time)
    logger.debug("%s finished at t=%d: %s", config.algorithm.value, state.current_time, aggregate)
    return EvaluationOutcome(algorithm=config.algorithm, final_state=state, aggregate=aggregate)


def evaluate_suite(
    processes: Sequence[Process],
    algorithms: Sequence[Algorithm] = COMPARED_ALGORITHMS,
) -> list[EvaluationOutcome]:
    return [evaluate_algorithm(algorithm, processes) for algorithm in algorithms]


def compare_algorithms(processes: Sequence[Process]) -> dict[str, metrics.Metrics]:
    """Metrics for every compared algorithm, keyed by algorithm identifier."""

    outcomes = evaluate_suite(processes)
    logger.info("Compared %d algorithms over %d processes", len(outcomes), len(processes))
    return {outcome.name: outcome.aggregate for outcome in outcomes}
