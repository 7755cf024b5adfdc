from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import replace
from typing import Any, Iterable, Optional

from . import evaluation, simulator, workload
from .errors import InvalidOperation
from .metrics import Metrics, calculate_metrics
from .policies import Algorithm, build_policy
from .policy import SchedulerDecision
from .process import Process
from .simulator import SimulationConfig, SimulationState

logger = logging.getLogger(__name__)

MetricsListener = Callable[[Metrics, str], None]


class Simulation:
    """
    Interactive driver around the step engine.

    Keeps a pristine copy of the loaded process set so that ``reset`` can
    replay from tick 0, and notifies listeners with fresh metrics after every
    tick, reset and comparison. Changing any scheduling setting resets the run.
    """

    def __init__(
        self,
        config: SimulationConfig | None = None,
        processes: Iterable[Process] | None = None,
    ) -> None:
        self.config = config or SimulationConfig()
        self._policy = build_policy(self.config)
        # Operator's own choice, kept apart from the value SRT forces.
        self._preemptive_choice: Optional[bool] = (
            None if self.config.algorithm.requires_preemption else self.config.preemptive
        )
        self._original: tuple[Process, ...] = ()
        self._state = SimulationState.initial(())
        self._listeners: list[MetricsListener] = []
        self._running = False
        self._comparison: Optional[dict[str, Metrics]] = None
        if processes is not None:
            self.load(processes)

    # -- process set -------------------------------------------------------

    def generate(self, count: int, *, seed: int | None = None) -> tuple[Process, ...]:
        return self.load(workload.random_processes(count, seed=seed))

    def load(self, processes: Iterable[Process]) -> tuple[Process, ...]:
        pristine = tuple(process.fresh() for process in processes)
        pids = [process.pid for process in pristine]
        if len(set(pids)) != len(pids):
            msg = "process ids must be unique"
            raise ValueError(msg)
        self._original = pristine
        self.reset()
        return self.processes

    # -- configuration -----------------------------------------------------

    def set_algorithm(self, algorithm: Algorithm | str) -> None:
        algorithm = Algorithm.parse(algorithm)
        if algorithm.requires_preemption:
            self._reconfigure(algorithm=algorithm, preemptive=True)
        else:
            self._reconfigure(algorithm=algorithm, preemptive=self._preemptive_choice)

    def set_time_quantum(self, time_quantum: int) -> None:
        self._reconfigure(time_quantum=time_quantum)

    def set_preemptive(self, preemptive: bool) -> None:
        self._preemptive_choice = preemptive
        self._reconfigure(preemptive=preemptive)

    def set_queue_count(self, queue_count: int) -> None:
        self._reconfigure(queue_count=queue_count)

    def _reconfigure(self, **changes: Any) -> None:
        self.config = replace(self.config, **changes)
        self._policy = build_policy(self.config)
        self.reset()

    # -- control -----------------------------------------------------------

    def reset(self) -> None:
        self.pause()
        self._state = SimulationState.initial(self._original)
        self._comparison = None
        logger.info("Reset %s simulation with %d processes", self.config.algorithm.value, len(self._original))
        self._notify(self.metrics, self.config.algorithm.value)

    def step(self) -> SchedulerDecision:
        self._require_processes()
        self._state, decision = simulator.step(self._state, self._policy)
        logger.debug(
            "t=%d %s selected %s",
            self._state.current_time - 1,
            self.config.algorithm.value,
            "idle" if decision.idle else f"P{decision.selected_pid}",
        )
        self._notify(self.metrics, self.config.algorithm.value)
        return decision

    def run(self) -> Metrics:
        """Step until every process has completed and return the final metrics."""

        self._require_processes()
        while not self.is_finished:
            self.step()
        return self.metrics

    def start(self, speed: float = 5.0) -> None:
        """Step ``speed`` ticks per second until all processes complete or ``pause`` is called."""

        if speed <= 0:
            msg = "speed must be strictly positive"
            raise ValueError(msg)
        self._require_processes()
        interval = 1.0 / speed
        self._running = True
        try:
            while self._running and not self.is_finished:
                self.step()
                if self.is_finished:
                    logger.info("All processes completed at t=%d", self.current_time)
                    break
                time.sleep(interval)
        finally:
            self._running = False

    def pause(self) -> None:
        self._running = False

    def compare(self) -> dict[str, Metrics]:
        self._require_processes()
        self.pause()
        self._comparison = evaluation.compare_algorithms(self._original)
        for name, result in self._comparison.items():
            self._notify(result, name)
        return dict(self._comparison)

    # -- observers ---------------------------------------------------------

    def add_listener(self, listener: MetricsListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: MetricsListener) -> None:
        self._listeners.remove(listener)

    def _notify(self, result: Metrics, algorithm: str) -> None:
        for listener in list(self._listeners):
            listener(result, algorithm)

    def _require_processes(self) -> None:
        if not self._original:
            msg = "no processes loaded; generate or load a process set first"
            raise InvalidOperation(msg)

    # -- views -------------------------------------------------------------

    @property
    def state(self) -> SimulationState:
        return self._state

    @property
    def processes(self) -> tuple[Process, ...]:
        return self._state.snapshot()

    @property
    def original_processes(self) -> tuple[Process, ...]:
        return tuple(process.clone() for process in self._original)

    @property
    def metrics(self) -> Metrics:
        return calculate_metrics(self._state.processes, self._state.current_time)

    @property
    def current_time(self) -> int:
        return self._state.current_time

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_finished(self) -> bool:
        return self._state.is_finished

    @property
    def comparison(self) -> Optional[dict[str, Metrics]]:
        return None if self._comparison is None else dict(self._comparison)
