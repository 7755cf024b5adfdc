from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Sequence

from .errors import ConfigurationConflict, InvalidOperation
from .policies import Algorithm
from .policy import SchedulerDecision, SelectionPolicy, find_process
from .process import Process, ProcessStatus

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SimulationConfig:
    algorithm: Algorithm = Algorithm.FCFS
    time_quantum: int = 2
    preemptive: Optional[bool] = None
    queue_count: int = 3

    def __post_init__(self) -> None:
        self.algorithm = Algorithm.parse(self.algorithm)
        if self.time_quantum < 1:
            msg = "time_quantum must be at least 1"
            raise ValueError(msg)
        if self.queue_count < 1:
            msg = "queue_count must be at least 1"
            raise ValueError(msg)
        if self.preemptive is None:
            self.preemptive = self.algorithm.requires_preemption
        elif not self.preemptive and self.algorithm.requires_preemption:
            warnings.warn(
                f"{self.algorithm.value} is always preemptive; ignoring preemptive=False",
                ConfigurationConflict,
                stacklevel=3,
            )
            self.preemptive = True

    @classmethod
    def for_comparison(cls, algorithm: Algorithm | str) -> SimulationConfig:
        """Fixed defaults used when every algorithm is run against the same process set."""

        return cls(algorithm=algorithm)


@dataclass(frozen=True, slots=True)
class StepRecord:
    """What happened during one tick, kept for timeline views."""

    time: int
    selected_pid: Optional[int]
    preempted: bool
    ready_queue: tuple[tuple[int, int, int], ...]

    @property
    def idle(self) -> bool:
        return self.selected_pid is None


@dataclass(frozen=True, slots=True)
class SimulationState:
    """
    Complete simulation state between two ticks.

    States are values: ``step`` never mutates the state it is given, it clones
    the processes and returns a new state.
    """

    processes: tuple[Process, ...]
    current_time: int = 0
    running_pid: Optional[int] = None
    quantum_used: int = 0
    utilization_history: tuple[int, ...] = ()
    trace: tuple[StepRecord, ...] = ()

    @classmethod
    def initial(cls, processes: Iterable[Process]) -> SimulationState:
        return cls(processes=tuple(process.fresh() for process in processes))

    @property
    def is_finished(self) -> bool:
        return bool(self.processes) and all(p.is_complete for p in self.processes)

    def snapshot(self) -> tuple[Process, ...]:
        return tuple(process.clone() for process in self.processes)


def step(state: SimulationState, policy: SelectionPolicy) -> tuple[SimulationState, SchedulerDecision]:
    """Advance ``state`` by one tick under ``policy``."""

    if not state.processes:
        msg = "no processes loaded; generate or load a process set first"
        raise InvalidOperation(msg)

    now = state.current_time
    processes = state.snapshot()
    _admit_arrivals(processes, now)
    ready_queue = tuple(
        (p.pid, p.remaining_time, p.priority)
        for p in processes
        if p.status in (ProcessStatus.READY, ProcessStatus.RUNNING)
    )

    decision = policy.select(processes, now, state)
    selected = decision.selected
    running_pid = state.running_pid
    quantum_used = decision.quantum_used

    if selected is None:
        running_pid = None
        quantum_used = 0
    else:
        if running_pid is not None and running_pid != selected.pid:
            previous = find_process(processes, running_pid)
            if previous is not None:
                previous.suspend(now)
        running_pid = selected.pid
        selected.run_one_tick(now)

    for process in processes:
        if process.status is ProcessStatus.READY:
            process.waiting_time += 1

    if selected is not None and selected.remaining_time == 0:
        selected.mark_completed(now)
        logger.debug("%s: P%d completed at t=%d", policy.name, selected.pid, selected.completion_time)
        running_pid = None
        quantum_used = 0

    _assert_invariants(processes)

    record = StepRecord(
        time=now,
        selected_pid=decision.selected_pid,
        preempted=decision.preempted,
        ready_queue=ready_queue,
    )
    new_state = replace(
        state,
        processes=processes,
        current_time=now + 1,
        running_pid=running_pid,
        quantum_used=quantum_used,
        utilization_history=state.utilization_history + (0 if selected is None else 100,),
        trace=state.trace + (record,),
    )
    return new_state, decision


def run_to_completion(
    state: SimulationState,
    policy: SelectionPolicy,
    *,
    max_ticks: Optional[int] = None,
) -> SimulationState:
    """Step until every process has completed, optionally bounded by ``max_ticks`` further ticks."""

    if not state.processes:
        msg = "no processes loaded; generate or load a process set first"
        raise InvalidOperation(msg)
    ticks = 0
    while not state.is_finished:
        if max_ticks is not None and ticks >= max_ticks:
            msg = f"simulation did not finish within {max_ticks} ticks"
            raise InvalidOperation(msg)
        state, _ = step(state, policy)
        ticks += 1
    return state


def _admit_arrivals(processes: Sequence[Process], now: int) -> None:
    for process in processes:
        if process.status is ProcessStatus.WAITING and process.has_arrived(now):
            process.status = ProcessStatus.READY


def _assert_invariants(processes: Sequence[Process]) -> None:
    running = [p.pid for p in processes if p.status is ProcessStatus.RUNNING]
    assert len(running) <= 1, f"more than one running process: {running}"
    for process in processes:
        assert 0 <= process.remaining_time <= process.burst_time, f"P{process.pid} remaining_time out of range"
        assert process.busy_time == process.burst_time - process.remaining_time, f"P{process.pid} busy time drifted"
        history = process.execution_history
        for earlier, later in zip(history, history[1:]):
            assert earlier.end_time <= later.start_time, f"P{process.pid} execution segments overlap"
