from __future__ import annotations

import logging
from abc import abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Sequence

from .policy import IDLE, SchedulerDecision, SelectionPolicy, find_process, ready_set
from .process import Process

if TYPE_CHECKING:
    from .simulator import SimulationConfig, SimulationState

logger = logging.getLogger(__name__)


class Algorithm(str, Enum):
    FCFS = "fcfs"
    SJF = "sjf"
    SRT = "srt"
    PRIORITY = "priority"
    ROUND_ROBIN = "round-robin"
    HRRN = "hrrn"
    MLQ = "mlq"

    @property
    def supports_preemption(self) -> bool:
        return self in (Algorithm.SJF, Algorithm.PRIORITY, Algorithm.SRT)

    @property
    def requires_preemption(self) -> bool:
        return self is Algorithm.SRT

    @classmethod
    def parse(cls, raw: str | Algorithm) -> Algorithm:
        if isinstance(raw, Algorithm):
            return raw
        key = raw.strip().lower().replace("_", "-")
        key = _ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            choices = ", ".join(a.value for a in cls)
            msg = f"unknown algorithm {raw!r}; expected one of {choices}"
            raise ValueError(msg) from None


_ALIASES = {
    "fifo": "fcfs",
    "rr": "round-robin",
    "roundrobin": "round-robin",
    "srtf": "srt",
    "prio": "priority",
}


class KeyedPolicy(SelectionPolicy):
    """Selects the ready process with the smallest key; ties keep collection order."""

    def select(self, processes: Sequence[Process], now: int, state: SimulationState) -> SchedulerDecision:
        candidates = ready_set(processes, now)
        if not candidates:
            return IDLE
        return SchedulerDecision(selected=self.best(candidates, now))

    def best(self, candidates: Sequence[Process], now: int) -> Process:
        # min() returns the first minimal element, matching a stable sort.
        return min(candidates, key=lambda process: self._key(process, now))

    @abstractmethod
    def _key(self, process: Process, now: int) -> object:
        """Ordering key for ``process`` at ``now``."""


class FcfsPolicy(KeyedPolicy):
    """First-Come, First-Served by arrival time."""

    name = Algorithm.FCFS.value

    def _key(self, process: Process, now: int) -> int:
        return process.arrival_time


class SjfPolicy(KeyedPolicy):
    """Shortest Job First on remaining time."""

    name = Algorithm.SJF.value

    def _key(self, process: Process, now: int) -> int:
        return process.remaining_time


class SrtPolicy(KeyedPolicy):
    """Shortest Remaining Time; only meaningful behind a preemptive adapter."""

    name = Algorithm.SRT.value

    def _key(self, process: Process, now: int) -> int:
        return process.remaining_time


class PriorityPolicy(KeyedPolicy):
    """Static priority, lower value wins."""

    name = Algorithm.PRIORITY.value

    def _key(self, process: Process, now: int) -> int:
        return process.priority


class HrrnPolicy(KeyedPolicy):
    """
    Highest Response Ratio Next.

    The ratio is ``(now - arrival_time + burst_time) / burst_time`` and is
    recomputed at every tick, so waiting time here counts from arrival rather
    than using the accumulated ``waiting_time`` field.
    """

    name = Algorithm.HRRN.value

    def best(self, candidates: Sequence[Process], now: int) -> Process:
        return max(candidates, key=lambda process: self.response_ratio(process, now))

    def _key(self, process: Process, now: int) -> float:
        return -self.response_ratio(process, now)

    @staticmethod
    def response_ratio(process: Process, now: int) -> float:
        waited = now - process.arrival_time
        return (waited + process.burst_time) / process.burst_time


class MlqPolicy(KeyedPolicy):
    """Multi-level queue: static buckets by priority, FCFS inside a bucket."""

    name = Algorithm.MLQ.value

    def __init__(self, queue_count: int = 3) -> None:
        if queue_count < 1:
            msg = "queue_count must be at least 1"
            raise ValueError(msg)
        self.queue_count = queue_count

    def queue_index(self, process: Process) -> int:
        return min(process.priority - 1, self.queue_count - 1)

    def _key(self, process: Process, now: int) -> tuple[int, int]:
        return (self.queue_index(process), process.arrival_time)

    def __repr__(self) -> str:
        return f"MlqPolicy(queue_count={self.queue_count})"


class RoundRobinPolicy(SelectionPolicy):
    """
    Round Robin without an explicit queue.

    The rotation order is the ready set sorted by arrival time, recomputed at
    every tick. When the holder's quantum is spent the process after it in
    that order is chosen, wrapping to the front when the holder was last or is
    no longer ready.
    """

    name = Algorithm.ROUND_ROBIN.value

    def __init__(self, time_quantum: int = 2) -> None:
        if time_quantum < 1:
            msg = "time_quantum must be at least 1"
            raise ValueError(msg)
        self.time_quantum = time_quantum

    def select(self, processes: Sequence[Process], now: int, state: SimulationState) -> SchedulerDecision:
        candidates = ready_set(processes, now)
        if not candidates:
            return IDLE

        holder_pid = state.running_pid
        if holder_pid is not None and state.quantum_used < self.time_quantum:
            holder = find_process(processes, holder_pid)
            if holder is not None and not holder.is_complete:
                return SchedulerDecision(selected=holder, quantum_used=state.quantum_used + 1)

        rotation = sorted(candidates, key=lambda process: process.arrival_time)
        if holder_pid is not None:
            index = next((i for i, process in enumerate(rotation) if process.pid == holder_pid), None)
            if index is not None and index < len(rotation) - 1:
                return SchedulerDecision(selected=rotation[index + 1], quantum_used=1)
        return SchedulerDecision(selected=rotation[0], quantum_used=1)

    def __repr__(self) -> str:
        return f"RoundRobinPolicy(time_quantum={self.time_quantum})"


class PreemptionAdapter(SelectionPolicy):
    """
    Adds preemptive or non-preemptive dispatch on top of a keyed policy.

    In non-preemptive mode, or without a live holder, the wrapped policy
    decides directly over the whole ready set. In preemptive mode the wrapped
    policy's best candidate replaces the holder whenever its pid differs, and
    the decision is flagged as a preemption.
    """

    def __init__(self, policy: KeyedPolicy, *, preemptive: bool) -> None:
        self.policy = policy
        self.preemptive = preemptive

    @property
    def name(self) -> str:  # type: ignore[override]
        return self.policy.name

    def select(self, processes: Sequence[Process], now: int, state: SimulationState) -> SchedulerDecision:
        holder = find_process(processes, state.running_pid)
        if not self.preemptive or holder is None or holder.is_complete:
            return self.policy.select(processes, now, state)

        decision = self.policy.select(processes, now, state)
        if decision.selected is not None and decision.selected.pid != holder.pid:
            logger.debug("%s: P%d preempts P%d at t=%d", self.name, decision.selected.pid, holder.pid, now)
            return SchedulerDecision(selected=decision.selected, preempted=True)
        return SchedulerDecision(selected=holder)

    def __repr__(self) -> str:
        return f"PreemptionAdapter({self.policy!r}, preemptive={self.preemptive})"


def build_policy(config: SimulationConfig) -> SelectionPolicy:
    """Instantiate the selection policy described by ``config``."""

    algorithm = config.algorithm
    if algorithm is Algorithm.FCFS:
        return FcfsPolicy()
    if algorithm is Algorithm.SJF:
        return PreemptionAdapter(SjfPolicy(), preemptive=config.preemptive)
    if algorithm is Algorithm.SRT:
        return PreemptionAdapter(SrtPolicy(), preemptive=True)
    if algorithm is Algorithm.PRIORITY:
        return PreemptionAdapter(PriorityPolicy(), preemptive=config.preemptive)
    if algorithm is Algorithm.ROUND_ROBIN:
        return RoundRobinPolicy(time_quantum=config.time_quantum)
    if algorithm is Algorithm.HRRN:
        return HrrnPolicy()
    if algorithm is Algorithm.MLQ:
        return MlqPolicy(queue_count=config.queue_count)
    msg = f"no policy registered for {algorithm!r}"
    raise ValueError(msg)
