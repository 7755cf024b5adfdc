from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Sequence

from .process import Process, ProcessStatus

if TYPE_CHECKING:
    from .simulator import SimulationState


@dataclass(frozen=True, slots=True)
class SchedulerDecision:
    """Outcome of one selection: the process to run (``None`` when idle) and carry state."""

    selected: Optional[Process] = None
    preempted: bool = False
    quantum_used: int = 0

    @property
    def idle(self) -> bool:
        return self.selected is None

    @property
    def selected_pid(self) -> Optional[int]:
        return self.selected.pid if self.selected is not None else None


IDLE = SchedulerDecision()


def ready_set(processes: Sequence[Process], now: int) -> list[Process]:
    """Processes eligible for the CPU at ``now``, in collection order."""

    return [p for p in processes if p.has_arrived(now) and p.status is not ProcessStatus.COMPLETED]


def find_process(processes: Sequence[Process], pid: Optional[int]) -> Optional[Process]:
    if pid is None:
        return None
    for process in processes:
        if process.pid == pid:
            return process
    return None


class SelectionPolicy(ABC):
    """Abstract selection policy choosing which process occupies the CPU for one tick."""

    name: str = "policy"

    @abstractmethod
    def select(self, processes: Sequence[Process], now: int, state: SimulationState) -> SchedulerDecision:
        """Select the process to run for the tick starting at ``now``."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
