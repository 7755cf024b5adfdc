from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ProcessStatus(str, Enum):
    WAITING = "waiting"
    READY = "ready"
    RUNNING = "running"
    COMPLETED = "completed"


@dataclass(slots=True)
class ExecutionSegment:
    """Half-open interval ``[start_time, end_time)`` during which a process held the CPU."""

    start_time: int
    end_time: int

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time


@dataclass(slots=True)
class Process:
    """A simulated unit of work and its runtime bookkeeping."""

    pid: int
    arrival_time: int
    burst_time: int
    priority: int = 1
    remaining_time: Optional[int] = None
    status: ProcessStatus = ProcessStatus.WAITING
    waiting_time: int = 0
    turnaround_time: Optional[int] = None
    completion_time: Optional[int] = None
    execution_history: list[ExecutionSegment] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.pid <= 0:
            msg = "pid must be a positive integer"
            raise ValueError(msg)
        if self.arrival_time < 0:
            msg = "arrival_time cannot be negative"
            raise ValueError(msg)
        if self.burst_time < 1:
            msg = "burst_time must be at least 1"
            raise ValueError(msg)
        if self.priority < 1:
            msg = "priority must be at least 1"
            raise ValueError(msg)
        if self.remaining_time is None:
            self.remaining_time = self.burst_time
        if not 0 <= self.remaining_time <= self.burst_time:
            msg = "remaining_time must lie within [0, burst_time]"
            raise ValueError(msg)

    @property
    def is_complete(self) -> bool:
        return self.status is ProcessStatus.COMPLETED

    @property
    def busy_time(self) -> int:
        return sum(segment.duration for segment in self.execution_history)

    def has_arrived(self, now: int) -> bool:
        return self.arrival_time <= now

    def fresh(self) -> Process:
        """Return a copy with the same identity and demand but no runtime history."""

        return Process(
            pid=self.pid,
            arrival_time=self.arrival_time,
            burst_time=self.burst_time,
            priority=self.priority,
        )

    def clone(self) -> Process:
        return copy.deepcopy(self)

    def run_one_tick(self, now: int) -> None:
        """Account one unit of CPU time at ``now`` and extend or open the history segment."""

        assert self.status is not ProcessStatus.COMPLETED, f"P{self.pid} selected after completion"
        if self.status is ProcessStatus.RUNNING and self.execution_history:
            self.execution_history[-1].end_time = now + 1
        else:
            if self.execution_history:
                assert self.execution_history[-1].end_time <= now, f"P{self.pid} segments overlap at {now}"
            self.status = ProcessStatus.RUNNING
            self.execution_history.append(ExecutionSegment(start_time=now, end_time=now + 1))
        self.remaining_time -= 1
        assert self.remaining_time >= 0, f"P{self.pid} remaining_time went negative"

    def suspend(self, now: int) -> None:
        """Return a running process to the ready state, closing its open segment at ``now``."""

        if self.status is not ProcessStatus.RUNNING:
            return
        self.status = ProcessStatus.READY
        if self.execution_history:
            self.execution_history[-1].end_time = now

    def mark_completed(self, now: int) -> None:
        self.status = ProcessStatus.COMPLETED
        self.completion_time = now + 1
        self.turnaround_time = self.completion_time - self.arrival_time
        derived_wait = self.turnaround_time - self.burst_time
        assert derived_wait == self.waiting_time, (
            f"P{self.pid} accumulated waiting time {self.waiting_time} != derived {derived_wait}"
        )
        self.waiting_time = derived_wait
