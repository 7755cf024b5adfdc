from __future__ import annotations

from dataclasses import asdict, dataclass
from statistics import mean
from typing import Any, Sequence

from .process import Process


@dataclass(frozen=True, slots=True)
class Metrics:
    avg_waiting_time: float
    avg_turnaround_time: float
    cpu_utilization: float
    throughput: float
    context_switches: int
    completed_processes: int
    total_processes: int

    def rounded(self) -> Metrics:
        """Display rounding: two decimals for times and utilisation, three for throughput."""

        return Metrics(
            avg_waiting_time=round(self.avg_waiting_time, 2),
            avg_turnaround_time=round(self.avg_turnaround_time, 2),
            cpu_utilization=round(self.cpu_utilization, 2),
            throughput=round(self.throughput, 3),
            context_switches=self.context_switches,
            completed_processes=self.completed_processes,
            total_processes=self.total_processes,
        )

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def calculate_metrics(processes: Sequence[Process], current_time: int) -> Metrics:
    completed = [p for p in processes if p.is_complete]
    busy_time = sum(p.busy_time for p in processes)
    context_switches = sum(max(0, len(p.execution_history) - 1) for p in processes)
    return Metrics(
        avg_waiting_time=float(mean(p.waiting_time for p in completed)) if completed else 0.0,
        avg_turnaround_time=float(mean(p.turnaround_time for p in completed)) if completed else 0.0,
        cpu_utilization=100.0 * busy_time / current_time if current_time else 0.0,
        throughput=len(completed) / current_time if current_time else 0.0,
        context_switches=context_switches,
        completed_processes=len(completed),
        total_processes=len(processes),
    )
