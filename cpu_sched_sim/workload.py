from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from random import Random

from .process import Process

logger = logging.getLogger(__name__)


def random_processes(
    count: int,
    *,
    seed: int | None = None,
    max_arrival: int = 9,
    max_burst: int = 10,
    max_priority: int = 5,
) -> list[Process]:
    """Generate ``count`` processes with pids ``1..count``, sorted by arrival time."""

    if count < 1:
        msg = "count must be at least 1"
        raise ValueError(msg)
    if max_arrival < 0 or max_burst < 1 or max_priority < 1:
        msg = "max_arrival must be >= 0, max_burst and max_priority must be >= 1"
        raise ValueError(msg)
    rng = Random(seed)
    processes = [
        Process(
            pid=i + 1,
            arrival_time=rng.randint(0, max_arrival),
            burst_time=rng.randint(1, max_burst),
            priority=rng.randint(1, max_priority),
        )
        for i in range(count)
    ]
    processes.sort(key=lambda p: p.arrival_time)
    logger.info("Generated %d processes (seed=%s)", count, seed)
    return processes


def from_rows(rows: Iterable[Sequence[int]]) -> list[Process]:
    """Build processes from ``(arrival, burst[, priority])`` rows, numbering pids from 1."""

    processes: list[Process] = []
    for idx, row in enumerate(rows):
        if len(row) not in (2, 3):
            msg = "each row must be (arrival, burst) or (arrival, burst, priority)"
            raise ValueError(msg)
        priority = row[2] if len(row) == 3 else 1
        processes.append(Process(pid=idx + 1, arrival_time=row[0], burst_time=row[1], priority=priority))
    return processes
