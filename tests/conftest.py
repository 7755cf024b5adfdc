from __future__ import annotations

import pytest

from cpu_sched_sim import Algorithm
from cpu_sched_sim.workload import random_processes


@pytest.fixture(params=[1, 7, 23, 42])
def random_set(request):
    return random_processes(6, seed=request.param)


@pytest.fixture(params=list(Algorithm), ids=lambda a: a.value)
def algorithm(request):
    return request.param
