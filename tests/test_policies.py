"""Tests for the selection policies and the preemption adapter.

Policies are exercised directly against hand-built process sets; the
engine-level behaviour is covered in test_simulator.py.
"""

import pytest

from cpu_sched_sim import Algorithm, Process, SimulationConfig, SimulationState
from cpu_sched_sim.policies import (
    FcfsPolicy,
    HrrnPolicy,
    MlqPolicy,
    PreemptionAdapter,
    PriorityPolicy,
    RoundRobinPolicy,
    SjfPolicy,
    SrtPolicy,
    build_policy,
)
from cpu_sched_sim.process import ProcessStatus


def _state(processes, running_pid=None, quantum_used=0):
    return SimulationState(processes=tuple(processes), running_pid=running_pid, quantum_used=quantum_used)


def _select(policy, processes, now, **carry):
    return policy.select(processes, now, _state(processes, **carry))


class TestReadySet:
    """Every policy idles when nothing has arrived or everything is done."""

    @pytest.mark.parametrize(
        "policy",
        [FcfsPolicy(), SjfPolicy(), SrtPolicy(), PriorityPolicy(), HrrnPolicy(), MlqPolicy(), RoundRobinPolicy()],
        ids=repr,
    )
    def test_idle_before_first_arrival(self, policy) -> None:
        processes = [Process(pid=1, arrival_time=5, burst_time=2)]
        decision = _select(policy, processes, 4)
        assert decision.idle
        assert decision.selected_pid is None

    def test_completed_processes_are_not_candidates(self) -> None:
        done = Process(pid=1, arrival_time=0, burst_time=1, status=ProcessStatus.COMPLETED)
        other = Process(pid=2, arrival_time=1, burst_time=1)
        assert _select(FcfsPolicy(), [done, other], 1).selected_pid == 2


class TestKeyedPolicies:
    def test_fcfs_picks_earliest_arrival(self) -> None:
        processes = [Process(pid=1, arrival_time=2, burst_time=1), Process(pid=2, arrival_time=1, burst_time=5)]
        assert _select(FcfsPolicy(), processes, 3).selected_pid == 2

    def test_fcfs_ties_keep_collection_order(self) -> None:
        processes = [Process(pid=7, arrival_time=0, burst_time=1), Process(pid=3, arrival_time=0, burst_time=1)]
        assert _select(FcfsPolicy(), processes, 0).selected_pid == 7

    def test_sjf_uses_remaining_time(self) -> None:
        processes = [
            Process(pid=1, arrival_time=0, burst_time=5, remaining_time=1),
            Process(pid=2, arrival_time=0, burst_time=2),
        ]
        assert _select(SjfPolicy(), processes, 0).selected_pid == 1

    def test_priority_lower_value_wins(self) -> None:
        processes = [
            Process(pid=1, arrival_time=0, burst_time=1, priority=3),
            Process(pid=2, arrival_time=0, burst_time=9, priority=1),
        ]
        assert _select(PriorityPolicy(), processes, 0).selected_pid == 2

    def test_hrrn_favours_highest_response_ratio(self) -> None:
        processes = [Process(pid=1, arrival_time=0, burst_time=10), Process(pid=2, arrival_time=3, burst_time=2)]
        # P1: (5 + 10) / 10 = 1.5, P2: (2 + 2) / 2 = 2.0
        assert _select(HrrnPolicy(), processes, 5).selected_pid == 2
        assert HrrnPolicy.response_ratio(processes[0], 5) == pytest.approx(1.5)

    def test_hrrn_ties_keep_collection_order(self) -> None:
        processes = [Process(pid=1, arrival_time=0, burst_time=4), Process(pid=2, arrival_time=0, burst_time=4)]
        assert _select(HrrnPolicy(), processes, 2).selected_pid == 1

    def test_mlq_services_lowest_bucket_first(self) -> None:
        processes = [
            Process(pid=1, arrival_time=0, burst_time=1, priority=5),
            Process(pid=2, arrival_time=4, burst_time=1, priority=2),
        ]
        assert _select(MlqPolicy(queue_count=3), processes, 4).selected_pid == 2

    def test_mlq_clamps_priorities_into_last_bucket(self) -> None:
        policy = MlqPolicy(queue_count=3)
        processes = [
            Process(pid=1, arrival_time=2, burst_time=1, priority=3),
            Process(pid=2, arrival_time=1, burst_time=1, priority=5),
        ]
        assert [policy.queue_index(p) for p in processes] == [2, 2]
        assert _select(policy, processes, 2).selected_pid == 2

    def test_mlq_rejects_empty_queue_set(self) -> None:
        with pytest.raises(ValueError):
            MlqPolicy(queue_count=0)


class TestRoundRobin:
    def _procs(self):
        return [Process(pid=i, arrival_time=0, burst_time=3) for i in (1, 2, 3)]

    def test_first_pick_starts_quantum(self) -> None:
        decision = _select(RoundRobinPolicy(2), self._procs(), 0)
        assert decision.selected_pid == 1
        assert decision.quantum_used == 1

    def test_holder_keeps_cpu_within_quantum(self) -> None:
        decision = _select(RoundRobinPolicy(2), self._procs(), 1, running_pid=1, quantum_used=1)
        assert decision.selected_pid == 1
        assert decision.quantum_used == 2

    def test_rotates_after_quantum(self) -> None:
        decision = _select(RoundRobinPolicy(2), self._procs(), 2, running_pid=1, quantum_used=2)
        assert decision.selected_pid == 2
        assert decision.quantum_used == 1

    def test_wraps_from_last_entry(self) -> None:
        decision = _select(RoundRobinPolicy(2), self._procs(), 6, running_pid=3, quantum_used=2)
        assert decision.selected_pid == 1

    def test_wraps_when_holder_is_gone(self) -> None:
        processes = self._procs()
        processes[1].status = ProcessStatus.COMPLETED
        decision = _select(RoundRobinPolicy(2), processes, 4, running_pid=2, quantum_used=2)
        assert decision.selected_pid == 1

    def test_quantum_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            RoundRobinPolicy(0)


class TestPreemptionAdapter:
    def _procs(self):
        holder = Process(pid=1, arrival_time=0, burst_time=4, remaining_time=3, status=ProcessStatus.RUNNING)
        newcomer = Process(pid=2, arrival_time=1, burst_time=2)
        return [holder, newcomer]

    def test_no_holder_delegates(self) -> None:
        adapter = PreemptionAdapter(SrtPolicy(), preemptive=True)
        decision = _select(adapter, self._procs(), 1)
        assert decision.selected_pid == 2
        assert not decision.preempted

    def test_preemptive_switches_to_better_candidate(self) -> None:
        adapter = PreemptionAdapter(SrtPolicy(), preemptive=True)
        decision = _select(adapter, self._procs(), 1, running_pid=1)
        assert decision.selected_pid == 2
        assert decision.preempted

    def test_preemptive_keeps_holder_when_best(self) -> None:
        processes = self._procs()
        processes[1].remaining_time = 2
        processes[0].remaining_time = 1
        decision = _select(PreemptionAdapter(SjfPolicy(), preemptive=True), processes, 1, running_pid=1)
        assert decision.selected_pid == 1
        assert not decision.preempted

    def test_non_preemptive_delegates_over_whole_ready_set(self) -> None:
        decision = _select(PreemptionAdapter(SjfPolicy(), preemptive=False), self._procs(), 1, running_pid=1)
        assert decision.selected_pid == 2
        assert not decision.preempted

    def test_non_preemptive_matches_wrapped_policy(self) -> None:
        processes = self._procs()
        adapter = PreemptionAdapter(PriorityPolicy(), preemptive=False)
        for running_pid in (None, 1):
            expected = _select(PriorityPolicy(), processes, 1, running_pid=running_pid)
            assert _select(adapter, processes, 1, running_pid=running_pid) == expected

    def test_completed_holder_falls_through(self) -> None:
        processes = self._procs()
        processes[0].status = ProcessStatus.COMPLETED
        decision = _select(PreemptionAdapter(PriorityPolicy(), preemptive=True), processes, 1, running_pid=1)
        assert decision.selected_pid == 2
        assert not decision.preempted


class TestAlgorithmRegistry:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("FCFS", Algorithm.FCFS), ("rr", Algorithm.ROUND_ROBIN), ("round_robin", Algorithm.ROUND_ROBIN), ("srtf", Algorithm.SRT)],
    )
    def test_parse_accepts_aliases(self, raw, expected) -> None:
        assert Algorithm.parse(raw) is expected

    def test_parse_rejects_unknown(self) -> None:
        with pytest.raises(ValueError, match="unknown algorithm"):
            Algorithm.parse("lottery")

    def test_build_policy_wraps_preemptible_algorithms(self) -> None:
        policy = build_policy(SimulationConfig(algorithm="priority", preemptive=True))
        assert isinstance(policy, PreemptionAdapter)
        assert policy.preemptive
        assert policy.name == "priority"

    def test_build_policy_srt_is_always_preemptive(self) -> None:
        policy = build_policy(SimulationConfig(algorithm=Algorithm.SRT))
        assert isinstance(policy, PreemptionAdapter)
        assert policy.preemptive

    def test_build_policy_passes_parameters(self) -> None:
        assert build_policy(SimulationConfig(algorithm="round-robin", time_quantum=4)).time_quantum == 4
        assert build_policy(SimulationConfig(algorithm="mlq", queue_count=2)).queue_count == 2
