"""
Tests for the Round Robin, Aging-Weighted FCFS and SJF strategies.
"""

import random

import pytest

from cpu_scheduling_simulator.backend.core import Process, ProcessState, clone_processes, reset_processes
from cpu_scheduling_simulator.backend.schedulers import (
    AgingFCFSScheduler, AgingWeights, RoundRobinScheduler, SJFScheduler,
)
from cpu_scheduling_simulator.backend.utils import IDLE, Timeline, TimelineSegment as Seg, compute_metrics


def execute(scheduler, processes):
    working = clone_processes(processes)
    reset_processes(working)
    timeline = Timeline()
    scheduler.run(working, timeline)
    return timeline, working


def completions(processes):
    return {p.pid: p.completion_time for p in processes}


def make(*rows):
    """Processes from (pid, arrival, burst[, priority]) tuples."""
    return [Process(s[0], s[1], s[2], s[3] if len(s) > 3 else 0) for s in rows]


ALL_SCHEDULERS = [
    pytest.param(lambda: RoundRobinScheduler(2), id="rr-q2"),
    pytest.param(lambda: RoundRobinScheduler(1), id="rr-q1"),
    pytest.param(lambda: RoundRobinScheduler(5), id="rr-q5"),
    pytest.param(lambda: AgingFCFSScheduler(), id="aging-fcfs"),
    pytest.param(lambda: SJFScheduler(), id="sjf"),
]


class TestRoundRobin:

    def test_new_arrivals_queue_before_preempted_process(self):
        timeline, procs = execute(RoundRobinScheduler(2), make((1, 0, 5), (2, 1, 3)))
        assert timeline.segments == [Seg(1, 0, 2), Seg(2, 2, 4), Seg(1, 4, 6), Seg(2, 6, 7), Seg(1, 7, 8)]
        assert completions(procs) == {1: 8, 2: 7}

    def test_sample_workload_with_idle_gap(self, sample_processes):
        timeline, procs = execute(RoundRobinScheduler(2), sample_processes)
        assert timeline.segments == [
            Seg(1, 0, 2), Seg(2, 2, 4), Seg(3, 4, 5), Seg(1, 5, 7), Seg(2, 7, 8),
            Seg(IDLE, 8, 12), Seg(4, 12, 14), Seg(5, 14, 19),
        ]
        assert completions(procs) == {1: 7, 2: 8, 3: 5, 4: 14, 5: 19}

    def test_slice_arrivals_queue_in_arrival_order(self):
        # P3 is listed after P2 but arrives first; both arrive during P1's slice.
        timeline, procs = execute(RoundRobinScheduler(3), make((1, 0, 6), (2, 2, 2), (3, 1, 2)))
        assert timeline.segments == [Seg(1, 0, 3), Seg(3, 3, 5), Seg(2, 5, 7), Seg(1, 7, 10)]
        assert completions(procs) == {1: 10, 2: 7, 3: 5}

    def test_clock_starts_at_first_arrival(self):
        timeline, procs = execute(RoundRobinScheduler(2), make((1, 3, 2)))
        assert timeline.segments == [Seg(1, 3, 5)]
        assert procs[0].completion_time == 5

    def test_single_process_slices_merge(self):
        timeline, _ = execute(RoundRobinScheduler(1), make((1, 0, 4)))
        assert timeline.segments == [Seg(1, 0, 4)]

    @pytest.mark.parametrize("quantum", [0, -3])
    def test_non_positive_quantum_defaults_to_one(self, quantum, caplog):
        scheduler = RoundRobinScheduler(quantum)
        assert scheduler.time_quantum == 1
        assert "Invalid time quantum" in caplog.text
        timeline, _ = execute(scheduler, make((1, 0, 2), (2, 0, 2)))
        assert timeline.segments == [Seg(1, 0, 1), Seg(2, 1, 2), Seg(1, 2, 3), Seg(2, 3, 4)]

    def test_zero_burst_completes_without_segment(self):
        timeline, procs = execute(RoundRobinScheduler(2), make((1, 0, 0), (2, 0, 3)))
        assert timeline.segments == [Seg(2, 0, 3)]
        assert procs[0].completed and procs[0].completion_time == 0


class TestAgingFCFS:

    def test_aging_lets_long_waiter_win(self):
        # At t=6 P2 scores 5*2 - 8*0.5 = 6.0, the short P3 only 1*2 - 0.5 = 1.5
        procs = make((1, 0, 6), (2, 1, 8), (3, 5, 1))
        timeline, done = execute(AgingFCFSScheduler(), procs)
        assert [s.pid for s in timeline] == [1, 2, 3]
        assert completions(done) == {1: 6, 2: 14, 3: 15}

    def test_less_urgent_priority_runs_later(self):
        procs = make((1, 0, 10), (2, 1, 2), (3, 2, 1, 5))
        timeline, _ = execute(AgingFCFSScheduler(), procs)
        assert [s.pid for s in timeline] == [1, 2, 3]

    def test_score(self):
        scheduler = AgingFCFSScheduler()
        p = Process(pid=1, arrival_time=1, burst_time=6, priority=1)
        assert scheduler.score(p, 4) == pytest.approx(3 * 2.0 - 6 * 0.5 - 1 * 3.0)

    def test_equal_scores_prefer_earlier_arrival(self):
        # At t=4 both score 3.0; the later arrival is listed first.
        procs = make((1, 0, 4), (3, 2, 2), (2, 1, 6))
        timeline, done = execute(AgingFCFSScheduler(), procs)
        assert timeline.segments == [Seg(1, 0, 4), Seg(2, 4, 10), Seg(3, 10, 12)]

    def test_scores_within_tolerance_are_ties(self):
        weights = AgingWeights(aging=1.0, burst=1.0, priority=0.0005)
        # At t=4: P2 scores 0.9995, P3 scores 1.0
        procs = make((1, 0, 4), (3, 2, 1), (2, 1, 2, 1))
        timeline, _ = execute(AgingFCFSScheduler(weights), procs)
        assert [s.pid for s in timeline] == [1, 2, 3]

    def test_zero_tolerance_picks_strictly_higher_score(self):
        weights = AgingWeights(aging=1.0, burst=1.0, priority=0.0005, tolerance=0.0)
        procs = make((1, 0, 4), (3, 2, 1), (2, 1, 2, 1))
        timeline, _ = execute(AgingFCFSScheduler(weights), procs)
        assert [s.pid for s in timeline] == [1, 3, 2]

    def test_priority_weight_counts(self):
        # Same arrival and burst; lower priority number scores higher.
        procs = make((1, 0, 2, 4), (2, 0, 2, 1))
        timeline, _ = execute(AgingFCFSScheduler(), procs)
        assert [s.pid for s in timeline] == [2, 1]

    def test_leading_idle_block(self):
        timeline, procs = execute(AgingFCFSScheduler(), make((1, 3, 2)))
        assert timeline.segments == [Seg(IDLE, 0, 3), Seg(1, 3, 5)]
        assert procs[0].completion_time == 5

    def test_sample_workload(self, sample_processes):
        timeline, procs = execute(AgingFCFSScheduler(), sample_processes)
        assert timeline.segments == [
            Seg(1, 0, 4), Seg(2, 4, 7), Seg(3, 7, 8), Seg(IDLE, 8, 12), Seg(4, 12, 14), Seg(5, 14, 19),
        ]


class TestSJF:

    def test_shortest_job_after_first_dispatch(self):
        timeline, procs = execute(SJFScheduler(), make((1, 0, 5), (2, 1, 3), (3, 2, 1)))
        assert timeline.segments == [Seg(1, 0, 5), Seg(3, 5, 6), Seg(2, 6, 9)]
        assert completions(procs) == {1: 5, 2: 9, 3: 6}

    def test_ties_broken_by_arrival_not_priority(self):
        procs = make((1, 0, 4), (2, 2, 3, 9), (3, 1, 3, 0))
        timeline, _ = execute(SJFScheduler(), procs)
        assert [s.pid for s in timeline] == [1, 3, 2]

        procs = make((1, 0, 4), (3, 2, 3, 0), (2, 1, 3, 9))
        timeline, _ = execute(SJFScheduler(), procs)
        assert [s.pid for s in timeline] == [1, 2, 3]

    def test_leading_idle_block(self):
        timeline, _ = execute(SJFScheduler(), make((1, 3, 2)))
        assert timeline.segments == [Seg(IDLE, 0, 3), Seg(1, 3, 5)]

    def test_sample_workload_metrics(self, sample_processes):
        _, procs = execute(SJFScheduler(), sample_processes)
        assert completions(procs) == {1: 4, 2: 8, 3: 5, 4: 14, 5: 19}
        avg_wt, avg_tat = compute_metrics(procs)
        assert avg_wt == pytest.approx(1.4)
        assert avg_tat == pytest.approx(4.4)


def random_workload(seed, n=12):
    rng = random.Random(seed)
    return [
        Process(pid=i + 1, arrival_time=rng.randint(0, 20), burst_time=rng.randint(1, 8), priority=rng.randint(0, 4))
        for i in range(n)
    ]


@pytest.mark.parametrize("factory", ALL_SCHEDULERS)
@pytest.mark.parametrize("seed", [1, 7, 42])
class TestSchedulingProperties:

    def test_every_process_completes(self, factory, seed):
        _, procs = execute(factory(), random_workload(seed))
        assert all(p.completed and p.remaining_time == 0 for p in procs)
        assert all(p.started for p in procs)
        assert all(p.state is ProcessState.TERMINATED for p in procs)

    def test_timeline_has_no_gaps_or_overlaps(self, factory, seed):
        timeline, procs = execute(factory(), random_workload(seed))
        for prev, nxt in zip(timeline.segments, timeline.segments[1:]):
            assert prev.end == nxt.start
            assert not (prev.pid == nxt.pid)
        assert all(seg.end > seg.start for seg in timeline)
        assert timeline.end_time == max(p.completion_time for p in procs)
        assert timeline.start_time <= min(p.arrival_time for p in procs)

    def test_cpu_time_conserved(self, factory, seed):
        timeline, procs = execute(factory(), random_workload(seed))
        for p in procs:
            segs = timeline.segments_for(p.pid)
            assert sum(s.duration for s in segs) == p.burst_time
            assert segs[-1].end == p.completion_time
            assert segs[0].start >= p.arrival_time
            if not isinstance(factory(), RoundRobinScheduler):
                assert len(segs) == 1

    def test_metrics_non_negative(self, factory, seed):
        _, procs = execute(factory(), random_workload(seed))
        compute_metrics(procs)
        for p in procs:
            assert p.waiting_time >= 0
            assert p.turnaround_time >= p.burst_time

    def test_deterministic(self, factory, seed):
        workload = random_workload(seed)
        first = execute(factory(), workload)
        second = execute(factory(), workload)
        assert first[0] == second[0]
        assert first[1] == second[1]


@pytest.mark.parametrize("factory", ALL_SCHEDULERS)
def test_empty_workload(factory):
    timeline, procs = execute(factory(), [])
    assert len(timeline) == 0
    assert procs == []


def test_round_robin_starts_at_min_arrival_for_random_workloads():
    workload = [p for p in random_workload(3) if p.arrival_time > 0]
    timeline, _ = execute(RoundRobinScheduler(2), workload)
    assert timeline.start_time == min(p.arrival_time for p in workload)
    assert not timeline.segments[0].is_idle
