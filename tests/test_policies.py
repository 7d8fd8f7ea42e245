import pytest

from scheduler_sim.models import Process
from scheduler_sim.policies import Policy, get_policy, resort_ready, sort_by_arrival


def _procs():
    a = Process(1, arrival_time=4, total_burst=9)
    b = Process(2, arrival_time=0, total_burst=3)
    c = Process(3, arrival_time=2, total_burst=3)
    c.remaining_burst = 1
    return [a, b, c]


def test_get_policy():
    assert get_policy("FCFS") is Policy.FCFS
    assert get_policy("srtf") is Policy.SRTF
    with pytest.raises(ValueError, match="Unknown scheduling policy 'rr'"):
        get_policy("rr")


def test_titles():
    assert Policy.SJF.title == "SHORTEST JOB FIRST"


def test_sort_by_arrival():
    queue = _procs()
    sort_by_arrival(queue)
    assert [p.pid for p in queue] == [2, 3, 1]


def test_fcfs_leaves_ready_in_insertion_order():
    queue = _procs()
    resort_ready(queue, Policy.FCFS)
    assert [p.pid for p in queue] == [1, 2, 3]


def test_sjf_sorts_by_total_burst_stably():
    queue = _procs()
    resort_ready(queue, Policy.SJF)
    # 2 and 3 tie on total_burst and keep their order
    assert [p.pid for p in queue] == [2, 3, 1]


def test_srtf_sorts_by_remaining_burst():
    queue = _procs()
    resort_ready(queue, Policy.SRTF)
    assert [p.pid for p in queue] == [3, 2, 1]
