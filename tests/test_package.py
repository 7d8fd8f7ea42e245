import importlib

import scheduler_sim


def test_all_lists_every_module():
    assert sorted(scheduler_sim.__all__) == [
        "cli",
        "engine",
        "gantt",
        "metrics",
        "models",
        "policies",
        "simulation",
        "trace",
        "workload_io",
    ]
    for name in scheduler_sim.__all__:
        importlib.import_module(f"scheduler_sim.{name}")
