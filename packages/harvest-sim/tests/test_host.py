"""Tests for the isolated execution host, batches, and the CLI."""

import json

import pytest

from harvest_sim.batch import BatchReport, run_batch
from harvest_sim.cli import main
from harvest_sim.host import SimulationHost

QUICK = {
    "max_days": 1,
    "include_state": False,
    "profile": {"weekday_checkins": 0, "weekend_checkins": 0},
}
WON = {"max_days": 1, "initial": {"farm_plots": 90}}


# --- Execution host ---

def test_host_streams_ticks_then_summary():
    with SimulationHost() as host:
        host.start(QUICK, seed=5, speed=240)
        messages = list(host.messages(timeout=5.0))
        host.join(5.0)
    assert messages[0] == {"type": "ready", "seed": 5, "max_ticks": 1440}
    ticks = [m for m in messages if m["type"] == "tick"]
    assert [t["tick_index"] for t in ticks] == list(range(1, 1441))
    assert ticks[-1]["completed"]
    assert messages[-1]["type"] == "summary"
    assert messages[-1]["reason"] == "max_ticks"


def test_host_stop_while_paused():
    with SimulationHost() as host:
        host.start(QUICK, seed=1, paused=True)
        host.step()
        host.stop()
        messages = list(host.messages(timeout=5.0))
    ticks = [m for m in messages if m["type"] == "tick"]
    assert [t["tick_index"] for t in ticks] == [1]
    assert messages[-1]["reason"] == "stopped"
    assert messages[-1]["total_ticks"] == 1


def test_host_reports_bad_config():
    with SimulationHost() as host:
        host.start({"max_days": -3})
        messages = list(host.messages(timeout=5.0))
    assert messages[0]["type"] == "error"
    assert messages[0]["fatal"]
    assert messages[-1]["reason"] == "error"


def test_unknown_message_is_not_fatal():
    with SimulationHost() as host:
        host.start(QUICK, seed=1, paused=True)
        host.send({"type": "dance"})
        host.stop()
        messages = list(host.messages(timeout=5.0))
    errors = [m for m in messages if m["type"] == "error"]
    assert errors and not errors[0]["fatal"]
    assert messages[-1]["reason"] == "stopped"


# --- Batches ---

def test_batch_aggregates_in_seed_order():
    report = run_batch(WON, [3, 1, 2])
    assert report.runs == 3
    assert [s["seed"] for s in report.summaries] == [3, 1, 2]
    assert report.reasons() == {"victory": 3}
    assert report.victory_rate() == 1.0
    assert report.mean_days("victory") == pytest.approx(1 / 1440)


def test_batch_result_independent_of_worker_count():
    serial = run_batch(WON, [1, 2])
    parallel = run_batch(WON, [1, 2], processes=2)
    assert serial.to_dict() == parallel.to_dict()


def test_empty_report():
    report = BatchReport()
    assert report.victory_rate() == 0.0
    assert report.mean_days() is None


# --- CLI ---

def test_cli_run_prints_summary(tmp_path, capsys):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(WON))
    assert main(["run", "--config", str(path), "--seed", "7"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["reason"] == "victory"
    assert out["seed"] == 7


def test_cli_batch_without_summaries(tmp_path, capsys):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(WON))
    assert main(["batch", "--config", str(path), "--runs", "2", "--processes", "1"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["runs"] == 2
    assert "summaries" not in out


def test_cli_bad_config_exits_2(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"max_days": "forever"}))
    assert main(["run", "--config", str(path)]) == 2
    assert main(["run", "--config", str(tmp_path / "missing.json")]) == 2
    path.write_text(json.dumps({"profile": {"preset": "nope"}}))
    assert main(["run", "--config", str(path), "--days", "1"]) == 2
