from __future__ import annotations

import sys

import pytest

import idle_sim
import text_sim
from engine import GameEngine
from formatters import format_currency, format_time
from game_data import default_catalog


def test_text_parse_args_defaults():
    args = text_sim.parse_args([])

    assert args.ticks == 50
    assert args.buy == "1"
    assert args.greedy is False
    assert args.save is None


def test_text_run_greedy_earns_and_saves(tmp_path, capsys):
    save = tmp_path / "save.json"

    engine = text_sim.run(ticks=30, seconds_per_tick=1.0, save_path=save, greedy=True, every=10)

    assert engine.ticks == 30
    assert engine.state.lifetime_earnings > 0
    assert engine.state.business("freelancer").is_owned
    assert save.exists()
    out = capsys.readouterr().out
    assert "[SYSTEM] tick=10" in out
    assert "freelancer" in out


def test_text_run_without_player_earns_nothing():
    engine = text_sim.run(ticks=5, seconds_per_tick=1.0, every=0)

    assert engine.state.cash == 0
    assert not engine.state.business("freelancer").is_owned


def test_synthetic_clock_only_moves_forward():
    clock = text_sim.SyntheticClock(1000)
    clock.advance(-50)
    clock.advance(250)

    assert clock() == 1250


def test_next_buy_quantity_cycles():
    assert idle_sim.next_buy_quantity(1) == 10
    assert idle_sim.next_buy_quantity(100) == "MAX"
    assert idle_sim.next_buy_quantity("MAX") == 1
    assert idle_sim.next_buy_quantity(7) == 1


def test_runtime_config_defaults_and_rejects_unknown_keys():
    config = idle_sim.RuntimeConfig()

    assert config.title == "Vibe Capitalist"
    assert config.tick_ms == 100
    with pytest.raises(ValueError):
        idle_sim.RuntimeConfig(fps_cap=30)


def test_idle_parse_args_defaults(monkeypatch):
    monkeypatch.setattr(sys, "argv", ["idle_sim.py"])
    args = idle_sim._parse_args()

    assert args.save.endswith("vibe_capitalist_save_v1.json")
    assert args.reset is False


def test_screen_lines_for_fresh_engine():
    engine = GameEngine(default_catalog(), clock=lambda: 0.0)

    lines = idle_sim.business_lines(engine, selected=0)
    header = idle_sim.header_lines(engine)

    assert lines[0].startswith("> Freelancer")
    assert "FREE" in lines[0]
    assert "unlock $500" in lines[1]
    assert header[0].startswith("Cash $0")
    assert len(header) == 2


def test_next_upgrade_id_skips_owned():
    engine = GameEngine(default_catalog(), clock=lambda: 0.0)
    assert idle_sim.next_upgrade_id(engine, "freelancer") == "upg_freelancer_1"

    engine._state = engine.state.model_copy(update={"purchased_upgrades": {"upg_freelancer_1": True}})
    assert idle_sim.next_upgrade_id(engine, "freelancer") == "upg_freelancer_2"
    assert idle_sim.next_upgrade_id(engine, "nope") is None


def test_format_currency():
    assert format_currency(0) == "$0"
    assert format_currency(12.5) == "$12.5"
    assert format_currency(1500) == "$1.5K"
    assert format_currency(999.999) == "$1K"
    assert format_currency(2_500_000) == "$2.5M"
    assert format_currency(-1500) == "-$1.5K"


def test_format_time():
    assert format_time(5.2) == "6s"
    assert format_time(125) == "2m 5s"
    assert format_time(7260) == "2h 1m"


def test_format_time_carries_rounded_seconds():
    assert format_time(59.5) == "1m 0s"
    assert format_time(119.5) == "2m 0s"
    assert format_time(3599.5) == "1h 0m"
