#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Text-mode tycoon runner.

Drives the engine with a synthetic clock so a long session can be replayed
in a blink, and prints on every reported tick:
- cash, run earnings and prestige standing
- every business: level, owner/manager/auto flags, timer phase and revenue
- the buy-quantity policy in effect
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from config import BUY_MAX, BUY_QUANTITY_CHOICES, SAVE_FILE, SIM_TICK_MS
from engine import GameEngine, wall_clock_ms
from formatters import format_currency, format_time
from game_data import load_catalog
from persistence import SaveSlot


class SyntheticClock:
    def __init__(self, start_ms: float = 0.0):
        self.now_ms = float(start_ms)

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, ms: float) -> None:
        self.now_ms += max(0.0, float(ms))


def _dump_system(engine: GameEngine) -> None:
    s = engine.state
    preview = engine.prestige_preview()
    print(f"[SYSTEM] tick={engine.ticks} buy={engine.buy_quantity}")
    print(f"- cash: {format_currency(s.cash)}  run earnings: {format_currency(s.lifetime_earnings)}")
    print(
        f"- prestige: points={s.prestige_points} level={s.prestige_multiplier_level} "
        f"next_reset_gain={preview.points} ({preview.fraction * 100:.0f}% to next)"
    )
    if engine.offline_earnings > 0:
        print(f"- offline: {format_currency(engine.offline_earnings)} over {format_time(engine.offline_seconds)}")


def _dump_businesses(engine: GameEngine) -> None:
    s = engine.state
    now = engine.clock()
    print(f"[BUSINESSES] count={len(engine.catalog.businesses)}")
    for defn in engine.catalog.businesses:
        b = s.business(defn.id)
        if b is None:
            continue
        flags = "".join([
            "O" if b.is_owned else "-",
            "M" if b.is_manager_hired else "-",
            "A" if b.is_auto_upgrade_enabled else "-",
        ])
        phase = b.phase(defn.duration_ms, now).value
        progress = b.progress(defn.duration_ms, now) * 100
        print(
            f"- {defn.id:<20} lv={b.level:<5} [{flags}] {phase:<9} {progress:5.1f}% "
            f"rev/cycle={format_currency(engine.revenue_for(defn.id))}"
        )


def play_greedy(engine: GameEngine) -> None:
    """Naive player: keep manual cycles running, buy whatever fits."""
    for defn in engine.catalog.businesses:
        engine.buy_business(defn.id)
        engine.hire_manager(defn.id)
        b = engine.state.business(defn.id)
        if b is not None and b.is_manager_hired and not b.is_auto_upgrade_enabled:
            engine.toggle_auto_upgrade(defn.id)
        engine.start_cycle(defn.id)
    for upgrade in engine.catalog.upgrades:
        engine.buy_upgrade(upgrade.id)


def run(
    ticks: int,
    seconds_per_tick: float,
    save_path: Optional[Path] = None,
    catalog_path: Optional[Path] = None,
    buy: str = "1",
    greedy: bool = False,
    every: int = 1,
) -> GameEngine:
    clock = SyntheticClock(wall_clock_ms())
    slot = SaveSlot(save_path) if save_path is not None else None
    engine = GameEngine(load_catalog(catalog_path), slot=slot, clock=clock, tick_ms=SIM_TICK_MS)
    engine.start()
    engine.set_buy_quantity(BUY_MAX if buy.upper() == BUY_MAX else int(buy))

    step_ms = max(1.0, seconds_per_tick * 1000.0)
    for i in range(max(0, ticks)):
        clock.advance(step_ms)
        if greedy:
            play_greedy(engine)
        engine.tick()
        if every > 0 and (i + 1) % every == 0:
            _dump_system(engine)
            _dump_businesses(engine)
            print()
    engine.save()
    return engine


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Text idle tycoon runner")
    parser.add_argument("--ticks", type=int, default=50, help="number of ticks to simulate")
    parser.add_argument("--seconds-per-tick", type=float, default=SIM_TICK_MS / 1000.0, help="synthetic seconds per tick")
    parser.add_argument("--save", default=None, help=f"save file (default: none, e.g. {SAVE_FILE})")
    parser.add_argument("--catalog", default=None, help="JSON catalog override")
    parser.add_argument("--buy", default="1", choices=[str(q) for q in BUY_QUANTITY_CHOICES], help="buy-quantity policy")
    parser.add_argument("--greedy", action="store_true", help="let a naive player buy and start cycles")
    parser.add_argument("--every", type=int, default=10, help="print state every N ticks")
    return parser.parse_args(argv)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = parse_args()
    run(
        ticks=args.ticks,
        seconds_per_tick=args.seconds_per_tick,
        save_path=Path(args.save) if args.save else None,
        catalog_path=Path(args.catalog) if args.catalog else None,
        buy=args.buy,
        greedy=args.greedy,
        every=args.every,
    )


if __name__ == "__main__":
    main()
