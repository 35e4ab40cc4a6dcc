#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Arcade idle tycoon window.

The window only reads ``engine.state`` and calls engine commands; all
economy logic lives in the engine.
- rendering/runtime: arcade
- schema validation: pydantic
- JSON I/O: orjson (through the save slot and catalog loader)

Keys: UP/DOWN select, SPACE run cycle, B buy, M hire manager, A toggle
auto-buy, U buy next upgrade, Q cycle buy quantity, P prestige,
L spend a prestige point, ENTER dismiss offline earnings, F11 fullscreen.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from config import BUY_QUANTITY_CHOICES, CATALOG_FILE, FPS, SAVE_FILE, SCREEN_H, SCREEN_W, SIM_TICK_MS
from engine import GameEngine
from formatters import format_currency, format_time
from game_data import load_catalog
from persistence import SaveSlot


class RuntimeConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    window_width: int = SCREEN_W
    window_height: int = SCREEN_H
    title: str = "Vibe Capitalist"
    font_size: int = 14
    line_height: int = 26
    tick_ms: int = SIM_TICK_MS
    fps: int = FPS


def next_buy_quantity(current: object) -> object:
    choices = list(BUY_QUANTITY_CHOICES)
    try:
        idx = choices.index(current)
    except ValueError:
        return choices[0]
    return choices[(idx + 1) % len(choices)]


def next_upgrade_id(engine: GameEngine, business_id: str) -> Optional[str]:
    for upgrade in engine.catalog.upgrades_for(business_id):
        if not engine.state.owns_upgrade(upgrade.id):
            return upgrade.id
    return None


def business_lines(engine: GameEngine, selected: int) -> List[str]:
    s = engine.state
    now = engine.clock()
    out: List[str] = []
    for idx, defn in enumerate(engine.catalog.businesses):
        b = s.business(defn.id)
        if b is None:
            continue
        marker = ">" if idx == selected else " "
        if not b.is_owned:
            price = "FREE" if defn.is_starter else format_currency(defn.unlock_cost)
            out.append(f"{marker} {defn.name:<20} locked  unlock {price}")
            continue
        count, cost = engine.quote_for(defn.id)
        tags = ("MGR " if b.is_manager_hired else "") + ("AUTO" if b.is_auto_upgrade_enabled else "")
        bar = int(b.progress(defn.duration_ms, now) * 10)
        nxt = engine.catalog.next_milestone(defn.id, b.level)
        milestone = f"x2@{nxt.threshold}" if nxt is not None else "maxed"
        out.append(
            f"{marker} {defn.name:<20} lv{b.level:<5} [{'#' * bar}{'.' * (10 - bar)}] "
            f"{format_currency(engine.revenue_for(defn.id))}/{format_time(defn.duration)}  "
            f"buy x{count} {format_currency(cost)}  {milestone} {tags}"
        )
    return out


def header_lines(engine: GameEngine) -> List[str]:
    s = engine.state
    preview = engine.prestige_preview()
    out = [
        f"Cash {format_currency(s.cash)}   Run earnings {format_currency(s.lifetime_earnings)}   Buy x{engine.buy_quantity}",
        f"Prestige points {s.prestige_points}  level {s.prestige_multiplier_level}  "
        f"reset now for +{preview.points} ({preview.fraction * 100:.0f}% to next)",
    ]
    if engine.offline_earnings > 0:
        out.append(
            f"Welcome back! {format_currency(engine.offline_earnings)} earned in "
            f"{format_time(engine.offline_seconds)} (ENTER)"
        )
    return out


def run_arcade(engine: GameEngine, config: RuntimeConfig) -> None:
    import arcade

    class IdleArcadeWindow(arcade.Window):
        def __init__(self):
            super().__init__(
                config.window_width, config.window_height, config.title,
                resizable=True, update_rate=1 / max(1, config.fps),
            )
            self.selected = 0

        @property
        def selected_id(self) -> str:
            return engine.catalog.businesses[self.selected].id

        def on_update(self, delta_time: float):
            engine.advance(delta_time)

        def on_key_press(self, key: int, modifiers: int):
            count = len(engine.catalog.businesses)
            if key == arcade.key.UP:
                self.selected = (self.selected - 1) % count
            elif key == arcade.key.DOWN:
                self.selected = (self.selected + 1) % count
            elif key == arcade.key.SPACE:
                engine.start_cycle(self.selected_id)
            elif key == arcade.key.B:
                engine.buy_business(self.selected_id)
            elif key == arcade.key.M:
                engine.hire_manager(self.selected_id)
            elif key == arcade.key.A:
                engine.toggle_auto_upgrade(self.selected_id)
            elif key == arcade.key.U:
                upgrade_id = next_upgrade_id(engine, self.selected_id)
                if upgrade_id is not None:
                    engine.buy_upgrade(upgrade_id)
            elif key == arcade.key.Q:
                engine.set_buy_quantity(next_buy_quantity(engine.buy_quantity))
            elif key == arcade.key.P:
                engine.prestige()
            elif key == arcade.key.L:
                engine.buy_prestige_upgrade()
            elif key == arcade.key.ENTER:
                engine.clear_offline_earnings()
            elif key == arcade.key.F11:
                self.set_fullscreen(not self.fullscreen)

        def on_draw(self):
            self.clear()
            y = self.height - config.line_height
            for line in header_lines(engine) + [""] + business_lines(engine, self.selected):
                arcade.draw_text(line, 16, y, arcade.color.WHITE, config.font_size, font_name="Courier New")
                y -= config.line_height

        def on_close(self):
            engine.save()
            super().on_close()

    IdleArcadeWindow()
    arcade.run()


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Arcade idle tycoon runner")
    parser.add_argument("--save", default=str(SAVE_FILE), help=f"Save slot file (default: {SAVE_FILE})")
    parser.add_argument("--catalog", default=str(CATALOG_FILE), help=f"Catalog override (default: {CATALOG_FILE})")
    parser.add_argument("--reset", action="store_true", help="Hard reset before starting")
    return parser.parse_args()


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = _parse_args()
    config = RuntimeConfig()
    engine = GameEngine(load_catalog(Path(args.catalog)), slot=SaveSlot(Path(args.save)), tick_ms=config.tick_ms)
    if args.reset:
        engine.hard_reset()
    else:
        engine.start()
    run_arcade(engine, config)


if __name__ == "__main__":
    main()
