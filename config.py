#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Game configuration.

Constants and tunables only. No logic in this file.
"""

from pathlib import Path

# --- Storage ---
DATA_DIR = Path(__file__).parent / "data"
SAVE_KEY = "vibe_capitalist_save_v1"
SAVE_FILE = DATA_DIR / f"{SAVE_KEY}.json"
CATALOG_FILE = DATA_DIR / "catalog.json"

# --- Simulation ---
SIM_TICK_MS = 100              # real time between scheduler ticks
AUTOSAVE_INTERVAL_MS = 2000    # periodic full-state save
OFFLINE_MIN_SECONDS = 5.0      # shorter gaps are not reconciled

# --- Economy ---
INITIAL_CASH = 0.0
COST_MULTIPLIER = 1.15
MILESTONE_LEVELS = (25, 50, 100, 200, 300, 400)
MILESTONE_MULTIPLIER = 2.0

# --- Prestige ---
PRESTIGE_DIVISOR = 10_000_000
PRESTIGE_MULTIPLIER_PER_LEVEL = 0.5
PRESTIGE_UPGRADE_COST = 1

# --- Buy quantity ---
BUY_MAX = "MAX"
BUY_QUANTITY_CHOICES = (1, 10, 100, BUY_MAX)

# --- Window ---
SCREEN_W, SCREEN_H = 1024, 640
FPS = 60
