#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Single-slot save storage.

One JSON document per slot, always a full snapshot. Reads that fail for any
reason count as "no save"; writes that fail are dropped until the next one.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

import orjson
from pydantic import ValidationError

from model import GameCatalog
from state import GameState, dump_state, hydrate_state

logger = logging.getLogger(__name__)


class SaveSlot:
    def __init__(self, path: Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self, catalog: GameCatalog, now_ms: float) -> Optional[GameState]:
        try:
            raw = orjson.loads(self.path.read_bytes())
        except FileNotFoundError:
            return None
        except (OSError, orjson.JSONDecodeError) as e:
            logger.warning("Unreadable save at %s, starting fresh: %s", self.path, e)
            return None
        if not isinstance(raw, dict):
            logger.warning("Save at %s is not an object, starting fresh", self.path)
            return None
        try:
            return hydrate_state(raw, catalog, now_ms)
        except ValidationError as e:
            logger.warning("Invalid save at %s, starting fresh: %s", self.path, e)
            return None

    def save(self, state: GameState, now_ms: float) -> bool:
        payload = dump_state(state.model_copy(update={"last_save_time": now_ms}))
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_bytes(orjson.dumps(payload))
            os.replace(tmp, self.path)
        except OSError as e:
            logger.warning("Save to %s failed: %s", self.path, e)
            return False
        return True

    def erase(self) -> None:
        for p in (self.path, self.path.with_name(self.path.name + ".tmp")):
            try:
                p.unlink()
            except FileNotFoundError:
                pass
