#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Static data model (Enums + frozen dataclasses).

Definitions here are read once at startup and never mutated; run-scoped,
mutable data lives in ``state``.
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple


# =============================
# Enums
# =============================
class BusinessPhase(Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"


# =============================
# Definitions
# =============================
@dataclass(frozen=True)
class BusinessDef:
    id: str
    name: str
    base_cost: float
    base_revenue: float
    duration: float  # seconds per cycle
    unlock_cost: float
    manager_cost: float
    description: str = ""

    @property
    def duration_ms(self) -> float:
        return self.duration * 1000.0

    @property
    def is_starter(self) -> bool:
        return self.unlock_cost <= 0


@dataclass(frozen=True)
class MilestoneDef:
    business_id: str
    threshold: int
    multiplier: float
    name: str = ""

    @property
    def id(self) -> str:
        return f"{self.business_id}_{self.threshold}"


@dataclass(frozen=True)
class UpgradeDef:
    id: str
    business_id: str
    name: str
    cost: float
    multiplier: float
    description: str = ""


@dataclass(frozen=True)
class GameCatalog:
    """Lookup tables for one process lifetime."""

    businesses: Tuple[BusinessDef, ...]
    milestones: Tuple[MilestoneDef, ...] = ()
    upgrades: Tuple[UpgradeDef, ...] = ()
    cost_multiplier: float = 1.15
    initial_cash: float = 0.0
    _business_by_id: Dict[str, BusinessDef] = field(default_factory=dict, init=False, repr=False, compare=False)
    _upgrade_by_id: Dict[str, UpgradeDef] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._business_by_id.update({b.id: b for b in self.businesses})
        self._upgrade_by_id.update({u.id: u for u in self.upgrades})

    @property
    def business_ids(self) -> List[str]:
        return [b.id for b in self.businesses]

    def business(self, business_id: str) -> Optional[BusinessDef]:
        return self._business_by_id.get(business_id)

    def upgrade(self, upgrade_id: str) -> Optional[UpgradeDef]:
        return self._upgrade_by_id.get(upgrade_id)

    def upgrades_for(self, business_id: str) -> List[UpgradeDef]:
        return [u for u in self.upgrades if u.business_id == business_id]

    def milestones_for(self, business_id: str) -> List[MilestoneDef]:
        return sorted((m for m in self.milestones if m.business_id == business_id), key=lambda m: m.threshold)

    def unlock_multiplier(self, business_id: str, level: int) -> float:
        out = 1.0
        for m in self.milestones:
            if m.business_id == business_id and level >= m.threshold:
                out *= m.multiplier
        return out

    def upgrade_multiplier(self, business_id: str, purchased: Mapping[str, bool]) -> float:
        out = 1.0
        for u in self.upgrades:
            if u.business_id == business_id and purchased.get(u.id):
                out *= u.multiplier
        return out

    def next_milestone(self, business_id: str, level: int) -> Optional[MilestoneDef]:
        for m in self.milestones_for(business_id):
            if m.threshold > level:
                return m
        return None
