#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Static game tables and their loader.

Defaults are built in; an optional JSON file with the same row layout can
replace any of the tables. The file is parsed with orjson and validated with
pydantic; malformed files raise instead of being silently patched.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

import orjson
from pydantic import BaseModel, ConfigDict, Field

from config import (
    CATALOG_FILE,
    COST_MULTIPLIER,
    INITIAL_CASH,
    MILESTONE_LEVELS,
    MILESTONE_MULTIPLIER,
)
from model import BusinessDef, GameCatalog, MilestoneDef, UpgradeDef

DEFAULT_BUSINESSES: List[Dict[str, object]] = [
    {"id": "freelancer", "name": "Freelancer", "description": "Start small, dream big",
     "baseCost": 10, "baseRevenue": 15, "duration": 0.6, "unlockCost": 0, "managerCost": 500},
    {"id": "coffee_shop", "name": "Coffee Shop", "description": "Brewing profits one cup at a time",
     "baseCost": 500, "baseRevenue": 650, "duration": 5, "unlockCost": 500, "managerCost": 10_000},
    {"id": "tech_startup", "name": "Tech Startup", "description": "Disrupt the market",
     "baseCost": 50_000, "baseRevenue": 60_000, "duration": 30, "unlockCost": 50_000, "managerCost": 1_000_000},
    {"id": "investment_fund", "name": "Investment Fund", "description": "Let money work for you",
     "baseCost": 5_000_000, "baseRevenue": 5_500_000, "duration": 300, "unlockCost": 5_000_000,
     "managerCost": 100_000_000},
    {"id": "global_corporation", "name": "Global Corporation", "description": "Empire building at scale",
     "baseCost": 500_000_000, "baseRevenue": 525_000_000, "duration": 3600, "unlockCost": 500_000_000,
     "managerCost": 10_000_000_000},
    {"id": "quantum_computing", "name": "Quantum Computing", "description": "The future is now",
     "baseCost": 100_000_000_000, "baseRevenue": 102_000_000_000, "duration": 43_200,
     "unlockCost": 100_000_000_000, "managerCost": 2_000_000_000_000},
]

DEFAULT_UPGRADES: List[Dict[str, object]] = [
    {"id": "upg_freelancer_1", "businessId": "freelancer", "name": "Ergonomic Chair", "cost": 2_500, "multiplier": 3},
    {"id": "upg_freelancer_2", "businessId": "freelancer", "name": "Mechanical Keyboard", "cost": 10_000, "multiplier": 3},
    {"id": "upg_coffee_1", "businessId": "coffee_shop", "name": "Fair Trade Beans", "cost": 25_000, "multiplier": 3},
    {"id": "upg_coffee_2", "businessId": "coffee_shop", "name": "Espresso Machine", "cost": 100_000, "multiplier": 3},
    {"id": "upg_startup_1", "businessId": "tech_startup", "name": "Ping Pong Table", "cost": 1_000_000, "multiplier": 3},
    {"id": "upg_startup_2", "businessId": "tech_startup", "name": "Free Snacks", "cost": 5_000_000, "multiplier": 3},
    {"id": "upg_fund_1", "businessId": "investment_fund", "name": "Insider Trading", "cost": 50_000_000, "multiplier": 3},
    {"id": "upg_corp_1", "businessId": "global_corporation", "name": "Tax Haven", "cost": 5_000_000_000, "multiplier": 3},
    {"id": "upg_quantum_1", "businessId": "quantum_computing", "name": "Cold Fusion", "cost": 1_000_000_000_000, "multiplier": 3},
]


class BusinessRow(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    name: str
    description: str = ""
    base_cost: float = Field(alias="baseCost", gt=0)
    base_revenue: float = Field(alias="baseRevenue", ge=0)
    duration: float = Field(gt=0)
    unlock_cost: float = Field(alias="unlockCost", ge=0)
    manager_cost: float = Field(alias="managerCost", ge=0)


class MilestoneRow(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    business_id: str = Field(alias="businessId")
    threshold: int = Field(ge=1)
    multiplier: float = Field(gt=0)
    name: str = ""


class UpgradeRow(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    business_id: str = Field(alias="businessId")
    name: str
    description: str = ""
    cost: float = Field(ge=0)
    multiplier: float = Field(gt=0)


class CatalogFile(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    initial_cash: float = Field(default=INITIAL_CASH, alias="initialCash", ge=0)
    cost_multiplier: float = Field(default=COST_MULTIPLIER, alias="costMultiplier", gt=1)
    businesses: List[BusinessRow] = Field(default_factory=lambda: [BusinessRow.model_validate(r) for r in DEFAULT_BUSINESSES])
    milestones: Optional[List[MilestoneRow]] = None
    upgrades: List[UpgradeRow] = Field(default_factory=lambda: [UpgradeRow.model_validate(r) for r in DEFAULT_UPGRADES])


def _write_json(path: Path, obj: object) -> None:
    path.write_bytes(orjson.dumps(obj, option=orjson.OPT_INDENT_2))


def _default_milestones(businesses: List[BusinessRow]) -> List[MilestoneRow]:
    return [
        MilestoneRow(business_id=b.id, threshold=level, multiplier=MILESTONE_MULTIPLIER, name=f"{b.name} Profits x2")
        for b in businesses
        for level in MILESTONE_LEVELS
    ]


def build_catalog(data: CatalogFile) -> GameCatalog:
    milestones = data.milestones if data.milestones is not None else _default_milestones(data.businesses)
    known = {b.id for b in data.businesses}
    return GameCatalog(
        businesses=tuple(
            BusinessDef(
                id=b.id,
                name=b.name,
                base_cost=b.base_cost,
                base_revenue=b.base_revenue,
                duration=b.duration,
                unlock_cost=b.unlock_cost,
                manager_cost=b.manager_cost,
                description=b.description,
            )
            for b in data.businesses
        ),
        milestones=tuple(
            MilestoneDef(business_id=m.business_id, threshold=m.threshold, multiplier=m.multiplier, name=m.name)
            for m in milestones
            if m.business_id in known
        ),
        upgrades=tuple(
            UpgradeDef(
                id=u.id,
                business_id=u.business_id,
                name=u.name,
                cost=u.cost,
                multiplier=u.multiplier,
                description=u.description,
            )
            for u in data.upgrades
            if u.business_id in known
        ),
        cost_multiplier=data.cost_multiplier,
        initial_cash=data.initial_cash,
    )


def default_catalog() -> GameCatalog:
    return build_catalog(CatalogFile())


def load_catalog(path: Optional[Path] = None) -> GameCatalog:
    """Single entry point for both runners: file override or built-in tables."""
    path = Path(path) if path is not None else CATALOG_FILE
    if not path.exists():
        return default_catalog()
    return build_catalog(CatalogFile.model_validate(orjson.loads(path.read_bytes())))


def write_default_catalog(path: Optional[Path] = None) -> Path:
    path = Path(path) if path is not None else CATALOG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    _write_json(path, CatalogFile().model_dump(by_alias=True, exclude={"milestones"}))
    return path
