from __future__ import annotations

import orjson

from commands import buy_business
from game_data import default_catalog
from persistence import SaveSlot
from state import BusinessState, new_game_state

NOW = 1_700_000_000_000.0


def test_save_writes_full_snapshot_with_save_time(tmp_path):
    slot = SaveSlot(tmp_path / "save.json")
    state = new_game_state(default_catalog(), NOW - 60_000).with_business(
        BusinessState(id="coffee_shop", level=3, is_owned=True, work_start_time=NOW - 1000),
    )

    assert slot.save(state, NOW) is True

    raw = orjson.loads((tmp_path / "save.json").read_bytes())
    assert raw["lastSaveTime"] == NOW
    assert raw["businesses"]["coffee_shop"]["workStartTime"] == NOW - 1000
    assert raw["businesses"]["coffee_shop"]["isOwned"] is True
    assert state.last_save_time == NOW - 60_000

    loaded = slot.load(default_catalog(), NOW)
    assert loaded == state.model_copy(update={"last_save_time": NOW})


def test_missing_corrupt_or_invalid_save_loads_as_none(tmp_path):
    path = tmp_path / "save.json"
    slot = SaveSlot(path)
    assert slot.load(default_catalog(), NOW) is None

    path.write_bytes(b"{not json")
    assert slot.load(default_catalog(), NOW) is None

    path.write_bytes(b"[1, 2, 3]")
    assert slot.load(default_catalog(), NOW) is None

    path.write_bytes(orjson.dumps({"cash": 5, "businesses": {"freelancer": {"level": "lots"}}}))
    assert slot.load(default_catalog(), NOW) is None


def test_old_save_is_back_filled(tmp_path):
    path = tmp_path / "save.json"
    path.write_bytes(orjson.dumps({
        "cash": 42.5,
        "lifetimeEarnings": 100,
        "businesses": {
            "freelancer": {"id": "freelancer", "level": 12, "isOwned": True, "isManagerHired": True, "workStartTime": None},
            "retired_business": {"id": "retired_business", "level": 1, "isOwned": True},
        },
        "lastSaveTime": NOW - 10_000,
    }))

    loaded = SaveSlot(path).load(default_catalog(), NOW)

    assert loaded is not None
    assert loaded.cash == 42.5
    assert loaded.prestige_points == 0
    assert loaded.prestige_multiplier_level == 0
    assert loaded.purchased_upgrades == {}
    assert loaded.last_reset_time == int(NOW)
    assert loaded.business("freelancer").is_auto_upgrade_enabled is False
    assert loaded.business("freelancer").level == 12
    assert loaded.business("tech_startup") == BusinessState(id="tech_startup")
    assert "retired_business" not in loaded.businesses


def test_erase_removes_the_slot(tmp_path):
    slot = SaveSlot(tmp_path / "save.json")
    slot.save(new_game_state(default_catalog(), NOW), NOW)
    assert slot.exists()

    slot.erase()
    slot.erase()

    assert not slot.exists()
    assert slot.load(default_catalog(), NOW) is None


def test_failed_write_is_dropped(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    slot = SaveSlot(blocker / "save.json")

    assert slot.save(new_game_state(default_catalog(), NOW), NOW) is False


def test_save_with_owned_level_zero_starter_unlocks_for_free(tmp_path):
    path = tmp_path / "save.json"
    path.write_bytes(orjson.dumps({
        "cash": 10,
        "lifetimeEarnings": 0,
        "businesses": {
            "freelancer": {"id": "freelancer", "level": 0, "isOwned": True, "isManagerHired": False,
                           "isAutoUpgradeEnabled": False, "workStartTime": None},
        },
        "purchasedUpgrades": {},
        "lastSaveTime": NOW,
        "lastResetTime": NOW,
    }))

    loaded = SaveSlot(path).load(default_catalog(), NOW)
    after = buy_business(loaded, default_catalog(), "freelancer")

    assert not loaded.business("freelancer").is_owned
    assert after.business("freelancer").level == 1
    assert after.cash == 10
