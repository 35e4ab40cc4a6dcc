from __future__ import annotations

import pytest

from commands import buy_business
from model import BusinessDef, BusinessPhase, GameCatalog, MilestoneDef, UpgradeDef
from scheduler import commit_tick, compute_tick, resume_timers
from state import BusinessState, GameState

NOW = 1_000_000.0


def _catalog(**kwargs) -> GameCatalog:
    return GameCatalog(
        businesses=(
            BusinessDef(id="shop", name="Shop", base_cost=10, base_revenue=5, duration=10, unlock_cost=0, manager_cost=100),
            BusinessDef(id="mill", name="Mill", base_cost=100, base_revenue=50, duration=60, unlock_cost=100, manager_cost=1000),
        ),
        cost_multiplier=1.15,
        **kwargs,
    )


def _state(shop: BusinessState, cash: float = 0.0, **kwargs) -> GameState:
    return GameState(
        cash=cash,
        businesses={"shop": shop, "mill": BusinessState(id="mill")},
        last_reset_time=7,
        **kwargs,
    )


def _tick(state: GameState, catalog: GameCatalog, buy_quantity=1) -> GameState:
    return commit_tick(state, compute_tick(state, catalog, NOW, buy_quantity))


def test_manual_cycle_settles_exactly_once_and_goes_idle():
    shop = BusinessState(id="shop", level=2, is_owned=True, work_start_time=NOW - 35_000)

    after = _tick(_state(shop), _catalog())

    assert after.cash == pytest.approx(10)
    assert after.lifetime_earnings == pytest.approx(10)
    assert after.business("shop").work_start_time is None


def test_managed_cycle_batches_catch_up_and_reanchors():
    shop = BusinessState(id="shop", level=2, is_owned=True, is_manager_hired=True, work_start_time=NOW - 35_000)
    snapshot = _state(shop)

    result = compute_tick(snapshot, _catalog(), NOW)
    after = commit_tick(snapshot, result)

    assert result.cycles == {"shop": 3}
    assert after.cash == pytest.approx(30)
    assert after.business("shop").work_start_time == NOW - 5_000
    assert after.business("shop").phase(10_000, NOW) is BusinessPhase.RUNNING


def test_running_cycle_is_left_alone():
    shop = BusinessState(id="shop", level=2, is_owned=True, work_start_time=NOW - 5_000)
    state = _state(shop)

    result = compute_tick(state, _catalog(), NOW)

    assert not result.changed
    assert commit_tick(state, result) is state


def test_manager_starts_idle_business():
    shop = BusinessState(id="shop", level=1, is_owned=True, is_manager_hired=True)

    after = _tick(_state(shop), _catalog())

    assert after.business("shop").work_start_time == NOW
    assert after.cash == 0


def test_idle_business_without_manager_stays_idle():
    shop = BusinessState(id="shop", level=1, is_owned=True)
    state = _state(shop)

    assert _tick(state, _catalog()) is state


def test_revenue_includes_all_multipliers():
    catalog = _catalog(
        milestones=(MilestoneDef(business_id="shop", threshold=2, multiplier=2),),
        upgrades=(UpgradeDef(id="sign", business_id="shop", name="Sign", cost=1, multiplier=3),),
    )
    shop = BusinessState(id="shop", level=2, is_owned=True, work_start_time=NOW - 10_000)
    state = _state(shop, purchased_upgrades={"sign": True}, prestige_multiplier_level=2)

    after = _tick(state, catalog)

    # 5 * 2 levels * 2 prestige * 2 milestone * 3 upgrade
    assert after.cash == pytest.approx(120)


def test_auto_upgrade_spends_cash_earned_in_the_same_tick():
    shop = BusinessState(
        id="shop", level=2, is_owned=True, is_manager_hired=True, is_auto_upgrade_enabled=True,
        work_start_time=NOW - 35_000,
    )

    after = _tick(_state(shop), _catalog(), buy_quantity=1)

    assert after.business("shop").level == 3
    assert after.cash == pytest.approx(30 - 13.225)
    assert after.lifetime_earnings == pytest.approx(30)


def test_auto_upgrade_max_policy():
    shop = BusinessState(
        id="shop", level=2, is_owned=True, is_manager_hired=True, is_auto_upgrade_enabled=True,
        work_start_time=NOW - 35_000,
    )

    after = _tick(_state(shop), _catalog(), buy_quantity="MAX")

    assert after.business("shop").level == 4
    assert after.cash == pytest.approx(30 - 13.225 * 2.15)


def test_auto_upgrade_needs_flag_and_cash():
    shop = BusinessState(id="shop", level=2, is_owned=True, is_manager_hired=True, work_start_time=NOW - 35_000)
    after = _tick(_state(shop), _catalog())
    assert after.business("shop").level == 2

    auto = shop.model_copy(update={"is_auto_upgrade_enabled": True})
    after = _tick(_state(auto), _catalog(), buy_quantity=10)
    assert after.business("shop").level == 2
    assert after.cash == pytest.approx(30)


def test_commit_discards_tick_from_older_epoch():
    shop = BusinessState(id="shop", level=2, is_owned=True, is_manager_hired=True, work_start_time=NOW - 35_000)
    snapshot = _state(shop)
    result = compute_tick(snapshot, _catalog(), NOW)

    reset = snapshot.model_copy(update={"last_reset_time": 8, "cash": 0.0})

    assert commit_tick(reset, result) is reset


def test_commit_rebases_onto_changes_made_after_the_snapshot():
    shop = BusinessState(id="shop", level=2, is_owned=True, work_start_time=NOW - 35_000)
    snapshot = _state(shop, cash=200.0)
    result = compute_tick(snapshot, _catalog(), NOW)

    current = buy_business(snapshot, _catalog(), "mill")
    after = commit_tick(current, result)

    assert after.business("mill").is_owned
    assert after.cash == pytest.approx(100 + 10)
    assert after.business("shop").work_start_time is None


def test_commit_voids_auto_purchase_priced_at_a_stale_level():
    shop = BusinessState(
        id="shop", level=2, is_owned=True, is_manager_hired=True, is_auto_upgrade_enabled=True,
        work_start_time=NOW - 35_000,
    )
    snapshot = _state(shop, cash=20.0)
    result = compute_tick(snapshot, _catalog(), NOW)
    assert "shop" in result.purchases

    current = buy_business(snapshot, _catalog(), "shop", 1)
    after = commit_tick(current, result)

    assert after.business("shop").level == 3
    assert after.cash == pytest.approx(current.cash + 30)


def test_resume_timers_shifts_only_managed_cycles():
    paused_at = NOW - 3_600_000
    shop = BusinessState(id="shop", level=2, is_owned=True, is_manager_hired=True, work_start_time=paused_at - 4_000)
    mill = BusinessState(id="mill", level=1, is_owned=True, work_start_time=paused_at - 1_000)
    state = GameState(businesses={"shop": shop, "mill": mill})

    resumed = resume_timers(state, paused_at, NOW)

    assert resumed.business("shop").work_start_time == NOW - 4_000
    assert resumed.business("mill").work_start_time == paused_at - 1_000
    assert resume_timers(state, NOW, NOW) is state
