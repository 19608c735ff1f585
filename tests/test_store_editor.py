from __future__ import annotations

import pytest

from franchise_simulator.errors import StoreAddRejected, StoreRemoveRejected
from franchise_simulator.services.store_editor import (
    StoreEditSession,
    add_store,
    can_add_store,
    remove_store,
)


def _assert_cash_is_folded(result):
    running = 0.0
    for month in result.monthly_results:
        running += month.cash_flow
        assert month.cumulative_cash == pytest.approx(running)


@pytest.mark.parametrize("month", [1, 2, 3, 61, 100])
def test_cannot_add_in_setup_period_or_past_horizon(result_55k, month):
    assert not can_add_store(result_55k.monthly_results, month, result_55k.total_investment)


def test_can_add_once_profit_covers_capex(result_55k):
    months = result_55k.monthly_results

    assert result_55k.month(16).cumulative_cash < -35000
    assert not can_add_store(months, 16, 55000)
    assert result_55k.month(17).cumulative_cash >= -35000
    assert can_add_store(months, 17, 55000)


def test_add_store_rejected_without_accumulated_profit(result_55k):
    with pytest.raises(StoreAddRejected) as excinfo:
        add_store(result_55k, 4)

    assert excinfo.value.month == 4
    assert "accumulated profit" in excinfo.value.reason


def test_add_store_rejected_in_setup_period(result_55k):
    with pytest.raises(StoreAddRejected) as excinfo:
        add_store(result_55k, 3)

    assert "setup period" in excinfo.value.reason


def test_add_store_recalculates_downstream_months(result_55k):
    edited = add_store(result_55k, 40)

    assert edited.monthly_results[:39] == result_55k.monthly_results[:39]
    assert [m.stores for m in edited.monthly_results[39:]] == [3] * 21

    month40 = edited.month(40)
    assert month40.total_revenue == pytest.approx(result_55k.month(40).total_revenue)
    assert month40.capital_expenditure == 20000
    assert month40.resupply == pytest.approx(month40.gross_profit * 0.10)
    assert month40.cash_flow == pytest.approx(month40.net_profit - 20000)
    assert month40.stores_in_implementation == 1
    assert edited.month(41).stores_in_implementation == 0

    month41 = edited.month(41)
    assert month41.total_revenue == pytest.approx(result_55k.month(41).total_revenue * 1.5)
    assert month41.revenue_per_store == pytest.approx(month41.total_revenue / 3)
    assert month41.capital_expenditure == 0

    _assert_cash_is_folded(edited)
    assert edited.final_cash == edited.monthly_results[-1].cumulative_cash
    assert edited.roi == pytest.approx(edited.final_cash / 55000 * 100)
    assert edited.total_investment == 55000


def test_add_store_leaves_original_untouched(result_55k):
    before = result_55k.model_copy(deep=True)

    add_store(result_55k, 40)

    assert result_55k == before
    assert result_55k.month(40).stores == 2


def test_add_store_recomputes_payback(result_55k):
    edited = add_store(result_55k, 17)

    payback = edited.payback_period
    assert payback > 0
    assert edited.month(payback).cumulative_cash >= 0
    assert all(m.cumulative_cash < 0 for m in edited.monthly_results[: payback - 1])


def test_add_store_in_last_month(result_55k):
    edited = add_store(result_55k, 60)

    assert edited.month(60).stores == 3
    assert edited.month(59) == result_55k.month(59)
    assert edited.final_cash == pytest.approx(edited.month(59).cumulative_cash + edited.month(60).cash_flow)


def test_remove_store_scales_revenue_down(result_55k):
    edited = remove_store(result_55k, 20)

    assert edited.monthly_results[:19] == result_55k.monthly_results[:19]
    assert [m.stores for m in edited.monthly_results[19:]] == [1] * 41
    assert edited.month(20).total_revenue == pytest.approx(result_55k.month(20).total_revenue / 2)
    assert edited.month(20).cogs == pytest.approx(edited.month(20).total_revenue * 0.61)
    _assert_cash_is_folded(edited)


def test_remove_store_refunds_store_opening_that_month(result_55k):
    edited = remove_store(result_55k, 13)

    assert result_55k.month(13).capital_expenditure == 20000
    assert edited.month(13).capital_expenditure == 0
    assert edited.month(13).stores == 1
    _assert_cash_is_folded(edited)


def test_remove_store_added_the_same_month_keeps_revenue(result_55k):
    added = add_store(result_55k, 40)

    edited = remove_store(added, 40)

    month40 = edited.month(40)
    assert month40.stores == 2
    assert month40.stores_in_implementation == 0
    assert month40.total_revenue == pytest.approx(result_55k.month(40).total_revenue)
    assert month40.capital_expenditure == 0
    assert edited.month(41).stores == 2
    assert edited.month(41).total_revenue == pytest.approx(result_55k.month(41).total_revenue)
    _assert_cash_is_folded(edited)


@pytest.mark.parametrize("month", [3, 5, 61])
def test_remove_store_rejected(result_55k, month):
    with pytest.raises(StoreRemoveRejected):
        remove_store(result_55k, month)


def test_session_revert_returns_original(result_55k):
    session = StoreEditSession(result_55k)

    session.add_store(40)
    session.remove_store(50)
    assert session.has_edits
    assert session.current != result_55k

    reverted = session.revert()

    assert reverted is result_55k
    assert session.current is result_55k
    assert not session.has_edits


def test_session_keeps_state_after_rejected_edit(result_55k):
    session = StoreEditSession(result_55k)

    with pytest.raises(StoreAddRejected):
        session.add_store(2)

    assert session.current is result_55k
    assert not session.has_edits
    assert session.can_add_store(30)
