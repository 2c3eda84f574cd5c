"""Tests for the position tracker: average price, realized PnL ledger."""

import pytest

from grid_core.errors import InvalidOrder
from grid_core.position import PositionTracker


@pytest.fixture
def tracker() -> PositionTracker:
    return PositionTracker()


def test_two_buys_weighted_average(tracker: PositionTracker) -> None:
    tracker.apply_fill(1.0, 100.0, is_buy=True)
    tracker.apply_fill(3.0, 110.0, is_buy=True)
    assert tracker.quantity == 4.0
    assert tracker.avg_price == pytest.approx((1 * 100 + 3 * 110) / 4)
    assert tracker.total_cost == pytest.approx(430.0)


def test_sell_realizes_against_average(tracker: PositionTracker) -> None:
    tracker.apply_fill(1.0, 100.0, is_buy=True)
    tracker.apply_fill(3.0, 110.0, is_buy=True)
    avg = tracker.avg_price

    realized = tracker.apply_fill(3.0, 120.0, is_buy=False)

    assert realized == pytest.approx((120.0 - avg) * 3)
    assert tracker.avg_price == avg
    assert tracker.quantity == pytest.approx(1.0)
    assert tracker.ledger == {"TRADE_1": pytest.approx(37.5)}
    assert tracker.total_realized == pytest.approx(37.5)


def test_buy_realizes_nothing(tracker: PositionTracker) -> None:
    assert tracker.apply_fill(0.5, 100.0, is_buy=True) == 0.0
    assert tracker.ledger == {}


def test_ledger_keeps_order(tracker: PositionTracker) -> None:
    tracker.apply_fill(2.0, 100.0, is_buy=True)
    tracker.apply_fill(1.0, 90.0, is_buy=False)
    tracker.apply_fill(1.0, 105.0, is_buy=False)
    assert list(tracker.ledger) == ["TRADE_1", "TRADE_2"]
    assert list(tracker.ledger.values()) == [pytest.approx(-10.0), pytest.approx(5.0)]
    assert tracker.total_realized == pytest.approx(-5.0)


def test_unrealized_pnl(tracker: PositionTracker) -> None:
    tracker.apply_fill(2.0, 100.0, is_buy=True)
    assert tracker.unrealized_pnl(103.0) == pytest.approx(6.0)
    snap = tracker.snapshot(97.0)
    assert snap.quantity == 2.0
    assert snap.avg_price == 100.0
    assert snap.unrealized_pnl == pytest.approx(-6.0)


def test_flat_position_has_no_unrealized(tracker: PositionTracker) -> None:
    assert tracker.unrealized_pnl(12345.0) == 0.0


def test_sell_from_flat_goes_negative_without_touching_average(tracker: PositionTracker) -> None:
    realized = tracker.apply_fill(1.0, 100.0, is_buy=False)
    assert tracker.quantity == -1.0
    assert tracker.avg_price == 0.0
    assert realized == pytest.approx(100.0)


def test_buy_back_to_zero_keeps_average(tracker: PositionTracker) -> None:
    tracker.apply_fill(1.0, 100.0, is_buy=True)
    tracker.apply_fill(2.0, 110.0, is_buy=False)
    tracker.apply_fill(1.0, 90.0, is_buy=True)
    assert tracker.quantity == 0.0
    assert tracker.avg_price == 100.0


@pytest.mark.parametrize("qty,price", [(0.0, 100.0), (-1.0, 100.0), (1.0, 0.0), (1.0, float("nan"))])
def test_invalid_fill_leaves_state_untouched(tracker: PositionTracker, qty: float, price: float) -> None:
    tracker.apply_fill(1.0, 100.0, is_buy=True)
    with pytest.raises(InvalidOrder):
        tracker.apply_fill(qty, price, is_buy=False)
    assert tracker.quantity == 1.0
    assert tracker.avg_price == 100.0
    assert tracker.ledger == {}
