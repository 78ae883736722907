"""
Tests for pay-as-bid clearing.
"""
import random

import pytest

from energy_market.core.engine import ClearingEngine, pay_as_bid_matching
from energy_market.core.models import MarketInput
from energy_market.core.statistics import ClearingStatistics

from market_helpers import ask, bid


def test_exact_match_equal_price(engine):
    """One bid and one ask with equal energy and price produce a single match."""
    output = engine.clear(MarketInput(orders=[ask(1, 2.0, 0.30), bid(2, 2.0, 0.30)]))

    assert len(output.matches) == 1
    m = output.matches[0]
    assert m.bid_id == 2
    assert m.ask_id == 1
    assert m.energy_kwh == 2.0
    assert m.price_euro_per_kwh == 0.3


def test_price_priority_across_bids(engine):
    """The highest bid is served first, the next bid gets what is left."""
    output = engine.clear(MarketInput(orders=[
        ask(1, 3.0, 0.30),
        bid(2, 2.0, 0.30),
        bid(3, 2.0, 0.40),
    ]))

    assert len(output.matches) == 2
    m1, m2 = output.matches
    assert (m1.bid_id, m1.ask_id, m1.energy_kwh, m1.price_euro_per_kwh) == (3, 1, 2.0, 0.4)
    assert (m2.bid_id, m2.ask_id, m2.energy_kwh, m2.price_euro_per_kwh) == (2, 1, 1.0, 0.3)
    assert sum(m.energy_kwh for m in output.matches) <= 3.0


def test_price_priority_across_asks(engine):
    """The cheapest ask is consumed first."""
    output = engine.clear(MarketInput(orders=[
        ask(1, 2.0, 0.25),
        ask(2, 3.0, 0.20),
        bid(3, 4.0, 0.30),
    ]))

    assert len(output.matches) == 2
    m1, m2 = output.matches
    assert (m1.ask_id, m1.energy_kwh, m1.price_euro_per_kwh) == (2, 3.0, 0.3)
    assert (m2.ask_id, m2.energy_kwh, m2.price_euro_per_kwh) == (1, 1.0, 0.3)


def test_no_crossing(engine):
    """A bid below every ask never matches."""
    output = engine.clear(MarketInput(orders=[
        ask(1, 2.0, 0.30),
        ask(2, 2.0, 0.35),
        bid(3, 2.0, 0.29),
    ]))
    assert output.matches == []


@pytest.mark.parametrize("orders", [
    [],
    [bid(1, 1.0, 0.3)],
    [ask(1, 1.0, 0.3), ask(2, 1.0, 0.2)],
])
def test_one_sided_or_empty_batch(engine, orders):
    """Batches without both sides clear to an empty output."""
    assert engine.clear(MarketInput(orders=orders)).matches == []


def test_ask_carries_remaining_energy_across_bids(engine):
    """An ask is split over several bids and stops being used once empty."""
    output = engine.clear(MarketInput(orders=[
        ask(1, 5.0, 0.10),
        bid(2, 2.0, 0.50),
        bid(3, 2.0, 0.40),
        bid(4, 2.0, 0.30),
    ]))

    assert [(m.bid_id, m.ask_id, m.energy_kwh) for m in output.matches] == [
        (2, 1, 2.0),
        (3, 1, 2.0),
        (4, 1, 1.0),
    ]


def test_pay_as_bid_price():
    """Every match settles at the bid's price, never the ask's."""
    orders = [
        ask(1, 1.0, 0.05),
        ask(2, 1.0, 0.15),
        bid(3, 1.5, 0.42),
        bid(4, 1.0, 0.17),
    ]
    output = pay_as_bid_matching(MarketInput(orders=orders))
    bid_prices = {o.id: o.price_euro_per_kwh for o in orders}

    assert len(output.matches) == 3
    for m in output.matches:
        assert m.price_euro_per_kwh == bid_prices[m.bid_id]


def test_rounding_uses_unrounded_bookkeeping(engine):
    """Matches report rounded energy, remainders are tracked unrounded."""
    output = engine.clear(MarketInput(orders=[
        ask(1, 1.23456, 0.1),
        ask(2, 5.0, 0.2),
        bid(3, 3.0, 0.3),
    ]))

    assert len(output.matches) == 2
    assert output.matches[0].energy_kwh == 1.235
    # 3.0 - 1.23456 = 1.76544
    assert output.matches[1].energy_kwh == 1.765


def test_ask_below_threshold_is_skipped(engine):
    """An ask whose energy is at or below the threshold is never matched."""
    output = engine.clear(MarketInput(orders=[
        ask(1, 0.001, 0.1),
        ask(2, 0.0005, 0.1),
        ask(3, 1.0, 0.2),
        bid(4, 1.0, 0.3),
    ]))

    assert [m.ask_id for m in output.matches] == [3]


def test_drained_ask_residue_is_skipped(engine):
    """An ask drained below the threshold by one bid is not matched by the next."""
    output = engine.clear(MarketInput(orders=[
        ask(1, 1.0004, 0.1),
        ask(2, 1.0, 0.2),
        bid(3, 1.0, 0.5),
        bid(4, 1.0, 0.4),
    ]))

    assert [(m.bid_id, m.ask_id) for m in output.matches] == [(3, 1), (4, 2)]
    assert [m.energy_kwh for m in output.matches] == [1.0, 1.0]


def test_bid_stops_below_threshold(engine):
    """A bid left with less than the threshold does not take another ask."""
    output = engine.clear(MarketInput(orders=[
        ask(1, 0.9996, 0.1),
        ask(2, 1.0, 0.1),
        bid(3, 1.0, 0.3),
    ]))

    assert len(output.matches) == 1
    assert output.matches[0].ask_id == 1
    assert output.matches[0].energy_kwh == 1.0


def test_injected_threshold():
    """A larger threshold leaves small residual asks unmatched."""
    orders = MarketInput(orders=[
        ask(1, 0.05, 0.1),
        ask(2, 1.0, 0.2),
        bid(3, 2.0, 0.3),
    ])

    default = ClearingEngine().clear(orders)
    coarse = ClearingEngine(energy_eps=0.1).clear(orders)

    assert [m.ask_id for m in default.matches] == [1, 2]
    assert [m.ask_id for m in coarse.matches] == [2]


def test_injected_precision():
    output = ClearingEngine(precision=1).clear(MarketInput(orders=[
        ask(1, 1.26, 0.1),
        bid(2, 2.0, 0.3),
    ]))
    assert output.matches[0].energy_kwh == 1.3


def test_largest_precision():
    output = ClearingEngine(precision=15).clear(MarketInput(orders=[
        ask(1, 1.25, 0.1),
        bid(2, 2.0, 0.3),
    ]))
    assert output.matches[0].energy_kwh == pytest.approx(1.25)


@pytest.mark.parametrize("kwargs", [
    {"energy_eps": 0.0},
    {"energy_eps": -0.001},
    {"energy_eps": float("nan")},
    {"energy_eps": float("inf")},
    {"precision": -1},
    {"precision": 16},
    {"precision": 400},
    {"precision": 1.5},
    {"precision": True},
])
def test_invalid_engine_configuration(kwargs):
    with pytest.raises(ValueError):
        ClearingEngine(**kwargs)


def test_tie_break_by_input_position(engine):
    """
    Orders at equal price are served in input order.

    Bids 2 and 3 share a price, so bid 2 (earlier in the batch) is filled
    first. Asks 4 and 5 share a price, so ask 4 is consumed first.
    """
    output = engine.clear(MarketInput(orders=[
        bid(2, 1.0, 0.3),
        ask(4, 1.5, 0.2),
        bid(3, 1.0, 0.3),
        ask(5, 1.5, 0.2),
    ]))

    assert [(m.bid_id, m.ask_id, m.energy_kwh) for m in output.matches] == [
        (2, 4, 1.0),
        (3, 4, 0.5),
        (3, 5, 0.5),
    ]


def test_input_not_mutated(engine):
    orders = [ask(1, 3.0, 0.2), bid(2, 2.0, 0.3), bid(3, 2.0, 0.25)]
    batch = MarketInput(orders=orders)
    before = batch.model_dump()

    engine.clear(batch)

    assert batch.model_dump() == before
    assert batch.orders == orders


def test_deterministic(engine):
    batch = MarketInput(orders=_random_orders(random.Random(7), 40))

    first = engine.clear(batch).model_dump_json()
    second = engine.clear(batch).model_dump_json()

    assert first == second


def test_mixed_time_slots_are_cleared_together(engine, caplog):
    output = engine.clear(MarketInput(orders=[
        ask(1, 1.0, 0.2, time_slot="2022-03-04T05:00:00+00:00"),
        bid(2, 1.0, 0.3, time_slot="2022-03-04T06:00:00+00:00"),
    ]))

    assert len(output.matches) == 1
    assert "2 time slots" in caplog.text


@pytest.mark.parametrize("seed", range(10))
def test_random_batches_respect_invariants(engine, seed):
    """Conservation, pay-as-bid and price compatibility on random batches."""
    orders = _random_orders(random.Random(seed), 30)
    output = engine.clear(MarketInput(orders=orders))
    by_id = {o.id: o for o in orders}
    by_bid, by_ask = ClearingStatistics.matched_energy_by_order(output)

    # Rounding to three decimals may add at most half a thousandth per match
    slack = 0.0005 * len(output.matches) + 1e-9
    for bid_id, energy in by_bid.items():
        assert energy <= by_id[bid_id].energy_kwh + slack
    for ask_id, energy in by_ask.items():
        assert energy <= by_id[ask_id].energy_kwh + slack

    for m in output.matches:
        assert m.price_euro_per_kwh == by_id[m.bid_id].price_euro_per_kwh
        assert by_id[m.ask_id].price_euro_per_kwh <= m.price_euro_per_kwh
        assert m.energy_kwh >= 0


def _random_orders(rng, count):
    orders = []
    for i in range(count):
        make = bid if rng.random() < 0.5 else ask
        orders.append(make(i, round(rng.uniform(0.0, 5.0), 4), round(rng.uniform(0.05, 0.45), 2)))
    return orders
