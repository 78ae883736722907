"""
Simple clearing example using the energy-market package.
"""
import json

from energy_market import ClearingEngine, MarketInput, Order, OrderType

TIME_SLOT = "2022-03-04T05:06:07+00:00"


def run_simple_clearing():
    """Clear one time slot with a single ask and a single bid."""
    orders = [
        Order(id=1, order_type=OrderType.ASK, time_slot=TIME_SLOT, actor_id="actor_1",
              cluster_index=0, energy_kwh=2.0, price_euro_per_kwh=0.3),
        Order(id=2, order_type=OrderType.BID, time_slot=TIME_SLOT, actor_id="actor_2",
              cluster_index=0, energy_kwh=1.5, price_euro_per_kwh=0.35),
    ]

    engine = ClearingEngine()
    output = engine.clear(MarketInput(orders=orders))

    for m in output.matches:
        print(f"Match: bid {m.bid_id} <- ask {m.ask_id}: {m.energy_kwh} kWh @ {m.price_euro_per_kwh} EUR/kWh")

    return output


if __name__ == "__main__":
    output = run_simple_clearing()
    print(json.dumps(output.model_dump(), indent=2))
