"""
Statistics for a single clearing run.
"""
from collections import defaultdict
from typing import Any, Dict, Tuple
import numpy as np

from energy_market.core.enums import OrderType
from energy_market.core.models import MarketInput, MarketOutput


class ClearingStatistics:
    """
    Calculate volume and price statistics from a batch and its matches.
    """

    @staticmethod
    def calculate(batch: MarketInput, output: MarketOutput) -> Dict[str, Any]:
        """
        Calculate statistics of a clearing run.

        Args:
            batch: The orders that were cleared
            output: The matches produced for the batch

        Returns:
            Dictionary of clearing statistics
        """
        bid_energy = sum(o.energy_kwh for o in batch.orders if o.order_type == OrderType.BID)
        ask_energy = sum(o.energy_kwh for o in batch.orders if o.order_type == OrderType.ASK)

        energies = np.array([m.energy_kwh for m in output.matches], dtype=np.float64)
        prices = np.array([m.price_euro_per_kwh for m in output.matches], dtype=np.float64)
        matched_energy = float(np.sum(energies)) if len(energies) else 0.0

        if matched_energy > 0:
            vwap = float(np.sum(prices * energies) / matched_energy)
        else:
            vwap = 0.0

        return {
            "match_count": len(output.matches),
            "bid_energy": bid_energy,
            "ask_energy": ask_energy,
            "matched_energy": matched_energy,
            "bid_fill_ratio": matched_energy / bid_energy if bid_energy > 0 else 0.0,
            "ask_fill_ratio": matched_energy / ask_energy if ask_energy > 0 else 0.0,
            "vwap": vwap,
            "min_price": float(np.min(prices)) if len(prices) else 0.0,
            "max_price": float(np.max(prices)) if len(prices) else 0.0,
        }

    @staticmethod
    def matched_energy_by_order(output: MarketOutput) -> Tuple[Dict[int, float], Dict[int, float]]:
        """
        Sum the matched energy of every bid and ask.

        Returns:
            Tuple of dicts mapping bid ID and ask ID to matched energy
        """
        by_bid = defaultdict(float)
        by_ask = defaultdict(float)
        for m in output.matches:
            by_bid[m.bid_id] += m.energy_kwh
            by_ask[m.ask_id] += m.energy_kwh
        return dict(by_bid), dict(by_ask)
