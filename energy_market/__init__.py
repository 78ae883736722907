"""
Local energy market clearing.

This package clears the bids and asks of a single time slot with a
pay-as-bid double auction.
"""

__version__ = "0.1.0"

from energy_market.core.engine import ClearingEngine, pay_as_bid_matching
from energy_market.core.enums import OrderType
from energy_market.core.models import Order, MarketInput, Match, MarketOutput, GridFeeMatrix
