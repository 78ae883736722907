"""
Core clearing engine components.
"""
from energy_market.core.enums import OrderType
from energy_market.core.exceptions import MarketDecodeError
from energy_market.core.models import Order, MarketInput, Match, MarketOutput, GridFeeMatrix
from energy_market.core.order_book import ClearingBook
from energy_market.core.matcher import PayAsBidMatcher
from energy_market.core.engine import ClearingEngine, pay_as_bid_matching
from energy_market.core.statistics import ClearingStatistics
from energy_market.core.utils import ENERGY_EPS, ENERGY_PRECISION

__all__ = [
    'ClearingEngine',
    'pay_as_bid_matching',
    'PayAsBidMatcher',
    'ClearingBook',
    'ClearingStatistics',
    'OrderType',
    'Order',
    'MarketInput',
    'Match',
    'MarketOutput',
    'GridFeeMatrix',
    'MarketDecodeError',
    'ENERGY_EPS',
    'ENERGY_PRECISION'
]
