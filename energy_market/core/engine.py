"""
Clearing engine for a single time slot of a local energy market.
"""
import logging
import math

from energy_market.core.matcher import PayAsBidMatcher
from energy_market.core.models import MarketInput, MarketOutput
from energy_market.core.order_book import ClearingBook
from energy_market.core.utils import ENERGY_EPS, ENERGY_PRECISION, MAX_ENERGY_PRECISION

logger = logging.getLogger(__name__)


class ClearingEngine:
    """
    Pay-as-bid clearing engine.

    The engine only holds its configuration. Every call to :meth:`clear`
    works on private copies of the orders, so one engine can clear
    independent time slots concurrently.
    """

    __slots__ = ('energy_eps', 'precision', 'matcher')

    def __init__(self, energy_eps: float = ENERGY_EPS, precision: int = ENERGY_PRECISION):
        if not (math.isfinite(energy_eps) and energy_eps > 0):
            raise ValueError(f"energy_eps must be a positive finite number, got {energy_eps}")
        if (isinstance(precision, bool) or not isinstance(precision, int)
                or not 0 <= precision <= MAX_ENERGY_PRECISION):
            raise ValueError(f"precision must be an integer between 0 and {MAX_ENERGY_PRECISION}, got {precision!r}")

        self.energy_eps = energy_eps
        self.precision = precision
        self.matcher = PayAsBidMatcher(energy_eps, precision)

        logger.debug("Initializing ClearingEngine (energy_eps=%s, precision=%d)", energy_eps, precision)

    def clear(self, batch: MarketInput) -> MarketOutput:
        """
        Clear one batch of orders.

        Args:
            batch: All bids and asks of a time slot

        Returns:
            The matches of the time slot
        """
        time_slots = {order.time_slot for order in batch.orders}
        if len(time_slots) > 1:
            logger.warning("Clearing %d orders spanning %d time slots as a single slot: %s",
                           len(batch.orders), len(time_slots), ", ".join(sorted(time_slots)))

        book = ClearingBook.from_orders(batch.orders)
        matches = self.matcher.match(book)

        logger.info("Cleared %d bids and %d asks into %d matches",
                    len(book.bids), len(book.asks), len(matches))
        if logger.isEnabledFor(logging.DEBUG):
            bid_energy, ask_energy = book.remaining_energy()
            logger.debug("Unmatched energy: bids=%f kWh, asks=%f kWh", bid_energy, ask_energy)

        return MarketOutput(matches=matches)


def pay_as_bid_matching(batch: MarketInput) -> MarketOutput:
    """Clear a batch with the default engine configuration."""
    return ClearingEngine().clear(batch)
