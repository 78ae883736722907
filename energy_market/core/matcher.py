"""
Pay-as-bid matching logic for the clearing engine.
"""
from typing import List
import logging

from energy_market.core.models import Match
from energy_market.core.order_book import ClearingBook
from energy_market.core.utils import (
    ENERGY_EPS, ENERGY_PRECISION, min_quantity, round_energy_value
)

logger = logging.getLogger(__name__)


class PayAsBidMatcher:
    """
    Greedily crosses bids against asks. Every match settles at the bid's price.
    """

    __slots__ = ('energy_eps', 'precision')

    def __init__(self, energy_eps: float = ENERGY_EPS, precision: int = ENERGY_PRECISION):
        """
        Initialize a matcher.

        Args:
            energy_eps: Smallest remaining energy an order needs to be matched again
            precision: Decimal places of the energy reported in a match
        """
        self.energy_eps = energy_eps
        self.precision = precision

    def match(self, book: ClearingBook) -> List[Match]:
        """
        Match all bids in the book against its asks.

        Bids are visited highest price first and each one scans the asks
        lowest price first. Ask remaining quantities carry over between bids.
        The remaining quantities of the book's working orders are updated
        in place with the unrounded traded energy.

        Args:
            book: The book to clear

        Returns:
            Matches in the order they were made
        """
        energy_eps = self.energy_eps
        precision = self.precision
        asks = list(book.asks.values())
        debug = logger.isEnabledFor(logging.DEBUG)
        matches = []

        for bid in book.bids.values():
            bid_price = bid.price
            bid_remaining = bid.remaining_quantity

            for ask in asks:
                # Asks are sorted by price, no later ask can cross this bid
                if bid_price < ask.price:
                    break

                ask_remaining = ask.remaining_quantity
                if ask_remaining <= energy_eps:
                    continue

                matched_energy = min_quantity(ask_remaining, bid_remaining)
                matches.append(Match(
                    bid_id=bid.id,
                    ask_id=ask.id,
                    energy_kwh=round_energy_value(matched_energy, precision),
                    price_euro_per_kwh=bid_price
                ))
                if debug:
                    logger.debug("Matched bid %d with ask %d: energy=%f, price=%f",
                                 bid.id, ask.id, matched_energy, bid_price)

                ask.remaining_quantity = ask_remaining - matched_energy
                bid_remaining -= matched_energy
                if bid_remaining < energy_eps:
                    break

            bid.remaining_quantity = bid_remaining

        return matches
