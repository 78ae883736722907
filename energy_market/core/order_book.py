"""
Clearing book holding the working orders of one clearing run.
"""
from typing import Iterable, List, Tuple
from sortedcontainers import SortedDict
import logging

from energy_market.core.enums import OrderType
from energy_market.core.models import Order, WorkingOrder

logger = logging.getLogger(__name__)


class ClearingBook:
    """
    Working bids and asks of a single time slot, kept in priority order.

    Orders at the same price keep their position in the input batch.
    """

    __slots__ = ('bids', 'asks')

    def __init__(self):
        # For bids (highest price first), we use negative price as the key
        self.bids = SortedDict()  # key: (-price, position), value: WorkingOrder
        # For asks (lowest price first)
        self.asks = SortedDict()  # key: (price, position), value: WorkingOrder

    @classmethod
    def from_orders(cls, orders: Iterable[Order]) -> "ClearingBook":
        """Partition a batch of orders into a new book."""
        book = cls()
        for position, order in enumerate(orders):
            book.add_order(WorkingOrder(order, position))
        return book

    def add_order(self, working: WorkingOrder) -> None:
        """Add a working order to its side of the book."""
        if working.order.order_type == OrderType.BID:
            self.bids[(-working.price, working.position)] = working
        else:
            self.asks[(working.price, working.position)] = working

    def get_book_snapshot(self) -> Tuple[List[Tuple[int, float, float]], List[Tuple[int, float, float]]]:
        """
        Get the book in priority order.

        Returns:
            Tuple of bid and ask lists of (order id, price, remaining quantity)
        """
        bids = [(o.id, o.price, o.remaining_quantity) for o in self.bids.values()]
        asks = [(o.id, o.price, o.remaining_quantity) for o in self.asks.values()]
        return bids, asks

    def remaining_energy(self) -> Tuple[float, float]:
        """Total unmatched energy on the bid and ask side."""
        bid_energy = sum(o.remaining_quantity for o in self.bids.values())
        ask_energy = sum(o.remaining_quantity for o in self.asks.values())
        return bid_energy, ask_energy

    def __len__(self) -> int:
        return len(self.bids) + len(self.asks)

    def __repr__(self) -> str:
        return f"ClearingBook(bids={len(self.bids)}, asks={len(self.asks)})"
