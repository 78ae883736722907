"""
Enum definitions for the clearing engine.
"""
from enum import Enum


class OrderType(str, Enum):
    """Side of an order. Serialised as ``"bid"`` or ``"ask"``."""
    BID = "bid"
    ASK = "ask"
