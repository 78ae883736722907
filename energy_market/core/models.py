"""
Data models for the clearing engine.
"""
import json
from typing import Annotated, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from energy_market.core.enums import OrderType
from energy_market.core.exceptions import MarketDecodeError

Fee = Annotated[float, Field(ge=0, allow_inf_nan=False)]


class Order(BaseModel):
    """A single actor's order for one time slot."""
    id: int = Field(..., ge=0, strict=True, description="Order ID, unique within a batch")
    order_type: OrderType = Field(..., description="Order side: bid or ask")
    time_slot: str = Field(..., description="Time slot the order is cleared in")
    actor_id: str = Field(..., description="ID of the actor placing the order")
    cluster_index: Optional[int] = Field(None, strict=True, description="Grid cluster of the actor")
    energy_kwh: float = Field(..., ge=0, allow_inf_nan=False, strict=True, description="Energy to trade in kWh")
    price_euro_per_kwh: float = Field(..., allow_inf_nan=False, strict=True,
                                      description="Limit price in EUR/kWh")

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "id": 1,
                "order_type": "ask",
                "time_slot": "2022-03-04T05:06:07+00:00",
                "actor_id": "actor_1",
                "cluster_index": 0,
                "energy_kwh": 2.0,
                "price_euro_per_kwh": 0.3
            }
        }
    }


class MarketInput(BaseModel):
    """The market input contains all orders of a time slot."""
    orders: List[Order] = Field(default_factory=list, description="Bids and asks to clear")

    model_config = {"frozen": True}


class Match(BaseModel):
    """A match between a bid and an ask."""
    bid_id: int = Field(..., description="ID of the matched bid")
    ask_id: int = Field(..., description="ID of the matched ask")
    energy_kwh: float = Field(..., description="Traded energy in kWh")
    price_euro_per_kwh: float = Field(..., description="Traded price in EUR/kWh")

    model_config = {"frozen": True}


class MarketOutput(BaseModel):
    """The market output contains all matches of a time slot."""
    matches: List[Match] = Field(default_factory=list, description="Matches in clearing order")

    model_config = {"frozen": True}


class GridFeeMatrix(BaseModel):
    """
    Grid fees between clusters, indexed ``[from_cluster][to_cluster]``.

    Consumed by fee-aware clearing strategies; pay-as-bid clearing ignores it.
    """
    fees: List[List[Fee]] = Field(..., description="Square matrix of fees in EUR/kWh")

    model_config = {"frozen": True}

    @field_validator('fees')
    def validate_square(cls, v):
        """Validate the matrix has one row and one column per cluster."""
        for i, row in enumerate(v):
            if len(row) != len(v):
                raise ValueError(f"fee matrix must be square, row {i} has {len(row)} of {len(v)} entries")
        return v

    @classmethod
    def from_json_str(cls, text: str) -> "GridFeeMatrix":
        """Parse a matrix from a JSON array of arrays, e.g. ``[[0,1],[1,0]]``."""
        try:
            return cls(fees=json.loads(text))
        except (ValueError, ValidationError) as e:
            raise MarketDecodeError(f"Invalid grid fee matrix: {e}") from e

    @property
    def size(self) -> int:
        """Number of clusters."""
        return len(self.fees)

    def fee(self, from_cluster: int, to_cluster: int) -> float:
        """Get the fee for trading from one cluster to another."""
        if not (0 <= from_cluster < self.size and 0 <= to_cluster < self.size):
            raise IndexError(f"cluster pair ({from_cluster}, {to_cluster}) outside {self.size}x{self.size} matrix")
        return self.fees[from_cluster][to_cluster]


class WorkingOrder:
    """Private, mutable copy of an order used during one clearing run."""
    __slots__ = ['order', 'position', 'remaining_quantity']

    def __init__(self, order: Order, position: int):
        self.order = order
        self.position = position
        self.remaining_quantity = order.energy_kwh

    @property
    def id(self) -> int:
        return self.order.id

    @property
    def price(self) -> float:
        return self.order.price_euro_per_kwh

    def __repr__(self) -> str:
        return (f"WorkingOrder(id={self.id}, type={self.order.order_type.value}, "
                f"price={self.price}, qty={self.order.energy_kwh}, remaining={self.remaining_quantity})")
