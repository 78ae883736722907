"""
Utility functions for the clearing engine.
Quantity helpers on the matching hot path are compiled with numba.
"""
import math

import numpy as np
from numba import njit

# Smallest energy value (in kWh) that is used for a match
ENERGY_EPS = 0.001

# Decimal places kept for the energy of an emitted match
ENERGY_PRECISION = 3

# Largest supported precision of matched energies
MAX_ENERGY_PRECISION = 15


@njit(cache=True)
def min_quantity(a: float, b: float) -> float:
    """Fast minimum calculation for quantities."""
    return a if a < b else b


@njit(cache=True)
def round_half_away(value: float) -> float:
    """Round to the nearest integer, halves away from zero."""
    magnitude = abs(value)
    whole = np.floor(magnitude)
    if magnitude - whole >= 0.5:
        whole += 1.0
    return math.copysign(whole, value)


@njit(cache=True)
def round_energy_value(energy: float, precision: int = ENERGY_PRECISION) -> float:
    """Round an energy value to ``precision`` decimal places."""
    scale = 10.0 ** precision
    return round_half_away(energy * scale) / scale
