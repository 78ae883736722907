"""
Shared fixtures for the clearing engine tests.
"""
import pytest

from energy_market.core.engine import ClearingEngine


@pytest.fixture
def engine():
    """Create a clearing engine with the default configuration."""
    return ClearingEngine()
