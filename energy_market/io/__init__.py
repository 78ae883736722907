"""
JSON input and output of market batches.
"""
from energy_market.io.codec import (
    decode_market_input,
    load_market_input,
    encode_market_output,
    dump_market_output
)
from energy_market.core.exceptions import MarketDecodeError
