"""
JSON encoding and decoding of market batches.
"""
import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from energy_market.core.exceptions import MarketDecodeError
from energy_market.core.models import MarketInput, MarketOutput

logger = logging.getLogger(__name__)


def decode_market_input(data: Union[str, bytes]) -> MarketInput:
    """
    Decode a market input from JSON.

    Raises:
        MarketDecodeError: If the JSON is invalid or an order is malformed
    """
    try:
        return MarketInput.model_validate_json(data)
    except ValidationError as e:
        raise MarketDecodeError(f"Invalid market input: {e}") from e


def load_market_input(path: Union[str, Path]) -> MarketInput:
    """
    Read and decode a market input file.

    Raises:
        MarketDecodeError: If the file content is not a valid market input
        OSError: If the file cannot be read
    """
    path = Path(path)
    logger.debug("Loading market input from %s", path)
    return decode_market_input(path.read_bytes())


def encode_market_output(output: MarketOutput, indent: Optional[int] = None) -> str:
    """Encode a market output as JSON."""
    return output.model_dump_json(indent=indent)


def dump_market_output(output: MarketOutput, path: Union[str, Path], indent: Optional[int] = 2) -> None:
    """Write a market output to a JSON file, creating parent directories."""
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(encode_market_output(output, indent=indent))
    logger.debug("Wrote %d matches to %s", len(output.matches), output_path)
