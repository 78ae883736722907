"""
Command-line interface for clearing a market input file.
"""
import argparse
import logging
import sys
from typing import List, Optional

from energy_market.core.engine import ClearingEngine
from energy_market.core.exceptions import MarketDecodeError
from energy_market.core.statistics import ClearingStatistics
from energy_market.core.utils import ENERGY_EPS, ENERGY_PRECISION
from energy_market.io.codec import dump_market_output, encode_market_output, load_market_input

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="energy-market",
        description="Clear a local energy market time slot with pay-as-bid matching"
    )
    parser.add_argument("input", nargs="*",
                        help="Path to a market input JSON file")
    parser.add_argument("--output", type=str, default=None,
                        help="Output file for the market output (JSON), stdout if omitted")
    parser.add_argument("--indent", type=int, default=None,
                        help="Indentation of the JSON output")
    parser.add_argument("--energy-eps", type=float, default=ENERGY_EPS,
                        help="Smallest energy in kWh used for a match")
    parser.add_argument("--precision", type=int, default=ENERGY_PRECISION,
                        help="Decimal places of matched energy")
    parser.add_argument("--log-level", type=str, default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level")
    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    parsed_args = parser.parse_args(args)

    logging.basicConfig(
        level=getattr(logging, parsed_args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    if len(parsed_args.input) != 1:
        parser.print_usage()
        return 0
    input_path = parsed_args.input[0]

    try:
        engine = ClearingEngine(energy_eps=parsed_args.energy_eps, precision=parsed_args.precision)
    except ValueError as e:
        parser.error(str(e))

    try:
        batch = load_market_input(input_path)
    except (MarketDecodeError, OSError) as e:
        logger.error("Could not load market input %s: %s", input_path, e)
        return 1

    output = engine.clear(batch)

    stats = ClearingStatistics.calculate(batch, output)
    logger.info("Clearing summary:")
    logger.info(f"  Matches: {stats['match_count']}")
    logger.info(f"  Matched energy: {stats['matched_energy']:.3f} kWh")
    logger.info(f"  Bid fill ratio: {stats['bid_fill_ratio']:.2%}")
    logger.info(f"  Ask fill ratio: {stats['ask_fill_ratio']:.2%}")
    logger.info(f"  VWAP: {stats['vwap']:.4f} EUR/kWh")

    if parsed_args.output:
        try:
            dump_market_output(output, parsed_args.output, indent=parsed_args.indent)
        except OSError as e:
            logger.error("Could not write market output %s: %s", parsed_args.output, e)
            return 1
        logger.info(f"Market output saved to {parsed_args.output}")
    else:
        print(encode_market_output(output, indent=parsed_args.indent))

    return 0


def run_cli():
    """Run the CLI from a script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run_cli()
