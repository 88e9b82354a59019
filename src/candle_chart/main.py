from __future__ import annotations

import functools
import logging
import sys

import click
from dotenv import load_dotenv

from candle_chart.config import ChartConfig, get_log_level
from candle_chart.credentials import resolve_api_key
from candle_chart.errors import ChartError, ProviderError
from candle_chart.providers.alpha_vantage import AlphaVantageProvider
from candle_chart.render import CandlestickChart

DEFAULT_SYMBOL = "AAPL"


def _setup_logging() -> None:
  # Standard output is reserved for the chart itself.
  logging.basicConfig(
    level=get_log_level(),
    format="%(asctime)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
  )


# --- Error Handling Decorator ---


def cli_error_handler(func):
  """Decorator to handle common CLI errors, log them, and exit."""

  @functools.wraps(func)
  def wrapper(*args, **kwargs):
    try:
      return func(*args, **kwargs)
    except click.exceptions.Abort:
      raise
    except ProviderError as e:
      logging.error(f"API Error: {e}")
      sys.exit(1)
    except (ChartError, ValueError, TypeError) as e:
      logging.error(f"Error: {e}")
      sys.exit(1)
    except Exception as e:
      logging.error(f"An unexpected error occurred: {e}", exc_info=True)
      sys.exit(1)

  return wrapper


# --- CLI Command ---


@click.command()
@click.argument("symbol", default=DEFAULT_SYMBOL)
@cli_error_handler
def cli(symbol: str) -> None:
  """Draw a daily candlestick chart for SYMBOL in the terminal."""
  load_dotenv()
  _setup_logging()

  config = ChartConfig.from_env()
  api_key = resolve_api_key()
  provider = AlphaVantageProvider(api_key=api_key)

  logging.info(f"Fetching {symbol}...")
  bars = provider.get_daily_bars(symbol)

  if not bars:
    logging.warning(f"No daily bars were returned for {symbol}.")
    return

  CandlestickChart(config).draw(bars, symbol)


if __name__ == "__main__":
  cli()
