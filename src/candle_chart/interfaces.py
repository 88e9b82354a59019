from abc import ABC, abstractmethod

from candle_chart.models import Bar


class BarsFetcher(ABC):
  """Abstract base class for daily bar fetching functionality."""

  @abstractmethod
  def get_daily_bars(self, symbol: str) -> list[Bar]:
    """Fetches the daily price history for a ticker.

    Args:
      symbol: The ticker symbol (e.g., AAPL)

    Returns:
      List of Bar objects ordered oldest first
    """
    pass
