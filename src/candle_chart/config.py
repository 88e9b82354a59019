"""Chart configuration and environment-driven settings."""

from __future__ import annotations

import os
from dataclasses import dataclass

from candle_chart.errors import ConfigError

API_KEY_ENV_VAR = "ALPHA_VANTAGE_API_KEY"
HEIGHT_ENV_VAR = "CANDLE_CHART_HEIGHT"
LOG_LEVEL_ENV_VAR = "CANDLE_CHART_LOG_LEVEL"

DEFAULT_HEIGHT = 20
DEFAULT_STRIDE = 2
DEFAULT_PADDING = 4
DEFAULT_WIDTH = 80


@dataclass(frozen=True)
class ChartConfig:
  """Layout and styling for the terminal candlestick chart.

  Attributes:
    height: Rows available for the price axis.
    stride: Columns consumed by one bar (the glyph plus spacing).
    padding: Columns reserved for margins.
    fallback_width: Width used when the terminal size cannot be determined.
    flat_range_epsilon: Amount added to the top of a flat price range.
  """

  height: int = DEFAULT_HEIGHT
  stride: int = DEFAULT_STRIDE
  padding: int = DEFAULT_PADDING
  fallback_width: int = DEFAULT_WIDTH
  flat_range_epsilon: float = 1.0
  bull_glyph: str = "█"
  bear_glyph: str = "█"
  wick_glyph: str = "│"
  bull_color: str = "green"
  bear_color: str = "red"
  wick_color: str = "bright_black"

  def __post_init__(self) -> None:
    if self.height < 1:
      raise ValueError(f"Chart height must be positive, got {self.height}")
    if self.stride < 1:
      raise ValueError(f"Chart stride must be positive, got {self.stride}")
    if self.padding < 0:
      raise ValueError(f"Chart padding must not be negative, got {self.padding}")
    if self.flat_range_epsilon <= 0:
      raise ValueError("Flat range epsilon must be positive.")

  @classmethod
  def from_env(cls) -> ChartConfig:
    """Builds a config, applying CANDLE_CHART_HEIGHT when it is set."""
    raw_height = os.getenv(HEIGHT_ENV_VAR, "").strip()
    if not raw_height:
      return cls()
    try:
      return cls(height=int(raw_height))
    except ValueError as e:
      raise ConfigError(f"Invalid {HEIGHT_ENV_VAR}={raw_height!r}: {e}") from e


def get_log_level() -> str:
  return os.getenv(LOG_LEVEL_ENV_VAR, "INFO").strip().upper() or "INFO"
