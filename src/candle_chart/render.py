"""Terminal candlestick rendering.

A render pass selects the most recent bars that fit the terminal width, maps
their prices onto a fixed number of rows and paints one column per bar: the
wick first, then the body over it.
"""

from __future__ import annotations

import logging
import math
import shutil
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum, auto

import click

from candle_chart.config import DEFAULT_WIDTH, ChartConfig
from candle_chart.models import Bar


class Cell(Enum):
  BLANK = auto()
  WICK = auto()
  BULL = auto()
  BEAR = auto()


Grid = list[list[Cell]]


def terminal_width(fallback: int = DEFAULT_WIDTH) -> int:
  """Returns the width of the output terminal, or ``fallback`` if unknown."""
  try:
    columns = shutil.get_terminal_size(fallback=(fallback, 24)).columns
  except (OSError, ValueError):
    return fallback
  return columns if columns > 0 else fallback


def max_visible_bars(width: int, config: ChartConfig) -> int:
  return max(0, (width - config.padding) // config.stride)


def select_window(bars: Sequence[Bar], capacity: int) -> list[Bar]:
  """Returns the most recent ``capacity`` bars, keeping their order."""
  count = min(len(bars), max(capacity, 0))
  return list(bars[len(bars) - count :])


@dataclass(frozen=True)
class PriceScale:
  """Maps prices onto grid rows, row 0 being the highest price."""

  min_price: float
  max_price: float
  height: int

  @classmethod
  def from_bars(
    cls, bars: Sequence[Bar], height: int, flat_range_epsilon: float = 1.0
  ) -> PriceScale:
    min_price = min(b.low for b in bars)
    max_price = max(b.high for b in bars)
    if max_price == min_price:
      max_price += flat_range_epsilon
    return cls(min_price=min_price, max_price=max_price, height=height)

  def row(self, price: float) -> int:
    ratio = (price - self.min_price) / (self.max_price - self.min_price)
    # Round half up, then flip so higher prices land on lower row indices.
    row = (self.height - 1) - math.floor(ratio * (self.height - 1) + 0.5)
    # Prices outside the window range only occur when a bar breaks the
    # low <= open/close <= high relation.
    return min(max(row, 0), self.height - 1)


def build_grid(window: Sequence[Bar], scale: PriceScale) -> Grid:
  """Paints each bar into its own column of a ``scale.height`` row grid."""
  grid = [[Cell.BLANK] * len(window) for _ in range(scale.height)]

  for col, bar in enumerate(window):
    row_high = scale.row(bar.high)
    row_low = scale.row(bar.low)
    row_open = scale.row(bar.open)
    row_close = scale.row(bar.close)

    for r in range(row_high, row_low + 1):
      grid[r][col] = Cell.WICK

    body = Cell.BULL if bar.is_bullish else Cell.BEAR
    for r in range(min(row_open, row_close), max(row_open, row_close) + 1):
      grid[r][col] = body

  return grid


def format_price(price: float) -> str:
  return f"{price:g}"


class CandlestickChart:
  """Renders a bar sequence as a coloured block-character chart."""

  def __init__(self, config: ChartConfig | None = None):
    self.config = config or ChartConfig()
    spacing = " " * (self.config.stride - 1)
    self._cells = {
      Cell.BLANK: " " * self.config.stride,
      Cell.WICK: click.style(self.config.wick_glyph, fg=self.config.wick_color) + spacing,
      Cell.BULL: click.style(self.config.bull_glyph, fg=self.config.bull_color) + spacing,
      Cell.BEAR: click.style(self.config.bear_glyph, fg=self.config.bear_color) + spacing,
    }
    self._margin = " " * (self.config.padding // 2)

  def render(
    self, bars: Sequence[Bar], symbol: str, width: int | None = None
  ) -> list[str]:
    """Returns the chart as text lines, empty when there is nothing to draw."""
    if not bars:
      return []

    if width is None:
      width = terminal_width(self.config.fallback_width)
    window = select_window(bars, max_visible_bars(width, self.config))
    if not window:
      logging.warning(f"Terminal width {width} is too narrow to draw any candles.")
      return []

    scale = PriceScale.from_bars(
      window, self.config.height, self.config.flat_range_epsilon
    )
    grid = build_grid(window, scale)

    lines = [
      "",
      click.style(f"Chart: {symbol} ({len(window)} candles)", bold=True),
      f"Max: {format_price(scale.max_price)}",
      "",
    ]
    lines.extend(self._margin + "".join(self._cells[c] for c in row) for row in grid)
    lines.extend(
      [
        "",
        f"Min: {format_price(scale.min_price)}",
        f"Range: {window[0].date} -> {window[-1].date}",
        "",
      ]
    )
    return lines

  def draw(
    self,
    bars: Sequence[Bar],
    symbol: str,
    width: int | None = None,
    color: bool | None = None,
  ) -> None:
    """Writes the chart to standard output."""
    for line in self.render(bars, symbol, width=width):
      click.echo(line, color=color)
