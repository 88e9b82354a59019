from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Bar(BaseModel):
  """Represents one trading day's OHLC quote with Pydantic validation.

  The usual ``low <= min(open, close) <= max(open, close) <= high`` relation is
  not enforced here; the renderer tolerates bars that violate it.
  """

  model_config = ConfigDict(frozen=True, allow_inf_nan=False)

  date: str
  open: float
  high: float
  low: float
  close: float

  @property
  def is_bullish(self) -> bool:
    """A doji (close == open) counts as bullish."""
    return self.close >= self.open
