from __future__ import annotations

import logging
from typing import Any

import requests
from pydantic import ValidationError

from candle_chart.errors import DecodeError, ProviderError, TransportError
from candle_chart.interfaces import BarsFetcher
from candle_chart.models import Bar

# --- Module-level Constants ---
_BASE_URL = "https://www.alphavantage.co/query"
_DAILY_FUNCTION = "TIME_SERIES_DAILY"
_SERIES_KEY = "Time Series (Daily)"
_ERROR_KEY = "Error Message"
_NOTICE_KEYS = ("Note", "Information")
_FIELD_KEYS = {
  "open": "1. open",
  "high": "2. high",
  "low": "3. low",
  "close": "4. close",
}
_REQUEST_TIMEOUT_SECONDS = 30


def _map_api_bar_to_bar(date_str: str, daily_data: Any) -> Bar:
  """Maps a daily data entry from Alpha Vantage to a Bar model."""
  if not isinstance(daily_data, dict):
    raise DecodeError(f"Entry for {date_str} is not an object: {daily_data!r}")

  fields: dict[str, Any] = {"date": date_str}
  for name, key in _FIELD_KEYS.items():
    if key not in daily_data:
      raise DecodeError(f"Entry for {date_str} is missing field '{key}'")
    fields[name] = daily_data[key]

  try:
    return Bar.model_validate(fields)
  except ValidationError as e:
    raise DecodeError(f"Entry for {date_str} failed validation: {e}") from e


def parse_daily_series(payload: Any) -> list[Bar]:
  """Transforms a decoded TIME_SERIES_DAILY document into bars, oldest first.

  Raises:
    ProviderError: If the document carries an "Error Message".
    DecodeError: If the document does not hold a well-formed daily series.
  """
  if not isinstance(payload, dict):
    raise DecodeError(f"Expected a JSON object, got {type(payload).__name__}")

  if _ERROR_KEY in payload:
    raise ProviderError(str(payload[_ERROR_KEY]))

  series = payload.get(_SERIES_KEY)
  if series is None:
    notice = next((payload[k] for k in _NOTICE_KEYS if k in payload), None)
    detail = f": {notice}" if notice else ""
    raise DecodeError(f"Response is missing '{_SERIES_KEY}'{detail}")
  if not isinstance(series, dict):
    raise DecodeError(f"'{_SERIES_KEY}' is not an object")

  # The provider lists the newest day first; date keys sort chronologically.
  return [_map_api_bar_to_bar(d, series[d]) for d in sorted(series)]


class AlphaVantageProvider(BarsFetcher):
  """Alpha Vantage daily time series provider."""

  def __init__(self, api_key: str, timeout: float = _REQUEST_TIMEOUT_SECONDS):
    if not api_key:
      raise ValueError("Alpha Vantage provider requires an API key.")
    self.api_key = api_key
    self.timeout = timeout

  def get_daily_bars(self, symbol: str) -> list[Bar]:
    """Fetches the daily series for ``symbol`` with a single request."""
    params = {"function": _DAILY_FUNCTION, "symbol": symbol, "apikey": self.api_key}
    try:
      response = requests.get(_BASE_URL, params=params, timeout=self.timeout)
      response.raise_for_status()
    except requests.exceptions.RequestException as e:
      raise TransportError(f"HTTP error fetching {symbol} from Alpha Vantage: {e}") from e

    try:
      payload = response.json()
    except ValueError as e:
      raise DecodeError(f"Response is not valid JSON: {e}") from e

    bars = parse_daily_series(payload)
    logging.info(f"Decoded {len(bars)} daily bars for {symbol}.")
    return bars
