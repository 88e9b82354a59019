import pytest
import requests

from candle_chart.errors import DecodeError, ProviderError, TransportError
from candle_chart.providers import alpha_vantage
from candle_chart.providers.alpha_vantage import AlphaVantageProvider, parse_daily_series


def daily_entry(open_, high, low, close):
  return {
    "1. open": open_,
    "2. high": high,
    "3. low": low,
    "4. close": close,
    "5. volume": "1000",
  }


SAMPLE_PAYLOAD = {
  "Meta Data": {"2. Symbol": "IBM"},
  "Time Series (Daily)": {
    "2024-01-03": daily_entry("103.0000", "104.0000", "98.0000", "99.0000"),
    "2024-01-02": daily_entry("100.0000", "105.0000", "99.0000", "103.0000"),
  },
}


class FakeResponse:
  def __init__(self, payload=None, status_code=200, json_error=None):
    self._payload = payload
    self.status_code = status_code
    self._json_error = json_error

  def raise_for_status(self):
    if self.status_code >= 400:
      raise requests.exceptions.HTTPError(f"{self.status_code} Server Error")

  def json(self):
    if self._json_error is not None:
      raise self._json_error
    return self._payload


def test_parse_daily_series_orders_oldest_first():
  bars = parse_daily_series(SAMPLE_PAYLOAD)

  assert [b.date for b in bars] == ["2024-01-02", "2024-01-03"]
  assert bars[0].open == 100.0
  assert bars[0].high == 105.0
  assert bars[0].low == 99.0
  assert bars[0].close == 103.0
  assert bars[0].is_bullish
  assert not bars[1].is_bullish


def test_error_message_raises_provider_error():
  payload = {"Error Message": "Invalid API call."}
  with pytest.raises(ProviderError, match="Invalid API call"):
    parse_daily_series(payload)


def test_missing_series_includes_provider_notice():
  payload = {"Information": "API rate limit reached."}
  with pytest.raises(DecodeError, match="rate limit"):
    parse_daily_series(payload)


def test_empty_series_yields_no_bars():
  assert parse_daily_series({"Time Series (Daily)": {}}) == []


@pytest.mark.parametrize(
  "payload",
  [
    [],
    {"Time Series (Daily)": []},
    {"Time Series (Daily)": {"2024-01-02": "oops"}},
    {"Time Series (Daily)": {"2024-01-02": {"1. open": "1", "2. high": "2"}}},
    {"Time Series (Daily)": {"2024-01-02": daily_entry("abc", "2", "1", "1.5")}},
    {"Time Series (Daily)": {"2024-01-02": daily_entry("nan", "2", "1", "1.5")}},
  ],
)
def test_malformed_documents_raise_decode_error(payload):
  with pytest.raises(DecodeError):
    parse_daily_series(payload)


def test_provider_requires_api_key():
  with pytest.raises(ValueError):
    AlphaVantageProvider(api_key="")


def test_get_daily_bars_sends_single_request(monkeypatch):
  calls = []

  def fake_get(url, params=None, timeout=None):
    calls.append((url, params, timeout))
    return FakeResponse(SAMPLE_PAYLOAD)

  monkeypatch.setattr(alpha_vantage.requests, "get", fake_get)
  bars = AlphaVantageProvider(api_key="demo").get_daily_bars("IBM")

  assert len(bars) == 2
  assert len(calls) == 1
  url, params, timeout = calls[0]
  assert url == "https://www.alphavantage.co/query"
  assert params == {"function": "TIME_SERIES_DAILY", "symbol": "IBM", "apikey": "demo"}
  assert timeout == 30


def test_get_daily_bars_wraps_http_failures(monkeypatch):
  def fake_get(url, params=None, timeout=None):
    raise requests.exceptions.ConnectionError("connection refused")

  monkeypatch.setattr(alpha_vantage.requests, "get", fake_get)
  with pytest.raises(TransportError, match="connection refused"):
    AlphaVantageProvider(api_key="demo").get_daily_bars("IBM")


def test_get_daily_bars_wraps_bad_status(monkeypatch):
  monkeypatch.setattr(
    alpha_vantage.requests,
    "get",
    lambda url, params=None, timeout=None: FakeResponse(status_code=503),
  )
  with pytest.raises(TransportError):
    AlphaVantageProvider(api_key="demo").get_daily_bars("IBM")


def test_get_daily_bars_rejects_invalid_json(monkeypatch):
  monkeypatch.setattr(
    alpha_vantage.requests,
    "get",
    lambda url, params=None, timeout=None: FakeResponse(json_error=ValueError("Expecting value")),
  )
  with pytest.raises(DecodeError, match="not valid JSON"):
    AlphaVantageProvider(api_key="demo").get_daily_bars("IBM")
