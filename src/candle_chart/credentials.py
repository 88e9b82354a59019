from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path

import click

from candle_chart.config import API_KEY_ENV_VAR

KEY_FILENAME = ".stock_api_key"


def default_key_path() -> Path:
  return Path.home() / KEY_FILENAME


class ApiKeyStore:
  """Keeps the Alpha Vantage API key in a per-user dotfile."""

  def __init__(self, path: Path | None = None):
    self.path = path if path is not None else default_key_path()

  def load(self) -> str | None:
    """Returns the trimmed first line of the key file, or None if unusable."""
    try:
      with self.path.open(encoding="utf-8") as f:
        key = f.readline().strip()
    except OSError:
      return None
    return key or None

  def save(self, key: str) -> bool:
    """Persists the key. A failed write is reported but never fatal."""
    try:
      self.path.write_text(key, encoding="utf-8")
    except OSError as e:
      logging.warning(f"Could not save API key to {self.path}: {e}")
      return False
    return True

  def get_or_prompt(self, prompt: Callable[..., str] = click.prompt) -> str:
    """Returns the stored key, asking for it and saving it on first run."""
    key = self.load()
    if key:
      return key

    click.echo("First time setup: Please enter your Alpha Vantage API Key.")
    click.echo(f"(It will be saved to {self.path})")
    key = prompt("Key").strip()

    if self.save(key):
      click.echo("Key saved successfully.\n")
    return key


def resolve_api_key(store: ApiKeyStore | None = None) -> str:
  """Prefers ALPHA_VANTAGE_API_KEY from the environment over the key file."""
  env_key = os.getenv(API_KEY_ENV_VAR, "").strip()
  if env_key:
    logging.debug(f"Using API key from {API_KEY_ENV_VAR}.")
    return env_key
  return (store or ApiKeyStore()).get_or_prompt()
