"""Configuration management for boostly."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import click
from dotenv import load_dotenv

from .persistence import JsonFileGateway, SqliteGateway, StateGateway
from .timer import TimerMode

DEFAULT_HOME = Path.home() / ".boostly"


@dataclass
class StoreBackend:
    """A persistence backend the CLI can be pointed at."""

    name: str
    description: str
    filename: str


STORE_BACKENDS: dict[str, StoreBackend] = {
    "json": StoreBackend(
        name="json",
        description="Single JSON snapshot file",
        filename="boostly.json",
    ),
    "sqlite": StoreBackend(
        name="sqlite",
        description="SQLite key/value table",
        filename="boostly.db",
    ),
}


def _parse_minutes(value: str | None) -> int | None:
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError:
        raise click.ClickException(f"BOOSTLY_CUSTOM_MINUTES must be a whole number, got '{value}'") from None


class BoostlyConfig:
    """Settings read from the environment (and a .env file, if present)."""

    def __init__(self):
        self.home = Path(os.environ.get("BOOSTLY_HOME") or DEFAULT_HOME).expanduser()
        self.store = os.environ.get("BOOSTLY_STORE", "json").lower()
        self.verbose = os.environ.get("BOOSTLY_VERBOSE", "false").lower() == "true"
        self.timer_mode = os.environ.get("BOOSTLY_TIMER_MODE", TimerMode.POMODORO.value).lower()
        self.custom_minutes = _parse_minutes(os.environ.get("BOOSTLY_CUSTOM_MINUTES"))

    @property
    def backend(self) -> StoreBackend:
        return STORE_BACKENDS.get(self.store, STORE_BACKENDS["json"])

    @property
    def state_path(self) -> Path:
        return self.home / self.backend.filename

    @property
    def log_path(self) -> Path:
        return self.home / "boostly.log"

    def validate(self) -> None:
        if self.store not in STORE_BACKENDS:
            valid = ", ".join(STORE_BACKENDS.keys())
            raise click.ClickException(f"Invalid store '{self.store}'. Valid options: {valid}")
        if self.timer_mode not in {m.value for m in TimerMode}:
            valid = ", ".join(m.value for m in TimerMode)
            raise click.ClickException(f"Invalid timer mode '{self.timer_mode}'. Valid options: {valid}")
        if self.custom_minutes is not None and self.custom_minutes < 0:
            raise click.ClickException("BOOSTLY_CUSTOM_MINUTES must not be negative")

    def build_gateway(self) -> StateGateway:
        if self.store == "sqlite":
            return SqliteGateway(self.state_path)
        return JsonFileGateway(self.state_path)


def get_config(store: str | None = None, verbose: bool = False) -> BoostlyConfig:
    """Load .env, apply command-line overrides, then validate."""
    load_dotenv()
    config = BoostlyConfig()
    if store:
        config.store = store.lower()
    if verbose:
        config.verbose = True
    config.validate()
    return config


def store_option(f):
    """Decorator to add the persistence backend option to commands."""
    choices = sorted(STORE_BACKENDS.keys())

    return click.option(
        "--store",
        type=click.Choice(choices),
        default=None,
        help="Persistence backend (default: $BOOSTLY_STORE or json)",
    )(f)


def verbose_option(f):
    """Decorator to add verbose option to commands."""
    return click.option(
        "--verbose", "-v",
        is_flag=True,
        help="Enable verbose output",
    )(f)
