"""Configuration helpers for the simulation CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

DEFAULT_COUNTRIES: tuple[str, ...] = (
    "Morocco",
    "Senegal",
    "Nigeria",
    "Egypt",
    "Ghana",
    "Cameroon",
    "South Africa",
    "Kenya",
)


def env_bool(name: str, *, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return default


def env_int(name: str, *, default: int | None = None) -> int | None:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_str(name: str, *, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


def env_list(name: str, *, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None:
        return default
    values = tuple(part.strip() for part in raw.split(",") if part.strip())
    return values or default


@dataclass(frozen=True)
class SimulationConfig:
    seed: int | None
    show_events: bool
    log_level: str
    countries: tuple[str, ...]


def read_simulation_config() -> SimulationConfig:
    return SimulationConfig(
        seed=env_int("TOURNEY_SEED"),
        show_events=env_bool("TOURNEY_SHOW_EVENTS", default=False),
        log_level=env_str("TOURNEY_LOG_LEVEL", default="INFO").upper(),
        countries=env_list("TOURNEY_COUNTRIES", default=DEFAULT_COUNTRIES),
    )


__all__ = [
    "DEFAULT_COUNTRIES",
    "SimulationConfig",
    "env_bool",
    "env_int",
    "env_list",
    "env_str",
    "read_simulation_config",
]
