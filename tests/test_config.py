"""Tests for the config module."""

from dataclasses import FrozenInstanceError

import pytest

from tournament_sim.config import (
    DEFAULT_COUNTRIES,
    SimulationConfig,
    env_bool,
    env_int,
    env_list,
    env_str,
    read_simulation_config,
)

_ENV_KEYS = (
    "TOURNEY_SEED",
    "TOURNEY_SHOW_EVENTS",
    "TOURNEY_LOG_LEVEL",
    "TOURNEY_COUNTRIES",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


class TestEnvHelpers:
    """Test environment parsing helpers."""

    @pytest.mark.parametrize("raw", ["1", "true", "YES", " on "])
    def test_env_bool_truthy(self, monkeypatch, raw):
        monkeypatch.setenv("FLAG", raw)
        assert env_bool("FLAG") is True

    @pytest.mark.parametrize("raw", ["0", "false", "No", "off"])
    def test_env_bool_falsy(self, monkeypatch, raw):
        monkeypatch.setenv("FLAG", raw)
        assert env_bool("FLAG", default=True) is False

    def test_env_bool_unknown_value_uses_default(self, monkeypatch):
        monkeypatch.setenv("FLAG", "maybe")
        assert env_bool("FLAG", default=True) is True

    def test_env_bool_missing_uses_default(self, monkeypatch):
        monkeypatch.delenv("FLAG", raising=False)
        assert env_bool("FLAG") is False

    def test_env_int_parses_and_falls_back(self, monkeypatch):
        monkeypatch.setenv("NUMBER", "42")
        assert env_int("NUMBER") == 42

        monkeypatch.setenv("NUMBER", "forty-two")
        assert env_int("NUMBER", default=7) == 7

        monkeypatch.setenv("NUMBER", "")
        assert env_int("NUMBER") is None

    def test_env_str_strips_and_defaults(self, monkeypatch):
        monkeypatch.setenv("NAME", "  debug ")
        assert env_str("NAME", default="INFO") == "debug"

        monkeypatch.setenv("NAME", "   ")
        assert env_str("NAME", default="INFO") == "INFO"

    def test_env_list_splits_commas(self, monkeypatch):
        monkeypatch.setenv("ITEMS", "Ghana, Mali ,,Kenya")
        assert env_list("ITEMS", default=()) == ("Ghana", "Mali", "Kenya")

        monkeypatch.setenv("ITEMS", " , ")
        assert env_list("ITEMS", default=("x",)) == ("x",)


class TestSimulationConfig:
    """Test simulation configuration dataclass."""

    def test_frozen_dataclass(self):
        config = SimulationConfig(
            seed=1, show_events=False, log_level="INFO", countries=DEFAULT_COUNTRIES
        )
        with pytest.raises(FrozenInstanceError):
            config.seed = 2

    def test_defaults_without_environment(self):
        config = read_simulation_config()

        assert config.seed is None
        assert config.show_events is False
        assert config.log_level == "INFO"
        assert config.countries == DEFAULT_COUNTRIES
        assert len(config.countries) == 8

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("TOURNEY_SEED", "99")
        monkeypatch.setenv("TOURNEY_SHOW_EVENTS", "true")
        monkeypatch.setenv("TOURNEY_LOG_LEVEL", "debug")
        monkeypatch.setenv("TOURNEY_COUNTRIES", "A,B,C,D,E,F,G,H")

        config = read_simulation_config()

        assert config.seed == 99
        assert config.show_events is True
        assert config.log_level == "DEBUG"
        assert config.countries == tuple("ABCDEFGH")
