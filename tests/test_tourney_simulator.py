from __future__ import annotations

import logging
import random

import pytest

import tournament_sim.tourney_simulator as cli
from tournament_sim.bracket import generate_bracket, tournament_results
from tournament_sim.config import DEFAULT_COUNTRIES, read_simulation_config
from tournament_sim.models import EventKind, MatchRound
from tournament_sim.runner import record_winner, run_tournament
from tournament_sim.validation import BracketConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in (
        "TOURNEY_SEED",
        "TOURNEY_SHOW_EVENTS",
        "TOURNEY_LOG_LEVEL",
        "TOURNEY_COUNTRIES",
    ):
        monkeypatch.delenv(key, raising=False)


def make_teams(seed: int = 5):
    return cli.build_teams(DEFAULT_COUNTRIES, random.Random(seed))


def test_build_teams_assigns_sequential_ids():
    teams = make_teams()

    assert [team.team_id for team in teams] == [f"team-{i}" for i in range(1, 9)]
    assert [team.country for team in teams] == list(DEFAULT_COUNTRIES)
    assert all(len(team.players) == 23 for team in teams)


def test_run_tournament_plays_seven_matches():
    teams = make_teams()

    run = run_tournament(teams, rng=random.Random(10))

    rounds = [record.round for record in run.matches]
    assert rounds.count(MatchRound.QUARTER_FINAL) == 4
    assert rounds.count(MatchRound.SEMI_FINAL) == 2
    assert rounds.count(MatchRound.FINAL) == 1
    assert [label for label, _ in run.snapshots] == [
        "Initial Bracket",
        "After Quarterfinals",
        "After Semifinals",
        "After Final",
    ]

    results = tournament_results(run.bracket)
    assert results is not None
    assert run.champion_id() == results.winner_id
    final = run.matches[-1]
    assert final.result.winner_id == results.winner_id
    assert final.events[-1].kind is EventKind.FINAL


def test_run_tournament_winners_advance_between_rounds():
    run = run_tournament(make_teams(), rng=random.Random(3))
    quarter_winners = {
        record.result.winner_id
        for record in run.matches
        if record.round is MatchRound.QUARTER_FINAL
    }
    semi_teams = {
        team_id
        for record in run.matches
        if record.round is MatchRound.SEMI_FINAL
        for team_id in (record.team1.team_id, record.team2.team_id)
    }
    assert semi_teams == quarter_winners


def test_run_tournament_is_reproducible():
    first = run_tournament(make_teams(), rng=random.Random(8))
    second = run_tournament(make_teams(), rng=random.Random(8))

    assert first.bracket == second.bracket
    assert [r.summary() for r in first.matches] == [
        r.summary() for r in second.matches
    ]


def test_run_tournament_rejects_wrong_team_count():
    with pytest.raises(BracketConfigurationError):
        run_tournament(make_teams()[:6], rng=random.Random(1))


def test_record_winner_warns_on_unknown_match(caplog):
    bracket = generate_bracket(
        [f"t{i}" for i in range(8)], rng=random.Random(2)
    )

    with caplog.at_level(logging.WARNING, logger="tournament-sim"):
        updated = record_winner(bracket, "nope", "t1", MatchRound.QUARTER_FINAL)

    assert updated is bracket
    assert "matched no bracket slot" in caplog.text


def test_parse_args_uses_config_defaults(monkeypatch):
    monkeypatch.setenv("TOURNEY_SEED", "17")
    monkeypatch.setenv("TOURNEY_SHOW_EVENTS", "yes")

    args = cli.parse_args(read_simulation_config(), [])

    assert args.seed == 17
    assert args.show_events is True
    assert args.countries == list(DEFAULT_COUNTRIES)

    overridden = cli.parse_args(read_simulation_config(), ["--seed", "3"])
    assert overridden.seed == 3


def test_main_prints_bracket_and_results(capsys):
    exit_code = cli.main(["--seed", "11", "--log-level", "WARNING"])

    assert exit_code == 0
    output = capsys.readouterr().out
    assert "Snapshot 1: Initial Bracket" in output
    assert "Snapshot 4: After Final" in output
    assert "=== Final Bracket ===" in output
    assert "Champion: " in output
    assert "[QF1]" in output


def test_main_show_events_prints_timelines(capsys):
    cli.main(["--seed", "4", "--show-events", "--no-bracket", "--log-level", "ERROR"])

    output = capsys.readouterr().out
    assert "Match kicks off!" in output
    assert "=== Final Bracket ===" not in output


def test_main_is_deterministic_for_a_seed(capsys):
    cli.main(["--seed", "21", "--log-level", "ERROR"])
    first = capsys.readouterr().out
    cli.main(["--seed", "21", "--log-level", "ERROR"])
    second = capsys.readouterr().out

    assert first == second


@pytest.mark.parametrize("countries", ["Ghana,Mali,Kenya", ",".join(["Egypt"] * 9)])
def test_main_rejects_wrong_country_count(capsys, countries):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--countries", countries, "--log-level", "ERROR"])

    assert excinfo.value.code == 2
    assert "needs exactly 8 countries" in capsys.readouterr().err
