"""Utility script to play a full simulated knockout tournament from the CLI."""

from __future__ import annotations

import argparse
import logging
import random
from collections.abc import Sequence

from tournament_sim.bracket import render_bracket
from tournament_sim.config import SimulationConfig, read_simulation_config
from tournament_sim.models import Team
from tournament_sim.ratings import build_team
from tournament_sim.runner import MatchRecord, TournamentRun, run_tournament
from tournament_sim.validation import BRACKET_TEAM_COUNT

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def parse_args(
    config: SimulationConfig, argv: Sequence[str] | None = None
) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Simulate an eight-team knockout tournament with generated squads"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=config.seed,
        help="Seed for the random generator (defaults to TOURNEY_SEED or random)",
    )
    parser.add_argument(
        "--countries",
        type=str,
        default=",".join(config.countries),
        help="Comma separated list of exactly eight countries",
    )
    parser.add_argument(
        "--show-events",
        action="store_true",
        default=config.show_events,
        help="Print the full event timeline for every match",
    )
    parser.add_argument(
        "--no-bracket",
        action="store_true",
        help="Skip printing the rendered bracket",
    )
    parser.add_argument(
        "--log-level",
        default=config.log_level,
        help="Logging level (DEBUG, INFO, WARNING...)",
    )
    args = parser.parse_args(argv)
    args.countries = split_countries(args.countries)
    if len(args.countries) != BRACKET_TEAM_COUNT:
        parser.error(
            f"--countries needs exactly {BRACKET_TEAM_COUNT} countries "
            f"(got {len(args.countries)})"
        )
    return args


def split_countries(raw: str) -> list[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT
    )


def build_teams(countries: Sequence[str], rng: random.Random) -> list[Team]:
    return [
        build_team(f"team-{index + 1}", country, rng=rng)
        for index, country in enumerate(countries)
    ]


def format_timeline(record: MatchRecord) -> list[str]:
    lines = [record.summary()]
    for event in record.events:
        minute = f"{event.minute:g}'"
        lines.append(
            f"  {minute:>6} {event.score.team1}-{event.score.team2}  {event.description}"
        )
    return lines


def print_run(run: TournamentRun, *, show_events: bool) -> None:
    for idx, (label, _) in enumerate(run.snapshots, start=1):
        print(f"Snapshot {idx}: {label}")
    print()
    for record in run.matches:
        if show_events:
            print("\n".join(format_timeline(record)))
            print()
        else:
            print(record.summary())


def main(argv: Sequence[str] | None = None) -> int:
    config = read_simulation_config()
    args = parse_args(config, argv)
    configure_logging(args.log_level)

    rng = random.Random(args.seed)
    teams = build_teams(args.countries, rng)
    run = run_tournament(teams, rng=rng)

    print_run(run, show_events=args.show_events)
    if not args.no_bracket:
        labels = {team.team_id: team.country for team in teams}
        print("\n=== Final Bracket ===")
        print(render_bracket(run.bracket, labels))
        print("====================\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
