"""In-memory orchestration of a full eight-team knockout tournament."""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Final

from .bracket import (
    advance_winner,
    bracket_position,
    generate_bracket,
    is_complete,
    newly_ready_slots,
    round_name,
)
from .events import synthesize_events
from .models import Bracket, MatchEvent, MatchResult, MatchRound, Team
from .simulator import simulate_match

log: Final = logging.getLogger("tournament-sim")


@dataclass(slots=True)
class MatchRecord:
    match_id: str
    round: MatchRound
    position: str
    team1: Team
    team2: Team
    result: MatchResult
    events: list[MatchEvent]

    def summary(self) -> str:
        return (
            f"[{self.position}] {self.team1.country} {self.result.scoreline()} "
            f"{self.team2.country}"
        )


@dataclass(slots=True)
class TournamentRun:
    bracket: Bracket
    matches: list[MatchRecord] = field(default_factory=list)
    snapshots: list[tuple[str, Bracket]] = field(default_factory=list)

    def champion_id(self) -> str | None:
        return self.bracket.final.winner_id


def play_match(
    match_id: str,
    round_: MatchRound,
    position: str,
    team1: Team,
    team2: Team,
    *,
    rng: random.Random,
) -> MatchRecord:
    result = simulate_match(team1, team2, rng=rng)
    events = synthesize_events(team1, team2, result, rng=rng)
    record = MatchRecord(
        match_id=match_id,
        round=round_,
        position=position,
        team1=team1,
        team2=team2,
        result=result,
        events=events,
    )
    log.info("%s (winner %s)", record.summary(), result.winner_id)
    return record


def record_winner(
    bracket: Bracket, match_id: str, winner_id: str, round_: MatchRound
) -> Bracket:
    updated = advance_winner(bracket, match_id, winner_id, round_)
    if updated is bracket:
        log.warning(
            "Advance for %s match %s matched no bracket slot; ignoring",
            round_,
            match_id,
        )
        return bracket
    for ready_round, index, _slot in newly_ready_slots(bracket, updated):
        log.info("%s is ready to be played", bracket_position(ready_round, index))
    return updated


def run_tournament(
    teams: Sequence[Team], *, rng: random.Random | None = None
) -> TournamentRun:
    """Play every round of the bracket until a champion is crowned."""
    randomizer = rng or random.Random()
    by_id = {team.team_id: team for team in teams}
    bracket = generate_bracket([team.team_id for team in teams], rng=randomizer)
    run = TournamentRun(bracket=bracket, snapshots=[("Initial Bracket", bracket)])

    for round_ in MatchRound:
        for index, slot in enumerate(run.bracket.slots(round_)):
            if slot.is_decided or not slot.is_ready or slot.match_id is None:
                continue
            record = play_match(
                slot.match_id,
                round_,
                bracket_position(round_, index),
                by_id[slot.team1_id],  # type: ignore[index]
                by_id[slot.team2_id],  # type: ignore[index]
                rng=randomizer,
            )
            run.matches.append(record)
            run.bracket = record_winner(
                run.bracket, record.match_id, record.result.winner_id, round_
            )
        run.snapshots.append((f"After {round_name(round_)}", run.bracket))

    if not is_complete(run.bracket):
        raise RuntimeError("Tournament finished without a champion")
    return run


__all__ = [
    "MatchRecord",
    "TournamentRun",
    "play_match",
    "record_winner",
    "run_tournament",
]
