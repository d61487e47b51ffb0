from __future__ import annotations

import logging
import random
from collections.abc import Callable, Mapping, Sequence
from dataclasses import replace
from typing import Final

from .models import Bracket, BracketSlot, MatchRound, TournamentResults
from .validation import validate_team_ids

log: Final = logging.getLogger("tournament-sim")

QUARTER_FINAL_SLOTS = 4
SEMI_FINAL_SLOTS = 2

# (round, slot index) -> (next round, next slot index, side)
PROPAGATION: Final[dict[tuple[MatchRound, int], tuple[MatchRound, int, str]]] = {
    (MatchRound.QUARTER_FINAL, 0): (MatchRound.SEMI_FINAL, 0, "team1_id"),
    (MatchRound.QUARTER_FINAL, 1): (MatchRound.SEMI_FINAL, 0, "team2_id"),
    (MatchRound.QUARTER_FINAL, 2): (MatchRound.SEMI_FINAL, 1, "team1_id"),
    (MatchRound.QUARTER_FINAL, 3): (MatchRound.SEMI_FINAL, 1, "team2_id"),
    (MatchRound.SEMI_FINAL, 0): (MatchRound.FINAL, 0, "team1_id"),
    (MatchRound.SEMI_FINAL, 1): (MatchRound.FINAL, 0, "team2_id"),
}

_NEXT_ROUND: Final[dict[MatchRound, MatchRound | None]] = {
    MatchRound.QUARTER_FINAL: MatchRound.SEMI_FINAL,
    MatchRound.SEMI_FINAL: MatchRound.FINAL,
    MatchRound.FINAL: None,
}

_ROUND_NAMES: Final[dict[MatchRound, str]] = {
    MatchRound.QUARTER_FINAL: "Quarterfinals",
    MatchRound.SEMI_FINAL: "Semifinals",
    MatchRound.FINAL: "Final",
}


def next_round(round_: MatchRound | str) -> MatchRound | None:
    return _NEXT_ROUND[MatchRound(round_)]


def round_name(round_: MatchRound | str) -> str:
    return _ROUND_NAMES[MatchRound(round_)]


def bracket_position(round_: MatchRound | str, index: int = 0) -> str:
    """Short label for a slot: ``QF1``..``QF4``, ``SF1``, ``SF2`` or ``FINAL``."""
    normalized = MatchRound(round_)
    if normalized is MatchRound.QUARTER_FINAL:
        return f"QF{index + 1}"
    if normalized is MatchRound.SEMI_FINAL:
        return f"SF{index + 1}"
    return "FINAL"


def generate_bracket(
    team_ids: Sequence[str],
    *,
    rng: random.Random | None = None,
    match_id_factory: Callable[[MatchRound, int], str] | None = None,
) -> Bracket:
    """Shuffle eight teams into quarter-final pairings.

    Semi-final and final slots start without teams. Every slot gets a match
    id up front (``QF1``.. ``FINAL`` unless ``match_id_factory`` says
    otherwise) so winners can be advanced by id.
    """
    ids = validate_team_ids(team_ids)
    randomizer = rng or random.Random()
    shuffled = list(ids)
    randomizer.shuffle(shuffled)
    make_id = match_id_factory or bracket_position

    quarter_finals = tuple(
        BracketSlot(
            match_id=make_id(MatchRound.QUARTER_FINAL, index),
            team1_id=shuffled[index * 2],
            team2_id=shuffled[index * 2 + 1],
        )
        for index in range(QUARTER_FINAL_SLOTS)
    )
    semi_finals = tuple(
        BracketSlot(match_id=make_id(MatchRound.SEMI_FINAL, index))
        for index in range(SEMI_FINAL_SLOTS)
    )
    final = BracketSlot(match_id=make_id(MatchRound.FINAL, 0))
    return Bracket(
        quarter_finals=quarter_finals,  # type: ignore[arg-type]
        semi_finals=semi_finals,  # type: ignore[arg-type]
        final=final,
    )


def assign_match_id(
    bracket: Bracket, round_: MatchRound | str, index: int, match_id: str
) -> Bracket:
    normalized = MatchRound(round_)
    slot = bracket.slots(normalized)[index]
    return bracket.with_slot(normalized, index, replace(slot, match_id=match_id))


def advance_winner(
    bracket: Bracket, match_id: str, winner_id: str, round_: MatchRound | str
) -> Bracket:
    """Record ``winner_id`` for ``match_id`` and seed it into the next round.

    Returns the bracket untouched when no slot in ``round_`` carries
    ``match_id``; callers decide whether that deserves a warning.
    """
    normalized = MatchRound(round_)
    found = bracket.find_slot(match_id)
    if found is None or found[0] is not normalized:
        log.debug("No %s slot for match %s; bracket unchanged", normalized, match_id)
        return bracket

    _, index, slot = found
    updated = bracket.with_slot(normalized, index, replace(slot, winner_id=winner_id))
    target = PROPAGATION.get((normalized, index))
    if target is None:
        return updated

    target_round, target_index, side = target
    target_slot = updated.slots(target_round)[target_index]
    return updated.with_slot(
        target_round, target_index, replace(target_slot, **{side: winner_id})
    )


def is_complete(bracket: Bracket) -> bool:
    return bracket.final.winner_id is not None


def tournament_results(bracket: Bracket) -> TournamentResults | None:
    if not is_complete(bracket):
        return None
    winner_id = bracket.final.winner_id
    runner_up = (
        bracket.final.team2_id
        if bracket.final.team1_id == winner_id
        else bracket.final.team1_id
    )
    return TournamentResults(winner_id=winner_id or "", runner_up_id=runner_up or "")


def current_round(bracket: Bracket) -> MatchRound | None:
    """Earliest round that still has an undecided slot."""
    for round_ in MatchRound:
        if any(not slot.is_decided for slot in bracket.slots(round_)):
            return round_
    return None


def newly_ready_slots(
    before: Bracket, after: Bracket
) -> list[tuple[MatchRound, int, BracketSlot]]:
    """Slots that gained their second team between ``before`` and ``after``."""
    ready: list[tuple[MatchRound, int, BracketSlot]] = []
    for round_, index, slot in after.all_slots():
        if slot.is_ready and not before.slots(round_)[index].is_ready:
            ready.append((round_, index, slot))
    return ready


def render_bracket(
    bracket: Bracket,
    labels: Mapping[str, str] | None = None,
    *,
    shrink_completed: bool = False,
) -> str:
    names = labels or {}

    def display(team_id: str | None, placeholder: str) -> str:
        if team_id is None:
            return placeholder
        return names.get(team_id, team_id)

    rounds = list(MatchRound)
    if shrink_completed:
        active = current_round(bracket)
        if active is not None:
            rounds = rounds[rounds.index(active) :]
        else:
            rounds = rounds[-1:]

    lines: list[str] = []
    for round_ in rounds:
        lines.append(round_name(round_))
        for index, slot in enumerate(bracket.slots(round_)):
            label = slot.match_id or bracket_position(round_, index)
            team_one = display(slot.team1_id, "TBD")
            team_two = display(slot.team2_id, "TBD")
            lines.append(f"  [{label}] {team_one} vs {team_two}")
            if slot.winner_id is not None:
                lines.append(f"    -> Winner: {display(slot.winner_id, 'TBD')}")
            else:
                lines.append("    -> Winner: TBD")
        lines.append("")
    if lines and not lines[-1]:
        lines.pop()
    results = tournament_results(bracket)
    if results is not None:
        lines.append(f"Champion: {display(results.winner_id, 'TBD')}")
        lines.append(f"Runner-up: {display(results.runner_up_id, 'TBD')}")
    return "\n".join(line.rstrip() for line in lines)


__all__ = [
    "PROPAGATION",
    "advance_winner",
    "assign_match_id",
    "bracket_position",
    "current_round",
    "generate_bracket",
    "is_complete",
    "newly_ready_slots",
    "next_round",
    "render_bracket",
    "round_name",
    "tournament_results",
]
