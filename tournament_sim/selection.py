"""Rating-weighted player selection shared by the match engine."""

from __future__ import annotations

import random
from collections.abc import Collection, Iterable
from itertools import accumulate

from .models import Player, Position, Team

MIN_SELECTION_WEIGHT = 1


def selection_weights(players: Iterable[Player]) -> list[int]:
    """Return each player's weight: their natural-position rating, floored at 1."""
    return [max(player.natural_rating, MIN_SELECTION_WEIGHT) for player in players]


def pick_player(
    team: Team,
    eligible: Iterable[Position],
    *,
    rng: random.Random | None = None,
    exclude: Collection[str] = (),
) -> Player:
    """Pick a player whose natural position is in ``eligible``.

    Falls back to a uniform pick over the whole squad when nobody matches.
    Otherwise a single draw in ``[0, total_weight)`` is scanned against the
    prefix sums of the candidates' weights. Player ids in ``exclude`` are
    never returned.
    """
    randomizer = rng or random.Random()
    candidates = [
        player for player in team.players_in(eligible) if player.player_id not in exclude
    ]
    if not candidates:
        pool = [player for player in team.players if player.player_id not in exclude]
        if not pool:
            raise ValueError(f"Team {team.team_id} has no players to select from")
        return randomizer.choice(pool)

    cumulative = list(accumulate(selection_weights(candidates)))
    draw = randomizer.random() * cumulative[-1]
    for player, bound in zip(candidates, cumulative, strict=True):
        if draw < bound:
            return player
    return candidates[-1]


__all__ = ["MIN_SELECTION_WEIGHT", "pick_player", "selection_weights"]
