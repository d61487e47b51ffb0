from __future__ import annotations

import random
from collections.abc import Callable

import pytest

from tournament_sim.models import Player, Position, Team
from tournament_sim.ratings import SQUAD_DISTRIBUTION, pick_starting_eleven

TeamFactory = Callable[..., Team]


def _make_team(
    team_id: str,
    overall_rating: float = 50.0,
    *,
    natural: int = 70,
    off_position: int = 20,
    country: str | None = None,
    distribution: tuple[tuple[Position, int], ...] = SQUAD_DISTRIBUTION,
) -> Team:
    players: list[Player] = []
    for position, count in distribution:
        for _ in range(count):
            number = len(players) + 1
            players.append(
                Player(
                    player_id=f"{team_id}-p{number:02d}",
                    name=f"{team_id.upper()} Player {number}",
                    natural_position=position,
                    ratings={
                        pos: natural if pos is position else off_position
                        for pos in Position
                    },
                    is_captain=number == 1,
                )
            )
    return Team(
        team_id=team_id,
        country=country or f"Country {team_id.upper()}",
        players=players,
        overall_rating=overall_rating,
        starting_eleven=pick_starting_eleven(players),
    )


@pytest.fixture
def make_team() -> TeamFactory:
    return _make_team


@pytest.fixture
def team_pair() -> tuple[Team, Team]:
    return _make_team("home", 60.0), _make_team("away", 55.0)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)
