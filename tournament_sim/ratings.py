"""Player rating generation and team strength helpers.

Ratings depend on the strength tier of the player's country. Natural-position
ratings are drawn from a higher band than the three off-position ratings.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass

from .models import SQUAD_SIZE, STARTING_ELEVEN_SIZE, Player, Position, Team
from .validation import InvalidTeamError


@dataclass(slots=True, frozen=True)
class RatingRange:
    minimum: int
    maximum: int

    def draw(self, rng: random.Random) -> int:
        return rng.randint(self.minimum, self.maximum)


@dataclass(slots=True, frozen=True)
class TierConfig:
    tier: int
    natural_range: RatingRange
    off_position_range: RatingRange
    description: str


TIER_CONFIGS: dict[int, TierConfig] = {
    1: TierConfig(1, RatingRange(75, 100), RatingRange(10, 50), "Elite"),
    2: TierConfig(2, RatingRange(65, 90), RatingRange(5, 45), "Strong"),
    3: TierConfig(3, RatingRange(55, 80), RatingRange(0, 40), "Mid level"),
    4: TierConfig(4, RatingRange(50, 70), RatingRange(0, 35), "Developing"),
}
DEFAULT_TIER = 4

COUNTRY_TIERS: dict[str, int] = {
    "Morocco": 1,
    "Senegal": 1,
    "Nigeria": 1,
    "Egypt": 1,
    "Tunisia": 1,
    "Algeria": 1,
    "Ghana": 2,
    "Cameroon": 2,
    "Ivory Coast": 2,
    "Mali": 2,
    "Burkina Faso": 2,
    "Guinea": 2,
    "South Africa": 3,
    "Congo (DRC)": 3,
    "Uganda": 3,
    "Angola": 3,
    "Zambia": 3,
    "Kenya": 3,
    "Gabon": 3,
    "Cape Verde": 3,
}

# 3 GK / 8 DF / 7 MD / 5 AT
SQUAD_DISTRIBUTION: tuple[tuple[Position, int], ...] = (
    (Position.GOALKEEPER, 3),
    (Position.DEFENDER, 8),
    (Position.MIDFIELDER, 7),
    (Position.ATTACKER, 5),
)

# 1 GK / 4 DF / 3 MD / 3 AT
STARTING_SHAPE: tuple[tuple[Position, int], ...] = (
    (Position.GOALKEEPER, 1),
    (Position.DEFENDER, 4),
    (Position.MIDFIELDER, 3),
    (Position.ATTACKER, 3),
)

_NAME_POOLS: dict[Position, tuple[str, ...]] = {
    Position.GOALKEEPER: ("Ahmed", "Mohamed", "Ibrahim", "Omar", "Hassan", "Ali"),
    Position.DEFENDER: ("Salah", "Mahmoud", "Tarek", "Nabil", "Khalid", "Rashid"),
    Position.MIDFIELDER: ("Amr", "Hany", "Sherif", "Mostafa", "Ashraf", "Tamer"),
    Position.ATTACKER: ("Yasser", "Hossam", "Mido", "Karim", "Youssef", "Samir"),
}


def country_tier(country: str) -> int:
    return COUNTRY_TIERS.get(country, DEFAULT_TIER)


def tier_config(country: str | None) -> TierConfig:
    if country is None:
        return TIER_CONFIGS[DEFAULT_TIER]
    return TIER_CONFIGS[country_tier(country)]


def generate_player_ratings(
    natural_position: Position,
    country: str | None = None,
    *,
    rng: random.Random | None = None,
) -> dict[Position, int]:
    randomizer = rng or random.Random()
    config = tier_config(country)
    ratings: dict[Position, int] = {}
    for position in Position:
        band = (
            config.natural_range
            if position is natural_position
            else config.off_position_range
        )
        ratings[position] = band.draw(randomizer)
    return ratings


def calculate_team_rating(players: Sequence[Player]) -> float:
    """Mean of all 92 position ratings (23 players x 4 positions)."""
    if len(players) != SQUAD_SIZE:
        raise InvalidTeamError([f"Team must have exactly {SQUAD_SIZE} players"])
    total = sum(player.rating(position) for player in players for position in Position)
    return total / (SQUAD_SIZE * len(Position))


def generate_player_name(
    position: Position, *, rng: random.Random | None = None
) -> str:
    randomizer = rng or random.Random()
    first = randomizer.choice(_NAME_POOLS[position])
    return f"{first} {randomizer.randint(1, 99)}"


def generate_squad(
    country: str, team_id: str = "", *, rng: random.Random | None = None
) -> list[Player]:
    randomizer = rng or random.Random()
    prefix = team_id or country.lower().replace(" ", "-")
    players: list[Player] = []
    for position, count in SQUAD_DISTRIBUTION:
        for _ in range(count):
            players.append(
                Player(
                    player_id=f"{prefix}-p{len(players) + 1:02d}",
                    name=generate_player_name(position, rng=randomizer),
                    natural_position=position,
                    ratings=generate_player_ratings(position, country, rng=randomizer),
                    is_captain=not players,
                )
            )
    return players


def pick_starting_eleven(players: Sequence[Player]) -> list[str]:
    """Best-rated players per line in a 4-3-3 shape."""
    lineup: list[str] = []
    for position, count in STARTING_SHAPE:
        ranked = sorted(
            (player for player in players if player.natural_position is position),
            key=lambda player: (-player.natural_rating, player.player_id),
        )
        lineup.extend(player.player_id for player in ranked[:count])
    if len(lineup) < STARTING_ELEVEN_SIZE:
        chosen = set(lineup)
        for player in players:
            if len(lineup) == STARTING_ELEVEN_SIZE:
                break
            if (
                player.player_id not in chosen
                and player.natural_position is not Position.GOALKEEPER
            ):
                lineup.append(player.player_id)
                chosen.add(player.player_id)
    return lineup


def build_team(
    team_id: str, country: str, *, rng: random.Random | None = None
) -> Team:
    players = generate_squad(country, team_id, rng=rng)
    return Team(
        team_id=team_id,
        country=country,
        players=players,
        overall_rating=calculate_team_rating(players),
        starting_eleven=pick_starting_eleven(players),
    )


__all__ = [
    "COUNTRY_TIERS",
    "DEFAULT_TIER",
    "SQUAD_DISTRIBUTION",
    "TIER_CONFIGS",
    "RatingRange",
    "TierConfig",
    "build_team",
    "calculate_team_rating",
    "country_tier",
    "generate_player_name",
    "generate_player_ratings",
    "generate_squad",
    "pick_starting_eleven",
    "tier_config",
]
