from __future__ import annotations

from collections.abc import Sequence

from .models import SQUAD_SIZE, STARTING_ELEVEN_SIZE, Player, Position

BRACKET_TEAM_COUNT = 8


class InvalidValueError(ValueError):
    """Base exception for validation failures."""


class InvalidTeamError(InvalidValueError):
    """Raised when a squad does not satisfy the tournament composition rules."""

    def __init__(self, errors: Sequence[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Invalid team composition")


class BracketConfigurationError(InvalidValueError):
    """Raised when a bracket cannot be generated from the supplied teams."""


def team_composition_errors(
    players: Sequence[Player], starting_eleven: Sequence[str] | None = None
) -> list[str]:
    if len(players) != SQUAD_SIZE:
        return [f"Team must have exactly {SQUAD_SIZE} players"]

    errors: list[str] = []
    captains = [player for player in players if player.is_captain]
    if len(captains) != 1:
        errors.append("Team must have exactly one captain")

    goalkeepers = [
        player for player in players if player.natural_position is Position.GOALKEEPER
    ]
    if not goalkeepers:
        errors.append("Team must have at least 1 goalkeeper")

    if starting_eleven is not None:
        if len(starting_eleven) != STARTING_ELEVEN_SIZE:
            errors.append(
                f"Starting lineup must have exactly {STARTING_ELEVEN_SIZE} players"
            )
        else:
            known = {player.player_id for player in players}
            unknown = [pid for pid in starting_eleven if pid not in known]
            if unknown:
                errors.append(
                    f"Invalid player IDs in starting lineup: {', '.join(unknown)}"
                )
            selected = set(starting_eleven)
            keepers = sum(
                1
                for player in players
                if player.player_id in selected
                and player.natural_position is Position.GOALKEEPER
            )
            if keepers < 1:
                errors.append("Starting lineup must have exactly 1 goalkeeper")
            elif keepers > 1:
                errors.append("Starting lineup can only have 1 goalkeeper")
    return errors


def validate_team_composition(
    players: Sequence[Player], starting_eleven: Sequence[str] | None = None
) -> None:
    errors = team_composition_errors(players, starting_eleven)
    if errors:
        raise InvalidTeamError(errors)


def validate_team_ids(team_ids: Sequence[str]) -> list[str]:
    ids = [str(team_id).strip() for team_id in team_ids]
    if len(ids) != BRACKET_TEAM_COUNT:
        raise BracketConfigurationError(
            f"Tournament must have exactly {BRACKET_TEAM_COUNT} teams (got {len(ids)})"
        )
    if any(not team_id for team_id in ids):
        raise BracketConfigurationError("Team ids cannot be empty")
    seen: set[str] = set()
    for team_id in ids:
        if team_id in seen:
            raise BracketConfigurationError(f"Duplicate team id provided: {team_id}")
        seen.add(team_id)
    return ids


__all__ = [
    "BRACKET_TEAM_COUNT",
    "BracketConfigurationError",
    "InvalidTeamError",
    "InvalidValueError",
    "team_composition_errors",
    "validate_team_composition",
    "validate_team_ids",
]
