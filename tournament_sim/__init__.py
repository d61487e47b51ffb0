"""Knockout tournament simulation engine."""

from .bracket import (
    advance_winner,
    generate_bracket,
    is_complete,
    render_bracket,
    tournament_results,
)
from .events import synthesize_events
from .models import (
    Bracket,
    BracketSlot,
    EventKind,
    GoalScorer,
    MatchEvent,
    MatchResult,
    MatchRound,
    PenaltyKick,
    PenaltyShootout,
    Player,
    Position,
    Score,
    Team,
    TournamentResults,
)
from .ratings import build_team, calculate_team_rating, generate_player_ratings
from .selection import pick_player
from .simulator import simulate_match
from .validation import (
    BracketConfigurationError,
    InvalidTeamError,
    InvalidValueError,
    team_composition_errors,
    validate_team_composition,
)

__all__ = [
    "Bracket",
    "BracketSlot",
    "EventKind",
    "GoalScorer",
    "MatchEvent",
    "MatchResult",
    "MatchRound",
    "PenaltyKick",
    "PenaltyShootout",
    "Player",
    "Position",
    "Score",
    "Team",
    "TournamentResults",
    "BracketConfigurationError",
    "InvalidTeamError",
    "InvalidValueError",
    "advance_winner",
    "build_team",
    "calculate_team_rating",
    "generate_bracket",
    "generate_player_ratings",
    "is_complete",
    "pick_player",
    "render_bracket",
    "simulate_match",
    "synthesize_events",
    "team_composition_errors",
    "tournament_results",
    "validate_team_composition",
]
