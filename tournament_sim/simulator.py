"""Match outcome generation from team strength ratings."""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from typing import Final

from .models import (
    EXTRA_TIME_MINUTES,
    REGULATION_MINUTES,
    GoalScorer,
    MatchResult,
    PenaltyKick,
    PenaltyShootout,
    Position,
    Team,
)
from .selection import pick_player

log: Final = logging.getLogger("tournament-sim")

MAX_GOALS = 7
RATING_JITTER = 0.2
LOW_TIER_SHARE = 0.8
MID_TIER_SHARE = 0.95
LOW_TIER_GOALS = (0, 1, 2, 3)
MID_TIER_GOALS = (4, 5)
HIGH_TIER_GOALS = (6, 7)

EXTRA_TIME_GOAL_CHANCE = 0.3
PENALTY_CONVERSION = 0.75
SHOOTOUT_ROUNDS = 5

_ATTACKER = (Position.ATTACKER,)
_MIDFIELDER = (Position.MIDFIELDER,)
_DEFENDER = (Position.DEFENDER,)
# cumulative thresholds: 70% AT, 25% MD, 5% DF
SCORER_ROLE_TABLE: tuple[tuple[float, tuple[Position, ...]], ...] = (
    (0.70, _ATTACKER),
    (0.95, _MIDFIELDER),
    (1.00, _DEFENDER),
)
EXTRA_TIME_SCORER_ROLES = (Position.ATTACKER, Position.MIDFIELDER)
PENALTY_TAKER_ROLES = (Position.ATTACKER, Position.MIDFIELDER, Position.DEFENDER)


def scoring_probability(overall_rating: float, rng: random.Random) -> float:
    """Rating as a probability, jittered by up to +/-20% and clamped to [0, 1]."""
    jitter = (rng.random() - 0.5) * 2 * RATING_JITTER
    return max(0.0, min(1.0, overall_rating / 100 + jitter))


def generate_goal_count(
    overall_rating: float, *, rng: random.Random | None = None
) -> int:
    """Draw a regulation goal count from the tiered distribution.

    A team at full strength stays in the 0-3 band 80% of the time and, when it
    escapes it, lands in 4-5 95% of the time. Weaker sides escape the low band
    proportionally less often, so stronger teams score more on average.
    """
    randomizer = rng or random.Random()
    probability = scoring_probability(overall_rating, randomizer)
    escape_low = (1 - LOW_TIER_SHARE) * probability
    reach_high = (1 - MID_TIER_SHARE) * probability
    if randomizer.random() >= escape_low:
        goals = randomizer.choice(LOW_TIER_GOALS)
    elif randomizer.random() >= reach_high:
        goals = randomizer.choice(MID_TIER_GOALS)
    else:
        goals = randomizer.choice(HIGH_TIER_GOALS)
    return min(goals, MAX_GOALS)


def _scorer_roles(rng: random.Random) -> tuple[Position, ...]:
    roll = rng.random()
    for threshold, roles in SCORER_ROLE_TABLE:
        if roll < threshold:
            return roles
    return SCORER_ROLE_TABLE[-1][1]


def _unique_minute(
    used_minutes: set[int], first: int, last: int, rng: random.Random
) -> int:
    if all(minute in used_minutes for minute in range(first, last + 1)):
        raise ValueError(f"No free minute left between {first} and {last}")
    while True:
        minute = rng.randint(first, last)
        if minute not in used_minutes:
            used_minutes.add(minute)
            return minute


def generate_goal_scorers(
    team: Team,
    goal_count: int,
    used_minutes: set[int],
    *,
    rng: random.Random | None = None,
) -> list[GoalScorer]:
    """Regulation goals, each at a minute in 1..90 not yet taken by either team."""
    randomizer = rng or random.Random()
    scorers: list[GoalScorer] = []
    for _ in range(goal_count):
        scorer = pick_player(team, _scorer_roles(randomizer), rng=randomizer)
        minute = _unique_minute(used_minutes, 1, REGULATION_MINUTES, randomizer)
        scorers.append(
            GoalScorer(
                player_id=scorer.player_id,
                player_name=scorer.name,
                team_id=team.team_id,
                minute=minute,
            )
        )
    return sorted(scorers, key=lambda goal: goal.minute)


def generate_extra_time_goals(
    team: Team,
    goal_count: int,
    used_minutes: set[int],
    *,
    rng: random.Random | None = None,
) -> list[GoalScorer]:
    randomizer = rng or random.Random()
    scorers: list[GoalScorer] = []
    for _ in range(goal_count):
        scorer = pick_player(team, EXTRA_TIME_SCORER_ROLES, rng=randomizer)
        minute = _unique_minute(
            used_minutes, REGULATION_MINUTES + 1, EXTRA_TIME_MINUTES, randomizer
        )
        scorers.append(
            GoalScorer(
                player_id=scorer.player_id,
                player_name=scorer.name,
                team_id=team.team_id,
                minute=minute,
                is_extra_time=True,
            )
        )
    return scorers


def extra_time_goal_count(rng: random.Random) -> int:
    if rng.random() < EXTRA_TIME_GOAL_CHANCE:
        return rng.randrange(2)
    return 0


def _take_kick(
    shootout: PenaltyShootout, team: Team, team1_kicking: bool, rng: random.Random
) -> None:
    taker = pick_player(team, PENALTY_TAKER_ROLES, rng=rng)
    scored = rng.random() < PENALTY_CONVERSION
    if scored:
        if team1_kicking:
            shootout.team1_score += 1
        else:
            shootout.team2_score += 1
    shootout.kicks.append(
        PenaltyKick(
            team_id=team.team_id,
            player_id=taker.player_id,
            scored=scored,
            order=len(shootout.kicks) + 1,
        )
    )


def simulate_penalty_shootout(
    team1: Team, team2: Team, *, rng: random.Random | None = None
) -> PenaltyShootout:
    """Five alternating rounds, then sudden-death rounds until a round ends unlevel."""
    randomizer = rng or random.Random()
    shootout = PenaltyShootout(team1_id=team1.team_id, team2_id=team2.team_id)
    rounds = 0
    while rounds < SHOOTOUT_ROUNDS or shootout.is_level:
        _take_kick(shootout, team1, True, randomizer)
        _take_kick(shootout, team2, False, randomizer)
        rounds += 1
    log.debug(
        "Shootout %s vs %s finished %s-%s after %s rounds",
        team1.team_id,
        team2.team_id,
        shootout.team1_score,
        shootout.team2_score,
        rounds,
    )
    return shootout


def _count_for(goals: Sequence[GoalScorer], team_id: str) -> int:
    return sum(1 for goal in goals if goal.team_id == team_id)


def simulate_match(
    team1: Team, team2: Team, *, rng: random.Random | None = None
) -> MatchResult:
    """Simulate a knockout match between two validated teams.

    Level scores after 90 minutes go to extra time, and a shootout settles
    anything still level after 120.
    """
    randomizer = rng or random.Random()
    used_minutes: set[int] = set()

    team1_regulation = generate_goal_count(team1.overall_rating, rng=randomizer)
    team2_regulation = generate_goal_count(team2.overall_rating, rng=randomizer)
    goal_scorers = generate_goal_scorers(
        team1, team1_regulation, used_minutes, rng=randomizer
    ) + generate_goal_scorers(team2, team2_regulation, used_minutes, rng=randomizer)

    is_draw = team1_regulation == team2_regulation
    went_to_extra_time = False
    shootout: PenaltyShootout | None = None

    if is_draw:
        went_to_extra_time = True
        goal_scorers += generate_extra_time_goals(
            team1, extra_time_goal_count(randomizer), used_minutes, rng=randomizer
        )
        goal_scorers += generate_extra_time_goals(
            team2, extra_time_goal_count(randomizer), used_minutes, rng=randomizer
        )

    team1_score = _count_for(goal_scorers, team1.team_id)
    team2_score = _count_for(goal_scorers, team2.team_id)

    if went_to_extra_time and team1_score == team2_score:
        shootout = simulate_penalty_shootout(team1, team2, rng=randomizer)
        team1_won = shootout.winner_team_id == team1.team_id
    else:
        team1_won = team1_score > team2_score

    winner, loser = (team1, team2) if team1_won else (team2, team1)
    result = MatchResult(
        team1_id=team1.team_id,
        team2_id=team2.team_id,
        team1_score=team1_score,
        team2_score=team2_score,
        winner_id=winner.team_id,
        loser_id=loser.team_id,
        is_draw=is_draw,
        goal_scorers=sorted(goal_scorers, key=lambda goal: goal.minute),
        went_to_extra_time=went_to_extra_time,
        went_to_penalties=shootout is not None,
        penalty_shootout=shootout,
    )
    log.debug(
        "Simulated %s vs %s: %s (winner %s)",
        team1.team_id,
        team2.team_id,
        result.scoreline(),
        result.winner_id,
    )
    return result


__all__ = [
    "MAX_GOALS",
    "PENALTY_CONVERSION",
    "SHOOTOUT_ROUNDS",
    "extra_time_goal_count",
    "generate_extra_time_goals",
    "generate_goal_count",
    "generate_goal_scorers",
    "scoring_probability",
    "simulate_match",
    "simulate_penalty_shootout",
]
