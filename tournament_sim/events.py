"""Minute-by-minute event timelines for simulated matches.

The timeline is derived from an already decided :class:`MatchResult`, so every
goal and own goal in it maps onto exactly one entry of ``result.goal_scorers``.
Everything else (shots, cards, substitutions, stoppages, VAR reviews) is
colour generated around those goals.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from typing import Final

from .models import (
    EXTRA_TIME_MINUTES,
    REGULATION_MINUTES,
    AddedTimeDetail,
    AssistDetail,
    CardDetail,
    CardType,
    EventDetail,
    EventKind,
    GoalDetail,
    GoalScorer,
    MatchEvent,
    MatchResult,
    OffsideDetail,
    Player,
    Position,
    Score,
    ShotDetail,
    ShotType,
    StoppageDetail,
    SubstitutionDetail,
    Team,
    VarDecision,
    VarDetail,
)
from .selection import pick_player

log: Final = logging.getLogger("tournament-sim")

HALFTIME_MINUTE = 45
EXTRA_TIME_MARKER_MINUTE = 90.5
ADDED_TIME_MARKER_MINUTE = 90

OWN_GOAL_CHANCE = 0.05
OWN_GOAL_EARLIEST_MINUTE = 10
ASSIST_CHANCE = 0.3
ASSIST_LEAD = 0.5
GOAL_BUFFER_MINUTES = 1

INTENSE_WINDOWS: tuple[tuple[int, int], ...] = ((15, 30), (60, 75), (105, 115))
INTENSE_EVENT_CHANCE = 0.65
CALM_EVENT_CHANCE = 0.45

INJURY_CHANCE = 0.02
INJURY_AFTER_MINUTE = 30
INJURY_OFFSET = 0.3
VAR_CHANCE = 0.01
VAR_AFTER_MINUTE = 20
VAR_OFFSET = 0.5
ADDED_TIME_WINDOW = (85, 90)

REGULATION_SUB_WINDOW = (60, 85)
EXTRA_TIME_SUB_LAST_MINUTE = 115

# Milliseconds a replay should dwell on each event.
PAUSE_DURATIONS: dict[EventKind, int] = {
    EventKind.KICKOFF: 2000,
    EventKind.GOAL: 4000,
    EventKind.OWN_GOAL: 4000,
    EventKind.SHOT_ON_TARGET: 2000,
    EventKind.SHOT_OFF_TARGET: 1500,
    EventKind.SAVE: 2500,
    EventKind.ASSIST: 2000,
    EventKind.OFFSIDE: 1500,
    EventKind.FOUL: 1500,
    EventKind.FREE_KICK: 2000,
    EventKind.PENALTY_KICK: 3000,
    EventKind.CORNER_KICK: 1800,
    EventKind.GOAL_KICK: 1000,
    EventKind.THROW_IN: 1000,
    EventKind.YELLOW_CARD: 2000,
    EventKind.RED_CARD: 3000,
    EventKind.SUBSTITUTION: 2000,
    EventKind.HALFTIME: 3000,
    EventKind.FULLTIME: 3000,
    EventKind.INJURY_STOPPAGE: 2000,
    EventKind.VAR_REVIEW: 4000,
    EventKind.ADDED_TIME: 2000,
    EventKind.EXTRATIME: 2000,
    EventKind.PENALTIES: 3000,
    EventKind.FINAL: 3000,
}
DEFAULT_PAUSE_DURATION = 1000

# cumulative thresholds; anything above the last one is an injury stoppage
EVENT_TABLE: tuple[tuple[float, EventKind], ...] = (
    (0.20, EventKind.SHOT_ON_TARGET),
    (0.35, EventKind.SHOT_OFF_TARGET),
    (0.45, EventKind.SAVE),
    (0.52, EventKind.CORNER_KICK),
    (0.58, EventKind.OFFSIDE),
    (0.65, EventKind.FOUL),
    (0.70, EventKind.YELLOW_CARD),
    (0.74, EventKind.FREE_KICK),
    (0.78, EventKind.GOAL_KICK),
    (0.82, EventKind.THROW_IN),
    (0.85, EventKind.PENALTY_KICK),
    (0.88, EventKind.RED_CARD),
    (0.92, EventKind.SUBSTITUTION),
)

TIE_PRIORITY: dict[EventKind, int] = {
    EventKind.EXTRATIME: 0,
    EventKind.GOAL: 1,
    EventKind.OWN_GOAL: 1,
    EventKind.VAR_REVIEW: 2,
    EventKind.RED_CARD: 3,
    EventKind.YELLOW_CARD: 4,
    EventKind.PENALTY_KICK: 5,
}
DEFAULT_TIE_PRIORITY = 99

_AT = Position.ATTACKER
_MD = Position.MIDFIELDER
_DF = Position.DEFENDER
_GK = Position.GOALKEEPER


def pause_duration(kind: EventKind) -> int:
    return PAUSE_DURATIONS.get(kind, DEFAULT_PAUSE_DURATION)


def event_sort_key(event: MatchEvent) -> tuple[float, int]:
    return (event.minute, TIE_PRIORITY.get(event.kind, DEFAULT_TIE_PRIORITY))


def is_intense_minute(minute: int) -> bool:
    return any(start <= minute <= end for start, end in INTENSE_WINDOWS)


def substitution_allowed(minute: int) -> bool:
    if minute > REGULATION_MINUTES:
        return minute <= EXTRA_TIME_SUB_LAST_MINUTE
    first, last = REGULATION_SUB_WINDOW
    return first <= minute <= last


def pick_event_kind(roll: float) -> EventKind:
    for threshold, kind in EVENT_TABLE:
        if roll < threshold:
            return kind
    return EventKind.INJURY_STOPPAGE


class _Timeline:
    """Accumulates events for one match while tracking the running score."""

    def __init__(
        self, team1: Team, team2: Team, result: MatchResult, rng: random.Random
    ) -> None:
        self.team1 = team1
        self.team2 = team2
        self.result = result
        self.rng = rng
        self.score = Score()
        self.events: list[MatchEvent] = []
        self.goals_by_minute: dict[int, GoalScorer] = {
            goal.minute: goal for goal in result.goal_scorers
        }
        if len(self.goals_by_minute) != len(result.goal_scorers):
            raise ValueError("Goal scorers must have distinct minutes")
        self.goal_minutes = sorted(self.goals_by_minute)
        self.total_minutes = result.total_minutes
        self._builders: dict[
            EventKind, Callable[[float, bool, Team, Team], MatchEvent | None]
        ] = {
            EventKind.SHOT_ON_TARGET: self._shot_on_target,
            EventKind.SHOT_OFF_TARGET: self._shot_off_target,
            EventKind.SAVE: self._save,
            EventKind.CORNER_KICK: self._corner_kick,
            EventKind.OFFSIDE: self._offside,
            EventKind.FOUL: self._foul,
            EventKind.YELLOW_CARD: self._yellow_card,
            EventKind.FREE_KICK: self._free_kick,
            EventKind.GOAL_KICK: self._goal_kick,
            EventKind.THROW_IN: self._throw_in,
            EventKind.PENALTY_KICK: self._penalty_kick,
            EventKind.RED_CARD: self._red_card,
            EventKind.SUBSTITUTION: self._substitution,
            EventKind.INJURY_STOPPAGE: self._injury_stoppage,
        }

    # ----- helpers -----
    def _pick(
        self, team: Team, *roles: Position, exclude: tuple[str, ...] = ()
    ) -> Player:
        return pick_player(team, roles, rng=self.rng, exclude=exclude)

    def _event(
        self,
        kind: EventKind,
        minute: float,
        description: str,
        *,
        is_extra_time: bool = False,
        team: Team | None = None,
        player: Player | None = None,
        detail: EventDetail | None = None,
        score: Score | None = None,
    ) -> MatchEvent:
        return MatchEvent(
            kind=kind,
            minute=minute,
            description=description,
            score=score if score is not None else self.score,
            pause_duration=pause_duration(kind),
            is_extra_time=is_extra_time,
            team_id=team.team_id if team is not None else None,
            player_id=player.player_id if player is not None else None,
            player_name=player.name if player is not None else None,
            detail=detail,
        )

    def _sides(self) -> tuple[Team, Team]:
        if self.rng.random() < 0.5:
            return self.team1, self.team2
        return self.team2, self.team1

    def _offset(self, minute: int, offset: float) -> float:
        # stay inside the period the minute belongs to
        period_end = (
            REGULATION_MINUTES if minute <= REGULATION_MINUTES else self.total_minutes
        )
        return min(minute + offset, float(period_end))

    def near_goal(self, minute: int) -> bool:
        return any(
            abs(goal_minute - minute) <= GOAL_BUFFER_MINUTES
            for goal_minute in self.goal_minutes
        )

    # ----- goals -----
    def add_goal(self, goal: GoalScorer, minute: int, is_extra_time: bool) -> None:
        team1_scored = goal.team_id == self.team1.team_id
        scoring, conceding = (
            (self.team1, self.team2) if team1_scored else (self.team2, self.team1)
        )
        own_goal = (
            self.rng.random() < OWN_GOAL_CHANCE and minute > OWN_GOAL_EARLIEST_MINUTE
        )
        before = self.score
        self.score = self.score.bump(team1_scored)

        if own_goal:
            defender = self._pick(conceding, _DF, _GK)
            self.events.append(
                self._event(
                    EventKind.OWN_GOAL,
                    minute,
                    f"OWN GOAL! {minute}' - {defender.name} ({conceding.country}) "
                    f"puts it into the wrong net, gifting {scoring.country} a goal!",
                    is_extra_time=is_extra_time,
                    team=conceding,
                    player=defender,
                    detail=GoalDetail(goal=goal, is_own_goal=True),
                )
            )
            return

        assister: Player | None = None
        if self.rng.random() < ASSIST_CHANCE and minute > 1:
            assister = self._pick(scoring, _AT, _MD, exclude=(goal.player_id,))
            self.events.append(
                self._event(
                    EventKind.ASSIST,
                    minute - ASSIST_LEAD,
                    f"Assist by {assister.name} ({scoring.country})!",
                    is_extra_time=is_extra_time,
                    team=scoring,
                    player=assister,
                    detail=AssistDetail(goal_minute=minute),
                    score=before,
                )
            )

        assist_note = f" (assist: {assister.name})" if assister is not None else ""
        self.events.append(
            MatchEvent(
                kind=EventKind.GOAL,
                minute=minute,
                description=(
                    f"GOAL! {minute}' - {goal.player_name} scores for "
                    f"{scoring.country}{assist_note}!"
                ),
                score=self.score,
                pause_duration=pause_duration(EventKind.GOAL),
                is_extra_time=is_extra_time,
                team_id=goal.team_id,
                player_id=goal.player_id,
                player_name=goal.player_name,
                detail=GoalDetail(
                    goal=goal,
                    assist_player_id=assister.player_id if assister else None,
                    assist_player_name=assister.name if assister else None,
                ),
            )
        )

    # ----- secondary events -----
    def add_random_event(self, minute: int, is_extra_time: bool) -> bool:
        if self.near_goal(minute):
            return False
        chance = INTENSE_EVENT_CHANCE if is_intense_minute(minute) else CALM_EVENT_CHANCE
        if self.rng.random() >= chance:
            return False
        kind = pick_event_kind(self.rng.random())
        team, opponent = self._sides()
        event = self._builders[kind](float(minute), is_extra_time, team, opponent)
        if event is None:
            return False
        self.events.append(event)
        return True

    def add_injury_stoppage(self, minute: int, is_extra_time: bool) -> bool:
        if minute <= INJURY_AFTER_MINUTE or self.near_goal(minute):
            return False
        if self.rng.random() >= INJURY_CHANCE:
            return False
        team, opponent = self._sides()
        event = self._injury_stoppage(
            self._offset(minute, INJURY_OFFSET), is_extra_time, team, opponent
        )
        self.events.append(event)
        return True

    def add_var_review(self, minute: int, is_extra_time: bool) -> bool:
        if minute <= VAR_AFTER_MINUTE or self.near_goal(minute):
            return False
        if self.rng.random() >= VAR_CHANCE:
            return False
        decision = self.rng.choice(list(VarDecision))
        self.events.append(
            self._event(
                EventKind.VAR_REVIEW,
                self._offset(minute, VAR_OFFSET),
                f"VAR review - Decision: {decision.value.replace('_', ' ')}",
                is_extra_time=is_extra_time,
                detail=VarDetail(decision=decision),
            )
        )
        return True

    def _shot_on_target(self, minute, is_extra_time, team, opponent):
        player = self._pick(team, _AT, _MD)
        saved = self.rng.random() < 0.5
        action = "forces a save" if saved else "hits the target"
        return self._event(
            EventKind.SHOT_ON_TARGET,
            minute,
            f"{player.name} ({team.country}) {action}",
            is_extra_time=is_extra_time,
            team=team,
            player=player,
            detail=ShotDetail(shot_type=ShotType.SHOT, saved=saved),
        )

    def _shot_off_target(self, minute, is_extra_time, team, opponent):
        player = self._pick(team, _AT, _MD)
        shot_type = self.rng.choice(list(ShotType))
        return self._event(
            EventKind.SHOT_OFF_TARGET,
            minute,
            f"{player.name} ({team.country}) {shot_type.value} goes wide",
            is_extra_time=is_extra_time,
            team=team,
            player=player,
            detail=ShotDetail(shot_type=shot_type),
        )

    def _save(self, minute, is_extra_time, team, opponent):
        attacker = self._pick(team, _AT, _MD)
        keeper = self._pick(opponent, _GK)
        return self._event(
            EventKind.SAVE,
            minute,
            f"Great save by {keeper.name} ({opponent.country}) "
            f"from {attacker.name}'s shot!",
            is_extra_time=is_extra_time,
            team=opponent,
            player=keeper,
        )

    def _corner_kick(self, minute, is_extra_time, team, opponent):
        taker = self._pick(team, _AT, _MD, _DF)
        return self._event(
            EventKind.CORNER_KICK,
            minute,
            f"Corner kick for {team.country}, {taker.name} to take",
            is_extra_time=is_extra_time,
            team=team,
            player=taker,
        )

    def _offside(self, minute, is_extra_time, team, opponent):
        player = self._pick(team, _AT)
        return self._event(
            EventKind.OFFSIDE,
            minute,
            f"Offside! {player.name} ({team.country}) is caught offside.",
            is_extra_time=is_extra_time,
            team=team,
            player=player,
            detail=OffsideDetail(offside_player=player.name),
        )

    def _foul(self, minute, is_extra_time, team, opponent):
        player = self._pick(team, _MD, _DF)
        return self._event(
            EventKind.FOUL,
            minute,
            f"Foul by {player.name} ({team.country})",
            is_extra_time=is_extra_time,
            team=team,
            player=player,
        )

    def _yellow_card(self, minute, is_extra_time, team, opponent):
        player = self._pick(team, _MD, _DF, _AT)
        return self._event(
            EventKind.YELLOW_CARD,
            minute,
            f"Yellow card shown to {player.name} ({team.country})",
            is_extra_time=is_extra_time,
            team=team,
            player=player,
            detail=CardDetail(card=CardType.YELLOW),
        )

    def _free_kick(self, minute, is_extra_time, team, opponent):
        player = self._pick(team, _AT, _MD)
        return self._event(
            EventKind.FREE_KICK,
            minute,
            f"Free kick for {team.country}, {player.name} to take",
            is_extra_time=is_extra_time,
            team=team,
            player=player,
        )

    def _goal_kick(self, minute, is_extra_time, team, opponent):
        return self._event(
            EventKind.GOAL_KICK,
            minute,
            f"Goal kick for {team.country}",
            is_extra_time=is_extra_time,
            team=team,
        )

    def _throw_in(self, minute, is_extra_time, team, opponent):
        player = self._pick(team, _DF, _MD)
        return self._event(
            EventKind.THROW_IN,
            minute,
            f"Throw-in for {team.country}",
            is_extra_time=is_extra_time,
            team=team,
            player=player,
        )

    def _penalty_kick(self, minute, is_extra_time, team, opponent):
        player = self._pick(team, _AT, _MD)
        return self._event(
            EventKind.PENALTY_KICK,
            minute,
            f"Penalty awarded to {team.country}! {player.name} to take",
            is_extra_time=is_extra_time,
            team=team,
            player=player,
        )

    def _red_card(self, minute, is_extra_time, team, opponent):
        player = self._pick(team, _MD, _DF)
        return self._event(
            EventKind.RED_CARD,
            minute,
            f"Red card! {player.name} ({team.country}) is sent off!",
            is_extra_time=is_extra_time,
            team=team,
            player=player,
            detail=CardDetail(card=CardType.RED),
        )

    def _substitution(self, minute, is_extra_time, team, opponent):
        if not substitution_allowed(int(minute)):
            return None
        player_out = self._pick(team, _AT, _MD, _DF)
        player_in = self._pick(team, _AT, _MD, _DF, exclude=(player_out.player_id,))
        return self._event(
            EventKind.SUBSTITUTION,
            minute,
            f"Substitution: {player_out.name} off, {player_in.name} on "
            f"({team.country})",
            is_extra_time=is_extra_time,
            team=team,
            player=player_in,
            detail=SubstitutionDetail(
                player_out_id=player_out.player_id,
                player_out_name=player_out.name,
                player_in_id=player_in.player_id,
                player_in_name=player_in.name,
            ),
        )

    def _injury_stoppage(self, minute, is_extra_time, team, opponent):
        stoppage = self.rng.randint(1, 3)
        return self._event(
            EventKind.INJURY_STOPPAGE,
            minute,
            f"Injury stoppage - {stoppage} minutes added",
            is_extra_time=is_extra_time,
            team=team,
            detail=StoppageDetail(stoppage_minutes=stoppage),
        )

    # ----- markers -----
    def add_markers(self) -> None:
        result = self.result
        team1, team2 = self.team1, self.team2
        final_score = Score(result.team1_score, result.team2_score)
        regulation = result.regulation_score

        self.events.append(
            self._event(
                EventKind.KICKOFF,
                0,
                f"Match kicks off! {team1.country} vs {team2.country}",
                score=Score(),
            )
        )

        halftime = halftime_score(result)
        self.events.append(
            self._event(
                EventKind.HALFTIME,
                HALFTIME_MINUTE,
                f"Half Time - {team1.country} {halftime.team1} "
                f"{halftime.team2} {team2.country}",
                score=halftime,
            )
        )
        late_stoppage = any(
            event.kind is EventKind.INJURY_STOPPAGE
            and ADDED_TIME_WINDOW[0] <= event.minute <= ADDED_TIME_WINDOW[1]
            for event in self.events
        )
        if late_stoppage:
            added = self.rng.randint(1, 4)
            self.events.append(
                self._event(
                    EventKind.ADDED_TIME,
                    ADDED_TIME_MARKER_MINUTE,
                    f"{added} minutes of added time",
                    detail=AddedTimeDetail(added_minutes=added),
                    score=regulation,
                )
            )

        self.events.append(
            self._event(
                EventKind.FULLTIME,
                REGULATION_MINUTES,
                f"Full Time - {team1.country} {regulation.team1} "
                f"{regulation.team2} {team2.country}",
                score=regulation,
            )
        )

        if result.went_to_extra_time:
            self.events.append(
                self._event(
                    EventKind.EXTRATIME,
                    EXTRA_TIME_MARKER_MINUTE,
                    "Match goes to Extra Time!",
                    score=regulation,
                )
            )

        total = result.total_minutes
        if result.went_to_penalties:
            self.events.append(
                self._event(
                    EventKind.PENALTIES,
                    total,
                    "Match goes to Penalty Shootout!",
                    is_extra_time=True,
                    score=final_score,
                )
            )

        self.events.append(
            self._event(
                EventKind.FINAL,
                total,
                f"Final Whistle! {team1.country} {result.team1_score} - "
                f"{result.team2_score} {team2.country}",
                is_extra_time=result.went_to_extra_time,
                score=final_score,
            )
        )


def halftime_score(result: MatchResult) -> Score:
    team1 = team2 = 0
    for goal in result.goal_scorers:
        if goal.is_extra_time or goal.minute > HALFTIME_MINUTE:
            continue
        if goal.team_id == result.team1_id:
            team1 += 1
        else:
            team2 += 1
    return Score(team1, team2)


def synthesize_events(
    team1: Team,
    team2: Team,
    result: MatchResult,
    *,
    rng: random.Random | None = None,
) -> list[MatchEvent]:
    """Build the ordered event timeline for a simulated match.

    Events are sorted by minute; ties go to goals, then VAR reviews, red
    cards, yellow cards and penalty kicks, with everything else keeping its
    insertion order.
    """
    randomizer = rng or random.Random()
    timeline = _Timeline(team1, team2, result, randomizer)
    total = EXTRA_TIME_MINUTES if result.went_to_extra_time else REGULATION_MINUTES

    for minute in range(1, total + 1):
        is_extra_time = minute > REGULATION_MINUTES
        goal = timeline.goals_by_minute.get(minute)
        if goal is not None:
            timeline.add_goal(goal, minute, is_extra_time)
            continue
        if timeline.add_random_event(minute, is_extra_time):
            continue
        if timeline.add_injury_stoppage(minute, is_extra_time):
            continue
        timeline.add_var_review(minute, is_extra_time)

    timeline.add_markers()
    events = sorted(timeline.events, key=event_sort_key)
    log.debug(
        "Synthesized %s events for %s vs %s", len(events), team1.team_id, team2.team_id
    )
    return events


__all__ = [
    "EVENT_TABLE",
    "PAUSE_DURATIONS",
    "TIE_PRIORITY",
    "event_sort_key",
    "halftime_score",
    "is_intense_minute",
    "pause_duration",
    "pick_event_kind",
    "substitution_allowed",
    "synthesize_events",
]
