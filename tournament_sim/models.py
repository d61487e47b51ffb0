from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace
from enum import StrEnum

REGULATION_MINUTES = 90
EXTRA_TIME_MINUTES = 120
SQUAD_SIZE = 23
STARTING_ELEVEN_SIZE = 11


class Position(StrEnum):
    GOALKEEPER = "GK"
    DEFENDER = "DF"
    MIDFIELDER = "MD"
    ATTACKER = "AT"


class MatchRound(StrEnum):
    QUARTER_FINAL = "quarterFinal"
    SEMI_FINAL = "semiFinal"
    FINAL = "final"


class EventKind(StrEnum):
    KICKOFF = "kickoff"
    GOAL = "goal"
    OWN_GOAL = "own_goal"
    SHOT_ON_TARGET = "shot_on_target"
    SHOT_OFF_TARGET = "shot_off_target"
    SAVE = "save"
    ASSIST = "assist"
    OFFSIDE = "offside"
    FOUL = "foul"
    FREE_KICK = "free_kick"
    PENALTY_KICK = "penalty_kick"
    CORNER_KICK = "corner_kick"
    GOAL_KICK = "goal_kick"
    THROW_IN = "throw_in"
    YELLOW_CARD = "yellow_card"
    RED_CARD = "red_card"
    SUBSTITUTION = "substitution"
    HALFTIME = "halftime"
    FULLTIME = "fulltime"
    INJURY_STOPPAGE = "injury_stoppage"
    VAR_REVIEW = "var_review"
    ADDED_TIME = "added_time"
    EXTRATIME = "extratime"
    PENALTIES = "penalties"
    FINAL = "final"


class VarDecision(StrEnum):
    GOAL = "goal"
    NO_GOAL = "no_goal"
    PENALTY = "penalty"
    NO_PENALTY = "no_penalty"
    RED_CARD = "red_card"
    NO_RED_CARD = "no_red_card"


class ShotType(StrEnum):
    SHOT = "shot"
    HEADER = "header"
    VOLLEY = "volley"


class CardType(StrEnum):
    YELLOW = "yellow"
    RED = "red"


# ---------- Squads ----------


@dataclass(slots=True)
class Player:
    player_id: str
    name: str
    natural_position: Position
    ratings: dict[Position, int]
    is_captain: bool = False
    goals: int = 0
    appearances: int = 0

    def rating(self, position: Position | None = None) -> int:
        return self.ratings.get(position or self.natural_position, 0)

    @property
    def natural_rating(self) -> int:
        return self.rating(self.natural_position)

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.player_id,
            "name": self.name,
            "natural_position": self.natural_position.value,
            "ratings": {pos.value: value for pos, value in self.ratings.items()},
            "is_captain": self.is_captain,
            "goals": self.goals,
            "appearances": self.appearances,
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> Player:
        ratings_data: dict[str, object] = data.get("ratings", {})  # type: ignore[assignment]
        return cls(
            player_id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            natural_position=Position(str(data.get("natural_position", "MD"))),
            ratings={Position(key): int(value) for key, value in ratings_data.items()},
            is_captain=bool(data.get("is_captain", False)),
            goals=int(data.get("goals", 0)),
            appearances=int(data.get("appearances", 0)),
        )


@dataclass(slots=True)
class Team:
    team_id: str
    country: str
    players: list[Player]
    overall_rating: float
    starting_eleven: list[str] = field(default_factory=list)

    def find_player(self, player_id: str) -> Player | None:
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None

    def players_in(self, positions: Iterable[Position]) -> list[Player]:
        wanted = set(positions)
        return [player for player in self.players if player.natural_position in wanted]

    def captain(self) -> Player | None:
        for player in self.players:
            if player.is_captain:
                return player
        return None

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.team_id,
            "country": self.country,
            "players": [player.to_dict() for player in self.players],
            "overall_rating": self.overall_rating,
            "starting_eleven": list(self.starting_eleven),
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> Team:
        players_data: Iterable[dict[str, object]] = data.get("players", [])  # type: ignore[assignment]
        starting: Iterable[object] = data.get("starting_eleven", [])  # type: ignore[assignment]
        return cls(
            team_id=str(data.get("id", "")),
            country=str(data.get("country", "")),
            players=[Player.from_dict(item) for item in players_data],
            overall_rating=float(data.get("overall_rating", 0.0)),
            starting_eleven=[str(value) for value in starting],
        )


# ---------- Match results ----------


@dataclass(slots=True, frozen=True)
class Score:
    team1: int = 0
    team2: int = 0

    def bump(self, team1_scored: bool) -> Score:
        if team1_scored:
            return Score(self.team1 + 1, self.team2)
        return Score(self.team1, self.team2 + 1)

    def to_dict(self) -> dict[str, int]:
        return {"team1": self.team1, "team2": self.team2}

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> Score:
        return cls(team1=int(data.get("team1", 0)), team2=int(data.get("team2", 0)))


@dataclass(slots=True, frozen=True)
class GoalScorer:
    player_id: str
    player_name: str
    team_id: str
    minute: int
    is_extra_time: bool = False
    is_penalty: bool = False

    def to_dict(self) -> dict[str, object]:
        return {
            "player_id": self.player_id,
            "player_name": self.player_name,
            "team_id": self.team_id,
            "minute": self.minute,
            "is_extra_time": self.is_extra_time,
            "is_penalty": self.is_penalty,
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> GoalScorer:
        return cls(
            player_id=str(data.get("player_id", "")),
            player_name=str(data.get("player_name", "")),
            team_id=str(data.get("team_id", "")),
            minute=int(data.get("minute", 0)),
            is_extra_time=bool(data.get("is_extra_time", False)),
            is_penalty=bool(data.get("is_penalty", False)),
        )


@dataclass(slots=True, frozen=True)
class PenaltyKick:
    team_id: str
    player_id: str
    scored: bool
    order: int

    def to_dict(self) -> dict[str, object]:
        return {
            "team_id": self.team_id,
            "player_id": self.player_id,
            "scored": self.scored,
            "order": self.order,
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> PenaltyKick:
        return cls(
            team_id=str(data.get("team_id", "")),
            player_id=str(data.get("player_id", "")),
            scored=bool(data.get("scored", False)),
            order=int(data.get("order", 0)),
        )


@dataclass(slots=True)
class PenaltyShootout:
    team1_id: str
    team2_id: str
    team1_score: int = 0
    team2_score: int = 0
    kicks: list[PenaltyKick] = field(default_factory=list)

    @property
    def is_level(self) -> bool:
        return self.team1_score == self.team2_score

    @property
    def winner_team_id(self) -> str | None:
        if self.is_level:
            return None
        return self.team1_id if self.team1_score > self.team2_score else self.team2_id

    @property
    def rounds_taken(self) -> int:
        return len(self.kicks) // 2

    def to_dict(self) -> dict[str, object]:
        return {
            "team1_id": self.team1_id,
            "team2_id": self.team2_id,
            "team1_score": self.team1_score,
            "team2_score": self.team2_score,
            "kicks": [kick.to_dict() for kick in self.kicks],
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> PenaltyShootout:
        kicks_data: Iterable[dict[str, object]] = data.get("kicks", [])  # type: ignore[assignment]
        return cls(
            team1_id=str(data.get("team1_id", "")),
            team2_id=str(data.get("team2_id", "")),
            team1_score=int(data.get("team1_score", 0)),
            team2_score=int(data.get("team2_score", 0)),
            kicks=[PenaltyKick.from_dict(item) for item in kicks_data],
        )


@dataclass(slots=True)
class MatchResult:
    team1_id: str
    team2_id: str
    team1_score: int
    team2_score: int
    winner_id: str
    loser_id: str
    is_draw: bool
    goal_scorers: list[GoalScorer]
    went_to_extra_time: bool = False
    went_to_penalties: bool = False
    penalty_shootout: PenaltyShootout | None = None

    def goals_for(self, team_id: str) -> list[GoalScorer]:
        return [goal for goal in self.goal_scorers if goal.team_id == team_id]

    @property
    def total_minutes(self) -> int:
        return EXTRA_TIME_MINUTES if self.went_to_extra_time else REGULATION_MINUTES

    @property
    def regulation_score(self) -> Score:
        team1 = team2 = 0
        for goal in self.goal_scorers:
            if goal.is_extra_time:
                continue
            if goal.team_id == self.team1_id:
                team1 += 1
            else:
                team2 += 1
        return Score(team1, team2)

    def scoreline(self) -> str:
        line = f"{self.team1_score}-{self.team2_score}"
        if self.went_to_penalties and self.penalty_shootout is not None:
            shootout = self.penalty_shootout
            line += f" ({shootout.team1_score}-{shootout.team2_score} pens)"
        elif self.went_to_extra_time:
            line += " (a.e.t.)"
        return line

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "team1_id": self.team1_id,
            "team2_id": self.team2_id,
            "team1_score": self.team1_score,
            "team2_score": self.team2_score,
            "winner_id": self.winner_id,
            "loser_id": self.loser_id,
            "is_draw": self.is_draw,
            "goal_scorers": [goal.to_dict() for goal in self.goal_scorers],
            "went_to_extra_time": self.went_to_extra_time,
            "went_to_penalties": self.went_to_penalties,
        }
        if self.penalty_shootout is not None:
            data["penalty_shootout"] = self.penalty_shootout.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> MatchResult:
        goals_data: Iterable[dict[str, object]] = data.get("goal_scorers", [])  # type: ignore[assignment]
        shootout_data = data.get("penalty_shootout")
        return cls(
            team1_id=str(data.get("team1_id", "")),
            team2_id=str(data.get("team2_id", "")),
            team1_score=int(data.get("team1_score", 0)),
            team2_score=int(data.get("team2_score", 0)),
            winner_id=str(data.get("winner_id", "")),
            loser_id=str(data.get("loser_id", "")),
            is_draw=bool(data.get("is_draw", False)),
            goal_scorers=[GoalScorer.from_dict(item) for item in goals_data],
            went_to_extra_time=bool(data.get("went_to_extra_time", False)),
            went_to_penalties=bool(data.get("went_to_penalties", False)),
            penalty_shootout=(
                PenaltyShootout.from_dict(shootout_data)  # type: ignore[arg-type]
                if isinstance(shootout_data, dict)
                else None
            ),
        )


# ---------- Match events ----------


@dataclass(slots=True, frozen=True)
class GoalDetail:
    goal: GoalScorer
    is_own_goal: bool = False
    assist_player_id: str | None = None
    assist_player_name: str | None = None


@dataclass(slots=True, frozen=True)
class AssistDetail:
    goal_minute: int


@dataclass(slots=True, frozen=True)
class ShotDetail:
    shot_type: ShotType
    saved: bool = False


@dataclass(slots=True, frozen=True)
class CardDetail:
    card: CardType


@dataclass(slots=True, frozen=True)
class VarDetail:
    decision: VarDecision


@dataclass(slots=True, frozen=True)
class SubstitutionDetail:
    player_out_id: str
    player_out_name: str
    player_in_id: str
    player_in_name: str


@dataclass(slots=True, frozen=True)
class StoppageDetail:
    stoppage_minutes: int


@dataclass(slots=True, frozen=True)
class AddedTimeDetail:
    added_minutes: int


@dataclass(slots=True, frozen=True)
class OffsideDetail:
    offside_player: str


EventDetail = (
    GoalDetail
    | AssistDetail
    | ShotDetail
    | CardDetail
    | VarDetail
    | SubstitutionDetail
    | StoppageDetail
    | AddedTimeDetail
    | OffsideDetail
)


@dataclass(slots=True, frozen=True)
class MatchEvent:
    kind: EventKind
    minute: float
    description: str
    score: Score
    pause_duration: int
    is_extra_time: bool = False
    team_id: str | None = None
    player_id: str | None = None
    player_name: str | None = None
    detail: EventDetail | None = None

    @property
    def is_goal(self) -> bool:
        return self.kind in (EventKind.GOAL, EventKind.OWN_GOAL)

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "type": self.kind.value,
            "minute": self.minute,
            "is_extra_time": self.is_extra_time,
            "description": self.description,
            "score": self.score.to_dict(),
            "pause_duration": self.pause_duration,
        }
        if self.team_id is not None:
            data["team_id"] = self.team_id
        if self.player_id is not None:
            data["player_id"] = self.player_id
        if self.player_name is not None:
            data["player_name"] = self.player_name
        data.update(_detail_fields(self.detail))
        return data

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> MatchEvent:
        def _optional(key: str) -> str | None:
            value = data.get(key)
            return str(value) if value is not None else None

        score_data: dict[str, object] = data.get("score", {})  # type: ignore[assignment]
        return cls(
            kind=EventKind(str(data.get("type", ""))),
            minute=float(data.get("minute", 0)),  # type: ignore[arg-type]
            description=str(data.get("description", "")),
            score=Score.from_dict(score_data),
            pause_duration=int(data.get("pause_duration", 0)),  # type: ignore[arg-type]
            is_extra_time=bool(data.get("is_extra_time", False)),
            team_id=_optional("team_id"),
            player_id=_optional("player_id"),
            player_name=_optional("player_name"),
            detail=_detail_from_fields(data),
        )


def _detail_fields(detail: EventDetail | None) -> dict[str, object]:
    if detail is None:
        return {}
    if isinstance(detail, GoalDetail):
        data: dict[str, object] = {"goal": detail.goal.to_dict()}
        if detail.is_own_goal:
            data["is_own_goal"] = True
        if detail.assist_player_id is not None:
            data["assist_player_id"] = detail.assist_player_id
            data["assist_player_name"] = detail.assist_player_name
        return data
    if isinstance(detail, AssistDetail):
        return {"goal_minute": detail.goal_minute}
    if isinstance(detail, ShotDetail):
        return {"shot_type": detail.shot_type.value, "saved": detail.saved}
    if isinstance(detail, CardDetail):
        return {"card_type": detail.card.value}
    if isinstance(detail, VarDetail):
        return {"var_decision": detail.decision.value}
    if isinstance(detail, SubstitutionDetail):
        return {
            "subbed_out_player_id": detail.player_out_id,
            "subbed_out_player_name": detail.player_out_name,
            "subbed_in_player_id": detail.player_in_id,
            "subbed_in_player_name": detail.player_in_name,
        }
    if isinstance(detail, StoppageDetail):
        return {"stoppage_minutes": detail.stoppage_minutes}
    if isinstance(detail, AddedTimeDetail):
        return {"added_time_minutes": detail.added_minutes}
    if isinstance(detail, OffsideDetail):
        return {"offside_player": detail.offside_player}
    raise TypeError(f"Unsupported event detail: {type(detail).__name__}")


def _detail_from_fields(data: dict[str, object]) -> EventDetail | None:
    """Rebuild the payload written by :func:`_detail_fields`, keyed by its fields."""
    if "goal" in data:
        goal_data: dict[str, object] = data["goal"]  # type: ignore[assignment]
        assist_id = data.get("assist_player_id")
        assist_name = data.get("assist_player_name")
        return GoalDetail(
            goal=GoalScorer.from_dict(goal_data),
            is_own_goal=bool(data.get("is_own_goal", False)),
            assist_player_id=str(assist_id) if assist_id is not None else None,
            assist_player_name=str(assist_name) if assist_name is not None else None,
        )
    if "goal_minute" in data:
        return AssistDetail(goal_minute=int(data["goal_minute"]))  # type: ignore[arg-type]
    if "shot_type" in data:
        return ShotDetail(
            shot_type=ShotType(str(data["shot_type"])),
            saved=bool(data.get("saved", False)),
        )
    if "card_type" in data:
        return CardDetail(card=CardType(str(data["card_type"])))
    if "var_decision" in data:
        return VarDetail(decision=VarDecision(str(data["var_decision"])))
    if "subbed_out_player_id" in data:
        return SubstitutionDetail(
            player_out_id=str(data["subbed_out_player_id"]),
            player_out_name=str(data.get("subbed_out_player_name", "")),
            player_in_id=str(data.get("subbed_in_player_id", "")),
            player_in_name=str(data.get("subbed_in_player_name", "")),
        )
    if "stoppage_minutes" in data:
        return StoppageDetail(stoppage_minutes=int(data["stoppage_minutes"]))  # type: ignore[arg-type]
    if "added_time_minutes" in data:
        return AddedTimeDetail(added_minutes=int(data["added_time_minutes"]))  # type: ignore[arg-type]
    if "offside_player" in data:
        return OffsideDetail(offside_player=str(data["offside_player"]))
    return None


# ---------- Bracket ----------


@dataclass(slots=True, frozen=True)
class BracketSlot:
    match_id: str | None = None
    team1_id: str | None = None
    team2_id: str | None = None
    winner_id: str | None = None

    @property
    def is_ready(self) -> bool:
        return self.team1_id is not None and self.team2_id is not None

    @property
    def is_decided(self) -> bool:
        return self.winner_id is not None

    def team_ids(self) -> tuple[str | None, str | None]:
        return (self.team1_id, self.team2_id)

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "team1_id": self.team1_id or "",
            "team2_id": self.team2_id or "",
        }
        if self.match_id is not None:
            data["match_id"] = self.match_id
        if self.winner_id is not None:
            data["winner_id"] = self.winner_id
        return data

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> BracketSlot:
        def _optional(key: str) -> str | None:
            value = data.get(key)
            return str(value) if value not in (None, "") else None

        return cls(
            match_id=_optional("match_id"),
            team1_id=_optional("team1_id"),
            team2_id=_optional("team2_id"),
            winner_id=_optional("winner_id"),
        )


@dataclass(slots=True, frozen=True)
class Bracket:
    quarter_finals: tuple[BracketSlot, BracketSlot, BracketSlot, BracketSlot]
    semi_finals: tuple[BracketSlot, BracketSlot]
    final: BracketSlot

    def slots(self, round_: MatchRound) -> tuple[BracketSlot, ...]:
        if round_ is MatchRound.QUARTER_FINAL:
            return self.quarter_finals
        if round_ is MatchRound.SEMI_FINAL:
            return self.semi_finals
        return (self.final,)

    def with_slot(self, round_: MatchRound, index: int, slot: BracketSlot) -> Bracket:
        if round_ is MatchRound.FINAL:
            if index != 0:
                raise IndexError("The final round has a single slot")
            return replace(self, final=slot)
        updated = list(self.slots(round_))
        updated[index] = slot
        if round_ is MatchRound.QUARTER_FINAL:
            return replace(self, quarter_finals=tuple(updated))  # type: ignore[arg-type]
        return replace(self, semi_finals=tuple(updated))  # type: ignore[arg-type]

    def all_slots(self) -> Iterator[tuple[MatchRound, int, BracketSlot]]:
        for round_ in MatchRound:
            for index, slot in enumerate(self.slots(round_)):
                yield round_, index, slot

    def find_slot(self, match_id: str) -> tuple[MatchRound, int, BracketSlot] | None:
        for round_, index, slot in self.all_slots():
            if slot.match_id == match_id:
                return round_, index, slot
        return None

    def to_dict(self) -> dict[str, object]:
        return {
            "quarter_finals": [slot.to_dict() for slot in self.quarter_finals],
            "semi_finals": [slot.to_dict() for slot in self.semi_finals],
            "final": self.final.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> Bracket:
        qf_data: list[dict[str, object]] = list(data.get("quarter_finals", []))  # type: ignore[arg-type]
        sf_data: list[dict[str, object]] = list(data.get("semi_finals", []))  # type: ignore[arg-type]
        if len(qf_data) != 4 or len(sf_data) != 2:
            raise ValueError("Bracket data must contain 4 quarter-finals and 2 semi-finals")
        return cls(
            quarter_finals=tuple(BracketSlot.from_dict(item) for item in qf_data),  # type: ignore[arg-type]
            semi_finals=tuple(BracketSlot.from_dict(item) for item in sf_data),  # type: ignore[arg-type]
            final=BracketSlot.from_dict(data.get("final", {})),  # type: ignore[arg-type]
        )


@dataclass(slots=True, frozen=True)
class TournamentResults:
    winner_id: str
    runner_up_id: str

    def to_dict(self) -> dict[str, str]:
        return {"winner_id": self.winner_id, "runner_up_id": self.runner_up_id}

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> TournamentResults:
        return cls(
            winner_id=str(data.get("winner_id", "")),
            runner_up_id=str(data.get("runner_up_id", "")),
        )


__all__ = [
    "EXTRA_TIME_MINUTES",
    "REGULATION_MINUTES",
    "SQUAD_SIZE",
    "STARTING_ELEVEN_SIZE",
    "AddedTimeDetail",
    "AssistDetail",
    "Bracket",
    "BracketSlot",
    "CardDetail",
    "CardType",
    "EventDetail",
    "EventKind",
    "GoalDetail",
    "GoalScorer",
    "MatchEvent",
    "MatchResult",
    "MatchRound",
    "OffsideDetail",
    "PenaltyKick",
    "PenaltyShootout",
    "Player",
    "Position",
    "Score",
    "ShotDetail",
    "ShotType",
    "StoppageDetail",
    "SubstitutionDetail",
    "Team",
    "TournamentResults",
    "VarDecision",
    "VarDetail",
]
