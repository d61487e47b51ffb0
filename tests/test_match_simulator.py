import random

import pytest

from tournament_sim import simulator as sim
from tournament_sim.models import MatchResult, Position


def _assert_consistent(result: MatchResult) -> None:
    assert result.team1_score == len(result.goals_for(result.team1_id))
    assert result.team2_score == len(result.goals_for(result.team2_id))
    assert result.team1_score >= 0 and result.team2_score >= 0
    assert {result.winner_id, result.loser_id} == {result.team1_id, result.team2_id}
    minutes = [goal.minute for goal in result.goal_scorers]
    assert minutes == sorted(minutes)
    assert len(set(minutes)) == len(minutes)
    for goal in result.goal_scorers:
        if goal.is_extra_time:
            assert 91 <= goal.minute <= 120
        else:
            assert 1 <= goal.minute <= 90


def test_simulated_results_are_internally_consistent(team_pair):
    team1, team2 = team_pair
    randomizer = random.Random(2024)
    for _ in range(500):
        result = sim.simulate_match(team1, team2, rng=randomizer)
        _assert_consistent(result)
        regulation = result.regulation_score
        assert result.is_draw == (regulation.team1 == regulation.team2)
        assert result.went_to_extra_time == result.is_draw
        if result.went_to_penalties:
            shootout = result.penalty_shootout
            assert shootout is not None
            assert result.team1_score == result.team2_score
            assert result.winner_id == shootout.winner_team_id
        else:
            assert result.penalty_shootout is None
            assert result.team1_score != result.team2_score
            expected = (
                result.team1_id
                if result.team1_score > result.team2_score
                else result.team2_id
            )
            assert result.winner_id == expected


def test_regulation_goal_counts_are_capped():
    randomizer = random.Random(5)
    for rating in (0, 25, 50, 75, 100):
        for _ in range(300):
            goals = sim.generate_goal_count(rating, rng=randomizer)
            assert 0 <= goals <= sim.MAX_GOALS


def test_stronger_team_scores_more_on_average(make_team):
    strong = make_team("strong", 90.0)
    weak = make_team("weak", 40.0)
    randomizer = random.Random(11)
    strong_goals = weak_goals = 0
    for _ in range(1000):
        result = sim.simulate_match(strong, weak, rng=randomizer)
        regulation = result.regulation_score
        strong_goals += regulation.team1
        weak_goals += regulation.team2
    assert strong_goals / 1000 > weak_goals / 1000


def test_scoring_probability_is_clamped():
    randomizer = random.Random(1)
    for _ in range(200):
        assert sim.scoring_probability(100, randomizer) <= 1.0
        assert sim.scoring_probability(0, randomizer) >= 0.0


def test_regulation_scorers_favour_attackers(make_team):
    team = make_team("alpha")
    randomizer = random.Random(8)
    scorers = sim.generate_goal_scorers(team, 7, set(), rng=randomizer)
    for _ in range(100):
        scorers += sim.generate_goal_scorers(team, 7, set(), rng=randomizer)
    positions = [team.find_player(goal.player_id).natural_position for goal in scorers]
    attackers = positions.count(Position.ATTACKER) / len(positions)
    assert 0.6 < attackers < 0.8
    assert Position.GOALKEEPER not in positions


def test_goal_minutes_are_unique_across_teams(team_pair):
    team1, team2 = team_pair
    used: set[int] = set()
    randomizer = random.Random(3)
    goals = sim.generate_goal_scorers(team1, 7, used, rng=randomizer)
    goals += sim.generate_goal_scorers(team2, 7, used, rng=randomizer)
    goals += sim.generate_extra_time_goals(team1, 1, used, rng=randomizer)
    minutes = [goal.minute for goal in goals]
    assert len(set(minutes)) == 15


def test_extra_time_goals_use_attackers_and_midfielders(make_team):
    team = make_team("alpha")
    randomizer = random.Random(4)
    goals = sim.generate_extra_time_goals(team, 20, set(), rng=randomizer)
    for goal in goals:
        assert goal.is_extra_time
        player = team.find_player(goal.player_id)
        assert player.natural_position in (Position.ATTACKER, Position.MIDFIELDER)


@pytest.mark.parametrize("seed", range(40))
def test_penalty_shootout_never_ends_level(team_pair, seed):
    team1, team2 = team_pair
    shootout = sim.simulate_penalty_shootout(team1, team2, rng=random.Random(seed))

    assert not shootout.is_level
    assert len(shootout.kicks) % 2 == 0
    assert len(shootout.kicks) >= 2 * sim.SHOOTOUT_ROUNDS
    assert [kick.order for kick in shootout.kicks] == list(
        range(1, len(shootout.kicks) + 1)
    )
    for index, kick in enumerate(shootout.kicks):
        expected_team = team1.team_id if index % 2 == 0 else team2.team_id
        assert kick.team_id == expected_team
    team1_goals = sum(1 for k in shootout.kicks[::2] if k.scored)
    team2_goals = sum(1 for k in shootout.kicks[1::2] if k.scored)
    assert (team1_goals, team2_goals) == (shootout.team1_score, shootout.team2_score)
    # sudden death only continues while level
    if shootout.rounds_taken > sim.SHOOTOUT_ROUNDS:
        before_last = shootout.kicks[:-2]
        assert sum(1 for k in before_last[::2] if k.scored) == sum(
            1 for k in before_last[1::2] if k.scored
        )


def test_penalty_takers_are_outfield_players(team_pair):
    team1, team2 = team_pair
    shootout = sim.simulate_penalty_shootout(team1, team2, rng=random.Random(21))
    teams = {team1.team_id: team1, team2.team_id: team2}
    for kick in shootout.kicks:
        player = teams[kick.team_id].find_player(kick.player_id)
        assert player.natural_position is not Position.GOALKEEPER


def test_goalless_draws_reach_extra_time_and_penalties(team_pair):
    team1, team2 = team_pair
    randomizer = random.Random(77)
    seen_goalless = seen_penalties = False
    for _ in range(3000):
        result = sim.simulate_match(team1, team2, rng=randomizer)
        regulation = result.regulation_score
        if regulation.team1 == regulation.team2 == 0:
            seen_goalless = True
            assert result.is_draw and result.went_to_extra_time
        if result.went_to_penalties:
            seen_penalties = True
    assert seen_goalless
    assert seen_penalties


def test_simulation_is_reproducible_with_seed(team_pair):
    team1, team2 = team_pair
    first = sim.simulate_match(team1, team2, rng=random.Random(42))
    second = sim.simulate_match(team1, team2, rng=random.Random(42))
    assert first.to_dict() == second.to_dict()


def test_match_result_round_trips_through_dict(team_pair):
    team1, team2 = team_pair
    randomizer = random.Random(9)
    while True:
        result = sim.simulate_match(team1, team2, rng=randomizer)
        if result.went_to_penalties:
            break
    restored = MatchResult.from_dict(result.to_dict())
    assert restored == result
    assert "pens" in restored.scoreline()
