import random
from dataclasses import replace

import pytest

from tournament_sim.models import Position
from tournament_sim.ratings import (
    COUNTRY_TIERS,
    TIER_CONFIGS,
    build_team,
    calculate_team_rating,
    country_tier,
    generate_player_ratings,
    generate_squad,
    pick_starting_eleven,
)
from tournament_sim.validation import (
    BracketConfigurationError,
    InvalidTeamError,
    InvalidValueError,
    team_composition_errors,
    validate_team_composition,
    validate_team_ids,
)


def make_squad(seed: int = 1):
    return generate_squad("Ghana", "gha", rng=random.Random(seed))


def test_generated_squad_passes_validation():
    players = make_squad()
    lineup = pick_starting_eleven(players)

    assert team_composition_errors(players, lineup) == []
    validate_team_composition(players, lineup)


def test_generated_squad_shape():
    players = make_squad()
    positions = [player.natural_position for player in players]

    assert len(players) == 23
    assert positions.count(Position.GOALKEEPER) == 3
    assert positions.count(Position.DEFENDER) == 8
    assert positions.count(Position.MIDFIELDER) == 7
    assert positions.count(Position.ATTACKER) == 5
    assert [player.is_captain for player in players].count(True) == 1
    assert players[0].is_captain
    assert len({player.player_id for player in players}) == 23


def test_wrong_squad_size_short_circuits():
    players = make_squad()[:22]

    errors = team_composition_errors(players)

    assert errors == ["Team must have exactly 23 players"]


def test_captain_and_goalkeeper_rules():
    players = [
        replace(player, is_captain=False, natural_position=Position.DEFENDER)
        for player in make_squad()
    ]

    errors = team_composition_errors(players)

    assert "Team must have exactly one captain" in errors
    assert "Team must have at least 1 goalkeeper" in errors
    with pytest.raises(InvalidTeamError) as excinfo:
        validate_team_composition(players)
    assert excinfo.value.errors == errors
    assert isinstance(excinfo.value, InvalidValueError)


def test_starting_lineup_rules():
    players = make_squad()
    keepers = [p.player_id for p in players if p.natural_position is Position.GOALKEEPER]
    outfield = [
        p.player_id for p in players if p.natural_position is not Position.GOALKEEPER
    ]

    assert team_composition_errors(players, outfield[:10]) == [
        "Starting lineup must have exactly 11 players"
    ]
    assert team_composition_errors(players, outfield[:11]) == [
        "Starting lineup must have exactly 1 goalkeeper"
    ]
    assert team_composition_errors(players, keepers[:2] + outfield[:9]) == [
        "Starting lineup can only have 1 goalkeeper"
    ]
    unknown = team_composition_errors(players, keepers[:1] + outfield[:9] + ["ghost"])
    assert unknown == ["Invalid player IDs in starting lineup: ghost"]


def test_validate_team_ids():
    ids = [f"t{index}" for index in range(8)]
    assert validate_team_ids(ids) == ids

    with pytest.raises(BracketConfigurationError):
        validate_team_ids(ids[:4])
    with pytest.raises(BracketConfigurationError):
        validate_team_ids(ids[:7] + ["t0"])
    with pytest.raises(BracketConfigurationError):
        validate_team_ids(ids[:7] + ["  "])


@pytest.mark.parametrize("country", ["Morocco", "Ghana", "Kenya", "Atlantis"])
def test_player_ratings_follow_country_tier(country):
    config = TIER_CONFIGS[country_tier(country)]
    randomizer = random.Random(12)
    for natural in Position:
        for _ in range(50):
            ratings = generate_player_ratings(natural, country, rng=randomizer)
            assert set(ratings) == set(Position)
            for position, value in ratings.items():
                band = (
                    config.natural_range
                    if position is natural
                    else config.off_position_range
                )
                assert band.minimum <= value <= band.maximum


def test_unknown_country_uses_lowest_tier():
    assert "Atlantis" not in COUNTRY_TIERS
    assert country_tier("Atlantis") == 4
    assert country_tier("Morocco") == 1


def test_calculate_team_rating_is_mean_of_all_ratings():
    players = make_squad()
    expected = sum(sum(p.ratings.values()) for p in players) / 92

    assert calculate_team_rating(players) == pytest.approx(expected)
    with pytest.raises(InvalidTeamError):
        calculate_team_rating(players[:5])


def test_stronger_tiers_produce_stronger_teams():
    elite = build_team("mar", "Morocco", rng=random.Random(3))
    developing = build_team("atl", "Atlantis", rng=random.Random(3))

    assert elite.overall_rating > developing.overall_rating
    assert len(elite.starting_eleven) == 11
    assert elite.captain() is elite.players[0]
