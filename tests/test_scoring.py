import pytest
from datetime import date

from catalog.seeds import BIRDIE_EM_ALL, FIVE_POINTS, MATCH_PLAY, SKINS, STABLEFORD
from models import (
    Game,
    GameHole,
    GameSpec,
    HoleMultiplier,
    JunkOption,
    MultiplierOption,
    OptionOverride,
    Player,
    Round,
    RoundToGame,
    Score,
    ScoreValue,
    ScoringRules,
    Team,
    TeamsConfig,
    Tee,
    TeeHole,
    TeeRating,
    TeeRatings,
)
from scoring import ConfigurationError, WarningCode, detect_invalidations, score_game

PARS = [4, 4, 3, 5, 4, 4, 3, 4, 5, 4, 4, 3, 5, 4, 4, 3, 4, 5]


def _build_tee(indices=None) -> Tee:
    indices = indices or list(range(1, 19))
    return Tee(
        id="tee-1",
        name="Blue",
        holes=[TeeHole(number=n, par=PARS[n - 1], handicap=indices[n - 1]) for n in range(1, 19)],
        ratings=TeeRatings(
            total=TeeRating(course_rating=72.0, slope_rating=113),
            front=TeeRating(course_rating=36.0, slope_rating=113),
            back=TeeRating(course_rating=36.0, slope_rating=113),
        ),
    )


def _build_rtg(player_id, grosses, course_handicap=0, flags=None, tee=None) -> RoundToGame:
    """grosses: {hole: gross or None}; flags: {hole: {name: bool}}."""
    flags = flags or {}
    scores = []
    for number in sorted(set(grosses) | set(flags)):
        values = []
        if grosses.get(number) is not None:
            values.append(ScoreValue(key="gross", value=str(grosses[number])))
        for key, flag in flags.get(number, {}).items():
            values.append(ScoreValue(key=key, value="true" if flag else "false"))
        scores.append(Score(hole=number, values=values))
    return RoundToGame(round=Round(
        player_id=player_id,
        course_handicap=course_handicap,
        course_id="course-1",
        tee=tee or _build_tee(),
        played_at=date(2024, 5, 1),
        scores=scores,
    ))


def _build_game(spec, rounds, holes=None, holes_scope="all18", overrides=()) -> Game:
    return Game(
        id="game-1",
        specs=[spec],
        players=[Player(id=r.player_id, name=r.player_id.upper()) for r in rounds],
        rounds=rounds,
        holes=holes or [],
        holes_scope=holes_scope,
        option_overrides=list(overrides),
    )


def _holes(*numbers, **teams_by_hole):
    return [GameHole(hole=str(n), number=n, teams=teams_by_hole.get(f"h{n}", [])) for n in numbers]


def _warning_codes(scoreboard, hole=None, player_id=None):
    return {
        w.code for w in scoreboard.warnings
        if (hole is None or w.hole == hole) and (player_id is None or w.player_id == player_id)
    }


# ================================================================
# Skins
# ================================================================

def test_tied_low_net_awards_no_skin():
    rounds = [
        _build_rtg("p1", {1: 3, 2: 4}),
        _build_rtg("p2", {1: 3, 2: 5}),
        _build_rtg("p3", {1: 4, 2: 5}),
    ]
    board = score_game(_build_game(SKINS, rounds, holes=_holes(1, 2)))

    first = board.get_hole(1)
    assert first.skin_winner is None
    assert first.skin_value == 0
    assert all(p.base_points == 0 for p in first.players.values())

    second = board.get_hole(2)
    assert second.skin_winner == "p1"
    assert second.skin_value == 1
    assert board.players["p1"].skins == 1
    assert board.players["p1"].points.total == 1


def test_skins_carryover_option():
    rounds = [
        _build_rtg("p1", {1: 3, 2: 4}),
        _build_rtg("p2", {1: 3, 2: 5}),
        _build_rtg("p3", {1: 4, 2: 5}),
    ]
    game = _build_game(SKINS, rounds, holes=_holes(1, 2),
                       overrides=[OptionOverride(name="carryover", value="true")])
    board = score_game(game)
    assert board.get_hole(2).skin_value == 2
    assert board.players["p1"].points.total == 2


def test_skins_use_net_scores():
    # p2 gets a pop on hole 1 (stroke index 1): gross 4 nets 3
    rounds = [_build_rtg("p1", {1: 4}), _build_rtg("p2", {1: 4}, course_handicap=1)]
    board = score_game(_build_game(SKINS, rounds, holes=_holes(1)))
    assert board.get_hole(1).skin_winner == "p2"
    assert board.get_hole(1).players["p2"].score.net == 3


# ================================================================
# Points
# ================================================================

def test_unconditional_junk_adds_its_value():
    spec = GameSpec(
        name="bonus",
        type="points",
        scoring=ScoringRules(based_on="net", points_table={"par": 1}),
        junk=[JunkOption(name="birdie", disp="Birdie", value=2, based_on="net", score_to_par="exactly -1")],
    )
    rounds = [_build_rtg("p1", {1: 4}, course_handicap=1), _build_rtg("p2", {1: 4})]
    hole = score_game(_build_game(spec, rounds, holes=_holes(1))).get_hole(1)

    p1 = hole.players["p1"]
    assert [j.name for j in p1.junk] == ["birdie"]
    assert p1.base_points == 0
    assert p1.points == 2

    p2 = hole.players["p2"]
    assert p2.junk == []
    assert p2.points == 1


def test_stableford_points_table():
    rounds = [_build_rtg("p1", {1: 3, 2: 4, 3: 5}), _build_rtg("p2", {1: 5, 2: 7, 3: 3}, course_handicap=2)]
    board = score_game(_build_game(STABLEFORD, rounds, holes=_holes(1, 2, 3)))

    # p1: birdie 3, par 2, double bogey 0
    assert [board.get_hole(n).players["p1"].points for n in (1, 2, 3)] == [3, 2, 0]
    # p2 pops on holes 1 and 2: net par 2, net double 0, par 2
    assert [board.get_hole(n).players["p2"].points for n in (1, 2, 3)] == [2, 0, 2]
    assert board.players["p1"].points.total == 5
    assert board.players["p2"].pops == 2


def test_missing_score_contributes_nothing():
    grosses = {n: PARS[n - 1] for n in range(1, 10)}
    p1 = dict(grosses)
    del p1[7]
    rounds = [_build_rtg("p1", p1), _build_rtg("p2", {n: g + 1 for n, g in grosses.items()})]
    board = score_game(_build_game(STABLEFORD, rounds, holes_scope="front9"))

    hole = board.get_hole(7)
    assert hole.players["p1"].points is None
    assert hole.players["p1"].score.gross is None
    assert hole.players["p2"].points == 1
    assert WarningCode.HOLE_UNSCORED in _warning_codes(board, hole=7, player_id="p1")
    assert not _warning_codes(board, hole=7, player_id="p2")

    totals = board.players["p1"]
    assert totals.holes_played == 8
    assert totals.points.total == 16
    assert totals.gross.total == sum(PARS[:9]) - PARS[6]
    assert board.players["p2"].points.total == 9


def test_rank_points():
    spec = GameSpec(
        name="low_man",
        type="points",
        scoring=ScoringRules(based_on="gross", rank_points=[
            {"rank": 1, "tie_count": 1, "points": 3},
            {"rank": 1, "tie_count": 2, "points": 1.5},
        ]),
    )
    rounds = [_build_rtg("p1", {1: 3, 2: 4}), _build_rtg("p2", {1: 4, 2: 4}), _build_rtg("p3", {1: 5, 2: 6})]
    board = score_game(_build_game(spec, rounds, holes=_holes(1, 2)))

    assert board.get_hole(1).players["p1"].points == 3
    assert board.get_hole(1).players["p2"].rank == 2
    assert board.get_hole(2).players["p1"].points == 1.5
    assert board.get_hole(2).players["p2"].points == 1.5
    assert board.get_hole(2).players["p3"].rank == 3
    assert board.get_hole(2).players["p3"].points == 0


def test_manual_flag_overrides_junk():
    spec = GameSpec(
        name="bonus",
        junk=[JunkOption(name="birdie", disp="Birdie", value=1, score_to_par="at_most -1")],
    )
    rounds = [
        _build_rtg("p1", {1: 3}, flags={1: {"birdie": False}}),
        _build_rtg("p2", {1: 4}, flags={1: {"birdie": True}}),
    ]
    hole = score_game(_build_game(spec, rounds, holes=_holes(1))).get_hole(1)
    assert hole.players["p1"].junk == []
    assert [j.name for j in hole.players["p2"].junk] == ["birdie"]


def test_user_junk_needs_a_flag():
    rounds = [_build_rtg("p1", {1: 3}), _build_rtg("p2", {}, flags={1: {"birdie": True}})]
    hole = score_game(_build_game(BIRDIE_EM_ALL, rounds, holes=_holes(1))).get_hole(1)
    assert hole.players["p1"].points == 0
    assert hole.players["p2"].points == 1     # toggled without a gross score


def test_option_override_disables_junk_on_listed_holes():
    spec = GameSpec(
        name="bonus",
        junk=[JunkOption(name="birdie", disp="Birdie", value=1, score_to_par="exactly -1")],
    )
    rounds = [_build_rtg("p1", {1: 3, 2: 3})]
    game = _build_game(spec, rounds, holes=_holes(1, 2),
                       overrides=[OptionOverride(name="birdie", value="false", holes=[1])])
    board = score_game(game)
    assert board.get_hole(1).players["p1"].junk == []
    assert len(board.get_hole(2).players["p1"].junk) == 1


def test_junk_scope_front_and_back():
    spec = GameSpec(
        name="bonus",
        junk=[JunkOption(name="back_birdie", disp="Birdie", value=1, scope="back", score_to_par="exactly -1")],
    )
    rounds = [_build_rtg("p1", {1: 3, 10: 3})]
    board = score_game(_build_game(spec, rounds, holes=_holes(1, 10)))
    assert board.get_hole(1).players["p1"].junk == []
    assert len(board.get_hole(10).players["p1"].junk) == 1


def test_malformed_availability_is_a_warning():
    spec = GameSpec(
        name="bonus",
        scoring=ScoringRules(points_table={"par": 1}),
        junk=[JunkOption(name="birdie", disp="Birdie", value=1, score_to_par="exactly -1",
                         availability="{'and': [")],
    )
    rounds = [_build_rtg("p1", {1: 3, 2: 4})]
    board = score_game(_build_game(spec, rounds, holes=_holes(1, 2)))

    assert board.get_hole(1).players["p1"].junk == []
    assert board.get_hole(2).players["p1"].points == 1
    assert any(w.code == WarningCode.BAD_EXPRESSION and w.option == "birdie" for w in board.warnings)


# ================================================================
# Five Points
# ================================================================

TEAMS = [Team(id="A", player_ids=["p1", "p2"]), Team(id="B", player_ids=["p3", "p4"])]


def _five_points_game(hole_multipliers=None):
    rounds = [
        _build_rtg("p1", {1: 3, 2: 4, 3: 3, 4: 5}),
        _build_rtg("p2", {1: 4, 2: 5, 3: 3, 4: 5}, flags={1: {"prox": True}}),
        _build_rtg("p3", {1: 4, 2: 4, 3: 3, 4: 5}),
        _build_rtg("p4", {1: 5, 2: 4, 3: 4, 4: 5}),
    ]
    holes = _holes(1, 2, 3, 4, h1=TEAMS)
    for number, multipliers in (hole_multipliers or {}).items():
        holes[number - 1].multipliers = multipliers
    return _build_game(FIVE_POINTS, rounds, holes=holes)


def test_five_points_sweep_with_birdie_bbq():
    hole = score_game(_five_points_game()).get_hole(1)

    a, b = hole.teams["A"], hole.teams["B"]
    assert sorted(j.name for j in a.junk) == ["low_ball", "low_total"]
    assert [j.name for j in hole.players["p1"].junk] == ["birdie"]
    assert [j.name for j in hole.players["p2"].junk] == ["prox"]
    assert hole.possible_points == 6

    # all six points went to A, and p1's birdie doubles them
    assert [m.name for m in a.multipliers] == ["birdie_bbq"]
    assert a.multipliers[0].before == 6
    assert a.points == 12
    assert b.points == 0
    assert a.running_total == 12
    assert a.running_diff == 12
    assert b.running_diff == -12


def test_five_points_tie_is_a_push():
    hole = score_game(_five_points_game()).get_hole(2)
    # low ball 4 v 4 pushes; low total 9 v 8 goes to B
    assert [j.name for j in hole.teams["B"].junk] == ["low_total"]
    assert hole.teams["A"].junk == []


def test_teams_carry_forward_from_first_hole():
    board = score_game(_five_points_game())
    assert set(board.get_hole(4).teams) == {"A", "B"}
    assert board.get_hole(4).players["p3"].team_id == "B"


def test_double_only_for_team_down_the_most():
    game = _five_points_game({2: [HoleMultiplier(name="double", team_id="A"), HoleMultiplier(name="double", team_id="B")]})
    hole = score_game(game).get_hole(2)
    assert hole.teams["A"].multipliers == []
    assert [m.name for m in hole.teams["B"].multipliers] == ["double"]
    assert hole.teams["B"].points == 4
    assert hole.teams["B"].running_total == 4


def test_pre_double_lasts_rest_of_nine():
    game = _five_points_game({3: [HoleMultiplier(name="pre_double", team_id="B")]})
    board = score_game(game)
    assert [m.name for m in board.get_hole(3).teams["B"].multipliers] == ["pre_double"]
    assert [m.name for m in board.get_hole(4).teams["B"].multipliers] == ["pre_double"]
    assert board.get_hole(4).teams["A"].multipliers == []


def test_additive_combination():
    spec = FIVE_POINTS.model_copy(update={
        "scoring": FIVE_POINTS.scoring.model_copy(update={"multiplier_combination": "add"}),
    })
    game = _five_points_game()
    game.specs = [spec]
    hole = score_game(game).get_hole(1)
    assert hole.teams["A"].points == 8


def test_junk_outside_multiplier():
    spec = GameSpec(
        name="press",
        scoring=ScoringRules(points_table={"par": 1, "birdie": 2}, junk_multiplied=False),
        junk=[JunkOption(name="birdie", disp="Birdie", value=1, score_to_par="exactly -1")],
        multipliers=[MultiplierOption(name="press", disp="Press", value=3, based_on="user")],
    )
    rounds = [_build_rtg("p1", {1: 3})]
    holes = _holes(1)
    holes[0].multipliers = [HoleMultiplier(name="press")]
    hole = score_game(_build_game(spec, rounds, holes=holes)).get_hole(1)
    # base 2 is tripled, the birdie junk point is added afterwards
    assert hole.players["p1"].points == 7


def test_input_value_multiplier():
    spec = GameSpec(
        name="press",
        scoring=ScoringRules(points_table={"par": 1}),
        multipliers=[MultiplierOption(name="press", disp="Press", based_on="user", input_value=True)],
    )
    holes = _holes(1)
    holes[0].multipliers = [HoleMultiplier(name="press", value=5)]
    hole = score_game(_build_game(spec, [_build_rtg("p1", {1: 4})], holes=holes)).get_hole(1)
    assert hole.players["p1"].points == 5
    assert hole.players["p1"].multipliers[0].value == 5


# ================================================================
# Team rotation
# ================================================================

ROTATING = GameSpec(
    name="rotating",
    type="points",
    teams=TeamsConfig(teams=True, team_size=2, team_change_every=2),
    junk=[JunkOption(name="low_ball", disp="Low Ball", value=1, awarded_to="team", calculation="best_ball")],
)


def _rotation_rounds():
    return [_build_rtg(p, {n: 4 for n in range(1, 5)}) for p in ("p1", "p2", "p3", "p4")]


def test_team_rotation_periods():
    new_teams = [Team(id="C", player_ids=["p1", "p3"]), Team(id="D", player_ids=["p2", "p4"])]
    game = _build_game(ROTATING, _rotation_rounds(), holes=_holes(1, 2, 3, 4, h1=TEAMS, h3=new_teams))
    board = score_game(game)

    assert set(board.get_hole(2).teams) == {"A", "B"}
    assert set(board.get_hole(4).teams) == {"C", "D"}
    assert board.get_hole(4).players["p3"].team_id == "C"


def test_rotation_without_new_teams_warns():
    game = _build_game(ROTATING, _rotation_rounds(), holes=_holes(1, 2, 3, 4, h1=TEAMS))
    board = score_game(game)
    assert board.get_hole(3).teams == {}
    assert WarningCode.NO_TEAMS in _warning_codes(board, hole=3)
    assert board.get_hole(3).players["p1"].points == 0


# ================================================================
# Match play
# ================================================================

def test_match_play_status():
    rounds = [_build_rtg("p1", {1: 3, 2: 3, 3: 3}), _build_rtg("p2", {1: 4, 2: 4, 3: 3})]
    board = score_game(_build_game(MATCH_PLAY, rounds, holes=_holes(1, 2, 3)))

    first = board.get_hole(1)
    assert first.teams["p1"].match_result == "win"
    assert first.teams["p1"].match_status == "1 up"
    assert first.teams["p2"].match_status == "1 down"

    second = board.get_hole(2)
    assert second.teams["p1"].match_status == "2 & 1"
    assert second.teams["p2"].match_status == "lost 2 & 1"

    # decided: the last hole does not change anything
    third = board.get_hole(3)
    assert third.teams["p1"].match_result is None
    assert third.teams["p1"].match_status == "2 & 1"

    assert board.teams["p1"].match_status == "2 & 1"
    assert board.teams["p1"].match_over
    assert board.teams["p1"].points.total == 2


def test_match_play_halves():
    rounds = [_build_rtg("p1", {1: 4, 2: 4}), _build_rtg("p2", {1: 4, 2: 4})]
    board = score_game(_build_game(MATCH_PLAY, rounds, holes=_holes(1, 2)))
    assert board.get_hole(2).teams["p1"].match_status == "all square"
    assert board.get_hole(1).teams["p2"].base_points == 0.5
    assert board.teams["p1"].match_over


def test_match_stays_open_while_an_earlier_hole_is_pending():
    rounds = [_build_rtg("p1", {1: 4, 2: 3, 3: 3}), _build_rtg("p2", {2: 4, 3: 4})]
    game = _build_game(MATCH_PLAY, rounds, holes=_holes(1, 2, 3, 4))
    board = score_game(game)

    # two up with one to play, but hole 1 can still square it
    third = board.get_hole(3).teams["p1"]
    assert third.match_status == "2 up"
    assert board.teams["p1"].match_status == "2 up"
    assert board.teams["p2"].match_status == "2 down"
    assert not board.teams["p1"].match_over

    game.get_round("p2").round.scores.append(Score(hole=1, values=[ScoreValue(key="gross", value="3")]))
    board = score_game(game)
    assert board.get_hole(1).teams["p2"].match_result == "win"
    assert board.get_hole(3).teams["p1"].match_status == "1 up"
    assert not board.teams["p1"].match_over


def test_match_play_needs_two_sides():
    rounds = [_build_rtg(p, {1: 4}) for p in ("p1", "p2", "p3")]
    spec = MATCH_PLAY.model_copy(update={"max_players": None})
    with pytest.raises(ConfigurationError):
        score_game(_build_game(spec, rounds, holes=_holes(1)))


# ================================================================
# Handicaps
# ================================================================

def test_missing_handicap_plays_scratch():
    rtg = _build_rtg("p1", {1: 4}, course_handicap=None)
    rtg.round.handicap_index = None
    board = score_game(_build_game(STABLEFORD, [rtg], holes=_holes(1)))
    assert WarningCode.NO_HANDICAP in _warning_codes(board, player_id="p1")
    assert board.get_hole(1).players["p1"].score.pops == 0
    assert board.get_hole(1).players["p1"].points == 2


def test_handicap_mode_low():
    rounds = [_build_rtg("p1", {1: 4}, course_handicap=10), _build_rtg("p2", {1: 4}, course_handicap=4)]
    game = _build_game(STABLEFORD, rounds, holes=_holes(1),
                       overrides=[OptionOverride(name="handicap_mode", value="low")])
    board = score_game(game)
    assert board.players["p1"].handicap == 6
    assert board.players["p2"].handicap == 0


def test_handicap_derived_from_index():
    rtg = _build_rtg("p1", {1: 4}, course_handicap=None)
    rtg.round.handicap_index = "+1.0"
    board = score_game(_build_game(STABLEFORD, [rtg]))
    assert board.players["p1"].handicap == -1
    assert board.get_hole(18).players["p1"].score.pops == -1   # easiest hole


# ================================================================
# Configuration errors
# ================================================================

def test_unknown_spec_type():
    spec = GameSpec(name="wolf", type="wolf")
    with pytest.raises(ConfigurationError):
        score_game(_build_game(spec, [_build_rtg("p1", {1: 4})]))


def test_game_without_spec():
    with pytest.raises(ConfigurationError):
        score_game(Game(rounds=[_build_rtg("p1", {1: 4})]))


def test_invalid_stroke_indices():
    indices = list(range(1, 19))
    indices[17] = 1
    rtg = _build_rtg("p1", {1: 4}, tee=_build_tee(indices))
    with pytest.raises(ConfigurationError):
        score_game(_build_game(STABLEFORD, [rtg]))


def test_team_size_inconsistent_with_players():
    rounds = [_build_rtg(p, {1: 4}) for p in ("p1", "p2", "p3")]
    with pytest.raises(ConfigurationError):
        score_game(_build_game(ROTATING, rounds))


def test_oversized_team_on_a_hole():
    teams = [Team(id="A", player_ids=["p1", "p2", "p3"]), Team(id="B", player_ids=["p4"])]
    with pytest.raises(ConfigurationError):
        score_game(_build_game(ROTATING, _rotation_rounds(), holes=_holes(1, h1=teams)))


def test_unknown_combination():
    spec = GameSpec(name="odd", scoring=ScoringRules(multiplier_combination="exponent"))
    with pytest.raises(ConfigurationError):
        score_game(_build_game(spec, [_build_rtg("p1", {1: 4})]))


# ================================================================
# Snapshots
# ================================================================

def test_scoring_is_idempotent():
    game = _five_points_game({2: [HoleMultiplier(name="double", team_id="B")]})
    before = game.model_dump()
    first = score_game(game)
    second = score_game(game)
    assert first.model_dump() == second.model_dump()
    assert game.model_dump() == before


def test_scores_for_holes_outside_the_game_warn():
    rounds = [_build_rtg("p1", {1: 4, 12: 4})]
    board = score_game(_build_game(STABLEFORD, rounds, holes_scope="front9"))
    assert WarningCode.UNKNOWN_HOLE in _warning_codes(board, hole=12)
    assert board.get_hole(12) is None


def test_no_tee_falls_back_to_defaults():
    rtg = _build_rtg("p1", {1: 4})
    rtg.round.tee = None
    board = score_game(_build_game(STABLEFORD, [rtg], holes=_holes(1)))
    assert WarningCode.NO_TEE in _warning_codes(board)
    assert board.get_hole(1).par == 4
    assert board.get_hole(1).players["p1"].points == 2


# ================================================================
# Incomplete holes
# ================================================================

def test_partly_scored_team_hole_counts_in_totals_only():
    rounds = [
        _build_rtg("p1", {1: 4, 2: 4}),
        _build_rtg("p2", {1: 4, 2: 4}, flags={1: {"prox": True}}),
        _build_rtg("p3", {1: 4, 2: 4}),
        _build_rtg("p4", {2: 4}),
    ]
    board = score_game(_build_game(FIVE_POINTS, rounds, holes=_holes(1, 2, h1=TEAMS)))

    first = board.get_hole(1)
    assert not first.teams["A"].complete
    assert first.teams["A"].points > 0
    assert first.teams["A"].running_total == 0
    assert board.get_hole(2).teams["A"].running_total == 0

    assert board.teams["A"].points.total == first.teams["A"].points + board.get_hole(2).teams["A"].points
    assert board.leaderboard[0].id == "A"


def test_parser_limits_are_warnings():
    spec = GameSpec(
        name="deep",
        scoring=ScoringRules(points_table={"par": 1}),
        junk=[JunkOption(name="sandy", disp="Sandy", value=1, based_on="user",
                         availability="[" * 5000 + "]" * 5000)],
    )
    rounds = [_build_rtg("p1", {1: 4}, flags={1: {"sandy": True}})]
    board = score_game(_build_game(spec, rounds, holes=_holes(1)))

    assert board.get_hole(1).players["p1"].junk == []
    assert board.get_hole(1).players["p1"].points == 1
    assert any(w.code == WarningCode.BAD_EXPRESSION and w.option == "sandy" for w in board.warnings)


# ================================================================
# Lower is better
# ================================================================

PENALTIES = GameSpec(
    name="penalties",
    type="points",
    teams=TeamsConfig(teams=True, team_size=1, team_count=2),
    scoring=ScoringRules(based_on="gross", better="lower", points_table={"bogey": 1, "double_bogey": 2}),
)


def test_running_diff_follows_lower_is_better():
    rounds = [_build_rtg("p1", {1: 4}), _build_rtg("p2", {1: 5})]
    teams = [Team(id="A", player_ids=["p1"]), Team(id="B", player_ids=["p2"])]
    hole = score_game(_build_game(PENALTIES, rounds, holes=_holes(1, h1=teams))).get_hole(1)

    a, b = hole.teams["A"], hole.teams["B"]
    assert (a.points, b.points) == (0, 1)
    assert a.running_diff == 1
    assert b.running_diff == -1
    assert a.hole_net_total == 1
    assert b.hole_net_total == -1


def test_hole_net_total_higher_is_better():
    hole = score_game(_five_points_game()).get_hole(1)
    assert hole.teams["A"].hole_net_total == 12
    assert hole.teams["B"].hole_net_total == -12


# ================================================================
# Edits to earlier holes
# ================================================================

def _swing_hole_one(game):
    game.get_round("p3").round.get_score(1).set_value("gross", "2")
    game.get_round("p4").round.get_score(1).set_value("gross", "3")


def test_untouched_game_has_no_invalidations():
    game = _five_points_game({2: [HoleMultiplier(name="double", team_id="B")]})
    result = detect_invalidations(game, 1)
    assert result.items == []
    assert not result.has_invalidations


def test_edit_invalidates_later_press():
    game = _five_points_game({2: [HoleMultiplier(name="double", team_id="B")]})
    _swing_hole_one(game)
    result = detect_invalidations(game, 1)

    # B now leads after hole 1, so B is no longer down the most
    assert [(i.hole, i.team_id, i.name) for i in result.items] == [(2, "B", "double")]
    assert result.has_invalidations
    assert {s.team_id for s in result.score_impact} == {"A", "B"}


def test_edit_on_last_hole_checks_nothing():
    game = _five_points_game({2: [HoleMultiplier(name="double", team_id="B")]})
    _swing_hole_one(game)
    assert detect_invalidations(game, 4).items == []


def test_dependent_press_is_invalidated_with_it():
    answer = MultiplierOption(
        name="answer", disp="Answer", value=2, based_on="user",
        availability="{'other_team_multiplied_with': [{'getCurrHole': []}, {'var': 'team'}, 'double']}",
    )
    spec = FIVE_POINTS.model_copy(update={"multipliers": [FIVE_POINTS.multipliers[1], answer]})
    game = _five_points_game({2: [
        HoleMultiplier(name="double", team_id="B"),
        HoleMultiplier(name="answer", team_id="A"),
    ]})
    game.specs = [spec]
    assert detect_invalidations(game, 1).items == []

    _swing_hole_one(game)
    items = detect_invalidations(game, 1).items
    assert [(i.team_id, i.name) for i in items] == [("B", "double"), ("A", "answer")]
    assert items[1].reason == "Depends on team B's 2x"
