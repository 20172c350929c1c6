import pytest

from models import RoundToGame, Round, Tee, TeeHole, TeeRating, TeeRatings
from scoring.exceptions import ConfigurationError
from scoring.handicap import (
    adjust_to_low,
    course_handicap,
    course_handicap_for_tee,
    course_handicap_from_slope,
    effective_handicap,
    format_handicap,
)
from scoring.pops import allocate_pops, check_stroke_indices, pops_for_tee

# A realistic card: odd indices on the front, even on the back
STROKE_INDICES = [7, 15, 3, 11, 1, 17, 5, 13, 9, 8, 16, 4, 12, 2, 18, 6, 14, 10]


def _build_tee(indices=None) -> Tee:
    indices = indices or STROKE_INDICES
    return Tee(
        id="tee-1",
        holes=[TeeHole(number=n, par=4, handicap=si) for n, si in enumerate(indices, start=1)],
        ratings=TeeRatings(
            total=TeeRating(course_rating=72.1, slope_rating=125),
            front=TeeRating(course_rating=36.0, slope_rating=122),
            back=TeeRating(course_rating=36.1, slope_rating=128),
        ),
    )


# ================================================================
# Pop allocation
# ================================================================

def test_pops_round_robin_indices():
    """Course handicap 10 with index == hole number: holes 1-10 get a pop."""
    indices = {n: n for n in range(1, 19)}
    pops = allocate_pops(10, indices)
    assert [pops[n] for n in range(1, 11)] == [1] * 10
    assert [pops[n] for n in range(11, 19)] == [0] * 8


def test_pops_total_equals_handicap():
    tee = _build_tee()
    for h in range(-10, 55):
        pops = pops_for_tee(h, tee)
        assert sum(pops.values()) == h
        if abs(h) <= 36:
            assert max(abs(p) for p in pops.values()) <= 2


def test_pops_go_to_hardest_holes_first():
    pops = pops_for_tee(3, _build_tee())
    # stroke indices 1, 2 and 3 are holes 5, 14 and 3
    assert {n for n, p in pops.items() if p} == {5, 14, 3}


def test_pops_second_round():
    pops = pops_for_tee(20, _build_tee())
    assert pops[5] == 2      # index 1
    assert pops[14] == 2     # index 2
    assert pops[3] == 1      # index 3
    assert sum(pops.values()) == 20


def test_plus_handicap_gives_strokes_back_on_easiest_holes():
    pops = pops_for_tee(-2, _build_tee())
    # indices 18 and 17 are holes 15 and 6
    assert pops[15] == -1
    assert pops[6] == -1
    assert sum(1 for p in pops.values() if p) == 2


def test_scratch_gets_no_pops():
    pops = pops_for_tee(0, _build_tee())
    assert set(pops.values()) == {0}
    assert list(pops) == list(range(1, 19))


def test_pops_over_nine_holes():
    pops = pops_for_tee(5, _build_tee(), range(1, 10))
    assert list(pops) == list(range(1, 10))
    # front nine indices ordered: 1 (h5), 3 (h3), 5 (h7), 7 (h1), 9 (h9)
    assert {n for n, p in pops.items() if p} == {5, 3, 7, 1, 9}


def test_invalid_stroke_indices():
    indices = list(STROKE_INDICES)
    indices[1] = 7   # duplicate of hole 1
    with pytest.raises(ConfigurationError):
        check_stroke_indices(_build_tee(indices))

    with pytest.raises(ConfigurationError):
        check_stroke_indices(Tee(id="empty"))

    check_stroke_indices(_build_tee())


# ================================================================
# Handicaps
# ================================================================

def test_course_handicap_from_slope():
    assert course_handicap_from_slope(10.4, 125) == 12     # 11.50 rounds up
    assert course_handicap_from_slope(10.0, 113) == 10
    assert course_handicap_from_slope(-1.5, 113) == -1


def test_course_handicap_uses_nine_hole_ratings():
    tee = _build_tee()
    assert course_handicap_for_tee(10.0, tee, "all18") == 11     # 10 * 125 / 113 = 11.06
    assert course_handicap_for_tee(5.0, tee, "front9") == 5      # 5 * 122 / 113 = 5.40
    assert course_handicap_for_tee(None, tee) is None
    assert course_handicap_for_tee(10.0, Tee()) is None


def test_effective_handicap_precedence():
    tee = _build_tee()
    r = Round(player_id="p1", handicap_index="10.0", tee=tee)
    assert effective_handicap(RoundToGame(round=r)) == 11

    r.course_handicap = 14
    assert effective_handicap(RoundToGame(round=r)) == 14

    rtg = RoundToGame(round=r, game_handicap=3)
    assert effective_handicap(rtg) == 3
    assert course_handicap(rtg) == 14    # posting ignores the game handicap

    assert effective_handicap(RoundToGame(round=Round(player_id="p2"))) is None


def test_adjust_to_low_and_format():
    assert adjust_to_low({"p1": 3, "p2": -4}) == {"p1": 7, "p2": 0}
    assert adjust_to_low({}) == {}

    assert format_handicap(-2) == "+2"
    assert format_handicap(12) == "12"
    assert format_handicap(None) == ""
