"""Course and game handicap resolution."""

import math
from typing import Dict, Optional

from models import RoundToGame, Tee
from models.tee import HolesPlayed

STANDARD_SLOPE_RATING = 113


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def course_handicap_from_slope(handicap_index: float, slope: float) -> int:
    """Course handicap = round(index * slope / 113)."""
    return round_half_up(handicap_index * slope / STANDARD_SLOPE_RATING)


def course_handicap_for_tee(
    handicap_index: Optional[float],
    tee: Optional[Tee],
    holes_played: HolesPlayed = "all18",
) -> Optional[int]:
    """Derive a course handicap, or None when the index or rating is missing."""
    if handicap_index is None or tee is None:
        return None
    rating = tee.get_rating(holes_played)
    if rating is None:
        return None
    return course_handicap_from_slope(handicap_index, rating.slope_rating)


def effective_handicap(
    rtg: RoundToGame,
    tee: Optional[Tee] = None,
    holes_played: HolesPlayed = "all18",
) -> Optional[int]:
    """Game handicap, then course handicap, then one derived from the index."""
    if rtg.resolved_game_handicap is not None:
        return rtg.resolved_game_handicap
    return course_handicap(rtg, tee, holes_played)


def course_handicap(
    rtg: RoundToGame,
    tee: Optional[Tee] = None,
    holes_played: HolesPlayed = "all18",
) -> Optional[int]:
    """Course handicap ignoring any game override. Used for posting."""
    if rtg.resolved_course_handicap is not None:
        return rtg.resolved_course_handicap
    return course_handicap_for_tee(rtg.resolved_handicap_index, tee or rtg.round.tee, holes_played)


def adjust_to_low(handicaps: Dict[str, int]) -> Dict[str, int]:
    """Play off the low handicap: everyone gets strokes relative to the lowest.

    {"p1": 3, "p2": -4} -> {"p1": 7, "p2": 0}
    """
    if not handicaps:
        return {}
    lowest = min(handicaps.values())
    return {player_id: value - lowest for player_id, value in handicaps.items()}


def format_handicap(value: Optional[int]) -> str:
    """Display form of a course handicap; plus handicaps carry a '+'."""
    if value is None:
        return ""
    return f"+{abs(value)}" if value < 0 else str(value)
