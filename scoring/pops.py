"""Handicap stroke ("pop") allocation across holes."""

from typing import Dict, List, Mapping, Optional

from models import Tee
from scoring.exceptions import ConfigurationError


def check_stroke_indices(tee: Tee) -> None:
    """Raise ConfigurationError unless the tee's stroke indices are a permutation of 1..N."""
    if not tee.holes:
        raise ConfigurationError(f"Tee '{tee.name or tee.id}' has no holes")
    if not tee.stroke_indices_valid:
        indices = sorted(h.handicap for h in tee.holes)
        raise ConfigurationError(
            f"Tee '{tee.name or tee.id}' stroke indices are not a permutation of 1-{len(indices)}: {indices}"
        )


def allocate_pops(course_handicap: int, stroke_indices: Mapping[int, int]) -> Dict[int, int]:
    """
    Map hole number -> pops for a course handicap.

    Holes are ordered by stroke index (1 = hardest). Every hole gets
    h // n strokes and the h % n hardest holes get one more. Plus
    handicaps (negative h) give strokes back on the easiest holes first,
    expressed as negative pops. The sum of pops always equals h.
    """
    holes = sorted(stroke_indices, key=lambda number: stroke_indices[number])
    if not holes or course_handicap == 0:
        return {number: 0 for number in stroke_indices}

    n = len(holes)
    strokes = abs(course_handicap)
    base, extra = divmod(strokes, n)

    if course_handicap > 0:
        ordered = holes
        sign = 1
    else:
        ordered = list(reversed(holes))
        sign = -1

    pops = {}
    for position, number in enumerate(ordered):
        pops[number] = sign * (base + (1 if position < extra else 0))
    return {number: pops[number] for number in sorted(pops)}


def pops_for_tee(course_handicap: int, tee: Tee, hole_numbers=None) -> Dict[int, int]:
    """Allocate pops over the tee holes being played (all of them by default)."""
    indices = tee.stroke_indices
    if hole_numbers is not None:
        indices = {number: indices[number] for number in hole_numbers if number in indices}
    return allocate_pops(course_handicap, indices)


HOLES_FOR_SCOPE = {
    "all18": range(1, 19),
    "front9": range(1, 10),
    "back9": range(10, 19),
}


def scope_holes(holes_played: str = "all18", tee: Optional[Tee] = None) -> List[int]:
    """Hole numbers a handicap is spread over: the scope's holes present on the tee."""
    numbers = list(HOLES_FOR_SCOPE[holes_played])
    if tee is None:
        return numbers
    return [n for n in numbers if tee.get_hole(n) is not None]
