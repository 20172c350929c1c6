"""Turn entered hole values plus pops into gross/net/to-par facts."""

from typing import Optional

from models import Score
from scoring.results import NormalizedScore


def score_type(to_par: int) -> str:
    """Name for a score relative to par. Worse than quad bogey counts as quad_bogey."""
    if to_par <= -3:
        return "albatross"
    if to_par == -2:
        return "eagle"
    if to_par == -1:
        return "birdie"
    if to_par == 0:
        return "par"
    if to_par == 1:
        return "bogey"
    if to_par == 2:
        return "double_bogey"
    if to_par == 3:
        return "triple_bogey"
    return "quad_bogey"


def normalize_score(score: Optional[Score], pops: int, par: int, hole: int) -> NormalizedScore:
    """
    Normalize one player's hole.

    A missing Score or a missing/invalid gross value leaves the hole
    unscored: gross, net and both to-par values stay None. Manual
    boolean values are carried through as flags either way.
    """
    flags = score.flags() if score is not None else {}
    gross = score.gross if score is not None else None
    if gross is None:
        return NormalizedScore(hole=hole, par=par, pops=pops, flags=flags)

    net = gross - pops
    return NormalizedScore(
        hole=hole,
        par=par,
        pops=pops,
        gross=gross,
        net=net,
        to_par=gross - par,
        net_to_par=net - par,
        flags=flags,
    )
