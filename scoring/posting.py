"""
Handicap-service posting payload.

Each hole's score is capped at net double bogey for the adjusted gross
score; the raw scores are sent as hole details alongside it.
"""

import logging
from datetime import date
from pydantic import Field
from typing import List, Literal, Optional

from models import Game, Player, RoundToGame
from models.base import BaseGolfModel
from scoring.exceptions import PostingError
from scoring.handicap import course_handicap
from scoring.pops import check_stroke_indices, pops_for_tee, scope_holes

logger = logging.getLogger(__name__)

NET_DOUBLE_BOGEY = 2


class PostingHole(BaseGolfModel):
    hole_number: int
    par: int
    pops: int
    raw_score: int
    net: int
    net_to_par: int
    adjusted_score: int
    is_adjusted: bool = False


class HoleDetail(BaseGolfModel):
    hole_number: int
    raw_score: int


class PostingPayload(BaseGolfModel):
    """What the handicap-service client submits, plus the locally computed adjusted gross."""
    golfer_id: str
    gender: Optional[str] = None
    course_id: str
    tee_set_id: str
    played_at: date
    score_type: Literal["H", "A", "C"] = "H"  # home, away, competition
    number_of_holes: int
    hole_details: List[HoleDetail] = Field(default_factory=list)
    adjusted_gross_score: int
    holes: List[PostingHole] = Field(default_factory=list)


def adjusted_score(raw: int, par: int, pops: int) -> int:
    """Cap a hole at par + 2 + pops. Never above the raw score."""
    return min(raw, par + NET_DOUBLE_BOGEY + pops)


def adjusted_hole_scores(rtg: RoundToGame, holes_played: str = "all18") -> List[PostingHole]:
    """
    Per-hole posting values for a round, using its course handicap.

    Raises PostingError when the tee is missing or any hole is unscored.
    """
    round_ = rtg.round
    tee = round_.tee
    if tee is None:
        raise PostingError(f"Round for {rtg.player_id} has no tee")
    check_stroke_indices(tee)

    numbers = scope_holes(holes_played, tee)
    handicap = course_handicap(rtg, tee, holes_played) or 0
    pops = pops_for_tee(handicap, tee, numbers)

    unscored = [n for n in numbers if round_.get_gross(n) is None]
    if unscored:
        raise PostingError(f"Cannot post {rtg.player_id}: holes {unscored} are unscored")

    holes = []
    for number in numbers:
        par = tee.get_hole(number).par
        raw = round_.get_gross(number)
        net = raw - pops[number]
        adjusted = adjusted_score(raw, par, pops[number])
        holes.append(PostingHole(
            hole_number=number,
            par=par,
            pops=pops[number],
            raw_score=raw,
            net=net,
            net_to_par=net - par,
            adjusted_score=adjusted,
            is_adjusted=adjusted < raw,
        ))
    return holes


def build_posting_payload(
    rtg: RoundToGame,
    player: Player,
    score_type: str = "H",
    holes_played: str = "all18",
) -> PostingPayload:
    """Build the payload for one player's round."""
    round_ = rtg.round
    if not player.golfer_id:
        raise PostingError(f"Player {player.id} has no golfer id")
    if not round_.course_id:
        raise PostingError(f"Round for {player.id} has no course")
    if round_.tee is None or not round_.tee.id:
        raise PostingError(f"Round for {player.id} has no tee")
    if round_.played_at is None:
        raise PostingError(f"Round for {player.id} has no played date")

    holes = adjusted_hole_scores(rtg, holes_played)
    adjusted = sum(h.adjusted_score for h in holes)
    logger.info("Posting %s: gross %s, adjusted %s", player.id, sum(h.raw_score for h in holes), adjusted)

    return PostingPayload(
        golfer_id=player.golfer_id,
        gender=player.gender,
        course_id=round_.course_id,
        tee_set_id=round_.tee.id,
        played_at=round_.played_at,
        score_type=score_type,
        number_of_holes=len(holes),
        hole_details=[HoleDetail(hole_number=h.hole_number, raw_score=h.raw_score) for h in holes],
        adjusted_gross_score=adjusted,
        holes=holes,
    )


def build_game_posting(game: Game, player_id: str, score_type: str = "H") -> PostingPayload:
    """Posting payload for one player of a game, using the game's hole scope."""
    rtg = game.get_round(player_id)
    player = game.get_player(player_id)
    if rtg is None or player is None:
        raise PostingError(f"Player {player_id} is not in this game")
    return build_posting_payload(rtg, player, score_type, game.holes_scope)
