"""Scoreboard, pops, invalidation and settlement endpoints."""

import logging
from fastapi import APIRouter, HTTPException, Query
from typing import Literal, Optional

from api.schemas import InvalidationRequest, PopsRequest, PopsResponse, SettlementRequest
from models import Game, parse_handicap_index
from scoring import (
    ConfigurationError,
    InvalidationResult,
    Scoreboard,
    Settlement,
    detect_invalidations,
    player_metrics,
    score_game,
    settle,
)
from scoring.handicap import course_handicap_for_tee, format_handicap
from scoring.pops import check_stroke_indices, pops_for_tee, scope_holes

logger = logging.getLogger(__name__)

router = APIRouter()


def configuration_error(e: ConfigurationError) -> HTTPException:
    logger.warning("Configuration error: %s", e)
    return HTTPException(422, detail={"error": "configuration", "message": str(e)})


@router.post("/scoreboard", response_model=Scoreboard)
async def scoreboard(
    game: Game,
    view: Optional[Literal["gross", "net", "to_par", "points", "skins"]] = Query(None),
):
    try:
        return score_game(game, view)
    except ConfigurationError as e:
        raise configuration_error(e)


@router.post("/pops", response_model=PopsResponse)
async def pops(request: PopsRequest):
    try:
        check_stroke_indices(request.tee)
    except ConfigurationError as e:
        raise configuration_error(e)

    handicap = request.course_handicap
    if handicap is None:
        handicap = course_handicap_for_tee(
            parse_handicap_index(request.handicap_index), request.tee, request.holes_played,
        )
    if handicap is None:
        raise HTTPException(400, "Provide a course handicap, or a handicap index and a rated tee")

    return PopsResponse(
        course_handicap=handicap,
        display=format_handicap(handicap),
        pops=pops_for_tee(handicap, request.tee, scope_holes(request.holes_played, request.tee)),
    )


@router.post("/invalidations", response_model=InvalidationResult)
async def invalidations(request: InvalidationRequest):
    try:
        return detect_invalidations(request.game, request.edited_hole)
    except ConfigurationError as e:
        raise configuration_error(e)


@router.post("/settlement", response_model=Settlement)
async def settlement(request: SettlementRequest):
    try:
        board = score_game(request.game)
    except ConfigurationError as e:
        raise configuration_error(e)
    return settle(request.pools, player_metrics(board), request.pot_total)
