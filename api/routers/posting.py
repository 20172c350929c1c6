"""Handicap-service posting payload endpoint."""

from fastapi import APIRouter, HTTPException

from api.routers.scoring import configuration_error
from api.schemas import PostingRequest
from scoring import ConfigurationError, PostingError, PostingPayload, build_game_posting

router = APIRouter()


@router.post("", response_model=PostingPayload)
async def posting_payload(request: PostingRequest):
    try:
        return build_game_posting(request.game, request.player_id, request.score_type)
    except PostingError as e:
        raise HTTPException(409, detail={"error": "posting", "message": str(e)})
    except ConfigurationError as e:
        raise configuration_error(e)
