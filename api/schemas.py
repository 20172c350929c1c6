"""API-specific request and response models."""

from pydantic import BaseModel, Field
from typing import Dict, List, Literal, Optional

from models import Game, Tee
from scoring import PoolConfig


class PostingRequest(BaseModel):
    """One player's round from a game, to be posted."""
    game: Game
    player_id: str
    score_type: Literal["H", "A", "C"] = "H"


class PopsRequest(BaseModel):
    """Pops preview. Give a course handicap, or a handicap index to derive one from the tee."""
    tee: Tee
    course_handicap: Optional[int] = None
    handicap_index: Optional[str] = Field(None, pattern=r"^\+?\d{1,2}(\.\d)?$")
    holes_played: Literal["all18", "front9", "back9"] = "all18"


class PopsResponse(BaseModel):
    course_handicap: int
    display: str
    pops: Dict[int, int]


class SpecSummaryResponse(BaseModel):
    """Game spec for list views."""
    name: str
    disp: Optional[str] = None
    type: str
    version: int
    min_players: int
    max_players: Optional[int] = None
    teams: bool = False


class InvalidationRequest(BaseModel):
    """A game as it stands after a score on `edited_hole` changed."""
    game: Game
    edited_hole: int = Field(..., ge=1, le=18)


class SettlementRequest(BaseModel):
    game: Game
    pools: List[PoolConfig]
    pot_total: float = Field(..., ge=0)
