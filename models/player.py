from pydantic import Field
from typing import Literal, Optional

from .base import BaseGolfModel


class Player(BaseGolfModel):
    """Represents a golfer taking part in a game."""
    id: str
    name: Optional[str] = None
    short: Optional[str] = None
    gender: Optional[Literal["M", "F"]] = None
    golfer_id: Optional[str] = None  # handicap service id
    handicap_index: Optional[str] = Field(None, pattern=r"^\+?\d{1,2}(\.\d)?$")
