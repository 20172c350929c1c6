from datetime import date
from pydantic import Field
from typing import List, Optional

from .base import BaseGolfModel
from .score import Score
from .tee import Tee


def parse_handicap_index(value: Optional[str]) -> Optional[float]:
    """Parse a handicap index string. Plus handicaps ("+1.5") become negative."""
    if value is None:
        return None
    text = value.strip()
    if not text:
        return None
    try:
        index = float(text)
    except ValueError:
        return None
    if text.startswith("+"):
        index = -index
    return index


class Round(BaseGolfModel):
    """Represents one player's round, with scores entered hole by hole."""
    id: Optional[str] = None
    player_id: str
    handicap_index: Optional[str] = None
    course_handicap: Optional[int] = None
    game_handicap: Optional[int] = None
    course_id: Optional[str] = None
    tee: Optional[Tee] = None
    played_at: Optional[date] = None
    scores: List[Score] = Field(default_factory=list)

    def get_score(self, hole_number: int) -> Optional[Score]:
        """Get the score record for a hole, if any."""
        for score in self.scores:
            if score.hole == hole_number:
                return score
        return None

    def get_gross(self, hole_number: int) -> Optional[int]:
        score = self.get_score(hole_number)
        return score.gross if score else None

    @property
    def handicap_index_value(self) -> Optional[float]:
        return parse_handicap_index(self.handicap_index)

    def holes_scored(self) -> int:
        return sum(1 for s in self.scores if s.gross is not None)


class RoundToGame(BaseGolfModel):
    """Edge linking a round to a game, with game-specific handicap fields.

    Values set here override the ones on the round.
    """
    round: Round
    handicap_index: Optional[str] = None
    course_handicap: Optional[int] = None
    game_handicap: Optional[int] = None

    @property
    def player_id(self) -> str:
        return self.round.player_id

    @property
    def resolved_handicap_index(self) -> Optional[float]:
        value = parse_handicap_index(self.handicap_index)
        if value is None:
            value = self.round.handicap_index_value
        return value

    @property
    def resolved_course_handicap(self) -> Optional[int]:
        if self.course_handicap is not None:
            return self.course_handicap
        return self.round.course_handicap

    @property
    def resolved_game_handicap(self) -> Optional[int]:
        if self.game_handicap is not None:
            return self.game_handicap
        return self.round.game_handicap
