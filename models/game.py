from datetime import date
from pydantic import Field
from typing import List, Literal, Optional

from .base import BaseGolfModel
from .gamespec import GameSpec
from .player import Player
from .round import RoundToGame


class Team(BaseGolfModel):
    """Group of players scored together on a hole."""
    id: str
    player_ids: List[str] = Field(default_factory=list)


class HoleMultiplier(BaseGolfModel):
    """A multiplier a team activated on a hole (press, double...)."""
    name: str
    team_id: Optional[str] = None  # None applies to every team
    value: Optional[float] = None  # user-entered value for input_value multipliers


class GameHole(BaseGolfModel):
    """A hole in play order, with any explicit team assignment for it."""
    hole: str
    number: int = Field(..., ge=1, le=18)
    teams: List[Team] = Field(default_factory=list)
    multipliers: List[HoleMultiplier] = Field(default_factory=list)


class OptionOverride(BaseGolfModel):
    """Game-level value for a spec option. Empty holes means every hole."""
    name: str
    value: str
    holes: List[int] = Field(default_factory=list)


class Game(BaseGolfModel):
    """One event instance: players, rounds, holes and the formats being played."""
    id: Optional[str] = None
    name: Optional[str] = None
    start: Optional[date] = None
    holes_scope: Literal["all18", "front9", "back9"] = "all18"
    specs: List[GameSpec] = Field(default_factory=list)
    players: List[Player] = Field(default_factory=list)
    holes: List[GameHole] = Field(default_factory=list)
    rounds: List[RoundToGame] = Field(default_factory=list)
    option_overrides: List[OptionOverride] = Field(default_factory=list)

    def hole_numbers(self) -> List[int]:
        """Hole numbers in play order."""
        if self.holes:
            return [h.number for h in self.holes]
        if self.holes_scope == "front9":
            return list(range(1, 10))
        if self.holes_scope == "back9":
            return list(range(10, 19))
        return list(range(1, 19))

    def get_hole(self, number: int) -> Optional[GameHole]:
        for hole in self.holes:
            if hole.number == number:
                return hole
        return None

    def get_player(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def get_round(self, player_id: str) -> Optional[RoundToGame]:
        for rtg in self.rounds:
            if rtg.player_id == player_id:
                return rtg
        return None

    def player_ids(self) -> List[str]:
        """Players in the game, in insertion order, including those only present as rounds."""
        ids = [p.id for p in self.players]
        for rtg in self.rounds:
            if rtg.player_id not in ids:
                ids.append(rtg.player_id)
        return ids
