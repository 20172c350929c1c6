from pydantic import Field, model_validator
from typing import Dict, List, Literal, Optional

from .base import BaseGolfModel
from .options import GameOption, JunkOption, MultiplierOption


class TeamsConfig(BaseGolfModel):
    """How players are grouped into teams."""
    teams: bool = False
    team_size: Optional[int] = Field(None, ge=1)
    team_count: Optional[int] = Field(None, ge=2)
    team_change_every: int = Field(0, ge=0)  # 0 = fixed for the whole game


class RankPoints(BaseGolfModel):
    """Points paid for finishing a hole at a rank with a given number of ties."""
    rank: int = Field(..., ge=1)
    tie_count: int = Field(1, ge=1)
    points: float


class ScoringRules(BaseGolfModel):
    """Per-hole scoring block of a game spec."""
    based_on: Literal["gross", "net"] = "net"
    points_table: Dict[str, float] = Field(default_factory=dict)  # keyed by score type name
    rank_points: List[RankPoints] = Field(default_factory=list)
    skin_value: float = 1
    team_score: str = "best_ball"
    better: Literal["higher", "lower"] = "higher"  # which direction of points is winning
    multiplier_combination: str = "multiply"
    junk_multiplied: bool = True


class GameSpec(BaseGolfModel):
    """Declarative definition of a scoring format."""
    name: str
    disp: Optional[str] = None
    short: Optional[str] = None
    version: int = 1
    status: Literal["prod", "dev", "test"] = "prod"
    type: str = "points"
    min_players: int = Field(1, ge=1)
    max_players: Optional[int] = Field(None, ge=1)
    location_type: Literal["local", "virtual"] = "local"
    teams: TeamsConfig = Field(default_factory=TeamsConfig)
    scoring: ScoringRules = Field(default_factory=ScoringRules)
    options: List[GameOption] = Field(default_factory=list)
    junk: List[JunkOption] = Field(default_factory=list)
    multipliers: List[MultiplierOption] = Field(default_factory=list)

    @model_validator(mode='after')
    def validate_unique_names(self):
        for label, items in (("option", self.options), ("junk", self.junk), ("multiplier", self.multipliers)):
            names = [item.name for item in items]
            duplicates = {n for n in names if names.count(n) > 1}
            if duplicates:
                raise ValueError(f"Duplicate {label} names: {', '.join(sorted(duplicates))}")
        return self

    @model_validator(mode='after')
    def validate_player_range(self):
        if self.max_players is not None and self.max_players < self.min_players:
            raise ValueError(f"max_players ({self.max_players}) below min_players ({self.min_players})")
        return self

    @property
    def key(self) -> str:
        return f"{self.name}@{self.version}"

    def get_option(self, name: str) -> Optional[GameOption]:
        return next((o for o in self.options if o.name == name), None)

    def get_junk(self, name: str) -> Optional[JunkOption]:
        return next((j for j in self.junk if j.name == name), None)
