"""Result models produced by the scoring engine."""

from enum import Enum
from pydantic import Field
from typing import Dict, List, Optional

from models.base import BaseGolfModel


class WarningCode(str, Enum):
    """Recoverable data problems, shown to the user instead of failing."""
    NO_HANDICAP = "no_handicap"
    HOLE_UNSCORED = "hole_unscored"
    BAD_EXPRESSION = "bad_expression"
    NO_TEAMS = "no_teams"
    UNKNOWN_HOLE = "unknown_hole"
    NO_TEE = "no_tee"


class IncompleteDataWarning(BaseGolfModel):
    """A data problem recovered locally while scoring."""
    code: WarningCode
    message: str
    hole: Optional[int] = None
    player_id: Optional[str] = None
    option: Optional[str] = None


class NormalizedScore(BaseGolfModel):
    """A player's hole score with handicap strokes applied."""
    hole: int
    par: int
    pops: int = 0
    gross: Optional[int] = None
    net: Optional[int] = None
    to_par: Optional[int] = None
    net_to_par: Optional[int] = None
    flags: Dict[str, bool] = Field(default_factory=dict)

    @property
    def scored(self) -> bool:
        return self.gross is not None

    def value(self, based_on: str) -> Optional[int]:
        """Gross or net strokes."""
        return self.net if based_on == "net" else self.gross

    def value_to_par(self, based_on: str) -> Optional[int]:
        return self.net_to_par if based_on == "net" else self.to_par


class AwardedJunk(BaseGolfModel):
    name: str
    value: float
    player_id: Optional[str] = None
    team_id: Optional[str] = None


class MultiplierApplication(BaseGolfModel):
    """A multiplier applied to a player or team total on a hole."""
    name: str
    value: float
    calculation: str = "multiply"
    player_id: Optional[str] = None
    team_id: Optional[str] = None
    before: float = 0
    after: float = 0


class PlayerHoleResult(BaseGolfModel):
    player_id: str
    team_id: Optional[str] = None
    score: NormalizedScore
    rank: Optional[int] = None
    tie_count: Optional[int] = None
    base_points: float = 0
    junk: List[AwardedJunk] = Field(default_factory=list)
    multipliers: List[MultiplierApplication] = Field(default_factory=list)
    points: Optional[float] = None  # None when the hole is unscored for the player

    @property
    def scored(self) -> bool:
        return self.score.scored

    @property
    def junk_points(self) -> float:
        return sum(j.value for j in self.junk)


class TeamHoleResult(BaseGolfModel):
    team_id: str
    player_ids: List[str] = Field(default_factory=list)
    score: Optional[float] = None
    low_ball: Optional[int] = None
    total: Optional[int] = None
    rank: Optional[int] = None
    tie_count: Optional[int] = None
    complete: bool = False  # every member scored the hole
    base_points: float = 0
    junk: List[AwardedJunk] = Field(default_factory=list)
    multipliers: List[MultiplierApplication] = Field(default_factory=list)
    points: float = 0
    running_total: float = 0
    running_diff: Optional[float] = None  # positive means ahead, in either points direction
    hole_net_total: Optional[float] = None  # this hole against the other team, two-team games
    match_result: Optional[str] = None  # win, halve, loss
    match_status: Optional[str] = None

    @property
    def junk_points(self) -> float:
        return sum(j.value for j in self.junk)


class HoleResult(BaseGolfModel):
    """Everything computed for one hole."""
    hole: int
    par: int
    stroke_index: int
    players: Dict[str, PlayerHoleResult] = Field(default_factory=dict)
    teams: Dict[str, TeamHoleResult] = Field(default_factory=dict)
    skin_winner: Optional[str] = None
    skin_value: float = 0
    possible_points: float = 0
    warnings: List[IncompleteDataWarning] = Field(default_factory=list)

    @property
    def junk_awards(self) -> List[AwardedJunk]:
        awards = [j for p in self.players.values() for j in p.junk]
        awards.extend(j for t in self.teams.values() for j in t.junk)
        return awards

    @property
    def multiplier_applications(self) -> List[MultiplierApplication]:
        applied = [m for t in self.teams.values() for m in t.multipliers]
        applied.extend(m for p in self.players.values() for m in p.multipliers)
        return applied

    @property
    def complete(self) -> bool:
        return bool(self.players) and all(p.scored for p in self.players.values())


class Split(BaseGolfModel):
    """Front nine, back nine and total. None means nothing scored there."""
    front: Optional[float] = None
    back: Optional[float] = None
    total: Optional[float] = None


class PlayerTotals(BaseGolfModel):
    player_id: str
    name: Optional[str] = None
    handicap: Optional[int] = None
    holes_played: int = 0
    gross: Split = Field(default_factory=Split)
    net: Split = Field(default_factory=Split)
    to_par: Split = Field(default_factory=Split)
    pops: int = 0
    points: Split = Field(default_factory=Split)
    skins: int = 0


class TeamTotals(BaseGolfModel):
    team_id: str
    player_ids: List[str] = Field(default_factory=list)
    points: Split = Field(default_factory=Split)
    score: Optional[float] = None
    match_status: Optional[str] = None
    match_over: bool = False


class LeaderboardEntry(BaseGolfModel):
    position: int
    id: str
    kind: str  # player or team
    name: Optional[str] = None
    value: Optional[float] = None


class Scoreboard(BaseGolfModel):
    """Read-only snapshot consumed by the display layer."""
    game_id: Optional[str] = None
    spec_name: str
    spec_type: str
    view: str
    holes: List[HoleResult] = Field(default_factory=list)
    players: Dict[str, PlayerTotals] = Field(default_factory=dict)
    teams: Dict[str, TeamTotals] = Field(default_factory=dict)
    leaderboard: List[LeaderboardEntry] = Field(default_factory=list)
    warnings: List[IncompleteDataWarning] = Field(default_factory=list)

    def get_hole(self, number: int) -> Optional[HoleResult]:
        for hole in self.holes:
            if hole.hole == number:
                return hole
        return None
