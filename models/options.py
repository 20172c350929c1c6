from pydantic import Field
from typing import List, Literal, Optional, Union

from .base import BaseGolfModel

OptionScope = Literal["hole", "front", "back", "total", "rest_of_nine", "game"]


class Choice(BaseGolfModel):
    """Choice for menu-type game options."""
    name: str
    disp: str


class GameOption(BaseGolfModel):
    """Global toggle or value for a game, e.g. handicap mode or carryover."""
    name: str
    disp: str
    type: Literal["game"] = "game"
    value_type: Literal["bool", "num", "menu", "text"] = "text"
    choices: List[Choice] = Field(default_factory=list)
    default_value: str = ""
    value: Optional[str] = None
    seq: Optional[int] = None
    scope: OptionScope = "total"
    team_only: bool = False

    @property
    def raw_value(self) -> str:
        return self.value if self.value is not None else self.default_value

    def typed_value(self, raw: Optional[str] = None) -> Union[bool, float, str]:
        """Convert a raw string value according to value_type."""
        raw = self.raw_value if raw is None else raw
        if self.value_type == "bool":
            return raw.strip().lower() in ("true", "1")
        if self.value_type == "num":
            try:
                return float(raw)
            except ValueError:
                return 0.0
        return raw


class JunkOption(BaseGolfModel):
    """Bonus points or skins awarded on a hole, e.g. birdie, sandy, low ball."""
    name: str
    disp: str
    type: Literal["junk"] = "junk"
    sub_type: Literal["dot", "skin", "carryover"] = "dot"
    value: float = 1
    seq: Optional[int] = None
    scope: OptionScope = "hole"
    awarded_to: Literal["player", "team"] = "player"
    based_on: Literal["gross", "net", "user"] = "gross"
    score_to_par: Optional[str] = None      # "exactly -1", "at_most -2"
    calculation: Optional[str] = None       # best_ball, sum, worst_ball, average, logic
    logic: Optional[str] = None
    availability: Optional[str] = None
    better: Literal["lower", "higher"] = "lower"
    limit: Optional[str] = None
    enabled: bool = True


class MultiplierOption(BaseGolfModel):
    """Adjustment applied to a hole's point total, e.g. press, double, birdie BBQ."""
    name: str
    disp: str
    type: Literal["multiplier"] = "multiplier"
    sub_type: Literal["bbq", "press", "automatic"] = "press"
    value: Optional[float] = None
    value_from: Optional[str] = None  # numeric expression giving the value
    input_value: bool = False         # value comes from the activation on the hole
    seq: Optional[int] = None
    based_on: Optional[str] = None    # "user" or the name of a junk that triggers it
    scope: OptionScope = "hole"
    availability: Optional[str] = None
    calculation: Optional[str] = None  # combination strategy, overrides the game spec default
    enabled: bool = True

    @property
    def user_activated(self) -> bool:
        return self.based_on == "user"
