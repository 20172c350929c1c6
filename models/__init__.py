from .base import BaseGolfModel
from .game import Game, GameHole, HoleMultiplier, OptionOverride, Team
from .gamespec import GameSpec, RankPoints, ScoringRules, TeamsConfig
from .options import Choice, GameOption, JunkOption, MultiplierOption
from .player import Player
from .round import Round, RoundToGame, parse_handicap_index
from .score import Score, ScoreValue
from .tee import Tee, TeeHole, TeeRating, TeeRatings

__all__ = [
    "BaseGolfModel",
    "Choice",
    "Game",
    "GameHole",
    "GameOption",
    "GameSpec",
    "HoleMultiplier",
    "JunkOption",
    "MultiplierOption",
    "OptionOverride",
    "Player",
    "RankPoints",
    "Round",
    "RoundToGame",
    "Score",
    "ScoreValue",
    "ScoringRules",
    "Team",
    "TeamsConfig",
    "Tee",
    "TeeHole",
    "TeeRating",
    "TeeRatings",
    "parse_handicap_index",
]
