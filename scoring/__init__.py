from .aggregate import leaderboard
from .exceptions import ConfigurationError, ExpressionError, PostingError, ScoringError
from .handicap import course_handicap_for_tee, effective_handicap
from .interpreter import GameScorer, score_game
from .invalidation import InvalidationResult, detect_invalidations
from .logic import LogicContext, evaluate_condition
from .pops import allocate_pops, pops_for_tee
from .posting import PostingPayload, build_game_posting, build_posting_payload
from .results import IncompleteDataWarning, Scoreboard, WarningCode
from .settlement import PoolConfig, Settlement, player_metrics, settle

__all__ = [
    "ConfigurationError",
    "ExpressionError",
    "GameScorer",
    "IncompleteDataWarning",
    "InvalidationResult",
    "LogicContext",
    "PoolConfig",
    "PostingError",
    "PostingPayload",
    "Scoreboard",
    "ScoringError",
    "Settlement",
    "WarningCode",
    "allocate_pops",
    "build_game_posting",
    "build_posting_payload",
    "course_handicap_for_tee",
    "detect_invalidations",
    "effective_handicap",
    "evaluate_condition",
    "leaderboard",
    "player_metrics",
    "pops_for_tee",
    "score_game",
    "settle",
]
