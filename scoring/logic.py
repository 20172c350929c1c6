"""
Availability expression language.

Expressions are stored on junk and multiplier options as json-logic style
strings, usually written with single quotes:

    {'and': [{'team_down_the_most': [{'getPrevHole': []}, {'var': 'team'}]},
             {'>=': [{'var': 'points'}, 2]}]}

They are parsed once into a small tree of frozen nodes (And, Or, Not,
Compare, Arith, Var, Accessor, Const) and evaluated against a LogicContext.
Evaluation has no side effects. Anything malformed or unknown evaluates to
False instead of raising.
"""

from __future__ import annotations

import json
import logging
import operator
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel

from scoring.exceptions import ExpressionError
from scoring.results import HoleResult, PlayerHoleResult, TeamHoleResult

logger = logging.getLogger(__name__)

MAX_DEPTH = 32
MAX_LENGTH = 4096


# ================================================================
# Expression tree
# ================================================================

@dataclass(frozen=True)
class Const:
    value: Any


@dataclass(frozen=True)
class Seq:
    items: Tuple[Any, ...]


@dataclass(frozen=True)
class Var:
    path: str
    default: Any = None


@dataclass(frozen=True)
class And:
    items: Tuple[Any, ...]


@dataclass(frozen=True)
class Or:
    items: Tuple[Any, ...]


@dataclass(frozen=True)
class Not:
    item: Any


@dataclass(frozen=True)
class Compare:
    op: str
    left: Any
    right: Any


@dataclass(frozen=True)
class Arith:
    op: str
    items: Tuple[Any, ...]


@dataclass(frozen=True)
class Accessor:
    name: str
    args: Tuple[Any, ...]


@dataclass(frozen=True)
class LogicContext:
    """Everything an expression may read while scoring one hole."""
    hole: HoleResult
    previous: Optional[HoleResult] = None
    team: Optional[TeamHoleResult] = None
    player: Optional[PlayerHoleResult] = None
    option: Optional[str] = None
    possible_points: float = 0
    points: float = 0
    pre_multiplier_points: float = 0
    better: str = "higher"
    activated: Mapping[Optional[str], Tuple[str, ...]] = field(default_factory=dict)  # user multipliers entered on the hole, by team id
    variables: Mapping[str, Any] = field(default_factory=dict)


COMPARISONS: Dict[str, Callable[[Any, Any], bool]] = {
    "==": operator.eq,
    "===": operator.eq,
    "!=": operator.ne,
    "!==": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}

ARITHMETIC: Dict[str, Callable[[float, float], float]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
}


# ================================================================
# Accessors
# ================================================================

def _sorted_by_running_total(hole: HoleResult, better: str):
    teams = list(hole.teams.values())
    # Worst team first: lowest total when higher points win.
    return sorted(teams, key=lambda t: t.running_total, reverse=(better == "lower"))


def _resolve_team(ctx: LogicContext, team: Any) -> Optional[TeamHoleResult]:
    if isinstance(team, TeamHoleResult):
        return team
    if isinstance(team, str):
        return _team_by_ref(ctx, team)
    return ctx.team


def _team_by_ref(ctx: LogicContext, ref: str) -> Optional[TeamHoleResult]:
    if ref == "this":
        return ctx.team
    if ref == "other":
        if ctx.team is None:
            return None
        return next((t for t in ctx.hole.teams.values() if t.team_id != ctx.team.team_id), None)
    return ctx.hole.teams.get(ref)


def get_prev_hole(ctx: LogicContext, *_) -> Optional[HoleResult]:
    return ctx.previous


def get_curr_hole(ctx: LogicContext, *_) -> HoleResult:
    return ctx.hole


def team(ctx: LogicContext, ref: str = "this", *_) -> Optional[TeamHoleResult]:
    return _team_by_ref(ctx, ref)


def team_down_the_most(ctx: LogicContext, hole: Optional[HoleResult] = None, which: Any = None, *_) -> bool:
    """True for the team trailing by the most after the given hole.

    Every team qualifies before the first hole and when all are level.
    """
    current = _resolve_team(ctx, which)
    if hole is None or current is None:
        return True
    if not isinstance(hole, HoleResult):
        raise ExpressionError("team_down_the_most expects a hole")
    ordered = _sorted_by_running_total(hole, ctx.better)
    if len(ordered) < 2:
        return True
    if all(t.running_total == ordered[0].running_total for t in ordered):
        return True
    return ordered[0].team_id == current.team_id


def team_second_to_last(ctx: LogicContext, hole: Optional[HoleResult] = None, which: Any = None, *_) -> bool:
    current = _resolve_team(ctx, which)
    if hole is None or current is None:
        return False
    if not isinstance(hole, HoleResult):
        raise ExpressionError("team_second_to_last expects a hole")
    ordered = _sorted_by_running_total(hole, ctx.better)
    if len(ordered) < 2:
        return False
    return ordered[1].team_id == current.team_id


def other_team_multiplied_with(ctx: LogicContext, hole: Optional[HoleResult], which: Any, name: str, *_) -> bool:
    current = _resolve_team(ctx, which)
    hole = hole if isinstance(hole, HoleResult) else ctx.hole
    if current is None:
        return False
    for other in hole.teams.values():
        if other.team_id == current.team_id:
            continue
        if any(m.name == name for m in other.multipliers):
            return True
        if hole is ctx.hole and name in ctx.activated.get(other.team_id, ()):
            return True
    return False


def count_junk(ctx: LogicContext, target: Any, name: str, *_) -> int:
    """Junk awards on a team (including its players' awards) or a player."""
    if isinstance(target, str):
        target = _team_by_ref(ctx, target)
    if isinstance(target, PlayerHoleResult):
        return sum(1 for j in target.junk if j.name == name)
    if isinstance(target, TeamHoleResult):
        count = sum(1 for j in target.junk if j.name == name)
        for player_id in target.player_ids:
            player = ctx.hole.players.get(player_id)
            if player is not None:
                count += sum(1 for j in player.junk if j.name == name)
        return count
    return 0


def rank_with_ties(ctx: LogicContext, rank: int, tie_count: int, *_) -> bool:
    subject = ctx.team if ctx.team is not None else ctx.player
    if subject is None or subject.rank is None:
        return False
    return subject.rank == rank and subject.tie_count == tie_count


def players_on_team(ctx: LogicContext, ref: str = "this", *_) -> int:
    found = _team_by_ref(ctx, ref)
    return len(found.player_ids) if found else 0


def hole_par(ctx: LogicContext, *_) -> int:
    return ctx.hole.par


def par_or_better(ctx: LogicContext, based_on: str = "gross", *_) -> bool:
    """Current player, or any player on the current team, made par or better."""
    if ctx.player is not None:
        players = [ctx.player]
    elif ctx.team is not None:
        players = [ctx.hole.players[p] for p in ctx.team.player_ids if p in ctx.hole.players]
    else:
        return False
    for player in players:
        to_par = player.score.value_to_par(based_on)
        if to_par is not None and to_par <= 0:
            return True
    return False


def existing_pre_multiplier_total(ctx: LogicContext, hole: Any = None, threshold: float = 0, *_) -> bool:
    if isinstance(hole, (int, float)) and not isinstance(hole, bool):
        threshold = hole
    return ctx.pre_multiplier_points >= threshold


ACCESSORS: Dict[str, Callable[..., Any]] = {
    "getPrevHole": get_prev_hole,
    "prev_hole": get_prev_hole,
    "getCurrHole": get_curr_hole,
    "curr_hole": get_curr_hole,
    "team": team,
    "team_down_the_most": team_down_the_most,
    "team_second_to_last": team_second_to_last,
    "other_team_multiplied_with": other_team_multiplied_with,
    "countJunk": count_junk,
    "count_junk": count_junk,
    "rankWithTies": rank_with_ties,
    "rank_with_ties": rank_with_ties,
    "playersOnTeam": players_on_team,
    "players_on_team": players_on_team,
    "holePar": hole_par,
    "hole_par": hole_par,
    "parOrBetter": par_or_better,
    "par_or_better": par_or_better,
    "existingPreMultiplierTotal": existing_pre_multiplier_total,
    "existing_pre_multiplier_total": existing_pre_multiplier_total,
}


# ================================================================
# Parsing
# ================================================================

def _loads(text: str) -> Any:
    """JSON, or the single-quoted form stored in game specs."""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return json.loads(text.replace("'", '"'))


def _args(raw: Any) -> list:
    return raw if isinstance(raw, list) else [raw]


def _build(data: Any, depth: int = 0):
    if depth > MAX_DEPTH:
        raise ExpressionError("Expression nested too deeply")
    if data is None or isinstance(data, (bool, int, float, str)):
        return Const(data)
    if isinstance(data, list):
        return Seq(tuple(_build(item, depth + 1) for item in data))
    if not isinstance(data, dict) or len(data) != 1:
        raise ExpressionError(f"Expected a single-operator object, got {data!r}")

    (op, raw_args), = data.items()
    args = _args(raw_args)

    if op == "var":
        if not args or not isinstance(args[0], str):
            raise ExpressionError("var needs a name")
        return Var(args[0], args[1] if len(args) > 1 else None)
    if op == "and":
        return And(tuple(_build(a, depth + 1) for a in args))
    if op == "or":
        return Or(tuple(_build(a, depth + 1) for a in args))
    if op in ("not", "!"):
        if len(args) != 1:
            raise ExpressionError(f"{op} takes one argument")
        return Not(_build(args[0], depth + 1))
    if op in COMPARISONS:
        if len(args) != 2:
            raise ExpressionError(f"{op} takes two arguments")
        return Compare(op, _build(args[0], depth + 1), _build(args[1], depth + 1))
    if op in ARITHMETIC:
        if not args:
            raise ExpressionError(f"{op} needs arguments")
        return Arith(op, tuple(_build(a, depth + 1) for a in args))
    if op in ACCESSORS:
        return Accessor(op, tuple(_build(a, depth + 1) for a in args))
    raise ExpressionError(f"Unknown accessor '{op}'")


@lru_cache(maxsize=512)
def parse_expression(text: str):
    """Parse an expression string into a tree. Raises ExpressionError."""
    if not isinstance(text, str) or not text.strip():
        raise ExpressionError("Empty expression")
    if len(text) > MAX_LENGTH:
        raise ExpressionError(f"Expression longer than {MAX_LENGTH} characters")
    try:
        data = _loads(text)
    except RecursionError as e:
        raise ExpressionError("Expression nested too deeply") from e
    except ValueError as e:
        raise ExpressionError(f"Invalid expression syntax: {getattr(e, 'msg', e)}") from e
    return _build(data)


def expression_error(text: Optional[str]) -> Optional[str]:
    """Reason an expression cannot be used, or None if it parses."""
    if not text:
        return None
    try:
        parse_expression(text)
    except ExpressionError as e:
        return str(e)
    return None


# ================================================================
# Evaluation
# ================================================================

def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _lookup(ctx: LogicContext, path: str, default: Any) -> Any:
    roots = {
        "team": ctx.team,
        "player": ctx.player,
        "team_id": ctx.team.team_id if ctx.team else None,
        "player_id": ctx.player.player_id if ctx.player else None,
        "hole": ctx.hole.hole,
        "par": ctx.hole.par,
        "option": ctx.option,
        "possiblePoints": ctx.possible_points,
        "possible_points": ctx.possible_points,
        "points": ctx.points,
        "pre_multiplier_points": ctx.pre_multiplier_points,
    }
    roots.update(ctx.variables)

    head, _, rest = path.partition(".")
    value = roots.get(head)
    for part in rest.split(".") if rest else []:
        if value is None:
            break
        if isinstance(value, BaseModel):
            value = getattr(value, part, None)
        elif isinstance(value, Mapping):
            value = value.get(part)
        else:
            value = None
    return default if value is None else value


def evaluate(node, ctx: LogicContext) -> Any:
    """Evaluate a parsed tree. Raises ExpressionError on type problems."""
    if isinstance(node, Const):
        return node.value
    if isinstance(node, Seq):
        return [evaluate(item, ctx) for item in node.items]
    if isinstance(node, Var):
        return _lookup(ctx, node.path, node.default)
    if isinstance(node, And):
        result: Any = True
        for item in node.items:
            result = evaluate(item, ctx)
            if not result:
                return result
        return result
    if isinstance(node, Or):
        result = False
        for item in node.items:
            result = evaluate(item, ctx)
            if result:
                return result
        return result
    if isinstance(node, Not):
        return not evaluate(node.item, ctx)
    if isinstance(node, Compare):
        left = evaluate(node.left, ctx)
        right = evaluate(node.right, ctx)
        if node.op in ("<", "<=", ">", ">=") and not (_is_number(left) and _is_number(right)):
            raise ExpressionError(f"Cannot compare {left!r} {node.op} {right!r}")
        return COMPARISONS[node.op](left, right)
    if isinstance(node, Arith):
        values = [evaluate(item, ctx) for item in node.items]
        if not all(_is_number(v) for v in values):
            raise ExpressionError(f"Non-numeric operand for {node.op}: {values!r}")
        if node.op == "-" and len(values) == 1:
            return -values[0]
        result = values[0]
        for value in values[1:]:
            result = ARITHMETIC[node.op](result, value)
        return result
    if isinstance(node, Accessor):
        args = [evaluate(arg, ctx) for arg in node.args]
        try:
            return ACCESSORS[node.name](ctx, *args)
        except TypeError as e:
            raise ExpressionError(f"Bad arguments for {node.name}: {e}") from e
    raise ExpressionError(f"Unknown node {node!r}")


def evaluate_condition(text: Optional[str], ctx: LogicContext, default: bool = True) -> bool:
    """
    Evaluate a condition string to a boolean.

    Empty conditions return `default`. Malformed expressions and unknown
    accessors return False.
    """
    if not text:
        return default
    try:
        return bool(evaluate(parse_expression(text), ctx))
    except ExpressionError as e:
        logger.warning("Condition for %s failed closed on hole %s: %s", ctx.option, ctx.hole.hole, e)
        return False


def evaluate_number(text: Optional[str], ctx: LogicContext) -> Optional[float]:
    """Evaluate a numeric expression, or None if it is missing or malformed."""
    if not text:
        return None
    try:
        value = evaluate(parse_expression(text), ctx)
    except ExpressionError as e:
        logger.warning("Value expression for %s failed on hole %s: %s", ctx.option, ctx.hole.hole, e)
        return None
    if isinstance(value, bool) or not _is_number(value):
        return None
    return float(value)
