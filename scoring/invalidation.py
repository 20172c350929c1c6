"""
User multipliers made invalid by an edit to an earlier hole.

A press entered on a later hole was available when it was entered. After
an earlier score changes, the rescored game may no longer allow it: the
scorer then leaves it off, and this module reports the stale entries so
they can be removed from the game holes.
"""

import logging
from dataclasses import fields, is_dataclass
from pydantic import Field, computed_field
from typing import Dict, Iterator, List, Set, Tuple

from models import Game, MultiplierOption
from models.base import BaseGolfModel
from scoring.exceptions import ExpressionError
from scoring.interpreter import GameScorer
from scoring.logic import Accessor, Const, parse_expression
from scoring.results import Scoreboard

logger = logging.getLogger(__name__)

NO_LONGER_AVAILABLE = "Availability condition no longer met"
MULTIPLICATIVE = ("multiply", "multiplicative")


class InvalidatedMultiplier(BaseGolfModel):
    hole: int
    team_id: str
    name: str
    disp: str
    reason: str


class ScoreImpact(BaseGolfModel):
    """A team's points now, and once the invalidated multipliers are gone."""
    team_id: str
    current_total: float
    projected_total: float


class InvalidationResult(BaseGolfModel):
    items: List[InvalidatedMultiplier] = Field(default_factory=list)
    score_impact: List[ScoreImpact] = Field(default_factory=list)

    @computed_field
    @property
    def has_invalidations(self) -> bool:
        return bool(self.items)


def _children(node) -> Iterator:
    for f in fields(node):
        value = getattr(node, f.name)
        if isinstance(value, tuple):
            yield from (item for item in value if is_dataclass(item))
        elif is_dataclass(value):
            yield value


def _references(node, name: str) -> bool:
    if isinstance(node, Accessor) and node.name == "other_team_multiplied_with":
        if any(isinstance(arg, Const) and arg.value == name for arg in node.args):
            return True
    return any(_references(child, name) for child in _children(node))


def depends_on(option: MultiplierOption, name: str) -> bool:
    """True when the option's availability needs another team to have `name`."""
    if not option.availability:
        return False
    try:
        return _references(parse_expression(option.availability), name)
    except ExpressionError:
        return False


def detect_invalidations(game: Game, edited_hole: int) -> InvalidationResult:
    """
    Rescore the game and check every user multiplier entered after the
    edited hole.

    A multiplier whose availability no longer holds is reported once, on
    the hole it was entered. Multipliers on the same hole that were only
    available because another team took an invalidated one are reported
    with it.
    """
    scorer = GameScorer(game)
    board = scorer.score()
    if edited_hole not in scorer.numbers:
        return InvalidationResult(score_impact=_score_impact(board, [], {}))

    checked = {
        m.name: m for m in scorer.spec.multipliers
        if m.user_activated and m.availability and m.name not in scorer.multipliers_skipped
    }
    later = scorer.numbers[scorer.numbers.index(edited_hole) + 1:]

    items: List[InvalidatedMultiplier] = []
    for number in later:
        game_hole = scorer.game.get_hole(number)
        result = board.get_hole(number)
        if game_hole is None or result is None:
            continue
        enabled = {m.name: m for m in scorer.options.multipliers_for_hole(number) if m.name in checked}
        for instance in game_hole.multipliers:
            option = enabled.get(instance.name)
            if option is None:
                continue
            team_ids = [instance.team_id] if instance.team_id else list(result.teams)
            for team_id in team_ids:
                team = result.teams.get(team_id)
                if team is None or any(m.name == option.name for m in team.multipliers):
                    continue
                items.append(InvalidatedMultiplier(
                    hole=number, team_id=team_id, name=option.name, disp=option.disp, reason=NO_LONGER_AVAILABLE,
                ))

    items.extend(_dependents(scorer, items, list(checked.values())))
    if items:
        logger.info("Edit to hole %s invalidates %s multiplier(s)", edited_hole, len(items))
    scopes = {m.name: m.scope for m in scorer.spec.multipliers}
    return InvalidationResult(items=items, score_impact=_score_impact(board, items, scopes))


def _dependents(
    scorer: GameScorer,
    invalidated: List[InvalidatedMultiplier],
    options: List[MultiplierOption],
) -> List[InvalidatedMultiplier]:
    found: List[InvalidatedMultiplier] = []
    seen: Set[Tuple[int, str, str]] = {(i.hole, i.team_id, i.name) for i in invalidated}
    for item in invalidated:
        game_hole = scorer.game.get_hole(item.hole)
        for dependent in (m for m in options if depends_on(m, item.name)):
            for instance in game_hole.multipliers:
                if instance.name != dependent.name or instance.team_id in (None, item.team_id):
                    continue
                key = (item.hole, instance.team_id, dependent.name)
                if key in seen:
                    continue
                seen.add(key)
                found.append(InvalidatedMultiplier(
                    hole=item.hole,
                    team_id=instance.team_id,
                    name=dependent.name,
                    disp=dependent.disp,
                    reason=f"Depends on team {item.team_id}'s {item.disp}",
                ))
    return found


def _covers(item: InvalidatedMultiplier, scope: str, hole: int) -> bool:
    if scope == "game":
        return hole >= item.hole
    if scope == "rest_of_nine":
        return hole >= item.hole and (hole <= 9) == (item.hole <= 9)
    return hole == item.hole


def _score_impact(
    board: Scoreboard,
    items: List[InvalidatedMultiplier],
    scopes: Dict[str, str],
) -> List[ScoreImpact]:
    """
    Estimated totals without the invalidated multipliers. A removed
    multiplicative factor takes points * (1 - 1/factor) off the hole; an
    additive one takes its value.
    """
    deltas: Dict[str, float] = {}
    for hole in board.holes:
        for team in hole.teams.values():
            removed = {
                i.name for i in items
                if i.team_id == team.team_id and _covers(i, scopes.get(i.name, "hole"), hole.hole)
            }
            factor, added = 1.0, 0.0
            for application in team.multipliers:
                if application.name not in removed:
                    continue
                if application.calculation in MULTIPLICATIVE:
                    factor *= application.value
                else:
                    added += application.value
            delta = added
            if factor > 1:
                delta += team.points * (1 - 1 / factor)
            if delta:
                deltas[team.team_id] = deltas.get(team.team_id, 0.0) + delta

    impact = []
    for team_id, totals in board.teams.items():
        current = totals.points.total or 0.0
        impact.append(ScoreImpact(
            team_id=team_id,
            current_total=current,
            projected_total=round(current - deltas.get(team_id, 0.0), 2),
        ))
    return impact
