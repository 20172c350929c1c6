"""Multiplier activation and application on a hole."""

import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence, Tuple, Union

from models import GameHole, MultiplierOption, ScoringRules
from scoring.combine import combine
from scoring.logic import LogicContext, evaluate_condition, evaluate_number
from scoring.results import HoleResult, MultiplierApplication, PlayerHoleResult, TeamHoleResult

logger = logging.getLogger(__name__)

DEFAULT_MULTIPLIER = 2.0

Subject = Union[TeamHoleResult, PlayerHoleResult]


@dataclass
class Activation:
    """A user-activated multiplier that stays on past its activation hole."""
    name: str
    team_id: Optional[str]
    value: Optional[float]
    scope: str
    hole: int

    def covers(self, hole: int) -> bool:
        if self.scope == "game":
            return True
        if self.scope == "rest_of_nine":
            return (self.hole <= 9) == (hole <= 9)
        return False

    def applies_to(self, subject_id: str) -> bool:
        return self.team_id is None or self.team_id == subject_id


class MultiplierTracker:
    """Carries rest_of_nine and game-scope activations across holes."""

    def __init__(self):
        self.carried: List[Activation] = []

    def active(self, name: str, subject_id: str, hole: int) -> Optional[Activation]:
        for activation in self.carried:
            if activation.name == name and activation.applies_to(subject_id) and activation.covers(hole):
                return activation
        return None

    def carry(self, activation: Activation) -> None:
        self.carried.append(activation)


def subject_id(subject: Subject) -> str:
    return subject.team_id if isinstance(subject, TeamHoleResult) else subject.player_id


def triggering_junk_count(name: str, subject: Subject, hole: HoleResult) -> int:
    count = sum(1 for j in subject.junk if j.name == name)
    if isinstance(subject, TeamHoleResult):
        for player_id in subject.player_ids:
            player = hole.players.get(player_id)
            if player is not None:
                count += sum(1 for j in player.junk if j.name == name)
    return count


def junk_total(subject: Subject, hole: HoleResult) -> float:
    """Junk points inside a subject's total, counting team members' awards for a team."""
    total = subject.junk_points
    if isinstance(subject, TeamHoleResult):
        for player_id in subject.player_ids:
            player = hole.players.get(player_id)
            if player is not None:
                total += player.junk_points
    return total


def resolve_value(option: MultiplierOption, entered: Optional[float], ctx: LogicContext) -> float:
    """Entered value (input_value multipliers), then value_from, then the declared value."""
    if option.input_value and entered is not None:
        return entered
    if option.value_from:
        computed = evaluate_number(option.value_from, ctx)
        if computed is not None:
            return computed
    if option.value is not None:
        return option.value
    return DEFAULT_MULTIPLIER


def apply_multipliers(
    hole: HoleResult,
    subjects: Sequence[Subject],
    options: Sequence[MultiplierOption],
    game_hole: Optional[GameHole],
    tracker: MultiplierTracker,
    rules: ScoringRules,
    base: LogicContext,
) -> None:
    """
    Apply multipliers to each subject's points, in declared order.

    subject.points must already hold the pre-multiplier total (base plus
    junk). Expressions see that as team.points / player.points, and the
    running total as `points`. Each multiplier folds into the running
    total with its own calculation or the game spec's combination rule.
    """
    instances = game_hole.multipliers if game_hole else []
    activated: Dict[Optional[str], Tuple[str, ...]] = {}
    for m in instances:
        activated[m.team_id] = activated.get(m.team_id, ()) + (m.name,)
    base = replace(base, activated=activated)

    for subject in subjects:
        ident = subject_id(subject)
        pre = subject.points or 0
        junk_points = junk_total(subject, hole)
        total = pre if rules.junk_multiplied else pre - junk_points

        for option in options:
            ctx = replace(
                base,
                team=subject if isinstance(subject, TeamHoleResult) else base.team,
                player=subject if isinstance(subject, PlayerHoleResult) else None,
                option=option.name,
                points=total,
                pre_multiplier_points=pre,
            )

            if option.user_activated:
                instance = next(
                    (m for m in instances if m.name == option.name and (m.team_id is None or m.team_id == ident)),
                    None,
                )
                if instance is not None:
                    if not evaluate_condition(option.availability, ctx):
                        logger.debug("Hole %s: %s not available to %s", hole.hole, option.name, ident)
                        continue
                    entered = instance.value
                    if option.scope in ("rest_of_nine", "game"):
                        tracker.carry(Activation(option.name, ident, entered, option.scope, hole.hole))
                else:
                    carried = tracker.active(option.name, ident, hole.hole)
                    if carried is None:
                        continue
                    entered = carried.value
            else:
                if option.based_on and triggering_junk_count(option.based_on, subject, hole) == 0:
                    continue
                if not evaluate_condition(option.availability, ctx):
                    continue
                entered = None

            value = resolve_value(option, entered, ctx)
            strategy = option.calculation or rules.multiplier_combination
            before = total
            total = combine(strategy, total, value)
            subject.multipliers.append(MultiplierApplication(
                name=option.name,
                value=value,
                calculation=strategy,
                player_id=subject.player_id if isinstance(subject, PlayerHoleResult) else None,
                team_id=subject.team_id,
                before=before,
                after=total,
            ))

        subject.points = total if rules.junk_multiplied else total + junk_points
