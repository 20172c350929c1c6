"""Junk (bonus) awards for players and teams on a hole."""

import logging
import re
from dataclasses import replace
from typing import List, Optional, Tuple

from models import JunkOption
from scoring.exceptions import ExpressionError
from scoring.logic import LogicContext, evaluate_condition
from scoring.results import AwardedJunk, HoleResult, PlayerHoleResult, TeamHoleResult
from scoring.teams import team_score

logger = logging.getLogger(__name__)

SCORE_TO_PAR_PATTERN = re.compile(r"^\s*(exactly|at_most|at_least)?\s*([+-]?\d+)\s*$")

ONE_TEAM_PER_GROUP = "one_team_per_group"


def parse_score_to_par(text: str) -> Tuple[str, int]:
    """'exactly -1' -> ('exactly', -1). A bare number means exactly."""
    match = SCORE_TO_PAR_PATTERN.match(text or "")
    if not match:
        raise ExpressionError(f"Invalid score_to_par '{text}'")
    return match.group(1) or "exactly", int(match.group(2))


def score_to_par_matches(condition: str, to_par: Optional[int]) -> bool:
    if to_par is None:
        return False
    kind, target = parse_score_to_par(condition)
    if kind == "at_most":
        return to_par <= target
    if kind == "at_least":
        return to_par >= target
    return to_par == target


def player_earns(junk: JunkOption, player: PlayerHoleResult, ctx: LogicContext) -> bool:
    """
    Whether a player earns a junk on the hole.

    A manual true/false value named after the junk decides outright.
    Junk based on user input needs that value. Everything else needs a
    gross score and then checks score_to_par or the logic expression.
    """
    flag = player.score.flags.get(junk.name)
    if flag is False:
        return False
    if flag is True:
        earned = True
    elif junk.based_on == "user" or not player.scored:
        return False
    elif junk.score_to_par:
        earned = score_to_par_matches(junk.score_to_par, player.score.value_to_par(junk.based_on))
    elif junk.logic:
        earned = evaluate_condition(junk.logic, ctx, default=False)
    else:
        earned = False
    return earned and evaluate_condition(junk.availability, ctx)


def award_player_junk(junk: JunkOption, hole: HoleResult, base: LogicContext) -> List[AwardedJunk]:
    awards = []
    for player in hole.players.values():
        team = hole.teams.get(player.team_id) if player.team_id else None
        ctx = replace(base, player=player, team=team, option=junk.name)
        if player_earns(junk, player, ctx):
            awards.append(AwardedJunk(name=junk.name, value=junk.value, player_id=player.player_id, team_id=player.team_id))
    return awards


def _team_value(junk: JunkOption, team: TeamHoleResult, hole: HoleResult) -> Optional[float]:
    based_on = "net" if junk.based_on == "net" else "gross"
    scores = [hole.players[p].score.value(based_on) for p in team.player_ids if p in hole.players]
    return team_score(junk.calculation, scores)


def award_team_junk(junk: JunkOption, hole: HoleResult, base: LogicContext) -> List[AwardedJunk]:
    """
    Team junk. With a calculation (best_ball, sum...) the best team wins;
    a tie under the one_team_per_group limit is a push. With a logic
    expression every team passing it wins. Otherwise a team wins when any
    member earns the junk.
    """
    teams = list(hole.teams.values())
    if not teams:
        return []

    if junk.calculation and junk.calculation != "logic":
        if not hole.complete:
            return []
        values = {t.team_id: _team_value(junk, t, hole) for t in teams}
        scored = [v for v in values.values() if v is not None]
        if not scored:
            return []
        best = min(scored) if junk.better == "lower" else max(scored)
        winners = [t for t in teams if values[t.team_id] == best]
        if len(winners) > 1 and junk.limit == ONE_TEAM_PER_GROUP:
            logger.debug("Hole %s: %s pushed between %s", hole.hole, junk.name, [t.team_id for t in winners])
            return []
    elif junk.logic:
        winners = [
            t for t in teams
            if evaluate_condition(junk.logic, replace(base, team=t, option=junk.name), default=False)
        ]
    else:
        winners = [
            t for t in teams
            if any(
                player_earns(junk, hole.players[p], replace(base, team=t, player=hole.players[p], option=junk.name))
                for p in t.player_ids if p in hole.players
            )
        ]

    return [
        AwardedJunk(name=junk.name, value=junk.value, team_id=t.team_id)
        for t in winners
        if evaluate_condition(junk.availability, replace(base, team=t, option=junk.name))
    ]
