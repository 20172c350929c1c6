"""Per-hole team assignment and team score calculations."""

import logging
from typing import Callable, Dict, List, Optional, Sequence

from models import Game, GameSpec, Team
from scoring.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def _best_ball(scores: Sequence[Optional[int]]) -> Optional[float]:
    scored = [s for s in scores if s is not None]
    return min(scored) if scored else None


def _worst_ball(scores: Sequence[Optional[int]]) -> Optional[float]:
    scored = [s for s in scores if s is not None]
    return max(scored) if scored else None


def _sum(scores: Sequence[Optional[int]]) -> Optional[float]:
    if not scores or any(s is None for s in scores):
        return None
    return sum(scores)


def _average(scores: Sequence[Optional[int]]) -> Optional[float]:
    total = _sum(scores)
    return total / len(scores) if total is not None else None


TEAM_CALCULATIONS: Dict[str, Callable[[Sequence[Optional[int]]], Optional[float]]] = {
    "best_ball": _best_ball,
    "low_ball": _best_ball,
    "worst_ball": _worst_ball,
    "sum": _sum,
    "total": _sum,
    "average": _average,
}


def team_score(method: str, scores: Sequence[Optional[int]]) -> Optional[float]:
    """
    Combine member scores into one team score.

    best_ball/worst_ball use whichever members scored; sum and average
    need every member to have scored, otherwise the result is None.
    """
    try:
        calculation = TEAM_CALCULATIONS[method]
    except KeyError:
        raise ConfigurationError(f"Unknown team calculation '{method}'") from None
    return calculation(scores)


def uses_teams(spec: GameSpec) -> bool:
    return spec.teams.teams


def validate_team_config(spec: GameSpec, player_ids: Sequence[str]) -> None:
    """Raise ConfigurationError when the team setup cannot fit the players."""
    config = spec.teams
    if not config.teams:
        return
    if config.team_size and len(player_ids) % config.team_size != 0:
        raise ConfigurationError(
            f"{spec.name}: {len(player_ids)} players cannot be split into teams of {config.team_size}"
        )
    if config.team_size and config.team_count and len(player_ids) > config.team_size * config.team_count:
        raise ConfigurationError(
            f"{spec.name}: {len(player_ids)} players exceed {config.team_count} teams of {config.team_size}"
        )


def validate_hole_teams(spec: GameSpec, teams: Sequence[Team], player_ids: Sequence[str], hole: int) -> None:
    seen: Dict[str, str] = {}
    for team in teams:
        if spec.teams.team_size and len(team.player_ids) > spec.teams.team_size:
            raise ConfigurationError(
                f"Hole {hole}: team {team.id} has {len(team.player_ids)} players, "
                f"team size is {spec.teams.team_size}"
            )
        for player_id in team.player_ids:
            if player_id not in player_ids:
                raise ConfigurationError(f"Hole {hole}: team {team.id} has unknown player {player_id}")
            if player_id in seen:
                raise ConfigurationError(
                    f"Hole {hole}: player {player_id} is on teams {seen[player_id]} and {team.id}"
                )
            seen[player_id] = team.id


def resolve_teams(game: Game, spec: GameSpec, numbers: Sequence[int], index: int) -> Optional[List[Team]]:
    """
    Teams in effect for the hole at position `index` of the play order.

    An explicit team list on the hole always wins. Otherwise the latest
    earlier assignment carries forward, but only within the current
    rotation period when team_change_every is set. Returns None when
    teams are in use and nobody has been assigned yet.
    """
    if not uses_teams(spec):
        return []

    every = spec.teams.team_change_every
    start = (index // every) * every if every else 0

    for position in range(index, start - 1, -1):
        hole = game.get_hole(numbers[position])
        if hole is not None and hole.teams:
            if position != index:
                logger.debug("Hole %s uses teams from hole %s", numbers[index], numbers[position])
            return list(hole.teams)
    return None


def team_of(teams: Sequence[Team], player_id: str) -> Optional[str]:
    for team in teams:
        if player_id in team.player_ids:
            return team.id
    return None


def match_sides(spec: GameSpec, teams: Optional[Sequence[Team]], player_ids: Sequence[str]) -> List[Team]:
    """The two sides of a match: the hole's teams, or one side per player."""
    if uses_teams(spec):
        sides = list(teams or [])
    else:
        sides = [Team(id=player_id, player_ids=[player_id]) for player_id in player_ids]
    if sides and len(sides) != 2:
        raise ConfigurationError(f"{spec.name}: match play needs exactly two sides, got {len(sides)}")
    return sides
