"""
Game spec interpreter.

Runs a game's holes in ascending order through: team assignment,
score normalization, the game spec type's base scoring (points, skins or
match play), ranks, junk, multipliers and running totals. The result is a
Scoreboard, rebuilt from scratch on every call.
"""

import logging
from dataclasses import replace
from typing import Dict, List, Optional

from models import Game, GameSpec, Tee, Team
from scoring.aggregate import build_scoreboard
from scoring.combine import get_combination
from scoring.exceptions import ConfigurationError, ExpressionError
from scoring.handicap import adjust_to_low, effective_handicap
from scoring.junk import award_player_junk, award_team_junk, parse_score_to_par
from scoring.logic import LogicContext, expression_error
from scoring.multipliers import MultiplierTracker, apply_multipliers
from scoring.normalize import normalize_score, score_type
from scoring.options import OptionSet
from scoring.pops import allocate_pops, check_stroke_indices, pops_for_tee, scope_holes
from scoring.ranking import rank_with_ties
from scoring.results import (
    HoleResult,
    IncompleteDataWarning,
    PlayerHoleResult,
    Scoreboard,
    TeamHoleResult,
    WarningCode,
)
from scoring.teams import (
    TEAM_CALCULATIONS,
    match_sides,
    resolve_teams,
    team_of,
    team_score,
    validate_hole_teams,
    validate_team_config,
)

logger = logging.getLogger(__name__)

DEFAULT_PAR = 4

SPEC_TYPES = {
    "points": "points",
    "skins": "skins",
    "match_play": "match_play",
    "match-play": "match_play",
    "match": "match_play",
}


def spec_kind(spec: GameSpec) -> str:
    try:
        return SPEC_TYPES[spec.type]
    except KeyError:
        raise ConfigurationError(f"Unknown game spec type '{spec.type}' for {spec.name}") from None


def match_status(diff: int, remaining: int) -> str:
    """Status for one side: 'all square', '2 up', '1 down', '3 & 2' once decided."""
    if diff == 0:
        return "all square"
    if remaining > 0 and abs(diff) > remaining:
        result = f"{abs(diff)} & {remaining}"
        return result if diff > 0 else f"lost {result}"
    return f"{diff} up" if diff > 0 else f"{-diff} down"


class GameScorer:
    """Scores one immutable snapshot of a game against its first spec."""

    def __init__(self, game: Game):
        self.game = game.model_copy(deep=True)
        if not self.game.specs:
            raise ConfigurationError("Game has no game spec")
        self.spec = self.game.specs[0]
        self.kind = spec_kind(self.spec)
        self.rules = self.spec.scoring
        self.options = OptionSet(self.spec, self.game.option_overrides)
        self.numbers = sorted(set(self.game.hole_numbers()))
        self.player_ids = self.game.player_ids()
        self.warnings: List[IncompleteDataWarning] = []

        self._check_configuration()
        self.tee = self._resolve_tee()
        self.pops = self._resolve_pops()
        self.junk_skipped, self.multipliers_skipped = self._check_expressions()

        self.tracker = MultiplierTracker()
        self.running: Dict[str, float] = {}
        self.match_diff: Dict[str, int] = {}
        self.match_over = False
        self.match_all_scored = True
        self.final_status: Dict[str, Optional[str]] = {}
        self.skin_carry = 0.0

    # ================================================================
    # Setup
    # ================================================================

    def _check_configuration(self) -> None:
        spec = self.spec
        count = len(self.player_ids)
        if count < spec.min_players:
            raise ConfigurationError(f"{spec.name} needs at least {spec.min_players} players, game has {count}")
        if spec.max_players is not None and count > spec.max_players:
            raise ConfigurationError(f"{spec.name} allows at most {spec.max_players} players, game has {count}")
        validate_team_config(spec, self.player_ids)

        if self.rules.team_score not in TEAM_CALCULATIONS:
            raise ConfigurationError(f"{spec.name}: unknown team score '{self.rules.team_score}'")
        get_combination(self.rules.multiplier_combination)
        for multiplier in spec.multipliers:
            if multiplier.calculation:
                get_combination(multiplier.calculation)
        for junk in spec.junk:
            if junk.calculation and junk.calculation != "logic" and junk.calculation not in TEAM_CALCULATIONS:
                raise ConfigurationError(f"{spec.name}: junk {junk.name} has unknown calculation '{junk.calculation}'")

    def _resolve_tee(self) -> Optional[Tee]:
        for rtg in self.game.rounds:
            if rtg.round.tee is not None:
                check_stroke_indices(rtg.round.tee)
                return rtg.round.tee
        self.warnings.append(IncompleteDataWarning(
            code=WarningCode.NO_TEE,
            message=f"No tee data, using par {DEFAULT_PAR} and hole numbers as stroke indices",
        ))
        return None

    def _tee_for(self, player_id: str) -> Optional[Tee]:
        rtg = self.game.get_round(player_id)
        if rtg is not None and rtg.round.tee is not None:
            check_stroke_indices(rtg.round.tee)
            return rtg.round.tee
        return self.tee

    def _resolve_pops(self) -> Dict[str, Dict[int, int]]:
        handicaps: Dict[str, int] = {}
        for player_id in self.player_ids:
            rtg = self.game.get_round(player_id)
            handicap = effective_handicap(rtg, self._tee_for(player_id), self.game.holes_scope) if rtg else None
            if handicap is None:
                logger.warning("No handicap for %s, playing off scratch", player_id)
                self.warnings.append(IncompleteDataWarning(
                    code=WarningCode.NO_HANDICAP,
                    message="No handicap available, pops default to 0",
                    player_id=player_id,
                ))
                handicap = 0
            handicaps[player_id] = handicap

        if self.options.value("handicap_mode", default="full") == "low":
            handicaps = adjust_to_low(handicaps)
        self.handicaps = handicaps

        pops: Dict[str, Dict[int, int]] = {}
        for player_id, handicap in handicaps.items():
            tee = self._tee_for(player_id)
            numbers = scope_holes(self.game.holes_scope, tee)
            if tee is None:
                pops[player_id] = allocate_pops(handicap, {number: number for number in numbers})
            else:
                pops[player_id] = pops_for_tee(handicap, tee, numbers)
        return pops

    def _check_expressions(self):
        """Drop junk and multipliers whose expressions cannot be parsed, with a warning each."""
        junk_skipped, multipliers_skipped = set(), set()
        for junk in self.spec.junk:
            problems = [expression_error(junk.availability), expression_error(junk.logic)]
            if junk.score_to_par:
                try:
                    parse_score_to_par(junk.score_to_par)
                except ExpressionError as e:
                    problems.append(str(e))
            if any(problems):
                junk_skipped.add(junk.name)
                self._bad_expression(junk.name, next(p for p in problems if p))
        for multiplier in self.spec.multipliers:
            problems = [expression_error(multiplier.availability), expression_error(multiplier.value_from)]
            if any(problems):
                multipliers_skipped.add(multiplier.name)
                self._bad_expression(multiplier.name, next(p for p in problems if p))
        return junk_skipped, multipliers_skipped

    def _bad_expression(self, name: str, problem: str) -> None:
        logger.warning("%s: %s is never awarded: %s", self.spec.name, name, problem)
        self.warnings.append(IncompleteDataWarning(
            code=WarningCode.BAD_EXPRESSION,
            message=f"{name} is never awarded: {problem}",
            option=name,
        ))

    # ================================================================
    # Holes
    # ================================================================

    def score(self, view: Optional[str] = None) -> Scoreboard:
        self._check_unknown_holes()
        holes: List[HoleResult] = []
        previous: Optional[HoleResult] = None
        for index, number in enumerate(self.numbers):
            result = self._score_hole(index, number, previous)
            holes.append(result)
            previous = result
        return build_scoreboard(self.game, self.spec, self.kind, holes, self.warnings, self.handicaps, view)

    def _check_unknown_holes(self) -> None:
        for rtg in self.game.rounds:
            for score in rtg.round.scores:
                if score.hole not in self.numbers:
                    self.warnings.append(IncompleteDataWarning(
                        code=WarningCode.UNKNOWN_HOLE,
                        message=f"Score for hole {score.hole} is not part of this game",
                        hole=score.hole,
                        player_id=rtg.player_id,
                    ))

    def _score_hole(self, index: int, number: int, previous: Optional[HoleResult]) -> HoleResult:
        tee_hole = self.tee.get_hole(number) if self.tee else None
        result = HoleResult(
            hole=number,
            par=tee_hole.par if tee_hole else DEFAULT_PAR,
            stroke_index=tee_hole.handicap if tee_hole else number,
        )

        teams = self._teams_for_hole(index, number, result)
        self._normalize(number, teams, result)
        self._build_teams(teams, result)
        self._rank(result)

        if self.kind == "points":
            self._score_points(result)
        elif self.kind == "skins":
            self._score_skins(number, result)
        else:
            self._score_match(index, result)

        base = LogicContext(hole=result, previous=previous, better=self.rules.better)
        self._award_junk(number, result, base)
        self._total_before_multipliers(result)
        self._apply_multipliers(number, result, base)
        self._advance_running_totals(result)
        logger.debug("Hole %s scored: %s", number, {p: r.points for p, r in result.players.items()})
        return result

    def _teams_for_hole(self, index: int, number: int, result: HoleResult) -> List[Team]:
        teams = resolve_teams(self.game, self.spec, self.numbers, index)
        if teams is None:
            result.warnings.append(IncompleteDataWarning(
                code=WarningCode.NO_TEAMS,
                message=f"No teams chosen for hole {number}",
                hole=number,
            ))
            teams = []
        validate_hole_teams(self.spec, teams, self.player_ids, number)
        if self.kind == "match_play":
            teams = match_sides(self.spec, teams, self.player_ids)
        return teams

    def _normalize(self, number: int, teams: List[Team], result: HoleResult) -> None:
        for player_id in self.player_ids:
            rtg = self.game.get_round(player_id)
            score = rtg.round.get_score(number) if rtg else None
            tee = self._tee_for(player_id)
            tee_hole = tee.get_hole(number) if tee else None
            par = tee_hole.par if tee_hole else result.par
            normalized = normalize_score(score, self.pops[player_id].get(number, 0), par, number)
            result.players[player_id] = PlayerHoleResult(
                player_id=player_id,
                team_id=team_of(teams, player_id),
                score=normalized,
            )
            if not normalized.scored:
                result.warnings.append(IncompleteDataWarning(
                    code=WarningCode.HOLE_UNSCORED,
                    message=f"No score for hole {number}",
                    hole=number,
                    player_id=player_id,
                ))

    def _build_teams(self, teams: List[Team], result: HoleResult) -> None:
        based_on = self.rules.based_on
        for team in teams:
            members = [result.players[p] for p in team.player_ids if p in result.players]
            values = [m.score.value(based_on) for m in members]
            scored = [v for v in values if v is not None]
            result.teams[team.id] = TeamHoleResult(
                team_id=team.id,
                player_ids=list(team.player_ids),
                score=team_score(self.rules.team_score, values),
                low_ball=min(scored) if scored else None,
                total=sum(values) if scored and len(scored) == len(values) else None,
                complete=bool(members) and len(scored) == len(values),
            )

    def _rank(self, result: HoleResult) -> None:
        based_on = self.rules.based_on
        ranks = rank_with_ties(
            result.players.values(), key=lambda p: p.score.value(based_on), ident=lambda p: p.player_id,
        )
        for player_id, (rank, tie_count) in ranks.items():
            result.players[player_id].rank = rank
            result.players[player_id].tie_count = tie_count
        team_ranks = rank_with_ties(result.teams.values(), key=lambda t: t.score, ident=lambda t: t.team_id)
        for team_id, (rank, tie_count) in team_ranks.items():
            result.teams[team_id].rank = rank
            result.teams[team_id].tie_count = tie_count

    # ================================================================
    # Base scoring
    # ================================================================

    def _score_points(self, result: HoleResult) -> None:
        table = self.rules.points_table
        for player in result.players.values():
            to_par = player.score.value_to_par(self.rules.based_on)
            if to_par is None:
                continue
            points = table.get(score_type(to_par), 0)
            for rank_points in self.rules.rank_points:
                if rank_points.rank == player.rank and rank_points.tie_count == player.tie_count:
                    points += rank_points.points
            player.base_points = points

    def _score_skins(self, number: int, result: HoleResult) -> None:
        value = self.rules.skin_value + self.skin_carry
        if not result.complete:
            return
        contenders: Dict[str, Optional[float]]
        if result.teams:
            contenders = {t.team_id: t.score for t in result.teams.values()}
        else:
            contenders = {p.player_id: p.score.value(self.rules.based_on) for p in result.players.values()}
        scored = {k: v for k, v in contenders.items() if v is not None}
        if not scored:
            return
        low = min(scored.values())
        winners = [k for k, v in scored.items() if v == low]

        if len(winners) > 1:
            if self.options.flag("carryover", number):
                self.skin_carry = value
                logger.debug("Hole %s: skin tied, %s carries", number, value)
            else:
                self.skin_carry = 0.0
            return

        winner = winners[0]
        self.skin_carry = 0.0
        result.skin_winner = winner
        result.skin_value = value
        if winner in result.teams:
            result.teams[winner].base_points = value
        else:
            result.players[winner].base_points = value

    def _score_match(self, index: int, result: HoleResult) -> None:
        sides = list(result.teams.values())
        if len(sides) != 2:
            return
        if self.match_over:
            for side in sides:
                side.match_status = self.final_status.get(side.team_id)
            return
        if any(side.score is None for side in sides):
            # the match stays open until every earlier hole is scored
            self.match_all_scored = False
            return
        first, second = sides

        if first.score == second.score:
            outcomes = {first.team_id: ("halve", 0.5, 0), second.team_id: ("halve", 0.5, 0)}
        elif first.score < second.score:
            outcomes = {first.team_id: ("win", 1.0, 1), second.team_id: ("loss", 0.0, -1)}
        else:
            outcomes = {first.team_id: ("loss", 0.0, -1), second.team_id: ("win", 1.0, 1)}

        remaining = len(self.numbers) - index - 1
        closable = remaining if self.match_all_scored else 0
        for side in sides:
            outcome, points, step = outcomes[side.team_id]
            side.match_result = outcome
            side.base_points = points
            self.match_diff[side.team_id] = self.match_diff.get(side.team_id, 0) + step
            side.match_status = match_status(self.match_diff[side.team_id], closable)

        lead = abs(self.match_diff[first.team_id])
        if self.match_all_scored and (lead > remaining or remaining == 0):
            self.match_over = True
        if self.match_over:
            self.final_status = {side.team_id: side.match_status for side in sides}

    # ================================================================
    # Junk, multipliers, totals
    # ================================================================

    def _award_junk(self, number: int, result: HoleResult, base: LogicContext) -> None:
        for junk in self.options.junk_for_hole(number):
            if junk.name in self.junk_skipped:
                continue
            if junk.awarded_to == "team":
                for award in award_team_junk(junk, result, base):
                    result.teams[award.team_id].junk.append(award)
            else:
                for award in award_player_junk(junk, result, base):
                    result.players[award.player_id].junk.append(award)

    def _total_before_multipliers(self, result: HoleResult) -> None:
        for player in result.players.values():
            if player.scored or player.junk:
                player.points = player.base_points + player.junk_points
        for team in result.teams.values():
            members = [result.players[p] for p in team.player_ids if p in result.players]
            team.points = team.base_points + team.junk_points + sum(m.points or 0 for m in members)
        if result.teams:
            result.possible_points = sum(t.points for t in result.teams.values())
        else:
            result.possible_points = sum(p.points or 0 for p in result.players.values())

    def _apply_multipliers(self, number: int, result: HoleResult, base: LogicContext) -> None:
        options = [m for m in self.options.multipliers_for_hole(number) if m.name not in self.multipliers_skipped]
        if not options:
            return
        if result.teams:
            subjects = list(result.teams.values())
        else:
            subjects = [p for p in result.players.values() if p.points is not None]
        apply_multipliers(
            result,
            subjects,
            options,
            self.game.get_hole(number),
            self.tracker,
            self.rules,
            replace(base, possible_points=result.possible_points),
        )

    def _advance_running_totals(self, result: HoleResult) -> None:
        complete = result.complete
        for team in result.teams.values():
            running = self.running.get(team.team_id, 0.0)
            if complete:
                running += team.points
                self.running[team.team_id] = running
            team.running_total = running
        if len(result.teams) == 2:
            first, second = result.teams.values()
            sign = -1 if self.rules.better == "lower" else 1
            first.hole_net_total = sign * (first.points - second.points)
            second.hole_net_total = sign * (second.points - first.points)
            first.running_diff = sign * (first.running_total - second.running_total)
            second.running_diff = sign * (second.running_total - first.running_total)


def score_game(game: Game, view: Optional[str] = None) -> Scoreboard:
    """Compute the full scoreboard for a game. Raises ConfigurationError for broken formats."""
    return GameScorer(game).score(view)
