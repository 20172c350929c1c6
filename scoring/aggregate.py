"""Fold per-hole results into player/team totals and a leaderboard."""

from typing import Dict, Iterable, List, Optional, Sequence

from models import Game, GameSpec
from scoring.results import (
    HoleResult,
    IncompleteDataWarning,
    LeaderboardEntry,
    PlayerTotals,
    Scoreboard,
    Split,
    TeamTotals,
)

VIEWS = ("gross", "net", "to_par", "points", "skins")
ASCENDING_VIEWS = ("gross", "net", "to_par")

DEFAULT_VIEWS = {
    "points": "points",
    "skins": "points",
    "match_play": "points",
}


def split(values: Iterable[tuple]) -> Split:
    """Sum (hole, value) pairs into front/back/total. Missing values are skipped, never zero."""
    front: Optional[float] = None
    back: Optional[float] = None
    for hole, value in values:
        if value is None:
            continue
        if hole <= 9:
            front = (front or 0) + value
        else:
            back = (back or 0) + value
    if front is None and back is None:
        total = None
    else:
        total = (front or 0) + (back or 0)
    return Split(front=front, back=back, total=total)


def player_totals(game: Game, holes: Sequence[HoleResult], handicaps: Dict[str, int]) -> Dict[str, PlayerTotals]:
    totals: Dict[str, PlayerTotals] = {}
    for player_id in game.player_ids():
        results = [(h.hole, h.players[player_id]) for h in holes if player_id in h.players]
        player = game.get_player(player_id)
        totals[player_id] = PlayerTotals(
            player_id=player_id,
            name=player.name if player else None,
            handicap=handicaps.get(player_id),
            holes_played=sum(1 for _, r in results if r.scored),
            gross=split((n, r.score.gross) for n, r in results),
            net=split((n, r.score.net) for n, r in results),
            to_par=split((n, r.score.to_par) for n, r in results),
            pops=sum(r.score.pops for _, r in results),
            points=split((n, r.points) for n, r in results),
            skins=sum(1 for h in holes if h.skin_winner == player_id),
        )
    return totals


def team_totals(holes: Sequence[HoleResult]) -> Dict[str, TeamTotals]:
    """
    Team totals over every hole. A hole counts for a team once any member
    scored it or the team earned junk there; running totals are the ones
    limited to fully scored holes.
    """
    totals: Dict[str, TeamTotals] = {}
    points: Dict[str, List[tuple]] = {}
    decided: Dict[str, int] = {}
    for hole in holes:
        for team in hole.teams.values():
            entry = totals.setdefault(team.team_id, TeamTotals(team_id=team.team_id, player_ids=team.player_ids))
            points.setdefault(team.team_id, [])
            members = [hole.players[p] for p in team.player_ids if p in hole.players]
            if team.junk or any(m.scored or m.junk for m in members):
                points[team.team_id].append((hole.hole, team.points))
            if team.score is not None:
                entry.score = (entry.score or 0) + team.score
            if team.match_result is not None:
                decided[team.team_id] = decided.get(team.team_id, 0) + 1
            if team.match_status is not None:
                entry.match_status = team.match_status
                entry.match_over = " & " in team.match_status
    for team_id, entry in totals.items():
        entry.points = split(points[team_id])
        # played out to the last hole with every hole decided
        if holes and decided.get(team_id, 0) == len(holes):
            entry.match_over = True
    return totals


def _value(view: str, totals) -> Optional[float]:
    if view == "skins":
        return getattr(totals, "skins", None)
    return getattr(totals, view).total


def leaderboard(scoreboard: Scoreboard, view: Optional[str] = None) -> List[LeaderboardEntry]:
    """
    Ordered standings for a view.

    gross, net and to_par sort ascending, points and skins descending.
    Points rank teams when the game has them. Equal values share a
    position and keep their insertion order; unscored entries go last.
    """
    view = view or scoreboard.view
    if view not in VIEWS:
        raise ValueError(f"Unknown leaderboard view '{view}'")

    if view == "points" and scoreboard.teams:
        rows = [(t.team_id, "team", ", ".join(t.player_ids), _value(view, t)) for t in scoreboard.teams.values()]
    else:
        rows = [(p.player_id, "player", p.name, _value(view, p)) for p in scoreboard.players.values()]

    descending = view not in ASCENDING_VIEWS
    ordered = sorted(
        rows,
        key=lambda row: (row[3] is None, 0 if row[3] is None else (-row[3] if descending else row[3])),
    )

    entries: List[LeaderboardEntry] = []
    for index, (ident, kind, name, value) in enumerate(ordered):
        if entries and value is not None and entries[-1].value == value:
            position = entries[-1].position
        else:
            position = index + 1
        entries.append(LeaderboardEntry(position=position, id=ident, kind=kind, name=name, value=value))
    return entries


def build_scoreboard(
    game: Game,
    spec: GameSpec,
    kind: str,
    holes: Sequence[HoleResult],
    warnings: Sequence[IncompleteDataWarning],
    handicaps: Dict[str, int],
    view: Optional[str] = None,
) -> Scoreboard:
    scoreboard = Scoreboard(
        game_id=game.id,
        spec_name=spec.name,
        spec_type=kind,
        view=view or DEFAULT_VIEWS.get(kind, "gross"),
        holes=list(holes),
        players=player_totals(game, holes, handicaps),
        teams=team_totals(holes),
        warnings=[*warnings, *(w for h in holes for w in h.warnings)],
    )
    scoreboard.leaderboard = leaderboard(scoreboard)
    return scoreboard
