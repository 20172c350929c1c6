"""
Pool payouts and debt settlement.

The pot is split into pools by percentage; each pool pays on one player
metric (higher is better) by places, per unit or winner take all. Net
positions are then settled with as few payments as a greedy match of
the largest creditor and debtor allows.
"""

import logging
from pydantic import Field
from typing import Dict, List, Literal, Optional

from models.base import BaseGolfModel
from scoring.handicap import round_half_up
from scoring.results import Scoreboard

logger = logging.getLogger(__name__)

CENT = 0.01

DEFAULT_PAYOUT_PCTS: Dict[int, List[float]] = {
    1: [100],
    2: [60, 40],
    3: [50, 30, 20],
    4: [45, 27, 18, 10],
    5: [40, 25, 17, 11, 7],
}


class PoolConfig(BaseGolfModel):
    name: str
    disp: Optional[str] = None
    pct: float = Field(..., ge=0, le=100)
    metric: str
    split_type: Literal["places", "per_unit", "winner_take_all"] = "places"
    places_paid: Optional[int] = Field(None, ge=1)
    payout_pcts: Optional[List[float]] = None


class PlayerMetrics(BaseGolfModel):
    player_id: str
    name: Optional[str] = None
    metrics: Dict[str, float] = Field(default_factory=dict)


class Payout(BaseGolfModel):
    player_id: str
    pool: str
    place: Optional[int] = None
    metric_value: float
    amount: float


class Debt(BaseGolfModel):
    from_player_id: str
    to_player_id: str
    amount: float


class Settlement(BaseGolfModel):
    pot_total: float
    buy_in: float
    payouts: List[Payout] = Field(default_factory=list)
    net_positions: Dict[str, float] = Field(default_factory=dict)
    debts: List[Debt] = Field(default_factory=list)


def payout_pcts(places_paid: int, custom: Optional[List[float]] = None) -> List[float]:
    """Custom percentages when they match the places paid, else the defaults."""
    if custom and len(custom) == places_paid:
        return custom
    return DEFAULT_PAYOUT_PCTS.get(places_paid, DEFAULT_PAYOUT_PCTS[3])


def pool_payouts(pool: PoolConfig, players: List[PlayerMetrics], amount: float) -> List[Payout]:
    """Pay one pool. The last payout takes the remainder so the pool is paid exactly."""
    ranked = []
    for player in players:
        value = player.metrics.get(pool.metric)
        if value is None:
            logger.warning("Metric %s missing for %s", pool.metric, player.player_id)
            value = 0.0
        ranked.append((player.player_id, value))
    if pool.split_type != "places":
        ranked = [(pid, value) for pid, value in ranked if value != 0]
    ranked.sort(key=lambda r: -r[1])
    if not ranked:
        return []

    payouts: List[Payout] = []
    if pool.split_type == "winner_take_all":
        player_id, value = ranked[0]
        return [Payout(player_id=player_id, pool=pool.name, place=1, metric_value=value, amount=amount)]

    if pool.split_type == "places":
        places = min(pool.places_paid or 3, len(ranked))
        pcts = payout_pcts(places, pool.payout_pcts)
        paid = 0.0
        for index, (player_id, value) in enumerate(ranked[:places]):
            share = amount - paid if index == places - 1 else round_half_up(amount * pcts[index] / 100)
            payouts.append(Payout(player_id=player_id, pool=pool.name, place=index + 1, metric_value=value, amount=share))
            paid += share
        return payouts

    # per_unit, e.g. per skin won
    earners = [(pid, value) for pid, value in ranked if value > 0]
    units = sum(value for _, value in earners)
    if units == 0:
        return []
    per_unit = amount / units
    paid = 0.0
    for index, (player_id, value) in enumerate(earners):
        share = amount - paid if index == len(earners) - 1 else round_half_up(value * per_unit)
        payouts.append(Payout(player_id=player_id, pool=pool.name, metric_value=value, amount=share))
        paid += share
    return payouts


def all_payouts(pools: List[PoolConfig], players: List[PlayerMetrics], pot_total: float) -> List[Payout]:
    payouts: List[Payout] = []
    allocated = 0.0
    for index, pool in enumerate(pools):
        amount = pot_total - allocated if index == len(pools) - 1 else round_half_up(pot_total * pool.pct / 100)
        payouts.extend(pool_payouts(pool, players, amount))
        allocated += amount
    return payouts


def net_positions(payouts: List[Payout], players: List[PlayerMetrics], pot_total: float) -> Dict[str, float]:
    """Winnings less the even buy-in, to the cent."""
    if not players:
        return {}
    buy_in = pot_total / len(players)
    positions = {p.player_id: -buy_in for p in players}
    for payout in payouts:
        positions[payout.player_id] = positions.get(payout.player_id, -buy_in) + payout.amount
    return {player_id: round(value, 2) for player_id, value in positions.items()}


def reconcile_debts(positions: Dict[str, float]) -> List[Debt]:
    creditors = sorted(([pid, net] for pid, net in positions.items() if net > CENT), key=lambda c: -c[1])
    debtors = sorted(([pid, -net] for pid, net in positions.items() if net < -CENT), key=lambda d: -d[1])

    debts: List[Debt] = []
    i = j = 0
    while i < len(creditors) and j < len(debtors):
        creditor, debtor = creditors[i], debtors[j]
        payment = min(creditor[1], debtor[1])
        if payment > CENT:
            debts.append(Debt(from_player_id=debtor[0], to_player_id=creditor[0], amount=round(payment, 2)))
        creditor[1] -= payment
        debtor[1] -= payment
        if creditor[1] < CENT:
            i += 1
        if debtor[1] < CENT:
            j += 1
    return debts


def player_metrics(scoreboard: Scoreboard) -> List[PlayerMetrics]:
    """Settlement metrics from a scoreboard: points by nine and in total, and skins won."""
    metrics = []
    for totals in scoreboard.players.values():
        metrics.append(PlayerMetrics(
            player_id=totals.player_id,
            name=totals.name,
            metrics={
                "points": totals.points.total or 0.0,
                "points_front": totals.points.front or 0.0,
                "points_back": totals.points.back or 0.0,
                "skins": float(totals.skins),
            },
        ))
    return metrics


def settle(pools: List[PoolConfig], players: List[PlayerMetrics], pot_total: float) -> Settlement:
    if not players:
        return Settlement(pot_total=pot_total, buy_in=0)
    payouts = all_payouts(pools, players, pot_total)
    positions = net_positions(payouts, players, pot_total)
    return Settlement(
        pot_total=pot_total,
        buy_in=pot_total / len(players),
        payouts=payouts,
        net_positions=positions,
        debts=reconcile_debts(positions),
    )
