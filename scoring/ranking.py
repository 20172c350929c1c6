"""Rank players or teams on a hole, sharing ranks on ties (1, 1, 3)."""

from typing import Callable, Dict, Hashable, Iterable, Optional, Tuple, TypeVar

T = TypeVar("T")


def rank_with_ties(
    items: Iterable[T],
    key: Callable[[T], Optional[float]],
    better: str = "lower",
    ident: Callable[[T], Hashable] = id,
) -> Dict[Hashable, Tuple[int, int]]:
    """
    Map ident(item) -> (rank, tie_count).

    Items whose key is None are left out. Tied items share the best rank
    and the next rank skips the tied places, so scores 3, 3, 4 rank 1, 1, 3
    with tie counts 2, 2, 1.
    """
    scored = [(item, key(item)) for item in items]
    scored = [(item, value) for item, value in scored if value is not None]
    scored.sort(key=lambda pair: pair[1], reverse=(better == "higher"))

    counts: Dict[float, int] = {}
    for _, value in scored:
        counts[value] = counts.get(value, 0) + 1

    ranks: Dict[Hashable, Tuple[int, int]] = {}
    rank = 0
    previous = None
    for position, (item, value) in enumerate(scored, start=1):
        if value != previous:
            rank = position
            previous = value
        ranks[ident(item)] = (rank, counts[value])
    return ranks
