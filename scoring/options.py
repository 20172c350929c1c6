"""Spec option defaults overlaid with a game's per-hole overrides."""

from typing import List, Optional, Sequence, Union

from models import GameSpec, JunkOption, MultiplierOption, OptionOverride
from models.score import FALSE_VALUES

OptionValue = Union[bool, float, str]


class OptionSet:
    """
    Resolves option, junk and multiplier settings for a hole.

    Options are keyed by name. Overrides are applied in order, so a later
    override for the same name and hole wins. An override with no holes
    applies everywhere.
    """

    def __init__(self, spec: GameSpec, overrides: Sequence[OptionOverride] = ()):
        self.spec = spec
        self.overrides = list(overrides)

    def override(self, name: str, hole: Optional[int] = None) -> Optional[str]:
        """Latest override value for a name on a hole, or None."""
        found: Optional[str] = None
        for override in self.overrides:
            if override.name != name:
                continue
            if override.holes and (hole is None or hole not in override.holes):
                continue
            found = override.value
        return found

    def raw(self, name: str, hole: Optional[int] = None) -> Optional[str]:
        found = self.override(name, hole)
        if found is not None:
            return found
        option = self.spec.get_option(name)
        return option.raw_value if option is not None else None

    def value(self, name: str, hole: Optional[int] = None, default: OptionValue = None) -> Optional[OptionValue]:
        """Typed value of a game option on a hole."""
        raw = self.raw(name, hole)
        if raw is None:
            return default
        option = self.spec.get_option(name)
        if option is None:
            return raw
        return option.typed_value(raw)

    def flag(self, name: str, hole: Optional[int] = None) -> bool:
        return bool(self.value(name, hole, default=False))

    def _patch(self, item, hole: int):
        raw = self.override(item.name, hole)
        if raw is None:
            return item
        if raw.strip().lower() in FALSE_VALUES:
            return item.model_copy(update={"enabled": False})
        try:
            value = float(raw)
        except ValueError:
            # "true" or any other text just switches the item on
            return item.model_copy(update={"enabled": True})
        return item.model_copy(update={"enabled": True, "value": value})

    def junk_for_hole(self, hole: int) -> List[JunkOption]:
        """Enabled junk for the hole, in declared order."""
        junk = [self._patch(j, hole) for j in self.spec.junk]
        return [j for j in junk if j.enabled and in_scope(j.scope, hole)]

    def multipliers_for_hole(self, hole: int) -> List[MultiplierOption]:
        """Enabled multipliers for the hole, in declared order."""
        multipliers = [self._patch(m, hole) for m in self.spec.multipliers]
        return [m for m in multipliers if m.enabled]


def in_scope(scope: str, hole: int) -> bool:
    """Junk scope filter: front is 1-9, back is 10-18, anything else is every hole."""
    if scope == "front":
        return hole <= 9
    if scope == "back":
        return hole >= 10
    return True
