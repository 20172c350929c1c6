from datetime import datetime
from pydantic import Field
from typing import Dict, List, Optional

from .base import BaseGolfModel

TRUE_VALUES = ("true", "1")
FALSE_VALUES = ("false", "0")


class ScoreValue(BaseGolfModel):
    """One named value entered for a hole, e.g. gross=5 or prox=true."""
    key: str
    value: str
    timestamp: Optional[datetime] = None


class Score(BaseGolfModel):
    """A player's entered values on a single hole.

    Pops and net are never stored here; they are derived at read time
    from the round's handicap and the tee.
    """
    hole: int = Field(..., ge=1, le=18)
    values: List[ScoreValue] = Field(default_factory=list)
    history: List[ScoreValue] = Field(default_factory=list)

    def get_value(self, key: str) -> Optional[str]:
        """Latest value for a key. Last write wins by timestamp, then list order."""
        latest: Optional[ScoreValue] = None
        for entry in self.values:
            if entry.key != key:
                continue
            if latest is None:
                latest = entry
            elif entry.timestamp is None or latest.timestamp is None:
                latest = entry
            elif entry.timestamp >= latest.timestamp:
                latest = entry
        return latest.value if latest else None

    def set_value(self, key: str, value: str, timestamp: Optional[datetime] = None) -> None:
        """Replace the value for a key, keeping the previous one in history."""
        kept = []
        for entry in self.values:
            if entry.key == key:
                self.history = [*self.history, entry]
            else:
                kept.append(entry)
        self.values = [*kept, ScoreValue(key=key, value=value, timestamp=timestamp or datetime.now())]

    def remove_value(self, key: str) -> None:
        """Unscore a key, keeping the removed value in history."""
        removed = [e for e in self.values if e.key == key]
        if removed:
            self.history = [*self.history, *removed]
            self.values = [e for e in self.values if e.key != key]

    @property
    def gross(self) -> Optional[int]:
        raw = self.get_value("gross")
        if raw is None:
            return None
        try:
            gross = int(raw)
        except ValueError:
            return None
        return gross if gross > 0 else None

    def flag(self, key: str) -> Optional[bool]:
        """Boolean manual value, or None when the key is absent or not boolean."""
        raw = self.get_value(key)
        if raw is None:
            return None
        raw = raw.strip().lower()
        if raw in TRUE_VALUES:
            return True
        if raw in FALSE_VALUES:
            return False
        return None

    def flags(self) -> Dict[str, bool]:
        """All boolean manual values on the hole, keyed by name."""
        result: Dict[str, bool] = {}
        for key in dict.fromkeys(e.key for e in self.values):
            if key == "gross":
                continue
            value = self.flag(key)
            if value is not None:
                result[key] = value
        return result
