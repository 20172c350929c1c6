from typing import Dict, Iterable, List, Optional, Protocol

from models import GameSpec


class GameSpecCatalog(Protocol):
    """Interface for game spec lookups.

    Specs are keyed by name and version. Any class with matching method
    signatures satisfies this protocol.
    """

    def get(self, name: str, version: Optional[int] = None) -> Optional[GameSpec]:
        """Look up a spec by name. Without a version, returns the latest."""
        ...

    def list_specs(self) -> List[GameSpec]:
        """Latest version of every spec, ordered by name."""
        ...


class InMemoryGameSpecCatalog:
    """Versioned catalog held in memory. Specs are copied in and out."""

    def __init__(self, specs: Iterable[GameSpec] = ()):
        self._specs: Dict[str, Dict[int, GameSpec]] = {}
        for spec in specs:
            self.add(spec)

    def add(self, spec: GameSpec) -> None:
        versions = self._specs.setdefault(spec.name, {})
        if spec.version in versions:
            raise ValueError(f"{spec.key} is already in the catalog")
        versions[spec.version] = spec.model_copy(deep=True)

    def get(self, name: str, version: Optional[int] = None) -> Optional[GameSpec]:
        versions = self._specs.get(name)
        if not versions:
            return None
        if version is None:
            version = max(versions)
        spec = versions.get(version)
        return spec.model_copy(deep=True) if spec else None

    def versions(self, name: str) -> List[int]:
        return sorted(self._specs.get(name, {}))

    def list_specs(self) -> List[GameSpec]:
        return [self.get(name) for name in sorted(self._specs)]


class NullGameSpecCatalog:
    """Placeholder catalog with no specs."""

    def get(self, name: str, version: Optional[int] = None) -> Optional[GameSpec]:
        return None

    def list_specs(self) -> List[GameSpec]:
        return []
