from .repository import GameSpecCatalog, InMemoryGameSpecCatalog, NullGameSpecCatalog
from .seeds import SEED_SPECS, load_default_catalog

__all__ = [
    "GameSpecCatalog",
    "InMemoryGameSpecCatalog",
    "NullGameSpecCatalog",
    "SEED_SPECS",
    "load_default_catalog",
]
