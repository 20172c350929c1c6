from fastapi import Request

from catalog import GameSpecCatalog


def get_catalog(request: Request) -> GameSpecCatalog:
    """FastAPI dependency that provides the game spec catalog."""
    return request.app.state.catalog
