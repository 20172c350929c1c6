"""Game spec catalog endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional

from api.dependencies import get_catalog
from api.schemas import SpecSummaryResponse
from catalog import GameSpecCatalog
from models import GameSpec

router = APIRouter()


def _summarize_spec(spec: GameSpec) -> SpecSummaryResponse:
    return SpecSummaryResponse(
        name=spec.name,
        disp=spec.disp,
        type=spec.type,
        version=spec.version,
        min_players=spec.min_players,
        max_players=spec.max_players,
        teams=spec.teams.teams,
    )


@router.get("", response_model=List[SpecSummaryResponse])
async def list_specs(catalog: GameSpecCatalog = Depends(get_catalog)):
    return [_summarize_spec(s) for s in catalog.list_specs()]


@router.get("/{name}", response_model=GameSpec)
async def get_spec(
    name: str,
    version: Optional[int] = Query(None, ge=1),
    catalog: GameSpecCatalog = Depends(get_catalog),
):
    spec = catalog.get(name, version)
    if not spec:
        raise HTTPException(404, "Game spec not found")
    return spec
