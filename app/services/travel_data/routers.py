from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query

from app.services.travel_data.categorizer import get_mappable_locations, get_upcoming_locations
from app.services.travel_data.client import SOURCES, TravelDataFetchError
from app.services.travel_data.schemas import Stats, TravelOverview, TravelRecord
from app.services.travel_data.service import (
    build_travel_overview, get_today, load_travel_records
)

router = APIRouter()

SOURCE_QUERY = Query(default=None, description=f"Data source, one of {', '.join(SOURCES)}")


async def _load_or_502(source: Optional[str]) -> List[TravelRecord]:
    if source is not None and source not in SOURCES:
        raise HTTPException(status_code=422, detail=f"Unknown source {source!r}")
    try:
        return await load_travel_records(source)
    except TravelDataFetchError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e


@router.get("/", response_model=List[TravelRecord])
async def list_travel_records(source: Optional[str] = SOURCE_QUERY):
    return await _load_or_502(source)


@router.get("/organized", response_model=TravelOverview)
async def organized_travel_data(source: Optional[str] = SOURCE_QUERY):
    records = await _load_or_502(source)
    return build_travel_overview(records, get_today())


@router.get("/stats", response_model=Stats)
async def travel_stats(source: Optional[str] = SOURCE_QUERY):
    records = await _load_or_502(source)
    return build_travel_overview(records, get_today()).stats


@router.get("/map", response_model=List[TravelRecord])
async def map_locations(source: Optional[str] = SOURCE_QUERY):
    records = await _load_or_502(source)
    return get_mappable_locations(records)


@router.get("/upcoming", response_model=List[TravelRecord])
async def upcoming_locations(source: Optional[str] = SOURCE_QUERY):
    records = await _load_or_502(source)
    return get_upcoming_locations(records, get_today())
