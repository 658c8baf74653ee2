# app/services/travel_data/service.py
import logging
from datetime import date, datetime
from typing import List, Optional, Sequence

from dateutil import tz

from app.config import settings
from app.services.travel_data.categorizer import organize_travel_data
from app.services.travel_data.client import TravelDataClient, travel_data_client
from app.services.travel_data.schemas import TravelOverview, TravelRecord
from app.services.travel_data.stats import calculate_stats
from app.services.travel_data.validation import parse_records

logger = logging.getLogger(__name__)


def get_today(tz_name: Optional[str] = None) -> date:
    """Calendar date "now" in the configured travel time zone (UTC unless overridden)."""
    tz_name = tz_name or settings.TRAVEL_TIMEZONE
    zone = tz.gettz(tz_name)
    if zone is None:
        raise ValueError(f"Unknown time zone {tz_name!r}")
    return datetime.now(zone).date()


async def load_travel_records(
    source: Optional[str] = None,
    client: Optional[TravelDataClient] = None,
) -> List[TravelRecord]:
    client = client or travel_data_client
    rows = await client.fetch_travel_data(source or settings.TRAVEL_DATA_SOURCE)
    return parse_records(rows)


def build_travel_overview(records: Sequence[TravelRecord], today: date) -> TravelOverview:
    organized = organize_travel_data(records, today)
    stats = calculate_stats(records, today, organized=organized)
    return TravelOverview(
        already_traveled=organized.already_traveled,
        current_location=organized.current_location,
        upcoming_trips=organized.upcoming_trips,
        potential_trips=organized.potential_trips,
        stats=stats,
        today=today,
    )


async def get_travel_overview(
    source: Optional[str] = None,
    today: Optional[date] = None,
    client: Optional[TravelDataClient] = None,
) -> TravelOverview:
    # ── 1. fetch + validate ───────────────────────────────────────────
    records = await load_travel_records(source, client)

    # ── 2. categorize + aggregate ─────────────────────────────────────
    today = today or get_today()
    overview = build_travel_overview(records, today)
    logger.info(
        f"Travel overview for {today}: {overview.stats.destinations} visited, "
        f"{overview.stats.upcoming} upcoming, current="
        f"{overview.current_location.location if overview.current_location else None}"
    )
    return overview
