from typing import Optional, Sequence
from datetime import date

from app.services.travel_data.categorizer import organize_travel_data
from app.services.travel_data.schemas import OrganizedTravelData, Stats, TravelRecord


def calculate_total_days(records: Sequence[TravelRecord], today: date) -> int:
    """Whole days from the earliest departure of *any* record up to ``today``."""
    if not records:
        return 0
    earliest_departure = min(r.departure_date for r in records)
    return max(0, (today - earliest_departure).days)


def calculate_stats(
    records: Sequence[TravelRecord],
    today: date,
    organized: Optional[OrganizedTravelData] = None,
) -> Stats:
    organized = organized or organize_travel_data(records, today)

    # completed stays plus the one in progress
    visited = list(organized.already_traveled)
    if organized.current_location is not None:
        visited.append(organized.current_location)

    return Stats(
        countries=len({r.country for r in visited}),
        destinations=len(visited),
        total_days=calculate_total_days(records, today),
        upcoming=len(organized.upcoming_trips) + len(organized.potential_trips),
    )
