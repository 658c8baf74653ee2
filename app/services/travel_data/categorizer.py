from typing import List, Optional, Sequence
from datetime import date

from app.services.travel_data.schemas import OrganizedTravelData, TravelRecord


def get_current_location(records: Sequence[TravelRecord], today: date) -> Optional[TravelRecord]:
    """First record in input order whose stay includes ``today`` (both ends inclusive)."""
    return next(
        (r for r in records if r.arrival_date <= today <= r.departure_date),
        None,
    )


def get_already_traveled(records: Sequence[TravelRecord], today: date) -> List[TravelRecord]:
    # most recent first
    return sorted(
        (r for r in records if r.departure_date < today),
        key=lambda r: r.departure_date,
        reverse=True,
    )


def get_upcoming_trips(records: Sequence[TravelRecord], today: date) -> List[TravelRecord]:
    return sorted(
        (r for r in records if r.arrival_date > today and r.booked),
        key=lambda r: r.arrival_date,
    )


def get_potential_trips(records: Sequence[TravelRecord], today: date) -> List[TravelRecord]:
    return sorted(
        (r for r in records if r.arrival_date > today and not r.booked),
        key=lambda r: r.arrival_date,
    )


def get_upcoming_locations(records: Sequence[TravelRecord], today: date) -> List[TravelRecord]:
    return sorted(
        (r for r in records if r.arrival_date > today),
        key=lambda r: r.arrival_date,
    )


def get_mappable_locations(records: Sequence[TravelRecord]) -> List[TravelRecord]:
    return [r for r in records if r.coordinates is not None]


def organize_travel_data(records: Sequence[TravelRecord], today: date) -> OrganizedTravelData:
    return OrganizedTravelData(
        already_traveled=get_already_traveled(records, today),
        current_location=get_current_location(records, today),
        upcoming_trips=get_upcoming_trips(records, today),
        potential_trips=get_potential_trips(records, today),
    )
