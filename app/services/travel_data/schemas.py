from typing import List, Optional, Tuple
from datetime import date

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

LONG_STAY_DAYS = 5


class Coordinates(BaseModel):
    lat: float
    lon: float


class TravelRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    location: str
    country: str
    travel_time_to_here: str = Field(alias="travelTimeToHere")
    time_zone: str = Field(alias="timeZone")
    arrival_date: date = Field(alias="arrivalDate")
    departure_date: date = Field(alias="departureDate")
    days_at_place: int = Field(alias="daysAtPlace", ge=0)
    booked: bool
    residing: bool
    coordinates: Optional[Coordinates] = None
    vacation_start: Optional[str] = Field(default=None, alias="vacationStart")
    vacation_end: Optional[str] = Field(default=None, alias="vacationEnd")

    @model_validator(mode="after")
    def check_dates(self):
        if self.departure_date < self.arrival_date:
            raise ValueError(
                f"departureDate {self.departure_date} is before arrivalDate {self.arrival_date}"
            )
        return self

    @property
    def key(self) -> Tuple[str, date]:
        return self.location, self.arrival_date

    @computed_field(alias="isLongStay")
    @property
    def is_long_stay(self) -> bool:
        return is_long_stay(self.days_at_place)


class Stats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    countries: int
    destinations: int
    total_days: int = Field(alias="totalDays")
    upcoming: int


class OrganizedTravelData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    already_traveled: List[TravelRecord] = Field(alias="alreadyTraveled")
    current_location: Optional[TravelRecord] = Field(alias="currentLocation")
    upcoming_trips: List[TravelRecord] = Field(alias="upcomingTrips")
    potential_trips: List[TravelRecord] = Field(alias="potentialTrips")


class TravelOverview(OrganizedTravelData):
    stats: Stats
    today: date


def calculate_days_at_place(arrival: date, departure: date) -> int:
    return abs((departure - arrival).days)


def is_long_stay(days_at_place: int) -> bool:
    return days_at_place >= LONG_STAY_DAYS
