"""
Row parsing for the travel spreadsheet.

Spreadsheet cells arrive loosely typed (booleans as "Yes"/"TRUE"/"1",
numbers as text). Rows are normalized first, then checked against the
record shape and finally validated into ``TravelRecord``. A bad row is
logged and dropped; it never aborts the batch.
"""

import logging
import math
import re
from collections.abc import Mapping
from datetime import date
from typing import Any, Iterable, List, Optional

from dateutil import parser
from pydantic import ValidationError

from app.services.travel_data.schemas import TravelRecord, calculate_days_at_place

logger = logging.getLogger(__name__)

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TRUTHY_VALUES = {"true", "yes", "1", "y", "t"}

STRING_FIELDS = (
    "location",
    "country",
    "travelTimeToHere",
    "timeZone",
    "arrivalDate",
    "departureDate",
)
BOOLEAN_FIELDS = ("booked", "residing")


def parse_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value == 1
    if not isinstance(value, str):
        return False
    return value.strip().lower() in TRUTHY_VALUES


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    if not isinstance(value, str) or not ISO_DATE_RE.match(value.strip()):
        return None
    try:
        return parser.isoparse(value.strip()).date()
    except (ValueError, TypeError, OverflowError):
        return None


def _parse_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool) or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _parse_days(value: Any) -> Any:
    if value is None or value == "":
        return 0
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    # left as-is so the shape check can reject it
    return value


def is_travel_record(obj: Any) -> bool:
    """True when ``obj`` has every required field with the right primitive kind."""
    if not isinstance(obj, Mapping):
        return False

    days = obj.get("daysAtPlace")
    return (
        all(isinstance(obj.get(f), str) for f in STRING_FIELDS)
        and isinstance(days, (int, float))
        and not isinstance(days, bool)
        and all(isinstance(obj.get(f), bool) for f in BOOLEAN_FIELDS)
    )


def normalize_row(raw: Mapping) -> dict:
    row = dict(raw)

    for field in BOOLEAN_FIELDS:
        row[field] = parse_boolean(row.get(field))

    row["daysAtPlace"] = _parse_days(row.get("daysAtPlace"))

    coordinates = row.pop("coordinates", None)
    lat, lon = row.pop("lat", None), row.pop("lon", None)
    if isinstance(coordinates, Mapping):
        lat, lon = coordinates.get("lat"), coordinates.get("lon")

    lat, lon = _parse_float(lat), _parse_float(lon)
    row["coordinates"] = {"lat": lat, "lon": lon} if lat is not None and lon is not None else None

    for field in ("vacationStart", "vacationEnd"):
        if not row.get(field):
            row[field] = None

    return row


def parse_record(raw: Any) -> Optional[TravelRecord]:
    if not isinstance(raw, Mapping):
        logger.warning(f"Skipping travel row of type {type(raw).__name__}: expected an object")
        return None

    row = normalize_row(raw)
    label = f"{row.get('location')!r} ({row.get('arrivalDate')!r})"

    if not is_travel_record(row):
        bad_fields = [f for f in STRING_FIELDS if not isinstance(row.get(f), str)]
        if isinstance(row["daysAtPlace"], (bool, str)):
            bad_fields.append("daysAtPlace")
        logger.warning(f"Skipping malformed travel row {label}: bad or missing fields {bad_fields}")
        return None

    arrival = parse_iso_date(row["arrivalDate"])
    departure = parse_iso_date(row["departureDate"])
    if arrival is None or departure is None:
        logger.warning(f"Skipping travel row {label}: dates must be ISO YYYY-MM-DD")
        return None
    row["arrivalDate"], row["departureDate"] = arrival, departure
    if raw.get("daysAtPlace") in (None, ""):
        row["daysAtPlace"] = calculate_days_at_place(arrival, departure)

    try:
        return TravelRecord.model_validate(row)
    except ValidationError as e:
        logger.warning(f"Skipping invalid travel row {label}: {e.errors(include_url=False)}")
        return None


def parse_records(rows: Iterable[Any]) -> List[TravelRecord]:
    rows = list(rows)
    records = [record for record in (parse_record(r) for r in rows) if record is not None]

    seen = set()
    for record in records:
        if record.key in seen:
            logger.warning(f"Duplicate travel row for {record.location!r} arriving {record.arrival_date}")
        seen.add(record.key)

    skipped = len(rows) - len(records)
    if skipped:
        logger.warning(f"Dropped {skipped} of {len(rows)} travel rows during validation")
    return records
