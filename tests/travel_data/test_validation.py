import logging
from datetime import date

import pytest

from app.services.travel_data.validation import (
    is_travel_record, normalize_row, parse_boolean, parse_iso_date, parse_record, parse_records
)


def sheet_row(**overrides):
    row = {
        "location": "Lisbon",
        "country": "Portugal",
        "travelTimeToHere": "8 hours",
        "timeZone": "GMT+1",
        "arrivalDate": "2025-08-10",
        "departureDate": "2025-08-25",
        "daysAtPlace": "15",
        "booked": "TRUE",
        "residing": "",
        "lat": "38.7223",
        "lon": "-9.1393",
    }
    row.update(overrides)
    return row


@pytest.mark.parametrize("value", ["Yes", "TRUE", "1", "t", "y", " true ", True, 1])
def test_truthy_values(value):
    assert parse_boolean(value) is True


@pytest.mark.parametrize("value", ["", "no", "0", "false", "maybe", None, False, 0])
def test_falsy_values(value):
    assert parse_boolean(value) is False


def test_absent_boolean_is_false():
    row = sheet_row()
    del row["residing"]
    assert normalize_row(row)["residing"] is False


def test_is_travel_record_never_raises_on_junk():
    assert is_travel_record(None) is False
    assert is_travel_record([1, 2]) is False
    assert is_travel_record("Lisbon") is False
    assert is_travel_record({}) is False


def test_is_travel_record_rejects_bool_days():
    row = normalize_row(sheet_row())
    assert is_travel_record(row)
    row["daysAtPlace"] = True
    assert not is_travel_record(row)


def test_parse_record_normalizes_sheet_row():
    record = parse_record(sheet_row())

    assert record is not None
    assert record.arrival_date == date(2025, 8, 10)
    assert record.departure_date == date(2025, 8, 25)
    assert record.days_at_place == 15
    assert record.booked is True
    assert record.residing is False
    assert record.coordinates.lat == pytest.approx(38.7223)
    assert record.key == ("Lisbon", date(2025, 8, 10))
    assert record.is_long_stay


def test_parse_record_accepts_json_shaped_row():
    row = sheet_row(daysAtPlace=15, booked=True, residing=True)
    del row["lat"], row["lon"]
    row["coordinates"] = {"lat": 38.7, "lon": -9.1}

    record = parse_record(row)
    assert record.residing is True
    assert record.coordinates.lon == pytest.approx(-9.1)


@pytest.mark.parametrize("lat,lon", [("", ""), ("NaN", "-9.1"), ("38.7", None), ("north", "west")])
def test_unusable_coordinates_are_dropped(lat, lon):
    record = parse_record(sheet_row(lat=lat, lon=lon))
    assert record is not None
    assert record.coordinates is None


def test_empty_days_are_counted_from_dates():
    assert parse_record(sheet_row(daysAtPlace="")).days_at_place == 15
    assert parse_record(sheet_row(daysAtPlace="0")).days_at_place == 0


@pytest.mark.parametrize(
    "overrides",
    [
        {"location": None},
        {"country": 42},
        {"daysAtPlace": "two weeks"},
        {"daysAtPlace": -3},
        {"arrivalDate": "10/08/2025"},
        {"departureDate": "2025-08-01"},
    ],
)
def test_malformed_rows_are_rejected(overrides, caplog):
    with caplog.at_level(logging.WARNING):
        assert parse_record(sheet_row(**overrides)) is None
    assert "Skipping" in caplog.text


def test_parse_records_drops_bad_rows_and_keeps_order(caplog):
    rows = [
        sheet_row(location="Lisbon"),
        "not a row",
        sheet_row(location="Porto", arrivalDate="2025-09-01", departureDate="2025-09-03"),
        sheet_row(location=None),
    ]

    with caplog.at_level(logging.WARNING):
        records = parse_records(rows)

    assert [r.location for r in records] == ["Lisbon", "Porto"]
    assert "Dropped 2 of 4 travel rows" in caplog.text


@pytest.mark.parametrize("value", ["2025", "2025-01", "2025-01-10T10:00:00+02:00", "20250110", " 2025-1-10"])
def test_only_plain_iso_dates_are_accepted(value):
    assert parse_iso_date(value) is None
    assert parse_record(sheet_row(arrivalDate=value)) is None


def test_plain_iso_date():
    assert parse_iso_date(" 2025-01-10 ") == date(2025, 1, 10)


def test_duplicate_rows_are_kept_but_logged(caplog):
    with caplog.at_level(logging.WARNING):
        records = parse_records([sheet_row(), sheet_row(travelTimeToHere="9 hours")])

    assert len(records) == 2
    assert "Duplicate travel row for 'Lisbon'" in caplog.text
