"""Tests for the tide cache."""

from datetime import UTC, datetime

import pytest
from sqlalchemy.exc import IntegrityError

from src.models.enums import TideType
from src.models.tide import TidePrediction
from src.services.exceptions import InvalidTideTypeError
from src.services.tides import (
    FloodPrediction,
    Prediction,
    get_flood_predictions,
    replace_tide_window,
    to_station_time,
    upsert_tide,
)

# 05:00 PDT on Monday, October 5 2026
NOW = datetime(2026, 10, 5, 12, 0, tzinfo=UTC)


def test_upsert_tide_replaces_existing_row(db):
    """Upserting the same timestamp twice keeps one row with the latest height."""
    t = datetime(2026, 10, 5, 14, 30)

    upsert_tide(db, t, 5.2, TideType.HIGH)
    upsert_tide(db, t, 5.4, "High")

    rows = db.query(TidePrediction).filter(TidePrediction.prediction_time == t).all()
    assert len(rows) == 1
    assert rows[0].height_ft == 5.4
    assert rows[0].tide_type == "High"


def test_upsert_tide_rejects_unknown_type(db):
    with pytest.raises(InvalidTideTypeError):
        upsert_tide(db, datetime(2026, 10, 5, 14, 30), 5.2, "Medium")

    assert db.query(TidePrediction).count() == 0


def test_table_check_constraint_rejects_unknown_type(db):
    """The table itself refuses tide types other than High and Low."""
    db.add(TidePrediction(prediction_time=datetime(2026, 10, 5), height_ft=1.0, tide_type="Ebb"))

    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_replace_tide_window(db):
    """Rows inside the window are replaced, rows outside are kept."""
    upsert_tide(db, datetime(2026, 10, 1, 8, 0), 4.0, "High")  # before window
    upsert_tide(db, datetime(2026, 10, 5, 9, 0), 3.0, "Low")  # stale, inside window

    count = replace_tide_window(
        db,
        datetime(2026, 10, 5),
        datetime(2026, 11, 4, 23, 59, 59),
        [
            Prediction(datetime(2026, 10, 5, 14, 30), 6.8, TideType.HIGH),
            Prediction(datetime(2026, 10, 5, 21, 10), 0.4, TideType.LOW),
            Prediction(datetime(2026, 10, 6, 2, 0), 2.0, None),
        ],
    )

    assert count == 2
    times = [
        t
        for (t,) in db.query(TidePrediction.prediction_time).order_by(
            TidePrediction.prediction_time
        )
    ]
    assert times == [
        datetime(2026, 10, 1, 8, 0),
        datetime(2026, 10, 5, 14, 30),
        datetime(2026, 10, 5, 21, 10),
    ]


def test_flood_prediction_formatting():
    display = FloodPrediction.from_tide(datetime(2023, 10, 5, 14, 30), 6.789)

    assert display.datetime == "Thursday, October 5 at 2:30PM"
    assert display.height == "6.79"


def test_flood_prediction_formatting_midnight_hour():
    display = FloodPrediction.from_tide(datetime(2023, 10, 5, 0, 5), 6.4)

    assert display.datetime == "Thursday, October 5 at 12:05AM"
    assert display.height == "6.40"


def test_to_station_time():
    assert to_station_time(NOW, "America/Los_Angeles") == datetime(2026, 10, 5, 5, 0)


def test_get_flood_predictions(db):
    """Only future tides at or above the threshold are returned, soonest first."""
    upsert_tide(db, datetime(2026, 10, 5, 3, 0), 7.0, "High")  # already past
    upsert_tide(db, datetime(2026, 10, 6, 15, 0), 6.4, "High")
    upsert_tide(db, datetime(2026, 10, 5, 14, 30), 6.789, "High")
    upsert_tide(db, datetime(2026, 10, 5, 20, 0), 5.0, "High")  # below threshold

    floods = get_flood_predictions(db, now=NOW, threshold=6.4)

    assert floods == [
        FloodPrediction("Monday, October 5 at 2:30PM", "6.79"),
        FloodPrediction("Tuesday, October 6 at 3:00PM", "6.40"),
    ]


def test_tide_type_from_noaa():
    assert TideType.from_noaa("H") is TideType.HIGH
    assert TideType.from_noaa("HH") is TideType.HIGH
    assert TideType.from_noaa("L") is TideType.LOW
    assert TideType.from_noaa("LL") is TideType.LOW
    assert TideType.from_noaa("") is None
    assert TideType.from_noaa(None) is None


def test_replace_tide_window_duplicate_times_rolls_back(db):
    """A feed repeating a timestamp fails without touching the cache."""
    upsert_tide(db, datetime(2026, 10, 5, 9, 0), 3.0, "Low")
    db.expunge_all()

    with pytest.raises(IntegrityError):
        replace_tide_window(
            db,
            datetime(2026, 10, 5),
            datetime(2026, 11, 4, 23, 59, 59),
            [
                Prediction(datetime(2026, 10, 5, 14, 30), 6.8, TideType.HIGH),
                Prediction(datetime(2026, 10, 5, 14, 30), 6.9, TideType.HIGH),
            ],
        )

    rows = db.query(TidePrediction).all()
    assert [(r.prediction_time, r.height_ft) for r in rows] == [(datetime(2026, 10, 5, 9, 0), 3.0)]
