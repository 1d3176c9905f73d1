#!/usr/bin/env python3
"""Seed a local database with demo data.

Creates a verified subscriber, a pending signup and a week of tides with a
couple of flood-level highs, so the home page and the alert job have
something to show without calling NOAA.

Usage:
    DATABASE_URL=sqlite:///./flood_alert.db python scripts/seed_demo_data.py
"""

import os
import sys
from datetime import datetime, timedelta

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.database import SessionLocal, init_db
from src.models import TideType, User
from src.services.subscribers import get_user_by_email
from src.services.tides import Prediction, replace_tide_window

DEMO_SUBSCRIBER = "demo@example.com"
DEMO_PENDING = "pending@example.com"

# (hours from today's midnight, height in feet, tide type)
DEMO_TIDES = [
    (4.2, 1.1, TideType.LOW),
    (10.5, 6.6, TideType.HIGH),
    (16.9, -0.4, TideType.LOW),
    (23.1, 5.2, TideType.HIGH),
    (35.0, 6.9, TideType.HIGH),
    (41.3, 0.2, TideType.LOW),
    (59.8, 5.9, TideType.HIGH),
]


def seed_demo_data():
    """Seed the database with demo users and tides."""
    init_db()
    db = SessionLocal()
    try:
        if not get_user_by_email(db, DEMO_SUBSCRIBER):
            db.add(User(email=DEMO_SUBSCRIBER, is_verified=True, is_subscribed=True))
        if not get_user_by_email(db, DEMO_PENDING):
            db.add(User(email=DEMO_PENDING))
        db.commit()

        today = datetime.now().replace(hour=0, minute=0, second=0, microsecond=0)
        predictions = [
            Prediction(
                (today + timedelta(hours=hours)).replace(second=0, microsecond=0),
                height,
                tide_type,
            )
            for hours, height, tide_type in DEMO_TIDES
        ]
        count = replace_tide_window(db, today, today + timedelta(days=3), predictions)
        print(f"Seeded {count} tides and demo users {DEMO_SUBSCRIBER}, {DEMO_PENDING}")
    finally:
        db.close()


if __name__ == "__main__":
    seed_demo_data()
