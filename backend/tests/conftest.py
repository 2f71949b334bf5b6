"""Pytest configuration and fixtures."""

import pytest

from app.quakes.models import QuakeRecord


@pytest.fixture
def make_record():
    """Factory for QuakeRecord instances with sensible defaults."""

    def _make(
        id: str = "A",
        time: str = "21 October 2024 - 10:15 AM",
        magnitude: float = 2.0,
        location: str = "005 km N 45° W of Hinatuan (Surigao Del Sur)",
    ) -> QuakeRecord:
        return QuakeRecord(
            id=id,
            timestamp_text=time,
            latitude=8.41,
            longitude=126.30,
            depth=17.0,
            magnitude=magnitude,
            location=location,
            detail_link=None,
        )

    return _make
