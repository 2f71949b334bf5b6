"""Data models for earthquake bulletin records."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

from .timestamps import parse_bulletin_time

_WHITESPACE = re.compile(r"\s+")


def make_record_id(time_text: str, lat_text: str, lon_text: str, magnitude_text: str) -> str:
    """Build the identity key of a bulletin row from its raw cell texts.

    Two distinct events sharing time, coordinates and magnitude collide.
    """
    return f"{_WHITESPACE.sub('_', time_text)}_{lat_text}_{lon_text}_{magnitude_text}"


@dataclass(frozen=True, slots=True)
class QuakeRecord:
    """Immutable row of the PHIVOLCS earthquake bulletin."""

    id: str
    timestamp_text: str
    latitude: float
    longitude: float
    depth: float
    magnitude: float
    location: str
    detail_link: str | None = None

    @property
    def parsed_time(self) -> datetime | None:
        """Origin time as an aware datetime, or None if the text is unparseable."""
        return parse_bulletin_time(self.timestamp_text)

    def to_dict(self) -> dict:
        """Serialize for JSON / SSE transmission."""
        return {
            "id": self.id,
            "time": self.timestamp_text,
            "lat": self.latitude,
            "lon": self.longitude,
            "depth": self.depth,
            "magnitude": self.magnitude,
            "location": self.location,
            "link": self.detail_link,
        }
