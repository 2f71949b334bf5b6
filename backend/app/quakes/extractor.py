"""Extract earthquake rows from the PHIVOLCS bulletin page."""

from __future__ import annotations

import logging
from urllib.parse import urljoin

from selectolax.parser import HTMLParser

from .models import QuakeRecord, make_record_id

logger = logging.getLogger(__name__)

MIN_CELLS = 6  # time, lat, lon, depth, magnitude, location


def extract_records(html: str, base_url: str) -> list[QuakeRecord]:
    """Parse bulletin rows in page order (latest first).

    Rows with fewer than six cells, or with a non-numeric coordinate, depth or
    magnitude cell, are skipped. An unrecognised page yields an empty list.
    """
    if not html:
        return []
    parser = HTMLParser(html)
    records: list[QuakeRecord] = []

    for row in parser.css("table tbody tr"):
        cells = [td.text().strip() for td in row.css("td")]
        if len(cells) < MIN_CELLS:
            continue

        time_text, lat_text, lon_text, depth_text, mag_text, location = cells[:MIN_CELLS]
        try:
            latitude = float(lat_text)
            longitude = float(lon_text)
            depth = float(depth_text)
            magnitude = float(mag_text)
        except ValueError:
            logger.debug("Skipping row with non-numeric fields: %r", cells[:MIN_CELLS])
            continue

        records.append(
            QuakeRecord(
                id=make_record_id(time_text, lat_text, lon_text, mag_text),
                timestamp_text=time_text,
                latitude=latitude,
                longitude=longitude,
                depth=depth,
                magnitude=magnitude,
                location=location,
                detail_link=_resolve_link(row, base_url),
            )
        )

    return records


def _resolve_link(row, base_url: str) -> str | None:
    """Absolute URL of the row's first link. The bulletin uses Windows-style paths."""
    anchor = row.css_first("td a")
    if anchor is None:
        return None
    href = (anchor.attributes.get("href") or "").strip()
    if not href:
        return None
    return urljoin(base_url, href.replace("\\", "/"))
