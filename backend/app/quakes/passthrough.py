"""Relays for USGS earthquakes and GeoRisk fault lines.

Both endpoints forward a fixed query upstream and return the JSON body
untouched. Nothing is cached or parsed.
"""

from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse, Response

logger = logging.getLogger(__name__)

USGS_QUERY_URL = "https://earthquake.usgs.gov/fdsnws/event/1/query"
GEORISK_FAULTS_URL = "https://hazardhunter.georisk.gov.ph/geoserver/hazardhunter/wfs"
GEORISK_FAULTS_PARAMS = {
    "service": "WFS",
    "version": "1.0.0",
    "request": "GetFeature",
    "typeName": "hazardhunter:active_faults",
    "outputFormat": "application/json",
}


def create_passthrough_router(transport: httpx.AsyncBaseTransport | None = None) -> APIRouter:
    """Create the relay router. ``transport`` lets tests stub the upstream services."""
    router = APIRouter(prefix="/api", tags=["passthrough"])

    @router.get("/usgs-earthquakes")
    async def usgs_earthquakes(
        start: str | None = None,
        end: str | None = None,
        minlatitude: float = Query(4.0),
        maxlatitude: float = Query(22.0),
        minlongitude: float = Query(116.0),
        maxlongitude: float = Query(127.0),
        minmagnitude: float = Query(1.0),
    ) -> Response:
        """USGS FDSN events as GeoJSON. The default box covers the Philippines."""
        params: dict[str, str | float] = {"format": "geojson"}
        if start:
            params["starttime"] = start
        if end:
            params["endtime"] = end
        params.update(
            minlatitude=minlatitude,
            maxlatitude=maxlatitude,
            minlongitude=minlongitude,
            maxlongitude=maxlongitude,
            minmagnitude=minmagnitude,
        )
        try:
            async with httpx.AsyncClient(timeout=10.0, transport=transport) as client:
                return await _relay(client, USGS_QUERY_URL, params)
        except httpx.HTTPError as e:
            logger.error("USGS API error: %s", e)
            return JSONResponse(status_code=500, content={"error": "Failed to fetch USGS earthquake data"})

    @router.get("/faultlines")
    async def faultlines() -> Response:
        """Active fault lines from GeoRisk HazardHunter as GeoJSON."""
        logger.info("Fetching fault lines from GeoRisk...")
        try:
            # GeoRisk has the same certificate-chain problem as PHIVOLCS.
            async with httpx.AsyncClient(timeout=15.0, verify=False, transport=transport) as client:
                return await _relay(client, GEORISK_FAULTS_URL, GEORISK_FAULTS_PARAMS)
        except httpx.HTTPError as e:
            logger.error("Fault line fetch failed: %s", e)
            return JSONResponse(status_code=500, content={"error": "Could not fetch fault lines"})

    return router


async def _relay(client: httpx.AsyncClient, url: str, params: dict) -> Response:
    """GET ``url`` and pass the body through. Raises httpx.HTTPError on non-2xx."""
    response = await client.get(url, params=params)
    response.raise_for_status()
    return Response(content=response.content, media_type="application/json")
