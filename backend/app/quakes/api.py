"""Pull endpoint for the cached earthquake bulletin."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import JSONResponse

from .errors import UpstreamUnavailable
from .query import QueryService
from .timestamps import parse_query_bound


def create_query_router(query_service: QueryService) -> APIRouter:
    """Create the bulletin query router bound to a QueryService."""
    router = APIRouter(prefix="/api", tags=["earthquakes"])

    @router.get("/earthquakes")
    async def get_earthquakes(
        start: str | None = Query(None, description="ISO-8601 lower bound, inclusive"),
        end: str | None = Query(None, description="ISO-8601 upper bound, inclusive"),
        force_refresh: str | None = Query(None, alias="forceRefresh"),
    ):
        """Current PHIVOLCS bulletin, newest first.

        Any ``forceRefresh`` value bypasses the cache TTL. Naive ``start``/``end``
        values are read as Philippine time.
        """
        try:
            start_at = parse_query_bound(start) if start else None
            end_at = parse_query_bound(end) if end else None
        except ValueError as e:
            raise HTTPException(status_code=422, detail=f"Invalid time bound: {e}") from e

        try:
            records = await query_service.query(
                force_refresh=force_refresh is not None,
                start=start_at,
                end=end_at,
            )
        except UpstreamUnavailable:
            return JSONResponse(status_code=500, content={"error": "Failed to fetch PHIVOLCS data"})

        return [record.to_dict() for record in records]

    return router
