"""PHIVOLCS earthquake relay.

Public API:
    QuakeRecord          - Immutable bulletin row dataclass
    SnapshotCache        - TTL cache with forced refresh and stale fallback
    ChangeDetector       - Broadcasts records whose id is new
    SubscriberRegistry   - Live SSE subscribers
    QuakePoller          - Background refresh loop
    QueryService         - Pull queries with time-range filtering
    create_quake_service - Factory that wires all of the above
    create_query_router / create_stream_router / create_passthrough_router
                         - FastAPI router factories
"""

from .api import create_query_router
from .broadcaster import ChangeDetector
from .cache import SnapshotCache
from .config import QuakeSettings
from .errors import ExtractionError, FetchError, QuakeError, UpstreamUnavailable
from .factory import QuakeService, create_quake_service
from .interface import QuakeSource
from .models import QuakeRecord
from .passthrough import create_passthrough_router
from .poller import QuakePoller
from .query import QueryService
from .registry import SubscriberRegistry
from .stream import create_stream_router

__all__ = [
    "QuakeRecord",
    "QuakeSource",
    "QuakeSettings",
    "QuakeService",
    "SnapshotCache",
    "ChangeDetector",
    "SubscriberRegistry",
    "QuakePoller",
    "QueryService",
    "QuakeError",
    "ExtractionError",
    "FetchError",
    "UpstreamUnavailable",
    "create_quake_service",
    "create_query_router",
    "create_stream_router",
    "create_passthrough_router",
]
