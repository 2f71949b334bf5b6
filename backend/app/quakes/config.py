"""Environment-driven settings for the earthquake relay."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from .fetcher import PHIVOLCS_URL


@dataclass(frozen=True, slots=True)
class QuakeSettings:
    """Runtime knobs. Defaults match the public PHIVOLCS deployment."""

    source_url: str = PHIVOLCS_URL
    cache_ttl: float = 60.0  # seconds a snapshot is served without refetching
    poll_interval: float = 20.0
    fetch_timeout: float = 8.0  # per attempt
    max_attempts: int = 3
    retry_delay: float = 3.0
    keepalive_interval: float = 30.0
    cors_origins: tuple[str, ...] = ("*",)

    def __post_init__(self) -> None:
        for name in ("cache_ttl", "retry_delay"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")
        for name in ("poll_interval", "fetch_timeout", "keepalive_interval"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be > 0, got {getattr(self, name)}")
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> QuakeSettings:
        """Read ``QUAKES_*`` variables. Blank or missing values keep the default.

        Raises ValueError when a numeric variable is not a number or is out
        of range, so a bad deployment fails at startup rather than inside the
        poller.
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        def get(name: str) -> str | None:
            value = env.get(f"QUAKES_{name}", "").strip()
            return value or None

        def number(name: str, default: float) -> float:
            value = get(name)
            return default if value is None else float(value)

        origins = get("CORS_ORIGINS")
        return cls(
            source_url=get("SOURCE_URL") or defaults.source_url,
            cache_ttl=number("CACHE_TTL", defaults.cache_ttl),
            poll_interval=number("POLL_INTERVAL", defaults.poll_interval),
            fetch_timeout=number("FETCH_TIMEOUT", defaults.fetch_timeout),
            max_attempts=int(number("MAX_ATTEMPTS", defaults.max_attempts)),
            retry_delay=number("RETRY_DELAY", defaults.retry_delay),
            keepalive_interval=number("KEEPALIVE_INTERVAL", defaults.keepalive_interval),
            cors_origins=(
                tuple(o.strip() for o in origins.split(",") if o.strip())
                if origins
                else defaults.cors_origins
            ),
        )
