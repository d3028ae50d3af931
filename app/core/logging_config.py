"""Logging setup: app log level, noisy libraries quieted, probe access logs dropped."""

import logging
from typing import FrozenSet, Optional

from app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Third-party loggers that only matter at WARNING+
QUIET_LOGGERS = ("httpx", "httpcore", "apscheduler", "qdrant_client", "openai")


class ProbeAccessFilter(logging.Filter):
    """
    Drops successful uvicorn access lines for health/status polling.

    uvicorn.access records carry args as
    (client_addr, method, path, http_version, status_code).
    """

    PROBE_PATHS: FrozenSet[str] = frozenset({
        "/healthz",
        "/api/healthz",
        "/api/health",
        "/api/scheduler/status",
    })

    def filter(self, record: logging.LogRecord) -> bool:
        args = record.args
        if not isinstance(args, tuple) or len(args) < 5:
            return True

        method, path, status = args[1], str(args[2]), args[4]
        if _as_status(status) != 200:
            return True
        if method == "OPTIONS":
            return False

        return path.split("?", 1)[0] not in self.PROBE_PATHS


def _as_status(value) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def configure_logging(level: Optional[str] = None) -> None:
    """Configure application logging. Safe to call more than once."""
    level_name = (level or settings.LOG_LEVEL).upper()
    logging.basicConfig(level=level_name, format=LOG_FORMAT)
    logging.getLogger("app").setLevel(level_name)

    probe_filter = ProbeAccessFilter()
    access_logger = logging.getLogger("uvicorn.access")
    if not any(isinstance(f, ProbeAccessFilter) for f in access_logger.filters):
        access_logger.addFilter(probe_filter)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        f"Logging configured at {level_name}; {len(ProbeAccessFilter.PROBE_PATHS)} probe paths muted"
    )
