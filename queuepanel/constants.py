from typing import Tuple

LOGGER_NAME = "queuepanel"

# Store INFO fields exposed by the index route
METRICS: Tuple[str, ...] = (
    "redis_version",
    "used_memory",
    "mem_fragmentation_ratio",
    "connected_clients",
    "blocked_clients",
)

STATUSES: Tuple[str, ...] = (
    "active",
    "completed",
    "delayed",
    "failed",
    "paused",
    "waiting",
)

# Query value selecting every status for a queue
LATEST_STATUS_FILTER = "latest"

JOBS_PAGE_START = 0
JOBS_PAGE_END = 10

# Minimum age (ms) a job must reach before clean removes it
CLEAN_GRACE_MS = 5000
