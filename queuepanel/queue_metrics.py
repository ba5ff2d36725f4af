import logging
import os
from typing import Mapping

from prometheus_client import Counter, Histogram, Gauge, CollectorRegistry

from queuepanel.constants import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)

# One registry per process
METRICS_REGISTRY = CollectorRegistry(auto_describe=True)
APP_NAME = os.getenv("METRICS_APP_NAME", "queuepanel")

HTTP_REQUESTS_TOTAL = Counter(
    "queuepanel_http_requests_total",
    "Total HTTP requests",
    ["app", "method", "route", "status"],
    registry=METRICS_REGISTRY,
)

HTTP_REQUEST_DURATION = Histogram(
    "queuepanel_http_request_duration_seconds",
    "HTTP request latency (seconds)",
    ["app", "method", "route"],
    registry=METRICS_REGISTRY,
)

JOB_COUNT = Gauge(
    "queuepanel_job_count",
    "Jobs per queue and status, as of the last index request",
    ["app", "queue", "status"],
    registry=METRICS_REGISTRY,
)

ACTIONS_TOTAL = Counter(
    "queuepanel_actions_total",
    "Mutations issued through the panel",
    ["app", "action", "queue"],
    registry=METRICS_REGISTRY,
)


def update_job_count_gauges(queue_name: str, counts: Mapping[str, int]) -> None:
    for status, value in counts.items():
        try:
            JOB_COUNT.labels(APP_NAME, queue_name, status).set(float(value))
        except (TypeError, ValueError):
            logger.debug("Skip non-numeric job count | queue=%s | status=%s | value=%r", queue_name, status, value)


def inc_action(action: str, queue_name: str) -> None:
    ACTIONS_TOTAL.labels(APP_NAME, action, queue_name).inc()
