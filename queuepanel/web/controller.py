import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from fastapi import Request as FastAPIRequest, Response as FastAPIResponse

from queuepanel.constants import (
    CLEAN_GRACE_MS,
    JOBS_PAGE_END,
    JOBS_PAGE_START,
    LATEST_STATUS_FILTER,
    LOGGER_NAME,
    STATUSES,
)
from queuepanel.interfaces import Job, Queue, StatusFilter, StoreClient
from queuepanel.queue_metrics import inc_action, update_job_count_gauges
from queuepanel.store.redis_info import build_stats, normalize_info
from queuepanel.utils.loop import maybe_await
from queuepanel.web.api_errors import NotFoundError

logger = logging.getLogger(LOGGER_NAME)


@dataclass(frozen=True)
class PanelContext:
    """Resolved at host startup, read-only afterwards."""

    queues: Tuple[Queue, ...] = ()
    # Overrides the first queue's client for stats
    store_client: Optional[StoreClient] = None


def _get_opt(opts: Any, name: str) -> Any:
    if opts is None:
        return None
    if isinstance(opts, Mapping):
        return opts.get(name)
    return getattr(opts, name, None)


def format_job(job: Job) -> Dict[str, Any]:
    job_props = job.toJSON()

    return {
        "id": job_props.get("id"),
        "timestamp": job_props.get("timestamp"),
        "processedOn": job_props.get("processedOn"),
        "finishedOn": job_props.get("finishedOn"),
        "progress": job_props.get("progress"),
        "attempts": job_props.get("attemptsMade"),
        "delay": _get_opt(getattr(job, "opts", None), "delay"),
        "failedReason": job_props.get("failedReason"),
        "stacktrace": job_props.get("stacktrace"),
        "opts": job_props.get("opts"),
        "data": job_props.get("data"),
        "name": job_props.get("name"),
    }


def status_filter_from_query(request: FastAPIRequest, queue_name: str) -> StatusFilter:
    values = request.query_params.getlist(queue_name)
    if not values:
        return None
    if len(values) > 1:
        return values
    if values[0] == LATEST_STATUS_FILTER:
        return list(STATUSES)
    return values[0]


class QueuesController:
    """Route handlers of the panel. One instance per registration."""

    def __init__(self, context: PanelContext):
        self.context = context

    def _find_queue(self, name: str) -> Queue:
        for queue in self.context.queues:
            if queue.name == name:
                return queue
        logger.debug("Queue not found: %s", name)
        raise NotFoundError()

    async def _find_job(self, queue: Queue, job_id: str) -> Job:
        job = await maybe_await(queue.getJob(job_id))
        if not job:
            logger.debug("Job not found: queue=%s job=%s", queue.name, job_id)
            raise NotFoundError()
        return job

    async def _store_client(self) -> StoreClient:
        if self.context.store_client is not None:
            return self.context.store_client
        return await maybe_await(self.context.queues[0].client)

    async def _stats(self) -> Dict[str, str]:
        client = await self._store_client()
        info = normalize_info(await maybe_await(client.info()))
        return build_stats(info)

    async def _queue_data(self, queue: Queue, status: StatusFilter) -> Dict[str, Any]:
        counts, jobs = await asyncio.gather(
            maybe_await(queue.getJobCounts(*STATUSES)),
            maybe_await(queue.getJobs(status, JOBS_PAGE_START, JOBS_PAGE_END)),
        )
        update_job_count_gauges(queue.name, counts)

        return {
            "name": queue.name,
            "counts": counts,
            "jobs": [format_job(job) for job in jobs],
        }

    async def index(self, request: FastAPIRequest):
        queues = self.context.queues
        if len(queues) == 0:
            return {
                "stats": {},
                "queues": [],
            }

        stats = await self._stats()
        data = await asyncio.gather(
            *(self._queue_data(queue, status_filter_from_query(request, queue.name)) for queue in queues)
        )

        return {
            "stats": stats,
            "data": list(data),
        }

    async def retry_all(self, queue: str):
        found = self._find_queue(queue)
        failed: List[Job] = await maybe_await(found.getJobs(["failed"], 0, -1))
        await asyncio.gather(*(maybe_await(job.retry()) for job in failed))

        inc_action("retry_all", found.name)
        logger.info("Retried %d failed jobs | queue=%s", len(failed), found.name)
        return FastAPIResponse(status_code=200)

    async def retry(self, queue: str, job: str):
        found = self._find_queue(queue)
        found_job = await self._find_job(found, job)
        await maybe_await(found_job.retry())

        inc_action("retry", found.name)
        logger.info("Retried job | queue=%s | job=%s", found.name, job)
        return FastAPIResponse(status_code=204)

    async def promote(self, queue: str, job: str):
        found = self._find_queue(queue)
        found_job = await self._find_job(found, job)
        await maybe_await(found_job.promote())

        inc_action("promote", found.name)
        logger.info("Promoted job | queue=%s | job=%s", found.name, job)
        return FastAPIResponse(status_code=204)

    async def clean(self, queue: str, status: str):
        found = self._find_queue(queue)
        await maybe_await(found.clean(CLEAN_GRACE_MS, status))

        inc_action("clean", found.name)
        logger.info("Cleaned queue | queue=%s | status=%s | grace_ms=%d", found.name, status, CLEAN_GRACE_MS)
        return FastAPIResponse(status_code=200)
