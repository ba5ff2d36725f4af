from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

import httpx
import pytest
from fastapi import FastAPI

from queuepanel import PanelConfig, QueuePanel

REDIS_INFO = """# Server
redis_version:7.2.4
redis_mode:standalone

# Clients
connected_clients:3
blocked_clients:0

# Memory
used_memory:1048576
maxmemory:0
mem_fragmentation_ratio:1.25
total_system_memory:8589934592
"""


class FakeStore:
    def __init__(self, info: Any = REDIS_INFO):
        self._info = info
        self.info_calls = 0

    async def info(self):
        self.info_calls += 1
        return self._info


class FakeJob:
    def __init__(self, job_id: str, *, data: Optional[Dict] = None, delay: int = 0, attempts_made: int = 0):
        self.id = job_id
        self.data = data or {}
        self.opts = {"delay": delay, "attempts": 3}
        self.attempts_made = attempts_made
        self.retry_calls = 0
        self.promote_calls = 0

    def toJSON(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": "__default__",
            "data": self.data,
            "opts": self.opts,
            "progress": 0,
            "timestamp": 1700000000000,
            "processedOn": None,
            "finishedOn": None,
            "attemptsMade": self.attempts_made,
            "failedReason": None,
            "stacktrace": [],
        }

    async def retry(self):
        self.retry_calls += 1

    async def promote(self):
        self.promote_calls += 1


class FakeQueue:
    def __init__(self, name: str, jobs: Optional[List[FakeJob]] = None, store: Optional[FakeStore] = None):
        self.name = name
        self.jobs = {job.id: job for job in (jobs or [])}
        self._store = store or FakeStore()
        self.get_jobs_calls: List[tuple] = []
        self.clean_calls: List[tuple] = []

    @property
    async def client(self):
        return self._store

    async def getJobCounts(self, *statuses: str) -> Dict[str, int]:
        return {status: 0 for status in statuses}

    async def getJobs(self, status, start, end):
        self.get_jobs_calls.append((status, start, end))
        return list(self.jobs.values())

    async def getJob(self, job_id):
        return self.jobs.get(job_id)

    async def clean(self, grace_ms, status):
        self.clean_calls.append((grace_ms, status))
        return []


@asynccontextmanager
async def panel_client(conf: PanelConfig):
    """Start a host app with the panel attached and yield an httpx client for it."""
    app = FastAPI()
    panel = QueuePanel(conf)
    panel.attach(app)

    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://panel.test") as client:
            yield client


@pytest.fixture
def jobs():
    return [FakeJob("1", data={"n": 1}, delay=500, attempts_made=2), FakeJob("2")]


@pytest.fixture
def queue(jobs):
    return FakeQueue("emails", jobs=jobs)


async def demo_queues():
    return [FakeQueue("imported")]
