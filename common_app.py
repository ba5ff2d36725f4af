import os
from typing import Any, List

from fastapi import FastAPI

import queuepanel
from queuepanel.config import PanelConfig, get_redis_url
from queuepanel.utils.interspection import get_factory_by_path


async def no_queues() -> List[Any]:
    return []


def build_panel() -> queuepanel.QueuePanel:
    """
    Single source of truth for the panel config.
    Queues come from the factory named by QUEUE_PANEL_QUEUES_FACTORY, e.g. "myproject.queues:get_queues".
    """
    base_path = os.getenv("QUEUE_PANEL_BASE_PATH", "")
    factory_path = os.getenv("QUEUE_PANEL_QUEUES_FACTORY")
    use_redis_stats = os.getenv("QUEUE_PANEL_USE_REDIS_STATS", "0") == "1"

    get_queues = get_factory_by_path(factory_path) if factory_path else no_queues

    return queuepanel.QueuePanel(
        PanelConfig(
            base_path=base_path,
            get_queues=get_queues,
            redis_url=get_redis_url() if use_redis_stats else None,
        )
    )


def build_app() -> FastAPI:
    app = FastAPI(
        title="Queue panel",
        description="Monitoring and control routes for job queues.",
        version=queuepanel.__version__,
    )
    build_panel().attach(app)
    return app


# FastAPI application (imported by uvicorn)
app = build_app()
