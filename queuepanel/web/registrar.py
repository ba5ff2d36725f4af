import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import FastAPI

from queuepanel.config import PanelConfig
from queuepanel.constants import LOGGER_NAME
from queuepanel.errors import PanelLoadError
from queuepanel.store.redis_client import RedisConnector
from queuepanel.utils.loop import maybe_await
from queuepanel.web.api_errors import ApiErrorResponse, ApiRequestError, api_request_error_handler
from queuepanel.web.controller import PanelContext, QueuesController

logger = logging.getLogger(LOGGER_NAME)


class QueuePanel:
    """
    Mounts the queue panel into a host FastAPI app.

    Routes are registered once the host app has started, after the queues
    list is resolved. Usage:

        panel = QueuePanel(PanelConfig(base_path="/admin", get_queues=load_queues))
        panel.attach(app)
    """

    def __init__(self, conf: Optional[PanelConfig] = None):
        self.conf = conf or PanelConfig()
        self.conf.validate()

        self._context: Optional[PanelContext] = None
        self._controller: Optional[QueuesController] = None
        self._redis: Optional[RedisConnector] = None

    @property
    def loaded(self) -> bool:
        return self._context is not None

    @property
    def context(self) -> PanelContext:
        if not self.loaded:
            raise PanelLoadError("Panel context is not resolved. Start the host app first.")
        return self._context

    def attach(self, app: FastAPI) -> None:
        """Install the error handler now and hook route registration into the app lifespan."""
        logger.debug(f"Attach queue panel with settings:\n{self.conf.to_str(need_spaces=True)}")
        app.add_exception_handler(ApiRequestError, api_request_error_handler)

        parent_lifespan = app.router.lifespan_context

        @asynccontextmanager
        async def _lifespan(app_: FastAPI):
            async with parent_lifespan(app_) as state:
                await self.on_post_start(app_)
                try:
                    yield state
                finally:
                    await self.on_stop()

        app.router.lifespan_context = _lifespan

    async def _resolve_queues(self) -> List[Any]:
        if self.conf.get_queues is not None:
            queues = await maybe_await(self.conf.get_queues())
            logger.info("Resolved %d queues from get_queues factory.", len(queues))
            return list(queues)
        return list(self.conf.queues)

    async def on_post_start(self, app: FastAPI) -> None:
        queues = await self._resolve_queues()

        store_client = None
        if self.conf.redis_url:
            self._redis = RedisConnector(self.conf.redis_url, decode_responses=True)
            store_client = await self._redis.connect()

        self._context = PanelContext(queues=tuple(queues), store_client=store_client)
        self._controller = QueuesController(self._context)
        self.register_routes(app, self._controller)

    async def on_stop(self) -> None:
        if self._redis:
            await self._redis.close()
            self._redis = None

    def _route_kwargs(self, not_found: bool = False) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {}
        if not_found:
            kwargs["responses"] = {404: {"description": "Queue or job not found", "model": ApiErrorResponse}}
        kwargs.update(self.conf.route_options)
        return kwargs

    def register_routes(self, app: FastAPI, controller: QueuesController) -> None:
        base_path = self.conf.base_path
        lookup_kwargs = self._route_kwargs(not_found=True)

        app.add_api_route(
            f"{base_path}/queues", controller.index, methods=["GET"], **self._route_kwargs()
        )
        app.add_api_route(
            f"{base_path}/queues/{{queue}}/retry",
            controller.retry_all,
            methods=["PUT"],
            **lookup_kwargs,
        )
        app.add_api_route(
            f"{base_path}/queues/{{queue}}/clean/{{status}}",
            controller.clean,
            methods=["PUT"],
            **lookup_kwargs,
        )
        app.add_api_route(
            f"{base_path}/queues/{{queue}}/jobs/{{job}}/retry",
            controller.retry,
            methods=["PUT"],
            **lookup_kwargs,
        )
        app.add_api_route(
            f"{base_path}/queues/{{queue}}/jobs/{{job}}/promote",
            controller.promote,
            methods=["PUT"],
            **lookup_kwargs,
        )
        # Routes are added after startup, drop a schema generated earlier
        app.openapi_schema = None

        logger.info(
            "Queue panel routes registered | base_path=%r | queues=%s",
            base_path,
            [q.name for q in controller.context.queues],
        )
