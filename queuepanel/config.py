import logging
import logging.config
import os
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from queuepanel.constants import LOGGER_NAME
from queuepanel.errors import PanelLoadError


LOGGING_CONFIG: Dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(levelname)s:[%(asctime)s] - %(name)s - %(message)s",
        },
        "access": {
            "()": "uvicorn.logging.AccessFormatter",
            "fmt": '%(levelprefix)s %(client_addr)s - "%(request_line)s" %(status_code)s',
        },
    },
    "handlers": {
        "default": {
            "formatter": "default",
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stderr",
        },
        "access": {
            "formatter": "access",
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stdout",
        },
    },
    "loggers": {
        LOGGER_NAME: {"handlers": ["default"], "level": "INFO", "propagate": False},
        "uvicorn": {"handlers": ["default"], "level": "INFO", "propagate": False},
        "uvicorn.error": {"level": "INFO"},
        "uvicorn.access": {"handlers": ["access"], "level": "INFO", "propagate": False},
    },
}


def set_logging_settings(logging_config: Dict[str, Any], level: int = logging.INFO) -> None:
    """Apply dictConfig with the panel logger forced to the given level."""
    conf = deepcopy(logging_config)
    conf["loggers"][LOGGER_NAME]["level"] = logging.getLevelName(level)
    logging.config.dictConfig(conf)


def get_redis_url() -> str:
    return os.getenv("REDIS_URL", "redis://localhost:6379")


@dataclass
class PanelConfig:
    """
    PanelConfig config class. Registration-time options of the queue panel.
    """

    # Prefix for every panel route, e.g. "/admin"
    base_path: str = ""

    # Can use only single from two params
    queues: Sequence[Any] = field(default_factory=list, repr=False)
    get_queues: Optional[Callable[[], Awaitable[List[Any]]]] = field(default=None, repr=False)

    # Keyword arguments forwarded as-is to FastAPI.add_api_route for every panel route
    route_options: Dict[str, Any] = field(default_factory=dict)

    # Read store stats from own Redis connection instead of the first queue client
    redis_url: Optional[str] = None

    def validate(self) -> None:
        if self.queues and self.get_queues is not None:
            raise PanelLoadError(
                "Only one of the two parameters can be used: queues, get_queues. "
                f"Now set queues={len(self.queues)} items, get_queues={self.get_queues}."
            )
        if self.base_path and not self.base_path.startswith("/"):
            raise PanelLoadError(f"The param base_path must start with '/'. Now it is {self.base_path!r}.")
        if self.base_path.endswith("/"):
            raise PanelLoadError(f"The param base_path must not end with '/'. Now it is {self.base_path!r}.")

    def to_dict(self) -> Dict[str, Any]:
        res = {}
        for n, f in PanelConfig.__dataclass_fields__.items():
            if f.repr is True:
                res[n] = getattr(self, n)
        return res

    def to_str(self, need_spaces: bool = False) -> str:
        space = "    " if need_spaces else ""
        return "\n".join(f"{space}{n}={v}" for n, v in self.to_dict().items())
