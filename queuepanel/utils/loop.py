import inspect
from typing import Any


async def maybe_await(value: Any) -> Any:
    """Return value, awaiting it first when it is awaitable."""
    if inspect.isawaitable(value):
        return await value
    return value
