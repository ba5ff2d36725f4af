"""
Capability sets the panel expects from the embedding application's queue library.

Method names follow the queue library (Bull/BullMQ style). Any method may be
sync or async: the panel awaits results that are awaitable.
"""
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Union, runtime_checkable

StatusFilter = Optional[Union[str, Sequence[str]]]


@runtime_checkable
class StoreClient(Protocol):
    def info(self) -> Union[str, Mapping[str, Any]]:
        """Raw INFO text, or an already parsed mapping (redis-py style)."""
        ...


@runtime_checkable
class Job(Protocol):
    opts: Any

    def toJSON(self) -> Dict[str, Any]:
        ...

    def retry(self) -> Any:
        ...

    def promote(self) -> Any:
        ...


@runtime_checkable
class Queue(Protocol):
    name: str
    # Store client, or an awaitable resolving to it
    client: Any

    def getJobCounts(self, *statuses: str) -> Dict[str, int]:
        ...

    def getJobs(self, status: StatusFilter, start: int, end: int) -> List[Job]:
        """``status=None`` selects the library default filter."""
        ...

    def getJob(self, job_id: str) -> Optional[Job]:
        ...

    def clean(self, grace_ms: int, status: str) -> Any:
        ...
