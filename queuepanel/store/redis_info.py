from typing import Any, Dict, Mapping, Union

from queuepanel.constants import METRICS


def parse_info(raw: str) -> Dict[str, str]:
    """
    Parse Redis INFO text into flat key/value pairs.

    Section headers ("# Server") and blank lines are skipped. Values stay strings,
    keyspace lines like "db0:keys=1,expires=0" keep their raw value.
    """
    result = {}
    for line in raw.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition(":")
        if not sep:
            continue
        result[key] = value
    return result


def normalize_info(info: Union[str, bytes, Mapping[str, Any]]) -> Dict[str, str]:
    """Accept raw INFO text or a redis-py parsed mapping, return str -> str pairs."""
    if isinstance(info, bytes):
        info = info.decode("utf-8")
    if isinstance(info, str):
        return parse_info(info)
    return {str(k): _stringify(v) for k, v in info.items()}


def _stringify(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    if isinstance(value, dict):
        # redis-py parses keyspace and similar lines into dicts
        return ",".join(f"{k}={v}" for k, v in value.items())
    return str(value)


def build_stats(info: Mapping[str, str]) -> Dict[str, str]:
    stats = {}
    for metric in METRICS:
        if info.get(metric):
            stats[metric] = info[metric]

    total_system_memory = info.get("total_system_memory") or info.get("maxmemory")
    if total_system_memory is not None:
        stats["total_system_memory"] = total_system_memory
    return stats
