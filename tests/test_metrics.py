import logging

import pytest
from prometheus_client import generate_latest

from queuepanel import PanelConfig
from queuepanel.queue_metrics import APP_NAME, METRICS_REGISTRY, update_job_count_gauges

from conftest import FakeJob, FakeQueue, panel_client


def promote_count(queue_name: str) -> float:
    labels = {"app": APP_NAME, "action": "promote", "queue": queue_name}
    return METRICS_REGISTRY.get_sample_value("queuepanel_actions_total", labels) or 0.0


@pytest.mark.asyncio
async def test_panel_metrics_are_exported():
    queue = FakeQueue("metrics-q", jobs=[FakeJob("7")])
    before = promote_count("metrics-q")

    async with panel_client(PanelConfig(queues=[queue])) as client:
        assert (await client.get("/queues")).status_code == 200
        assert (await client.put("/queues/metrics-q/jobs/7/promote")).status_code == 204

    assert promote_count("metrics-q") == before + 1

    text = generate_latest(METRICS_REGISTRY).decode()
    assert "queuepanel_actions_total" in text
    assert 'queuepanel_job_count{app="%s",queue="metrics-q",status="failed"} 0.0' % APP_NAME in text


def test_non_numeric_job_count_is_logged(caplog):
    with caplog.at_level(logging.DEBUG, logger="queuepanel"):
        update_job_count_gauges("odd-q", {"active": "n/a", "failed": 2})

    assert "Skip non-numeric job count" in caplog.text
    assert "odd-q" in caplog.text
    labels = {"app": APP_NAME, "queue": "odd-q", "status": "failed"}
    assert METRICS_REGISTRY.get_sample_value("queuepanel_job_count", labels) == 2.0
