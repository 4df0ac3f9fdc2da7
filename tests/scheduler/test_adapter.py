from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from news_relay.config import ScheduleConfig, ScheduleType
from news_relay.scheduler import APSchedulerAdapter


class StubScheduler:
    def __init__(self) -> None:
        self.calls: list[dict] = []

    def add_job(self, callback, **kwargs):  # noqa: ANN001
        self.calls.append({"callback": callback, **kwargs})

    def start(self):
        self.calls.append({"event": "started"})

    def shutdown(self, wait=False):  # noqa: ARG002
        self.calls.append({"event": "shutdown"})


def test_build_triggers() -> None:
    cron = APSchedulerAdapter.build_trigger(ScheduleConfig(type=ScheduleType.CRON, value="*/5 * * * *"))
    assert isinstance(cron, CronTrigger)

    interval = APSchedulerAdapter.build_trigger(ScheduleConfig(type=ScheduleType.INTERVAL, value=30))
    assert isinstance(interval, IntervalTrigger)
    assert interval.interval.total_seconds() == 30

    kwargs = APSchedulerAdapter.build_trigger(ScheduleConfig(type=ScheduleType.INTERVAL, value={"minutes": 2}))
    assert kwargs.interval.total_seconds() == 120


def test_schedule_job_prevents_overlapping_runs(relay_config) -> None:
    adapter = APSchedulerAdapter()
    stub = StubScheduler()
    adapter.scheduler = stub  # type: ignore[assignment]
    config = relay_config(job_name="hn")

    def callback() -> None:
        return None

    job_id = adapter.schedule_job(config, callback)
    adapter.start()
    adapter.start()
    adapter.shutdown()

    assert job_id == "relay::hn"
    scheduled = stub.calls[0]
    assert scheduled["callback"] is callback
    assert scheduled["id"] == "relay::hn"
    assert scheduled["max_instances"] == 1
    assert scheduled["coalesce"] is True
    assert scheduled["replace_existing"] is True
    assert "next_run_time" not in scheduled
    assert [c.get("event") for c in stub.calls[1:]] == ["started", "shutdown"]


def test_run_now_fires_through_the_same_job(relay_config) -> None:
    adapter = APSchedulerAdapter()
    stub = StubScheduler()
    adapter.scheduler = stub  # type: ignore[assignment]

    before = datetime.now(timezone.utc)
    adapter.schedule_job(relay_config(job_name="hn"), lambda: None, run_now=True)

    (scheduled,) = stub.calls
    assert scheduled["id"] == "relay::hn"
    assert scheduled["max_instances"] == 1
    first_run = scheduled["next_run_time"]
    assert first_run.tzinfo is not None
    assert before <= first_run <= before + timedelta(seconds=5)


def test_interval_rejects_bad_value() -> None:
    schedule = ScheduleConfig.model_construct(type=ScheduleType.INTERVAL, value="fast")
    with pytest.raises(ValueError):
        APSchedulerAdapter.build_trigger(schedule)
