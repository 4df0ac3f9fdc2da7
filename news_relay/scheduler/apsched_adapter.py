"""APScheduler wrapper exposing higher level helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from ..config import RelayConfig, ScheduleConfig, ScheduleType
from ..logging_conf import get_logger


class APSchedulerAdapter:
    """Manage the periodic relay job."""

    def __init__(self) -> None:
        self.scheduler = BackgroundScheduler()
        self.logger = get_logger("scheduler")
        self.started = False

    def start(self) -> None:
        if not self.started:
            self.scheduler.start()
            self.started = True
            self.logger.info("apscheduler_started")

    def shutdown(self) -> None:
        if self.started:
            self.scheduler.shutdown(wait=False)
            self.started = False
            self.logger.info("apscheduler_stopped")

    def schedule_job(
        self,
        config: RelayConfig,
        callback: Callable[[], object],
        run_now: bool = False,
    ) -> str:
        """Register the relay job; ``run_now`` also fires it as soon as the scheduler starts."""

        trigger = self.build_trigger(config.schedule)
        job_id = f"relay::{config.job_name}"
        options: dict[str, Any] = {}
        if run_now:
            options["next_run_time"] = datetime.now(timezone.utc)
        # runs share the sent log file and must never overlap
        self.scheduler.add_job(
            callback,
            trigger=trigger,
            id=job_id,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            **options,
        )
        self.logger.info(
            "job_scheduled",
            job=config.job_name,
            schedule=config.schedule.model_dump(mode="json"),
            run_now=run_now,
        )
        return job_id

    @staticmethod
    def build_trigger(schedule: ScheduleConfig):
        if schedule.type is ScheduleType.CRON:
            return CronTrigger.from_crontab(str(schedule.value))
        if schedule.type is ScheduleType.INTERVAL:
            if isinstance(schedule.value, (int, float)):
                return IntervalTrigger(seconds=float(schedule.value))
            if isinstance(schedule.value, dict):
                return IntervalTrigger(**schedule.value)
            raise ValueError("Interval schedule requires seconds or kwargs dict")
        raise ValueError(f"Unknown schedule type: {schedule.type}")


__all__ = ["APSchedulerAdapter"]
