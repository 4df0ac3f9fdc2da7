"""Periodic trigger for relay runs."""

from .apsched_adapter import APSchedulerAdapter

__all__ = ["APSchedulerAdapter"]
