"""Adapters: record encryption and storage backends."""

from taskseal.adapters.record_adapter import RecordAdapter

__all__ = ["RecordAdapter"]
