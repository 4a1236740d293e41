"""Data models for the Slack direct message action."""

from slack_dm_action.models.context import ExecutionContext
from slack_dm_action.models.params import ErrorParameters, HaltParameters, JobParameters
from slack_dm_action.models.results import ActionResult, HaltResult, RetryResult

__all__ = [
    "ExecutionContext",
    "JobParameters",
    "ErrorParameters",
    "HaltParameters",
    "ActionResult",
    "RetryResult",
    "HaltResult",
]
