"""Slack Web API access: base URL resolution and request builders."""

from slack_dm_action.slack.base_url import get_base_url
from slack_dm_action.slack.client import lookup_user_by_email, send_direct_message

__all__ = [
    "get_base_url",
    "lookup_user_by_email",
    "send_direct_message",
]
