"""Slack API base URL resolution."""

from collections.abc import Sequence

from slack_dm_action.errors import ActionError, ErrorKind
from slack_dm_action.models.context import ExecutionContext
from slack_dm_action.models.params import JobParameters


def get_base_url(
    params: JobParameters,
    context: ExecutionContext,
    env_keys: Sequence[str] = ("ADDRESS", "SLACK_API_URL"),
) -> str:
    """Return the base URL with trailing slashes stripped.

    ``params.address`` wins; otherwise the first non-empty key of
    ``env_keys`` in the context environment.

    Raises:
        ActionError(CONFIGURATION): no address anywhere.
    """
    address = params.address
    if not address:
        address = next((context.env(key) for key in env_keys if context.env(key)), None)
    if not address:
        raise ActionError(
            f"No URL specified. Provide address parameter or {' / '.join(env_keys)} environment variable",
            ErrorKind.CONFIGURATION,
        )
    return address.rstrip("/")
