"""Action entry points: invoke, error and halt.

``invoke`` looks up a Slack user by email and sends them a direct message:
resolve base URL and auth -> users.lookupByEmail -> delay -> chat.postMessage.
``error`` decides whether a failed invocation should be retried, and ``halt``
acknowledges a shutdown.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any

import httpx

from slack_dm_action.auth import get_authorization_header
from slack_dm_action.config import Settings, get_settings
from slack_dm_action.duration import parse_duration
from slack_dm_action.errors import ActionError, ErrorClass, ErrorKind, classify_error
from slack_dm_action.models import (
    ActionResult,
    ErrorParameters,
    ExecutionContext,
    HaltParameters,
    HaltResult,
    JobParameters,
    RetryResult,
)
from slack_dm_action.slack import get_base_url, lookup_user_by_email, send_direct_message


Sleep = Callable[[float], Awaitable[Any]]


def _json_body(response: httpx.Response) -> dict:
    """Parse a response body as a JSON object, or return {} if it isn't one."""
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


class SlackDirectMessageAction:
    """Sends a Slack direct message to a user identified by email.

    Args:
        settings: Handler settings. Defaults to ``get_settings()``.
        transport: Optional httpx transport for every outbound request.
        sleep: Awaitable sleep taking seconds. Replaced in tests.
        logger: Logger for step events. Defaults to this module's logger.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleep = asyncio.sleep,
        logger: logging.Logger | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._transport = transport
        self._sleep = sleep
        self._logger = logger or logging.getLogger(__name__)

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=self._transport,
            timeout=httpx.Timeout(self.settings.http_timeout_seconds),
        )

    async def _wait_ms(self, milliseconds: float) -> None:
        await self._sleep(milliseconds / 1000)

    async def invoke(
        self,
        params: JobParameters | dict,
        context: ExecutionContext | dict,
    ) -> ActionResult:
        """Look up the user by email and send them ``params.text``.

        Raises:
            ActionError: on any failure; nothing is retried here.
        """
        params = JobParameters.model_validate(params)
        context = ExecutionContext.model_validate(context)
        email = params.user_email

        self._logger.info("Starting Slack direct message send", extra={"user_email": email})

        base_url = get_base_url(params, context, self.settings.base_url_env_keys)
        delay_ms = parse_duration(params.delay)

        async with self._http_client() as client:
            auth_header = await get_authorization_header(context, client)

            self._logger.info("Looking up user by email", extra={"user_email": email})
            user_id = await self._lookup_user_id(client, email, base_url, auth_header)
            self._logger.info("Found user ID", extra={"user_email": email, "user_id": user_id})

            # Pace the two calls to stay under Slack's per-method rate limits
            self._logger.info("Waiting before sending message", extra={"delay_ms": delay_ms})
            await self._wait_ms(delay_ms)

            self._logger.info("Sending direct message", extra={"user_id": user_id})
            message = await self._send_message(client, user_id, params.text, base_url, auth_header)

        self._logger.info("Successfully sent direct message", extra={"user_email": email})

        return ActionResult(
            user_email=email,
            user_id=user_id,
            text=params.text,
            ts=message.get("ts"),
            ok=message.get("ok"),
        )

    async def _lookup_user_id(
        self, client: httpx.AsyncClient, email: str, base_url: str, auth_header: str
    ) -> str:
        try:
            response = await lookup_user_by_email(client, email, base_url, auth_header)
        except httpx.HTTPError as exc:
            raise ActionError(f"Failed to lookup user {email}: {exc}", ErrorKind.LOOKUP) from exc

        data = _json_body(response)

        if not response.is_success:
            if response.status_code == 404 or data.get("error") == "users_not_found":
                raise ActionError(
                    f"User not found with email: {email}",
                    ErrorKind.USER_NOT_FOUND,
                    status_code=response.status_code,
                )
            raise ActionError(
                f"Failed to lookup user {email}: {response.status_code} {response.reason_phrase}",
                ErrorKind.LOOKUP,
                status_code=response.status_code,
            )

        if data.get("ok") is not True:
            raise ActionError(
                f"Slack API error during user lookup: {data.get('error') or 'Unknown error'}",
                ErrorKind.LOOKUP,
                status_code=response.status_code,
            )

        user = data.get("user")
        user_id = user.get("id") if isinstance(user, dict) else None
        if not user_id:
            raise ActionError(
                f"No user ID found in response for email: {email}",
                ErrorKind.LOOKUP,
                status_code=response.status_code,
            )
        return user_id

    async def _send_message(
        self, client: httpx.AsyncClient, user_id: str, text: str, base_url: str, auth_header: str
    ) -> dict:
        try:
            response = await send_direct_message(client, user_id, text, base_url, auth_header)
        except httpx.HTTPError as exc:
            raise ActionError(f"Failed to send message: {exc}", ErrorKind.SEND) from exc

        if not response.is_success:
            raise ActionError(
                f"Failed to send message: {response.status_code} {response.reason_phrase}",
                ErrorKind.SEND,
                status_code=response.status_code,
            )

        data = _json_body(response)
        if data.get("ok") is not True:
            raise ActionError(
                f"Slack API error during message send: {data.get('error') or 'Unknown error'}",
                ErrorKind.SEND,
                status_code=response.status_code,
            )
        return data

    async def error(
        self,
        params: ErrorParameters | dict,
        context: ExecutionContext | dict | None = None,
    ) -> RetryResult:
        """Decide whether the failed invocation should be retried.

        Returns RetryResult after the configured backoff for rate limits and
        gateway errors. Re-raises the original error when it is fatal.
        Anything unclassified follows ``settings.unknown_error_policy``.
        """
        params = ErrorParameters.model_validate(params)
        exc = params.error

        self._logger.error(
            "Slack send message error: %s",
            exc,
            extra={"user_email": params.user_email, "error_type": type(exc).__name__},
        )

        error_class = classify_error(exc)

        if error_class in (ErrorClass.RATE_LIMITED, ErrorClass.SERVER_ERROR):
            backoff_ms = (
                self.settings.rate_limit_backoff_ms
                if error_class is ErrorClass.RATE_LIMITED
                else self.settings.server_error_backoff_ms
            )
            self._logger.info(
                "Retryable error detected, waiting before retry",
                extra={"error_class": error_class.value, "backoff_ms": backoff_ms},
            )
            await self._wait_ms(backoff_ms)
            return RetryResult()

        if error_class is ErrorClass.FATAL:
            self._logger.error("Fatal error - not retrying")
            raise exc

        if self.settings.unknown_error_policy == "raise":
            self._logger.error("Unclassified error - not retrying")
            raise exc
        return RetryResult()

    async def halt(
        self,
        params: HaltParameters | dict,
        context: ExecutionContext | dict | None = None,
    ) -> HaltResult:
        """Acknowledge a halt. No cleanup is needed for this action."""
        params = HaltParameters.model_validate(params)
        user_email = params.user_email or "unknown"

        self._logger.info(
            "Slack message job halted (%s) for user: %s",
            params.reason,
            user_email,
        )

        return HaltResult(
            user_email=user_email,
            reason=params.reason,
            halted_at=datetime.now(timezone.utc).isoformat(),
        )


@lru_cache
def get_action() -> SlackDirectMessageAction:
    """Return the cached default action instance."""
    return SlackDirectMessageAction()


async def invoke(params: JobParameters | dict, context: ExecutionContext | dict) -> ActionResult:
    """Module-level ``invoke`` bound to the default action."""
    return await get_action().invoke(params, context)


async def error(
    params: ErrorParameters | dict, context: ExecutionContext | dict | None = None
) -> RetryResult:
    """Module-level ``error`` bound to the default action."""
    return await get_action().error(params, context)


async def halt(params: HaltParameters | dict, context: ExecutionContext | dict | None = None) -> HaltResult:
    """Module-level ``halt`` bound to the default action."""
    return await get_action().halt(params, context)
