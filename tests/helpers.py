"""Test helpers for faking Slack and OAuth2 HTTP endpoints."""

import json
from collections.abc import Callable

import httpx

SLACK_URL = "https://slack.com"


def json_response(status_code: int, body: dict | None = None, **kwargs) -> httpx.Response:
    """Build an httpx.Response carrying a JSON body."""
    return httpx.Response(status_code, content=json.dumps(body or {}), **kwargs)


class RecordingTransport(httpx.MockTransport):
    """MockTransport that replays queued responses and records requests."""

    def __init__(self, *responses: httpx.Response | Callable[[httpx.Request], httpx.Response]):
        self.requests: list[httpx.Request] = []
        self._responses = list(responses)
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        response = self._responses.pop(0)
        return response(request) if callable(response) else response
