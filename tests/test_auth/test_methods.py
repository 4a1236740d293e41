"""Tests for authorization method selection and header building."""

import base64

import httpx
import pytest
from helpers import RecordingTransport, json_response

from slack_dm_action.auth import AuthMethod, get_authorization_header, select_auth_method
from slack_dm_action.errors import ActionError, ErrorKind
from slack_dm_action.models import ExecutionContext

TOKEN_URL = "https://auth.example.com/oauth/token"

BEARER = {"BEARER_AUTH_TOKEN": "xoxb-bearer"}
BASIC = {"BASIC_USERNAME": "user", "BASIC_PASSWORD": "pass"}
AUTH_CODE = {"OAUTH2_AUTHORIZATION_CODE_ACCESS_TOKEN": "xoxp-authcode"}
CLIENT_CREDS = {"OAUTH2_CLIENT_CREDENTIALS_CLIENT_SECRET": "s3cret"}
CLIENT_CREDS_ENV = {
    "OAUTH2_CLIENT_CREDENTIALS_TOKEN_URL": TOKEN_URL,
    "OAUTH2_CLIENT_CREDENTIALS_CLIENT_ID": "client-id",
}


def _context(secrets: dict, environment: dict | None = None) -> ExecutionContext:
    return ExecutionContext(secrets=secrets, environment=environment or {})


# -- select_auth_method --


@pytest.mark.parametrize(
    ("secrets", "expected"),
    [
        (BEARER, AuthMethod.BEARER),
        (BASIC, AuthMethod.BASIC),
        (AUTH_CODE, AuthMethod.OAUTH2_AUTHORIZATION_CODE),
        (CLIENT_CREDS, AuthMethod.OAUTH2_CLIENT_CREDENTIALS),
        ({**BEARER, **BASIC, **AUTH_CODE, **CLIENT_CREDS}, AuthMethod.BEARER),
        ({**BASIC, **AUTH_CODE, **CLIENT_CREDS}, AuthMethod.BASIC),
        ({**AUTH_CODE, **CLIENT_CREDS}, AuthMethod.OAUTH2_AUTHORIZATION_CODE),
    ],
)
def test_select_auth_method_priority(secrets: dict, expected: AuthMethod):
    """The first configured method in priority order wins."""
    assert select_auth_method(_context(secrets)) is expected


def test_basic_needs_both_secrets():
    """A username without a password does not select basic auth."""
    context = _context({"BASIC_USERNAME": "user", **AUTH_CODE})
    assert select_auth_method(context) is AuthMethod.OAUTH2_AUTHORIZATION_CODE


def test_empty_secret_is_ignored():
    """An empty bearer token falls through to the next method."""
    context = _context({"BEARER_AUTH_TOKEN": "", **BASIC})
    assert select_auth_method(context) is AuthMethod.BASIC


def test_no_method_configured():
    """No credentials raises a configuration error naming every accepted secret."""
    with pytest.raises(ActionError) as exc_info:
        select_auth_method(_context({"UNRELATED": "x"}))

    assert exc_info.value.kind is ErrorKind.CONFIGURATION
    for name in (
        "BEARER_AUTH_TOKEN",
        "BASIC_USERNAME",
        "BASIC_PASSWORD",
        "OAUTH2_AUTHORIZATION_CODE_ACCESS_TOKEN",
        "OAUTH2_CLIENT_CREDENTIALS_CLIENT_SECRET",
    ):
        assert name in str(exc_info.value)


# -- get_authorization_header --


async def _header(context: ExecutionContext, transport: httpx.MockTransport | None = None) -> str:
    async with httpx.AsyncClient(transport=transport or RecordingTransport()) as client:
        return await get_authorization_header(context, client)


async def test_bearer_header_is_prefixed():
    """A raw bearer token gets the Bearer scheme."""
    assert await _header(_context(BEARER)) == "Bearer xoxb-bearer"


async def test_bearer_header_not_double_prefixed():
    """A token already carrying the scheme is used as-is."""
    context = _context({"BEARER_AUTH_TOKEN": "Bearer xoxb-bearer"})
    assert await _header(context) == "Bearer xoxb-bearer"


async def test_basic_header():
    """Basic auth base64-encodes username:password."""
    expected = "Basic " + base64.b64encode(b"user:pass").decode()
    assert await _header(_context(BASIC)) == expected == "Basic dXNlcjpwYXNz"


async def test_authorization_code_header():
    """A pre-issued authorization-code token is sent as a bearer token."""
    assert await _header(_context(AUTH_CODE)) == "Bearer xoxp-authcode"


async def test_client_credentials_header():
    """Client credentials exchanges for a token and prefixes it."""
    transport = RecordingTransport(json_response(200, {"access_token": "xoxe-issued"}))

    header = await _header(_context(CLIENT_CREDS, CLIENT_CREDS_ENV), transport)

    assert header == "Bearer xoxe-issued"
    assert len(transport.requests) == 1
    assert str(transport.requests[0].url) == TOKEN_URL


async def test_client_credentials_exchanges_every_time():
    """No token is cached between calls."""
    transport = RecordingTransport(
        json_response(200, {"access_token": "first"}),
        json_response(200, {"access_token": "second"}),
    )
    context = _context(CLIENT_CREDS, CLIENT_CREDS_ENV)

    assert await _header(context, transport) == "Bearer first"
    assert await _header(context, transport) == "Bearer second"
    assert len(transport.requests) == 2


@pytest.mark.parametrize(
    "missing", ["OAUTH2_CLIENT_CREDENTIALS_TOKEN_URL", "OAUTH2_CLIENT_CREDENTIALS_CLIENT_ID"]
)
async def test_client_credentials_requires_environment(missing: str):
    """Token URL and client ID are required; no request is made without them."""
    environment = {k: v for k, v in CLIENT_CREDS_ENV.items() if k != missing}
    transport = RecordingTransport()

    with pytest.raises(ActionError) as exc_info:
        await _header(_context(CLIENT_CREDS, environment), transport)

    assert exc_info.value.kind is ErrorKind.CONFIGURATION
    assert transport.requests == []
