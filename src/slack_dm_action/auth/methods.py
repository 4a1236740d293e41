"""Authorization header resolution from the execution context.

Four methods are supported, tried in the order they are declared on
``AuthMethod``. The first whose secrets are present wins; methods are never
combined.
"""

import logging
from enum import Enum

import httpx

from slack_dm_action.auth.oauth2 import basic_credentials, fetch_client_credentials_token
from slack_dm_action.errors import ActionError, ErrorKind
from slack_dm_action.models.context import ExecutionContext

logger = logging.getLogger(__name__)

# Secrets
BEARER_AUTH_TOKEN = "BEARER_AUTH_TOKEN"
BASIC_USERNAME = "BASIC_USERNAME"
BASIC_PASSWORD = "BASIC_PASSWORD"
OAUTH2_AUTHORIZATION_CODE_ACCESS_TOKEN = "OAUTH2_AUTHORIZATION_CODE_ACCESS_TOKEN"
OAUTH2_CLIENT_CREDENTIALS_CLIENT_SECRET = "OAUTH2_CLIENT_CREDENTIALS_CLIENT_SECRET"

# Environment
OAUTH2_CLIENT_CREDENTIALS_TOKEN_URL = "OAUTH2_CLIENT_CREDENTIALS_TOKEN_URL"
OAUTH2_CLIENT_CREDENTIALS_CLIENT_ID = "OAUTH2_CLIENT_CREDENTIALS_CLIENT_ID"
OAUTH2_CLIENT_CREDENTIALS_SCOPE = "OAUTH2_CLIENT_CREDENTIALS_SCOPE"
OAUTH2_CLIENT_CREDENTIALS_AUDIENCE = "OAUTH2_CLIENT_CREDENTIALS_AUDIENCE"
OAUTH2_CLIENT_CREDENTIALS_AUTH_STYLE = "OAUTH2_CLIENT_CREDENTIALS_AUTH_STYLE"


class AuthMethod(str, Enum):
    """Supported credential schemes, in priority order."""

    BEARER = "bearer"
    BASIC = "basic"
    OAUTH2_AUTHORIZATION_CODE = "oauth2_authorization_code"
    OAUTH2_CLIENT_CREDENTIALS = "oauth2_client_credentials"


# Secrets each method needs, all of which must be non-empty
REQUIRED_SECRETS: dict[AuthMethod, tuple[str, ...]] = {
    AuthMethod.BEARER: (BEARER_AUTH_TOKEN,),
    AuthMethod.BASIC: (BASIC_USERNAME, BASIC_PASSWORD),
    AuthMethod.OAUTH2_AUTHORIZATION_CODE: (OAUTH2_AUTHORIZATION_CODE_ACCESS_TOKEN,),
    AuthMethod.OAUTH2_CLIENT_CREDENTIALS: (OAUTH2_CLIENT_CREDENTIALS_CLIENT_SECRET,),
}


def _bearer(token: str) -> str:
    return token if token.startswith("Bearer ") else f"Bearer {token}"


def select_auth_method(context: ExecutionContext) -> AuthMethod:
    """Return the first method whose required secrets are all present.

    Raises:
        ActionError(CONFIGURATION): no method is configured.
    """
    for method in AuthMethod:
        if all(context.secret(name) for name in REQUIRED_SECRETS[method]):
            return method

    accepted = ", ".join(
        dict.fromkeys(name for names in REQUIRED_SECRETS.values() for name in names)
    )
    raise ActionError(
        f"No authentication configured. Provide one of: {accepted}",
        ErrorKind.CONFIGURATION,
    )


async def get_authorization_header(context: ExecutionContext, client: httpx.AsyncClient) -> str:
    """Build the ``Authorization`` header value for this invocation.

    Client-credentials performs a token exchange on every call; nothing is
    cached between invocations.

    Raises:
        ActionError(CONFIGURATION): no method configured, or client-credentials
            is missing its token URL or client ID.
        ActionError(TOKEN_EXCHANGE): the token endpoint rejected the request.
    """
    method = select_auth_method(context)
    logger.debug("Resolved authentication method", extra={"auth_method": method.value})

    if method is AuthMethod.BEARER:
        return _bearer(context.secret(BEARER_AUTH_TOKEN))

    if method is AuthMethod.BASIC:
        username = context.secret(BASIC_USERNAME)
        password = context.secret(BASIC_PASSWORD)
        return f"Basic {basic_credentials(username, password)}"

    if method is AuthMethod.OAUTH2_AUTHORIZATION_CODE:
        return _bearer(context.secret(OAUTH2_AUTHORIZATION_CODE_ACCESS_TOKEN))

    token_url = context.env(OAUTH2_CLIENT_CREDENTIALS_TOKEN_URL)
    client_id = context.env(OAUTH2_CLIENT_CREDENTIALS_CLIENT_ID)
    if not token_url or not client_id:
        raise ActionError(
            "OAuth2 client credentials flow requires "
            f"{OAUTH2_CLIENT_CREDENTIALS_TOKEN_URL} and {OAUTH2_CLIENT_CREDENTIALS_CLIENT_ID} "
            "in environment",
            ErrorKind.CONFIGURATION,
        )

    token = await fetch_client_credentials_token(
        client,
        token_url,
        client_id,
        context.secret(OAUTH2_CLIENT_CREDENTIALS_CLIENT_SECRET),
        scope=context.env(OAUTH2_CLIENT_CREDENTIALS_SCOPE),
        audience=context.env(OAUTH2_CLIENT_CREDENTIALS_AUDIENCE),
        auth_style=context.env(OAUTH2_CLIENT_CREDENTIALS_AUTH_STYLE),
    )
    return f"Bearer {token}"
