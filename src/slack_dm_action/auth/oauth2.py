"""OAuth2 client-credentials token exchange."""

import base64
import logging

import httpx

from slack_dm_action.errors import ActionError, ErrorKind

logger = logging.getLogger(__name__)

# authStyle value that sends client_id/client_secret in the form body
AUTH_STYLE_IN_PARAMS = "InParams"


def basic_credentials(username: str, password: str) -> str:
    """Return the base64 payload of an HTTP Basic credential (no scheme prefix)."""
    return base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")


async def fetch_client_credentials_token(
    client: httpx.AsyncClient,
    token_url: str,
    client_id: str,
    client_secret: str,
    *,
    scope: str | None = None,
    audience: str | None = None,
    auth_style: str | None = None,
) -> str:
    """Exchange client credentials for an access token.

    Sends a form-encoded ``grant_type=client_credentials`` POST. With
    ``auth_style == "InParams"`` the client identity goes in the form body;
    any other value (including None) sends it as an HTTP Basic header.

    Returns:
        The raw access token, without a "Bearer " prefix.

    Raises:
        ActionError(TOKEN_EXCHANGE): transport failure, non-2xx status, or a
            2xx body without ``access_token``.
    """
    form = {"grant_type": "client_credentials"}
    if scope:
        form["scope"] = scope
    if audience:
        form["audience"] = audience

    headers = {"Accept": "application/json"}
    if auth_style == AUTH_STYLE_IN_PARAMS:
        form["client_id"] = client_id
        form["client_secret"] = client_secret
    else:
        headers["Authorization"] = f"Basic {basic_credentials(client_id, client_secret)}"

    try:
        response = await client.post(token_url, data=form, headers=headers)
    except httpx.HTTPError as exc:
        raise ActionError(
            f"OAuth2 token request to {token_url} failed: {exc}",
            ErrorKind.TOKEN_EXCHANGE,
        ) from exc

    if not response.is_success:
        try:
            body = response.json()
        except ValueError:
            body = response.text
        raise ActionError(
            f"OAuth2 token request failed: {response.status_code} "
            f"{response.reason_phrase} - {body}",
            ErrorKind.TOKEN_EXCHANGE,
            status_code=response.status_code,
        )

    try:
        payload = response.json()
    except ValueError:
        payload = None
    token = payload.get("access_token") if isinstance(payload, dict) else None
    if not token:
        raise ActionError(
            "Malformed token response: no access_token in OAuth2 token response",
            ErrorKind.TOKEN_EXCHANGE,
            status_code=response.status_code,
        )

    logger.info("Obtained OAuth2 client-credentials token", extra={"token_url": token_url})
    return token
