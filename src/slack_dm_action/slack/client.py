"""Slack Web API request builders.

Both functions return the raw ``httpx.Response``; interpreting status codes
and the ``ok``/``error`` fields is left to the caller.
"""

from urllib.parse import quote

import httpx

# Characters encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_uri_component(value: str) -> str:
    """Percent-encode a query value (``+`` -> ``%2B``, ``@`` -> ``%40``)."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


async def lookup_user_by_email(
    client: httpx.AsyncClient, email: str, base_url: str, auth_header: str
) -> httpx.Response:
    """GET users.lookupByEmail for ``email``."""
    url = f"{base_url}/api/users.lookupByEmail?email={encode_uri_component(email)}"
    return await client.get(
        url,
        headers={
            "Authorization": auth_header,
            "Accept": "application/json",
        },
    )


async def send_direct_message(
    client: httpx.AsyncClient, user_id: str, text: str, base_url: str, auth_header: str
) -> httpx.Response:
    """POST chat.postMessage addressed to a user ID.

    Slack opens (or reuses) the bot's DM with the user when ``channel`` is a
    user ID.
    """
    return await client.post(
        f"{base_url}/api/chat.postMessage",
        headers={
            "Authorization": auth_header,
            "Accept": "application/json",
            "Content-Type": "application/json",
        },
        json={"channel": user_id, "text": text},
    )
