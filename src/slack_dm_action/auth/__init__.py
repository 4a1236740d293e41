"""Authorization header resolution: bearer, basic and OAuth2 variants."""

from slack_dm_action.auth.methods import (
    AuthMethod,
    get_authorization_header,
    select_auth_method,
)
from slack_dm_action.auth.oauth2 import fetch_client_credentials_token

__all__ = [
    "AuthMethod",
    "fetch_client_credentials_token",
    "get_authorization_header",
    "select_auth_method",
]
