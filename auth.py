"""
Token sources for foldertalk.

The OAuth handshake that issues a Drive token happens outside this
package. What foldertalk needs is a bearer token, supplied through a
TokenProvider:

- StaticTokenProvider: a token the host already has (CLI flag, env var,
  a sign-in widget callback)
- TokenFileProvider: an authorized-user token.json, refreshed when expired

get_token_provider() picks one in that order of preference.
"""

import os
from pathlib import Path
from typing import Protocol

import google_auth_httplib2
import httplib2
from google.oauth2.credentials import Credentials

from adapters.services import API_TIMEOUT
from logging_config import logger
from oauth_config import SCOPES, TOKEN_ENV_VAR, TOKEN_FILE


class TokenProvider(Protocol):
    def request_token(self) -> str:
        """Return a Drive bearer token."""
        ...


class StaticTokenProvider:
    """Hands back a token obtained elsewhere."""

    def __init__(self, token: str):
        if not token:
            raise ValueError("token must be non-empty")
        self._token = token

    def request_token(self) -> str:
        return self._token


class TokenFileProvider:
    """
    Reads an authorized-user token file.

    Expired credentials with a refresh token are refreshed over httplib2
    and written back so the next run starts with a live token.
    """

    def __init__(self, path: Path = TOKEN_FILE, scopes: list[str] | None = None):
        self.path = Path(path)
        self.scopes = scopes or SCOPES

    def _load(self) -> Credentials:
        if not self.path.exists():
            raise FileNotFoundError(
                f"{self.path} not found. Sign in with Google and save the "
                f"authorized-user token there, or set {TOKEN_ENV_VAR}."
            )
        return Credentials.from_authorized_user_file(str(self.path), self.scopes)

    def request_token(self) -> str:
        creds = self._load()

        if not creds.valid and creds.expired and creds.refresh_token:
            logger.info(f"Refreshing expired token from {self.path}")
            creds.refresh(google_auth_httplib2.Request(httplib2.Http(timeout=API_TIMEOUT)))
            self.path.write_text(creds.to_json())

        if not creds.token:
            raise FileNotFoundError(f"{self.path} holds no usable access token")
        return creds.token


def get_token_provider(token: str | None = None) -> TokenProvider:
    """
    Choose a token source.

    Order: explicit token, then $FOLDERTALK_TOKEN, then the token file.
    """
    token = token or os.environ.get(TOKEN_ENV_VAR)
    if token:
        return StaticTokenProvider(token)
    return TokenFileProvider()
