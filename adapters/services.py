"""
Google API service initialization.

Builds Drive service objects from a bearer token supplied by the caller.
Services are NOT cached: folder aggregation fetches files from worker
threads, and shared httplib2 connections corrupt SSL state under
concurrency. Each call gets its own connection.

All services use a 60-second timeout to prevent indefinite hangs
when Google APIs are slow or network connections stall.
"""

import google_auth_httplib2
import httplib2
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build, Resource

__all__ = [
    "build_drive_service",
    "API_TIMEOUT",
]

# Default timeout for all Google API calls (seconds)
API_TIMEOUT = 60


def _get_authorized_http(token: str) -> google_auth_httplib2.AuthorizedHttp:
    """Create an HTTP client that sends `Authorization: Bearer <token>`."""
    creds = Credentials(token=token)
    http = httplib2.Http(timeout=API_TIMEOUT)
    return google_auth_httplib2.AuthorizedHttp(creds, http=http)


def build_drive_service(token: str) -> Resource:
    """Build a Drive v3 service bound to the given bearer token."""
    # static_discovery avoids a network round-trip for the discovery doc
    return build(
        "drive", "v3",
        http=_get_authorized_http(token),
        cache_discovery=False,
        static_discovery=True,
    )
