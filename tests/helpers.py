"""
Shared test helpers for foldertalk.

Centralizes mock wiring patterns that repeat across test files.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock, seal

from models import FileDescriptor, FileRecord

FOLDER_ID = "ABCDEFGHIJKLMNOPQRSTUVWXY"
DOC_ID = "1aBcDeFgHiJkLmNoPqRsTuVwXyZ0123"

# Drive folders appear as children of other folders
FOLDER_MIME = "application/vnd.google-apps.folder"

FOLDER_LINK = f"https://drive.google.com/drive/folders/{FOLDER_ID}"
DOC_LINK = f"https://docs.google.com/document/d/{DOC_ID}/edit"


def mock_api_chain(
    mock_service: MagicMock,
    chain: str,
    response: Any = None,
    *,
    side_effect: Any = None,
) -> MagicMock:
    """Set up a mock Google API response for a chained call.

    Each part of chain except the last is treated as a callable method
    (traversed via .return_value). Returns the final mock method.

    Examples:
        mock_api_chain(service, "files.get.execute", {"id": "f1"})
        # equivalent to: service.files().get().execute.return_value = {"id": "f1"}

        mock_api_chain(service, "files.export.execute", side_effect=make_http_error(404))
    """
    parts = chain.split(".")
    obj = mock_service
    for part in parts[:-1]:
        obj = getattr(obj, part).return_value
    final = getattr(obj, parts[-1])
    if side_effect is not None:
        final.side_effect = side_effect
    elif response is not None:
        final.return_value = response
    return final


def seal_service(mock_service: MagicMock) -> None:
    """Seal a mock service after all mock_api_chain() calls.

    Without seal, a test passes even if the adapter calls files().export()
    but the mock only set up files().get_media() — MagicMock returns a new
    MagicMock instead of raising.
    """
    seal(mock_service)


def wire_httpx_client(mock_client_cls: MagicMock) -> MagicMock:
    """Wire up httpx.Client context manager mock and return the client instance.

    Usage:
        with patch("adapters.chat.httpx.Client") as mock_client_cls:
            client = wire_httpx_client(mock_client_cls)
            client.post.return_value = response
    """
    mock_client = MagicMock()
    mock_client_cls.return_value.__enter__ = MagicMock(return_value=mock_client)
    mock_client_cls.return_value.__exit__ = MagicMock(return_value=False)
    return mock_client


def make_record(
    id: str,
    name: str,
    content: str = "",
    mime_type: str = "text/plain",
    is_full_content: bool = True,
) -> FileRecord:
    """Build a FileRecord without touching Drive."""
    return FileRecord(FileDescriptor(id, name, mime_type), content, is_full_content)
