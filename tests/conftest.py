"""
Shared pytest fixtures for foldertalk tests.

Adapter mocking infrastructure lives here so adapters and tools can be
tested without hitting Google or the chat endpoint.
"""

from typing import Generator
from unittest.mock import MagicMock, patch

import pytest

from models import FileRecord
from tests.helpers import make_record


@pytest.fixture(autouse=True)
def no_retry_sleep() -> Generator[MagicMock, None, None]:
    """Retries back off with time.sleep; tests shouldn't wait for it."""
    with patch("retry.time.sleep") as mock_sleep:
        yield mock_sleep


# ============================================================================
# Drive service mocks
# ============================================================================

@pytest.fixture
def mock_drive_service() -> MagicMock:
    """Create a mock Google Drive service."""
    return MagicMock()


@pytest.fixture
def patch_drive_service(mock_drive_service: MagicMock) -> Generator[MagicMock, None, None]:
    """
    Patch build_drive_service and yield the mock service.

    Example:
        def test_something(patch_drive_service):
            patch_drive_service.files().get().execute.return_value = {"id": "123"}
            result = get_file_metadata("123", "token")
    """
    with patch("adapters.drive.build_drive_service", return_value=mock_drive_service):
        yield mock_drive_service


# ============================================================================
# File collections
# ============================================================================

@pytest.fixture
def report_text() -> str:
    """Plain-text body well past the preview length."""
    return "Quarterly report. " + "Revenue grew in every region. " * 20


@pytest.fixture
def sample_files(report_text: str) -> list[FileRecord]:
    """Three files as aggregation retains them: previews where content was long."""
    return [
        make_record("f1", "Report.txt", report_text[:200], is_full_content=False),
        make_record("f2", "Notes", "short notes", mime_type="application/vnd.google-apps.document"),
        make_record("f3", "photo.png", "[Non-text file or unsupported type]", mime_type="image/png"),
    ]
