"""
Drive adapter — Google Drive API wrapper.

Provides file metadata, plain-text export, raw download and folder listing.
Every call takes the bearer token explicitly; nothing is cached.
"""

from typing import Any, cast

from logging_config import log_api_call, log_api_result, logger
from models import FileDescriptor, FolderListing, FolderTalkError, ErrorKind
from retry import with_retry
from validation import validate_drive_id
from adapters.services import build_drive_service


# Common MIME types
GOOGLE_DOC_MIME = "application/vnd.google-apps.document"
TEXT_PLAIN_MIME = "text/plain"

# Fields for file metadata: identity and routing only
FILE_METADATA_FIELDS = "id,name,mimeType"

# Fields for folder listing
FOLDER_LIST_FIELDS = "nextPageToken,files(id,name,mimeType)"

# Max pages to fetch eagerly (3 pages × 100 items = 300 items)
FOLDER_LIST_MAX_PAGES = 3
FOLDER_LIST_PAGE_SIZE = 100


def _validate_drive_id(drive_id: str, param_name: str = "folder_id") -> None:
    """Raise FolderTalkError if drive_id is unsafe to put inside a Drive query."""
    try:
        validate_drive_id(drive_id, param_name)
    except ValueError as e:
        raise FolderTalkError(
            ErrorKind.INVALID_INPUT, str(e), details={param_name: drive_id}
        ) from e


@with_retry(max_attempts=3, delay_ms=1000)
def get_file_metadata(file_id: str, token: str) -> dict[str, Any]:
    """
    Get id, name and mimeType for a single file.

    Args:
        file_id: The file ID
        token: OAuth bearer token

    Returns:
        Raw files resource dict. May lack "id" if the API returned an
        error body instead of raising.

    Raises:
        FolderTalkError: On API failure
    """
    log_api_call("drive", "files.get", fileId=file_id)
    service = build_drive_service(token)

    result = (
        service.files()
        .get(fileId=file_id, fields=FILE_METADATA_FIELDS, supportsAllDrives=True)
        .execute()
    )
    log_api_result("drive", "files.get")
    return cast(dict[str, Any], result)


@with_retry(max_attempts=3, delay_ms=1000)
def export_file(file_id: str, mime_type: str, token: str) -> bytes:
    """
    Export a Google Workspace file to the given MIME type.

    For native Docs, use this with text/plain.
    For uploaded files, use download_file() instead.

    Raises:
        FolderTalkError: On API failure
    """
    log_api_call("drive", "files.export", fileId=file_id, mimeType=mime_type)
    service = build_drive_service(token)

    # Export returns bytes directly
    result = (
        service.files()
        .export(fileId=file_id, mimeType=mime_type)
        .execute()
    )
    log_api_result("drive", "files.export")
    return cast(bytes, result)


@with_retry(max_attempts=3, delay_ms=1000)
def download_file(file_id: str, token: str) -> bytes:
    """
    Download raw file bytes (alt=media).

    Raises:
        FolderTalkError: On API failure
    """
    log_api_call("drive", "files.get_media", fileId=file_id)
    service = build_drive_service(token)

    result = (
        service.files()
        .get_media(fileId=file_id, supportsAllDrives=True)
        .execute()
    )
    log_api_result("drive", "files.get_media")
    return cast(bytes, result)


@with_retry(max_attempts=3, delay_ms=1000)
def list_folder(folder_id: str, token: str) -> FolderListing | None:
    """
    List direct children of a Drive folder, in name order.

    Fetches up to 3 pages (300 items). Does not recurse. Subfolders are
    returned as children like any other file.

    CRITICAL: Both supportsAllDrives=True AND includeItemsFromAllDrives=True
    are required for shared drives — omitting either returns 0 results with no error.

    Args:
        folder_id: The folder's Drive file ID
        token: OAuth bearer token

    Returns:
        FolderListing, or None if the first page carried no file list at all
        (as opposed to an empty one).

    Raises:
        FolderTalkError: On API failure or invalid folder_id
    """
    _validate_drive_id(folder_id, "folder_id")
    service = build_drive_service(token)

    query = f"'{folder_id}' in parents and trashed = false"

    files: list[FileDescriptor] = []
    page_token = None
    pages_fetched = 0
    truncated = False

    while pages_fetched < FOLDER_LIST_MAX_PAGES:
        kwargs: dict = dict(
            q=query,
            pageSize=FOLDER_LIST_PAGE_SIZE,
            fields=FOLDER_LIST_FIELDS,
            orderBy="name",
            supportsAllDrives=True,
            includeItemsFromAllDrives=True,
        )
        if page_token:
            kwargs["pageToken"] = page_token

        log_api_call("drive", "files.list", q=query, pageToken=page_token)
        response = service.files().list(**kwargs).execute()
        pages_fetched += 1

        if "files" not in response:
            if pages_fetched == 1:
                return None
            break

        files.extend(FileDescriptor.from_api(item) for item in response["files"])

        page_token = response.get("nextPageToken")
        if not page_token:
            break
    else:
        # Exited because pages_fetched == FOLDER_LIST_MAX_PAGES
        truncated = bool(page_token)

    log_api_result("drive", "files.list", len(files))
    if truncated:
        logger.warning(
            f"Folder {folder_id} has more than {len(files)} items; only the first {len(files)} are used"
        )

    return FolderListing(files=files, truncated=truncated)
