"""
Aggregation — shared link to file collection.

aggregate() turns a LinkReference into FileRecords, raising ResolutionError
when the link is invalid or Drive gives us nothing to work with.
load_files() is the top-level boundary: resolve + aggregate, and any
failure becomes an empty collection. A partially fetched folder is never
returned.
"""

from concurrent.futures import ThreadPoolExecutor, wait

from adapters.drive import get_file_metadata, list_folder
from extractors.prompt import PREVIEW_CHARS
from logging_config import logger, log_recovered
from models import (
    ErrorKind,
    FileDescriptor,
    FileRecord,
    FolderTalkError,
    LinkKind,
    LinkReference,
    ResolutionError,
)
from tools.content import fetch_record
from validation import resolve_link

# Concurrent file fetches per folder
MAX_FETCH_WORKERS = 8

# Adapter failures that mean "this link doesn't resolve for you"
_RESOLUTION_KINDS = frozenset({
    ErrorKind.NOT_FOUND,
    ErrorKind.PERMISSION_DENIED,
    ErrorKind.AUTH_EXPIRED,
    ErrorKind.INVALID_INPUT,
})


def _as_resolution_error(error: FolderTalkError, message: str) -> FolderTalkError:
    """Re-label access/not-found failures as ResolutionError; pass others through."""
    if isinstance(error, ResolutionError) or error.kind not in _RESOLUTION_KINDS:
        return error
    return ResolutionError(error.kind, f"{message}: {error.message}", details=error.details)


def _aggregate_document(
    file_id: str, token: str, preview_chars: int | None
) -> list[FileRecord]:
    try:
        metadata = get_file_metadata(file_id, token)
    except FolderTalkError as e:
        raise _as_resolution_error(e, "access denied or not found") from e

    if not metadata.get("id"):
        raise ResolutionError(None, "access denied or not found", details={"file_id": file_id})

    descriptor = FileDescriptor.from_api(metadata)
    return [fetch_record(descriptor, token, preview_chars)]


def _aggregate_folder(
    folder_id: str, token: str, preview_chars: int | None, max_workers: int
) -> list[FileRecord]:
    try:
        listing = list_folder(folder_id, token)
    except FolderTalkError as e:
        raise _as_resolution_error(e, "no files found or access denied") from e

    if listing is None:
        raise ResolutionError(None, "no files found or access denied", details={"folder_id": folder_id})

    if not listing.file_count:
        return []

    with ThreadPoolExecutor(max_workers=min(max_workers, listing.file_count)) as executor:
        futures = [
            executor.submit(fetch_record, descriptor, token, preview_chars)
            for descriptor in listing.files
        ]
        # Every fetch settles before any failure is raised
        wait(futures)

    # Listing order; the first failed fetch re-raises here
    return [future.result() for future in futures]


def aggregate(
    reference: LinkReference,
    token: str,
    *,
    preview_chars: int | None = PREVIEW_CHARS,
    max_workers: int = MAX_FETCH_WORKERS,
) -> list[FileRecord]:
    """
    Fetch every file a link refers to.

    Args:
        reference: Parsed link
        token: OAuth bearer token
        preview_chars: Characters of content to retain per file (None = all).
            Files cut short are fetched in full later, on request.
        max_workers: Concurrent fetches for folders

    Returns:
        One record for a document; one per direct child for a folder,
        in listing order.

    Raises:
        ResolutionError: Invalid reference, access denied, not found, or no listing
        FolderTalkError: A content fetch failed (whole aggregation aborted)
    """
    if reference.kind is LinkKind.DOCUMENT:
        records = _aggregate_document(reference.id, token, preview_chars)
    elif reference.kind is LinkKind.FOLDER:
        records = _aggregate_folder(reference.id, token, preview_chars, max_workers)
    else:
        raise ResolutionError(
            ErrorKind.INVALID_INPUT, "Invalid Google Drive folder or document link"
        )

    logger.info(f"Aggregated {len(records)} file(s) from {reference.kind.value} {reference.id}")
    return records


def load_files(
    link: str,
    token: str,
    *,
    preview_chars: int | None = PREVIEW_CHARS,
) -> list[FileRecord]:
    """
    Resolve a link and aggregate it, failing to an empty collection.

    Never raises: invalid links, denied access and fetch failures all
    yield [] (and a warning in the log).
    """
    try:
        return aggregate(resolve_link(link), token, preview_chars=preview_chars)
    except Exception as e:
        log_recovered("aggregate", e)
        return []
