"""
Content fetching — one Drive file to text.

Dispatch on MIME type:
- Google Docs → plain-text export
- text/plain  → raw download
- anything else → UNSUPPORTED_CONTENT, no network call

Failures are not handled here. A failed export/download propagates as
FolderTalkError and the caller decides what to do with it.
"""

from adapters.drive import (
    GOOGLE_DOC_MIME,
    TEXT_PLAIN_MIME,
    download_file,
    export_file,
)
from extractors.text import decode_text
from models import FileDescriptor, FileRecord

UNSUPPORTED_CONTENT = "[Non-text file or unsupported type]"


def is_supported(mime_type: str) -> bool:
    return mime_type in (GOOGLE_DOC_MIME, TEXT_PLAIN_MIME)


def fetch_content(descriptor: FileDescriptor, token: str) -> str:
    """
    Fetch a file's full text.

    Args:
        descriptor: File to fetch
        token: OAuth bearer token

    Returns:
        Exported/downloaded text, or UNSUPPORTED_CONTENT for other types

    Raises:
        FolderTalkError: If the export or download fails
    """
    if descriptor.mime_type == GOOGLE_DOC_MIME:
        return decode_text(export_file(descriptor.id, TEXT_PLAIN_MIME, token))
    if descriptor.mime_type == TEXT_PLAIN_MIME:
        return decode_text(download_file(descriptor.id, token))
    return UNSUPPORTED_CONTENT


def fetch_record(
    descriptor: FileDescriptor,
    token: str,
    preview_chars: int | None = None,
) -> FileRecord:
    """
    Fetch a file and wrap it as a FileRecord.

    Args:
        descriptor: File to fetch
        token: OAuth bearer token
        preview_chars: Keep only this many characters (None keeps everything).
            is_full_content records whether anything was cut. The
            unsupported-type placeholder is never cut.
    """
    content = fetch_content(descriptor, token)
    if (
        preview_chars is not None
        and is_supported(descriptor.mime_type)
        and len(content) > preview_chars
    ):
        return FileRecord(descriptor, content[:preview_chars], is_full_content=False)
    return FileRecord(descriptor, content, is_full_content=True)
