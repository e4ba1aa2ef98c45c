"""
Prompt extractor — pure functions, no I/O.

Builds the grounding text sent as the system turn on every chat request.
Deciding which file needs a full fetch happens here; doing the fetch
happens in tools/prompt.py.
"""

from models import FileRecord

# Characters of content each non-requested file contributes
PREVIEW_CHARS = 200

PREAMBLE = (
    "You are an expert assistant. The user will ask questions about the contents "
    "of the Google Drive folder or document at this link: {link}. "
    "Here are the files and summaries of their contents:"
)

INSTRUCTIONS = (
    "Always answer as short direct clear and concise as possible, and wherever "
    "possible provide citations (file name, or page numbers, or quoted text) for "
    "every fact or quote you use. If you are not sure about something do not try "
    "to guess. If asked about the entire folder, make sure to be accurate and "
    "precise when counting and performing arithmetic."
)


def truncate(content: str, limit: int = PREVIEW_CHARS) -> str:
    """First `limit` characters of content."""
    return content[:limit]


def find_requested_file(files: list[FileRecord], text: str | None) -> FileRecord | None:
    """
    Return the first file whose exact name occurs in text.

    Matching is a plain case-sensitive substring test in listing order.
    Files with an empty name never match.
    """
    if not text:
        return None
    for record in files:
        if record.name and record.name in text:
            return record
    return None


def _file_block(record: FileRecord, full: bool) -> str:
    content = record.content if full else truncate(record.content)
    return f"File: {record.name}\n{content}\n"


def render_system_prompt(
    files: list[FileRecord],
    link: str,
    requested_id: str | None = None,
) -> str:
    """
    Render the system prompt for one turn.

    Args:
        files: Current collection, in listing order
        link: The link the collection was loaded from
        requested_id: ID of the file to include in full; all others are
            cut to PREVIEW_CHARS. None truncates everything.

    Returns:
        Preamble naming the link, one "File: <name>" block per file, then
        the fixed answering instructions.
    """
    blocks = "\n".join(
        _file_block(record, full=record.id == requested_id) for record in files
    )
    return f"{PREAMBLE.format(link=link)}\n\n{blocks}\n\n{INSTRUCTIONS}"
