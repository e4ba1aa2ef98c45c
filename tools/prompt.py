"""
Prompt building — selection, lazy full fetch, rendering.

If the user's message names a file we only hold a preview of, that one
file is fetched in full before the prompt is rendered. This is the only
fetch outside aggregation.
"""

from extractors.prompt import find_requested_file, render_system_prompt
from logging_config import logger, log_recovered
from models import ConversationTurn, FileRecord, FolderTalkError
from tools.content import fetch_content


def prepare_prompt_files(
    files: list[FileRecord],
    user_turn: ConversationTurn | None,
    token: str,
) -> tuple[list[FileRecord], FileRecord | None]:
    """
    Pick the requested file and make sure its full content is held.

    Args:
        files: Current collection
        user_turn: The message being answered (None: nothing is requested)
        token: OAuth bearer token for the full fetch

    Returns:
        (collection, requested). The collection is a new list with the
        requested record replaced if it was re-fetched; otherwise the same
        records. requested is None when no file name appears in the message.
    """
    requested = find_requested_file(files, user_turn.content if user_turn else None)
    if requested is None or requested.is_full_content:
        return files, requested

    try:
        full = requested.with_content(fetch_content(requested.descriptor, token))
    except FolderTalkError as e:
        # Keep the turn going on the preview we already have
        log_recovered("prompt", e)
        return files, requested

    logger.info(f"Fetched full content of {requested.name} ({len(full.content)} chars)")
    return [full if f.id == full.id else f for f in files], full


def build_system_prompt(
    files: list[FileRecord],
    link: str,
    user_turn: ConversationTurn | None,
    token: str,
) -> str:
    """
    Build the grounding text for one turn.

    The requested file (if any) is included in full; every other file
    contributes at most PREVIEW_CHARS characters.
    """
    prepared, requested = prepare_prompt_files(files, user_turn, token)
    return render_system_prompt(prepared, link, requested.id if requested else None)
