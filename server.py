#!/usr/bin/env python3
"""
foldertalk MCP Server

Two tools over one process-wide ChatSession:
- load: point the session at a shared Drive folder or document
- ask: ask a question grounded in the loaded files

The session is created on first use so importing this module doesn't
touch credentials.
"""

import os
import signal
from typing import Any

from mcp.server.fastmcp import FastMCP

from auth import get_token_provider
from extractors.folder import extract_collection_summary
from logging_config import configure_logging
from models import ErrorKind, FolderTalkError
from tools import ChatSession

mcp = FastMCP("foldertalk")

_session: ChatSession | None = None


def get_session() -> ChatSession:
    """Return the server's session, creating it on first call."""
    global _session
    if _session is None:
        _session = ChatSession(get_token_provider())
    return _session


# ============================================================================
# TOOLS
# ============================================================================

@mcp.tool()
def load(link: str) -> dict[str, Any]:
    """
    Load a shared Google Drive folder or document.

    Replaces whatever was loaded before. An invalid link, or one you
    can't access, leaves the session with no files.

    Args:
        link: https://drive.google.com/drive/folders/<id> or
              https://docs.google.com/document/d/<id>/...

    Returns:
        file_count: Number of files loaded
        summary: Markdown list of the loaded files
    """
    session = get_session()
    files = session.load(link)
    return {
        "file_count": len(files),
        "summary": extract_collection_summary(files, session.link),
    }


@mcp.tool()
def ask(question: str) -> dict[str, Any]:
    """
    Ask a question about the loaded files.

    Mention a file by its exact name to have its full content considered;
    other files are seen as short previews.

    Returns:
        reply: The assistant's answer
    """
    session = get_session()
    turn = session.submit(question)
    if turn is None:
        return FolderTalkError(
            ErrorKind.INVALID_INPUT,
            "Question was empty or another question is still being answered",
        ).to_dict()
    return {"reply": turn.content}


# ============================================================================
# SERVER ENTRY POINT
# ============================================================================

def _shutdown_handler(signum: int, frame: object) -> None:
    """Handle termination signals by exiting immediately.

    os._exit() is required because sys.exit() raises SystemExit,
    which asyncio's event loop catches and ignores.
    """
    os._exit(0)


if __name__ == "__main__":
    signal.signal(signal.SIGTERM, _shutdown_handler)
    signal.signal(signal.SIGINT, _shutdown_handler)
    configure_logging()
    mcp.run()
