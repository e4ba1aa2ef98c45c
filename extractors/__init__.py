"""
Extractors — Pure functions for content extraction.

No MCP awareness, no API calls, no logging. Just transform input → output.
Easily testable with plain records.
"""

from .text import decode_text
from .prompt import (
    PREVIEW_CHARS,
    find_requested_file,
    render_system_prompt,
    truncate,
)
from .folder import extract_collection_summary

__all__ = [
    "decode_text",
    "PREVIEW_CHARS",
    "find_requested_file",
    "render_system_prompt",
    "truncate",
    "extract_collection_summary",
]
