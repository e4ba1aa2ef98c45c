"""
Tools — the content pipeline.

- content: one Drive file → text
- aggregate: shared link → file collection (fail to empty at the top)
- prompt: collection + question → system prompt
- session: conversation state and the per-turn loop

cli.py and server.py are thin wrappers over these.
"""

from .content import UNSUPPORTED_CONTENT, fetch_content, fetch_record
from .aggregate import aggregate, load_files
from .prompt import build_system_prompt, prepare_prompt_files
from .session import ChatSession, SessionState, FALLBACK_ERROR, FALLBACK_NO_RESPONSE

__all__ = [
    "UNSUPPORTED_CONTENT", "fetch_content", "fetch_record",
    "aggregate", "load_files",
    "build_system_prompt", "prepare_prompt_files",
    "ChatSession", "SessionState", "FALLBACK_ERROR", "FALLBACK_NO_RESPONSE",
]
