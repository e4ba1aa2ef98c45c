"""
Chat session — conversation state and the per-turn pipeline.

One ChatSession holds everything that was ambient UI state: the loaded
link, the file collection, the conversation history and whether a send
is in flight. Collaborators (token source, chat endpoint) are injected.

Turn lifecycle (Idle → Sending → Idle):
1. Append the user turn
2. Build a fresh system turn from the collection (may fetch one file in full)
3. Send [system, ...history, user] to the chat endpoint
4. Append the reply, or a fallback when there is none or the call failed

Nothing in a turn raises to the caller; the session stays usable.
"""

import logging
import threading
from enum import Enum
from typing import Callable

from adapters.chat import complete_chat
from auth import TokenProvider
from extractors.prompt import render_system_prompt
from logging_config import logger, log_recovered
from models import ConversationTurn, FileRecord, Role
from tools.aggregate import load_files
from tools.prompt import prepare_prompt_files

FALLBACK_NO_RESPONSE = "No response."
FALLBACK_ERROR = "Error contacting OpenAI API."

ChatCompleter = Callable[[list[ConversationTurn]], str | None]


class SessionState(Enum):
    IDLE = "idle"
    SENDING = "sending"


class ChatSession:
    """
    A single user's conversation about one Drive folder or document.

    Args:
        token_provider: Supplies the Drive bearer token (asked once, lazily)
        complete: Chat endpoint call; returns reply text or None
        link: Initially loaded link, if files were aggregated elsewhere
        files: Initially loaded collection
    """

    def __init__(
        self,
        token_provider: TokenProvider,
        complete: ChatCompleter = complete_chat,
        link: str = "",
        files: list[FileRecord] | None = None,
    ):
        self._token_provider = token_provider
        self._complete = complete
        self._token: str | None = None
        self._send_lock = threading.Lock()
        self._history: list[ConversationTurn] = []
        self.link = link
        self.files: list[FileRecord] = list(files or [])

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return SessionState.SENDING if self._send_lock.locked() else SessionState.IDLE

    @property
    def is_sending(self) -> bool:
        return self.state is SessionState.SENDING

    @property
    def history(self) -> tuple[ConversationTurn, ...]:
        return tuple(self._history)

    @property
    def display_history(self) -> tuple[ConversationTurn, ...]:
        """History as shown to the user: no system turns."""
        return tuple(t for t in self._history if t.role is not Role.SYSTEM)

    def _get_token(self) -> str:
        if self._token is None:
            self._token = self._token_provider.request_token()
        return self._token

    # ------------------------------------------------------------------
    # Link submission
    # ------------------------------------------------------------------

    def load(self, link: str) -> list[FileRecord]:
        """
        Load a new link, replacing the collection wholesale.

        Any failure leaves an empty collection. A blank link changes nothing.
        """
        link = link.strip()
        if not link:
            return self.files

        try:
            token = self._get_token()
        except Exception as e:
            log_recovered("auth", e)
            token = None

        self.link = link
        self.files = load_files(link, token) if token is not None else []
        return self.files

    # ------------------------------------------------------------------
    # Turns
    # ------------------------------------------------------------------

    def _system_turn(self, user_turn: ConversationTurn) -> ConversationTurn:
        files = self.files
        prepared, requested = prepare_prompt_files(files, user_turn, self._get_token())
        # Keep the full fetch for later turns, unless load() replaced the collection meanwhile
        if self.files is files:
            self.files = prepared
        prompt = render_system_prompt(prepared, self.link, requested.id if requested else None)
        return ConversationTurn(Role.SYSTEM, prompt)

    def submit(self, text: str) -> ConversationTurn | None:
        """
        Send a user message and append the assistant's reply.

        Returns:
            The appended assistant turn, or None if the message was blank
            or another send is still in flight (nothing is appended then).
        """
        if not text or not text.strip():
            return None
        if not self._send_lock.acquire(blocking=False):
            logger.debug("submit ignored: a send is already in flight")
            return None

        try:
            prior = [t for t in self._history if t.role is not Role.SYSTEM]
            user_turn = ConversationTurn(Role.USER, text)
            self._history.append(user_turn)

            try:
                system_turn = self._system_turn(user_turn)
                reply = self._complete([system_turn, *prior, user_turn])
                content = reply or FALLBACK_NO_RESPONSE
            except Exception as e:
                log_recovered("chat", e, logging.ERROR)
                content = FALLBACK_ERROR

            assistant_turn = ConversationTurn(Role.ASSISTANT, content)
            self._history.append(assistant_turn)
            return assistant_turn
        finally:
            self._send_lock.release()
