"""
Chat adapter — chat-completion endpoint wrapper.

One POST per turn with {model, messages, temperature}. The reply is read
from choices[0].message.content; any other payload shape means "no reply"
(None), not an error. Transport failures, timeouts and bodies that aren't
JSON raise ChatEndpointError.

An HTTP error status whose body is still JSON is treated like any other
payload: logged, then searched for a reply.
"""

import os
from typing import Any

import httpx

from logging_config import log_api_call, log_api_result, logger
from models import ChatEndpointError, ConversationTurn, ErrorKind

__all__ = [
    "complete_chat",
    "extract_reply",
    "CHAT_ENDPOINT",
    "CHAT_MODEL",
    "CHAT_TEMPERATURE",
    "CHAT_TIMEOUT",
]

CHAT_ENDPOINT = os.environ.get(
    "FOLDERTALK_CHAT_ENDPOINT", "https://api.openai.com/v1/chat/completions"
)
CHAT_MODEL = os.environ.get("FOLDERTALK_CHAT_MODEL", "gpt-4.1")
CHAT_TEMPERATURE = float(os.environ.get("FOLDERTALK_CHAT_TEMPERATURE", "0.2"))

# Seconds per request phase (connect, write, read, pool wait)
CHAT_TIMEOUT = float(os.environ.get("FOLDERTALK_CHAT_TIMEOUT", "60"))

API_KEY_ENV_VAR = "OPENAI_API_KEY"


def extract_reply(payload: Any) -> str | None:
    """
    Pull the first choice's message text out of a completion payload.

    Returns None for any shape other than a non-empty string at
    choices[0].message.content.
    """
    if not isinstance(payload, dict):
        return None
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    if not isinstance(content, str) or not content:
        return None
    return content


def complete_chat(
    messages: list[ConversationTurn],
    *,
    api_key: str | None = None,
    model: str = CHAT_MODEL,
    temperature: float = CHAT_TEMPERATURE,
    endpoint: str = CHAT_ENDPOINT,
    timeout: float = CHAT_TIMEOUT,
) -> str | None:
    """
    Send one chat-completion request.

    Args:
        messages: Full outbound message list, system turn first
        api_key: Bearer key for the endpoint (default: $OPENAI_API_KEY)
        model: Model name
        temperature: Sampling temperature
        endpoint: Completion URL
        timeout: Seconds allowed for each phase of the request (connect,
            write, read, pool wait); not a total budget

    Returns:
        Reply text, or None if the payload carried no reply.

    Raises:
        ChatEndpointError: On timeout, transport failure or non-JSON body
    """
    key = api_key if api_key is not None else os.environ.get(API_KEY_ENV_VAR, "")
    body = {
        "model": model,
        "messages": [m.to_message() for m in messages],
        "temperature": temperature,
    }

    log_api_call("chat", "completions", model=model, messages=len(messages))
    try:
        with httpx.Client(timeout=httpx.Timeout(timeout)) as client:
            response = client.post(
                endpoint,
                json=body,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {key}",
                },
            )
    except httpx.TimeoutException as e:
        raise ChatEndpointError(ErrorKind.TIMEOUT, f"Chat request timed out after {timeout}s") from e
    except httpx.RequestError as e:
        raise ChatEndpointError(ErrorKind.NETWORK_ERROR, f"Chat request failed: {e}") from e

    if response.status_code >= 400:
        logger.warning(f"Chat endpoint returned HTTP {response.status_code}")

    try:
        payload = response.json()
    except ValueError as e:
        raise ChatEndpointError(
            ErrorKind.INVALID_RESPONSE,
            "Chat endpoint returned a non-JSON body",
            details={"status": response.status_code},
        ) from e

    reply = extract_reply(payload)
    log_api_result("chat", "completions", 0 if reply is None else 1)
    return reply
