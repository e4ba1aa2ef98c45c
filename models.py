"""
Type definitions for foldertalk.

Dataclasses defining the contracts between layers:
- Adapters produce descriptors and raw payloads from API responses
- Extractors consume records and return strings
- Tools wire everything together and own session state

These types make the adapter→extractor contract explicit and IDE-checkable.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


# ============================================================================
# ERROR TYPES
# ============================================================================

class ErrorKind(Enum):
    """Categories of errors for consistent handling."""
    AUTH_EXPIRED = "auth_expired"        # Token needs refresh
    NOT_FOUND = "not_found"              # Resource doesn't exist
    PERMISSION_DENIED = "permission_denied"  # No access to resource
    RATE_LIMITED = "rate_limited"        # Hit API quota
    NETWORK_ERROR = "network_error"      # Connection failed
    TIMEOUT = "timeout"                  # Request timed out
    INVALID_INPUT = "invalid_input"      # Bad parameters
    INVALID_RESPONSE = "invalid_response"  # Payload we couldn't parse
    UNKNOWN = "unknown"                  # Unexpected error


class FolderTalkError(Exception):
    """
    Structured error for consistent handling across layers.

    Adapters raise these on API failures.
    Tools catch them at the aggregation and turn boundaries.

    Inherits from Exception so it can be raised.
    """

    default_kind = ErrorKind.UNKNOWN

    def __init__(
        self,
        kind: ErrorKind | None,
        message: str,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.kind = kind or self.default_kind
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for MCP response."""
        return {
            "error": True,
            "kind": self.kind.value,
            "message": self.message,
            "retryable": self.retryable,
            **self.details,
        }


class ResolutionError(FolderTalkError):
    """Link could not be turned into a file collection (invalid, denied, not found)."""

    default_kind = ErrorKind.NOT_FOUND


class ChatEndpointError(FolderTalkError):
    """Calling or parsing the chat-completion endpoint failed."""

    default_kind = ErrorKind.NETWORK_ERROR


# ============================================================================
# LINK TYPES
# ============================================================================

class LinkKind(Enum):
    """What a shared link points at."""
    DOCUMENT = "document"
    FOLDER = "folder"
    INVALID = "invalid"


@dataclass(frozen=True)
class LinkReference:
    """
    Typed result of parsing a shared Drive link.

    id is non-empty exactly when kind is not INVALID.
    """
    kind: LinkKind
    id: str = ""

    def __post_init__(self) -> None:
        if (self.kind is LinkKind.INVALID) == bool(self.id):
            raise ValueError(f"LinkReference({self.kind.value}) has inconsistent id {self.id!r}")

    @classmethod
    def invalid(cls) -> "LinkReference":
        return cls(LinkKind.INVALID)

    @property
    def is_valid(self) -> bool:
        return self.kind is not LinkKind.INVALID


# ============================================================================
# FILE TYPES
# ============================================================================

@dataclass(frozen=True)
class FileDescriptor:
    """Identity and metadata of a remote file, without content."""
    id: str
    name: str
    mime_type: str

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> "FileDescriptor":
        """Build from a Drive files resource (id, name, mimeType)."""
        return cls(
            id=item["id"],
            name=item.get("name", ""),
            mime_type=item.get("mimeType", ""),
        )


@dataclass(frozen=True)
class FileRecord:
    """
    A descriptor plus fetched text content.

    content may be a preview; is_full_content says whether it is the whole
    file. Records are replaced, never mutated, when a full fetch happens.
    """
    descriptor: FileDescriptor
    content: str
    is_full_content: bool = True

    @property
    def id(self) -> str:
        return self.descriptor.id

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def mime_type(self) -> str:
        return self.descriptor.mime_type

    def with_content(self, content: str, is_full_content: bool = True) -> "FileRecord":
        """Return a replacement record with the same descriptor."""
        return replace(self, content=content, is_full_content=is_full_content)


@dataclass
class FolderListing:
    """
    Direct children of a Drive folder, in listing order.

    truncated is True when more pages remained after the page cap.
    """
    files: list[FileDescriptor] = field(default_factory=list)
    truncated: bool = False

    @property
    def file_count(self) -> int:
        return len(self.files)


# ============================================================================
# CONVERSATION TYPES
# ============================================================================

class Role(Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


@dataclass(frozen=True)
class ConversationTurn:
    role: Role
    content: str

    def to_message(self) -> dict[str, str]:
        """Wire format for the chat-completion endpoint."""
        return {"role": self.role.value, "content": self.content}
