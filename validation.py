"""
Input validation for shared Drive links and Drive query strings.

Handles:
- Shared link → LinkReference (document vs folder, plus file ID)
- Drive ID alphabet checks before IDs are placed in folder queries
"""

import re

from models import LinkKind, LinkReference

# =============================================================================
# PATTERNS
# =============================================================================

# IDs in shared links are at least 25 word/hyphen characters.
# Document links are checked before folder links.
DOCUMENT_LINK_PATTERN = re.compile(r'/document/d/([\w-]{25,})', re.ASCII)
FOLDER_LINK_PATTERN = re.compile(r'/folders/([\w-]{25,})', re.ASCII)

_DRIVE_ID_RE = re.compile(r'^[A-Za-z0-9_\-]+$')


# =============================================================================
# LINK RESOLUTION
# =============================================================================

def resolve_link(link: str) -> LinkReference:
    """
    Parse a shared Google Drive link into a LinkReference.

    Accepts:
    - Document: https://docs.google.com/document/d/{id}/edit
    - Folder:   https://drive.google.com/drive/folders/{id}

    A link that matches both shapes resolves as a document.

    Returns:
        LinkReference; kind INVALID (empty id) when nothing matches.
        Never raises.
    """
    if not link:
        return LinkReference.invalid()

    match = DOCUMENT_LINK_PATTERN.search(link)
    if match:
        return LinkReference(LinkKind.DOCUMENT, match.group(1))

    match = FOLDER_LINK_PATTERN.search(link)
    if match:
        return LinkReference(LinkKind.FOLDER, match.group(1))

    return LinkReference.invalid()


# =============================================================================
# DRIVE ID SAFETY
# =============================================================================

def validate_drive_id(drive_id: str, param_name: str = "drive_id") -> None:
    """
    Raise ValueError if drive_id contains characters outside the Drive ID alphabet.

    Drive file/folder IDs are base62-ish: [A-Za-z0-9_-]. Anything else
    (spaces, quotes, operators) indicates either a malformed ID or an
    injection attempt against Drive query strings.
    """
    if not drive_id or not _DRIVE_ID_RE.match(drive_id):
        raise ValueError(
            f"Invalid {param_name}: must contain only alphanumeric characters, "
            f"hyphens, and underscores"
        )
