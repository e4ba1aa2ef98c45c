"""
OAuth Configuration - Single Source of Truth

All OAuth parameters defined here. Do not duplicate elsewhere.
The token-issuing handshake itself lives outside foldertalk; we only
read the token it leaves behind.
"""

import os
from pathlib import Path

# Package root (where this file lives)
_PACKAGE_ROOT = Path(__file__).parent

# Read-only Drive is all we need: metadata, export, download, list
SCOPES = [
    'https://www.googleapis.com/auth/drive.readonly',
]

# Authorized-user token file (written by whatever ran the OAuth flow)
TOKEN_FILE = Path(os.environ.get("FOLDERTALK_TOKEN_FILE", _PACKAGE_ROOT / 'token.json'))

# Bearer token handed in directly (takes precedence over TOKEN_FILE)
TOKEN_ENV_VAR = "FOLDERTALK_TOKEN"
