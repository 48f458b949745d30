"""Keyring graph: credentials, keyrings, and the store that links them.

Submodules:
    models  -- Credential, Keyring, SessionAnchors
    store   -- GraphStore (arena, add, link, bootstrap, member snapshots)
"""

from keyreach.core.graph.models import (
    DEFAULT_KEY_TYPE,
    KEYRING_TYPE,
    Credential,
    Keyring,
    SessionAnchors,
)
from keyreach.core.graph.store import GraphStore

__all__ = [
    "DEFAULT_KEY_TYPE",
    "KEYRING_TYPE",
    "Credential",
    "GraphStore",
    "Keyring",
    "SessionAnchors",
]
