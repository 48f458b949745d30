"""Entities held in the keyring graph.

Every entity is addressed by a serial: a positive integer allocated by the
store in creation order. A ``Credential`` is a leaf carrying an opaque
payload. A ``Keyring`` is a container whose member list holds serials of
credentials and of other keyrings. Permission effects are never stored on
either; they are derived from the graph shape at query time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Hashable

from keyreach.core.permissions import PermissionMask

KEYRING_TYPE = "keyring"
DEFAULT_KEY_TYPE = "user"


@dataclass(frozen=True)
class Credential:
    """An immutable credential record.

    Attributes:
        serial: Unique store-allocated id. Lower serials were created earlier.
        key_type: Credential type, e.g. ``"user"``.
        description: Name the credential is located by.
        owner: Identity of the caller that added it.
        payload: Opaque secret bytes.
        mask: Permission mask evaluated on every access.
    """

    serial: int
    key_type: str
    description: str
    owner: Hashable
    payload: bytes = field(repr=False)
    mask: PermissionMask

    @property
    def is_keyring(self) -> bool:
        return False


@dataclass
class Keyring:
    """A container node of the graph.

    ``members`` keeps insertion order and holds each serial at most once.
    Only the store mutates it, under its write lock.
    """

    serial: int
    description: str
    owner: Hashable
    mask: PermissionMask
    members: list[int] = field(default_factory=list)

    @property
    def key_type(self) -> str:
        return KEYRING_TYPE

    @property
    def is_keyring(self) -> bool:
        return True


@dataclass(frozen=True)
class SessionAnchors:
    """The two well-known keyrings of one identity.

    Attributes:
        identity: The principal these anchors belong to.
        user_root: Serial of the user keyring (``@u``).
        session_root: Serial of the session keyring (``@s``).
    """

    identity: Hashable
    user_root: int
    session_root: int

    @property
    def search_path(self) -> tuple[int, int]:
        """Default locate order: session root first, then user root."""
        return (self.session_root, self.user_root)
