"""Permission classes for possession-based access control.

This package implements the six keyring capabilities (view, read, write,
search, link, setattr) and the four-class permission mask that decides
which of them a caller holds on a given credential or keyring.

Submodules
----------
- ``levels``: Perm flag enum, letter codes, rendering and parsing helpers.
- ``models``: PermissionMask dataclass and the default masks.

All public names are re-exported here::

    from keyreach.core.permissions import Perm, PermissionMask, DEFAULT_KEY_MASK
"""

from keyreach.core.permissions.levels import PERM_LETTERS, Perm, format_perms, parse_perms
from keyreach.core.permissions.models import (
    DEFAULT_KEY_MASK,
    DEFAULT_KEYRING_MASK,
    PermissionMask,
)

__all__ = [
    "DEFAULT_KEY_MASK",
    "DEFAULT_KEYRING_MASK",
    "PERM_LETTERS",
    "Perm",
    "PermissionMask",
    "format_perms",
    "parse_perms",
]
