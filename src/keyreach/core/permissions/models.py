"""PermissionMask: the four permission classes of a keyring entity.

A mask assigns an independent ``Perm`` set to each class of caller:

- **possessor**: the entity is reachable from the caller's anchor keyring.
- **owner**: the caller's identity equals the entity's owner.
- **group**: reserved. Empty by default, since no group concept is modeled.
- **other**: everyone. Empty by default.

The classes are additive. A caller who is both owner and possessor gets the
union of both sets. With the default mask (``possessor=alswrv owner=v``) the
owner can only view its own credential; reading the payload requires
possession.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from keyreach.core.permissions.levels import Perm, format_perms, parse_perms
from keyreach.exceptions import MaskFormatError

MASK_CLASSES: tuple[str, ...] = ("possessor", "owner", "group", "other")

_CLASS_ALIASES: dict[str, str] = {
    "possessor": "possessor",
    "pos": "possessor",
    "owner": "owner",
    "user": "owner",
    "usr": "owner",
    "group": "group",
    "grp": "group",
    "other": "other",
    "oth": "other",
}

_SEPARATOR = re.compile(r"[\s,]+")


@dataclass(frozen=True)
class PermissionMask:
    """Immutable four-class permission mask.

    Attributes:
        possessor: Granted when the entity is reachable from the anchor.
        owner: Granted when the caller owns the entity.
        group: Granted to group members. Always empty in this model.
        other: Granted to every caller.

    Examples:
        >>> mask = PermissionMask.parse("possessor=alswrv owner=v")
        >>> Perm.READ in mask.owner
        False
        >>> mask.describe()
        'possessor=alswrv owner=v group= other='
    """

    possessor: Perm = Perm.NONE
    owner: Perm = Perm.NONE
    group: Perm = Perm.NONE
    other: Perm = Perm.NONE

    @classmethod
    def parse(cls, text: str) -> PermissionMask:
        """Parse ``class=letters`` pairs separated by spaces or commas.

        Classes left out of ``text`` are empty. Class names accept the short
        forms ``pos``, ``usr``/``user``, ``grp`` and ``oth``.

        Raises:
            MaskFormatError: On an unknown class, a missing ``=``, a repeated
                class, or an unknown permission letter.
        """
        values: dict[str, Perm] = {}
        for token in _SEPARATOR.split(text.strip()):
            if not token:
                continue
            name, sep, letters = token.partition("=")
            if not sep:
                raise MaskFormatError(f"Expected 'class=letters', got {token!r}")
            field_name = _CLASS_ALIASES.get(name.lower())
            if field_name is None:
                raise MaskFormatError(
                    f"Unknown permission class {name!r}. "
                    f"Valid classes: {', '.join(MASK_CLASSES)}"
                )
            if field_name in values:
                raise MaskFormatError(f"Permission class {field_name!r} given twice")
            values[field_name] = parse_perms(letters)
        return cls(**values)

    def describe(self) -> str:
        """Render the mask as ``possessor=... owner=... group=... other=...``."""
        return " ".join(f"{name}={format_perms(getattr(self, name))}" for name in MASK_CLASSES)

    def as_dict(self) -> dict[str, str]:
        """Return a mapping of class name to keyctl letters."""
        return {name: format_perms(getattr(self, name)) for name in MASK_CLASSES}

    def __str__(self) -> str:
        return self.describe()


DEFAULT_KEY_MASK = PermissionMask(possessor=Perm.ALL, owner=Perm.VIEW)
"""Mask applied to credentials added without an explicit mask."""

DEFAULT_KEYRING_MASK = PermissionMask(possessor=Perm.ALL, owner=Perm.VIEW)
"""Mask applied to keyrings, including the per-identity anchors."""
