"""Capabilities a caller may hold on a keyring entity.

Each capability is one bit of a ``Perm`` flag set. The set forms a boolean
lattice under ``|`` (join) and ``&`` (meet), with ``Perm.NONE`` as bottom
and ``Perm.ALL`` as top, so effective permissions are computed by plain
union of the classes that apply to a caller.

Letter Codes
------------
Masks are rendered with the single-letter codes used by ``keyctl``, in the
fixed order ``a l s w r v``::

    a  setattr   change ownership or the mask itself
    l  link      link the entity into a keyring
    s  search    find the entity by description
    w  write     update the payload, or add members to a keyring
    r  read      read the payload, or list a keyring's members
    v  view      see type, description and attributes
"""

from __future__ import annotations

from enum import Flag

from keyreach.exceptions import MaskFormatError


class Perm(Flag):
    """Capability flags for credentials and keyrings.

    Flags combine with the bitwise operators::

        Perm.VIEW | Perm.READ
        Perm.ALL & ~Perm.SETATTR
    """

    NONE = 0
    VIEW = 0x01
    READ = 0x02
    WRITE = 0x04
    SEARCH = 0x08
    LINK = 0x10
    SETATTR = 0x20

    ALL = VIEW | READ | WRITE | SEARCH | LINK | SETATTR


# Rendering order matches keyctl's describe output.
PERM_LETTERS: dict[str, Perm] = {
    "a": Perm.SETATTR,
    "l": Perm.LINK,
    "s": Perm.SEARCH,
    "w": Perm.WRITE,
    "r": Perm.READ,
    "v": Perm.VIEW,
}


def format_perms(perms: Perm) -> str:
    """Render a flag set as its keyctl letters, e.g. ``"alswrv"``."""
    return "".join(letter for letter, flag in PERM_LETTERS.items() if flag in perms)


def parse_perms(text: str) -> Perm:
    """Parse keyctl letters into a flag set.

    Letters may appear in any order and may repeat. An empty string or
    ``"-"`` means no permissions.

    Raises:
        MaskFormatError: If ``text`` contains an unknown letter.
    """
    perms = Perm.NONE
    if text == "-":
        return perms
    for letter in text:
        flag = PERM_LETTERS.get(letter)
        if flag is None:
            raise MaskFormatError(
                f"Unknown permission letter {letter!r} in {text!r}. "
                f"Valid letters: {''.join(PERM_LETTERS)}"
            )
        perms |= flag
    return perms
