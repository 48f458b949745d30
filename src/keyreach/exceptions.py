"""keyreach exception hierarchy.

All public exceptions inherit from KeyReachError, giving callers a single
base class to catch when they want to handle any keyreach-specific failure
without swallowing unrelated errors.

Every exception carries an ``ErrorKind`` so that the query API can hand
failures back as values while keeping "absent" and "present but not
possessed" distinguishable.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """The enumerated failure outcomes of a store operation."""

    NOT_FOUND = "not_found"
    INVALID_TARGET = "invalid_target"
    DENIED = "denied"
    INVALID_FORMAT = "invalid_format"


class KeyReachError(Exception):
    """Base exception for all keyreach errors."""

    kind: ErrorKind = ErrorKind.INVALID_FORMAT


class NotFoundError(KeyReachError):
    """Raised when a serial or description cannot be resolved.

    Covers unknown serials passed to ``link`` or ``read``, and descriptions
    that no reachable credential matches during ``locate``.
    """

    kind = ErrorKind.NOT_FOUND


class InvalidTargetError(KeyReachError):
    """Raised when an operation targets the wrong kind of entity.

    Covers ``add`` into a serial that is not a keyring, ``link`` into a
    credential, and ``read`` of a keyring.
    """

    kind = ErrorKind.INVALID_TARGET


class PermissionDeniedError(KeyReachError):
    """Raised when the caller's effective permissions lack a capability.

    The target exists; the caller neither owns it with the required
    permission nor possesses it.
    """

    kind = ErrorKind.DENIED


class MaskFormatError(KeyReachError):
    """Raised when a permission mask string cannot be parsed."""

    kind = ErrorKind.INVALID_FORMAT


class CredentialFormatError(KeyReachError):
    """Raised when a credential payload does not match its expected format."""

    kind = ErrorKind.INVALID_FORMAT
