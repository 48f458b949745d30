"""Username/password credentials stored as ``username:password`` payloads."""

from __future__ import annotations

from dataclasses import dataclass, field

from keyreach.exceptions import CredentialFormatError

_SEPARATOR = ":"


@dataclass(frozen=True)
class UserCredential:
    """A username/password pair.

    The username may not contain ``:``; the password may, since only the
    first separator splits the payload.
    """

    username: str
    password: str = field(repr=False)

    def __post_init__(self) -> None:
        if _SEPARATOR in self.username:
            raise CredentialFormatError("Username must not contain ':'")

    def to_payload(self) -> bytes:
        return f"{self.username}{_SEPARATOR}{self.password}".encode("utf-8")

    @classmethod
    def from_payload(cls, payload: bytes) -> UserCredential:
        """Parse a ``username:password`` payload.

        Raises:
            CredentialFormatError: If the payload is not UTF-8 or has no ``:``.
        """
        try:
            text = payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise CredentialFormatError("Credential payload is not valid UTF-8") from exc
        username, sep, password = text.partition(_SEPARATOR)
        if not sep:
            raise CredentialFormatError("Expected 'username:password'")
        return cls(username=username, password=password)
