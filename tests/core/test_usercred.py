"""Tests for the username:password payload codec."""

from __future__ import annotations

import pytest

from keyreach.core.usercred import UserCredential
from keyreach.exceptions import CredentialFormatError


class TestUserCredential:

    def test_payload_format(self) -> None:
        assert UserCredential("admin", "hunter2").to_payload() == b"admin:hunter2"

    def test_parse(self) -> None:
        cred = UserCredential.from_payload(b"admin:hunter2")
        assert cred.username == "admin"
        assert cred.password == "hunter2"

    def test_password_may_contain_colon(self) -> None:
        cred = UserCredential.from_payload(b"admin:a:b:c")
        assert cred.password == "a:b:c"

    def test_empty_password(self) -> None:
        assert UserCredential.from_payload(b"admin:").password == ""

    def test_missing_separator_raises(self) -> None:
        with pytest.raises(CredentialFormatError, match="username:password"):
            UserCredential.from_payload(b"no-separator")

    def test_invalid_utf8_raises(self) -> None:
        with pytest.raises(CredentialFormatError, match="UTF-8"):
            UserCredential.from_payload(b"\xff\xfe:x")

    def test_username_with_colon_rejected(self) -> None:
        with pytest.raises(CredentialFormatError):
            UserCredential("a:b", "pw")

    def test_password_hidden_from_repr(self) -> None:
        assert "hunter2" not in repr(UserCredential("admin", "hunter2"))
