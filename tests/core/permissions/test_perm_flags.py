"""Tests for Perm flags and keyctl letter rendering/parsing."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from keyreach.core.permissions import PERM_LETTERS, Perm, format_perms, parse_perms
from keyreach.exceptions import ErrorKind, MaskFormatError

single_flags = st.sampled_from(list(PERM_LETTERS.values()))
flag_sets = st.lists(single_flags, unique=True).map(
    lambda flags: Perm.NONE if not flags else _union(flags)
)


def _union(flags: list[Perm]) -> Perm:
    result = Perm.NONE
    for flag in flags:
        result |= flag
    return result


class TestPermFlags:
    """The six capabilities and their combinations."""

    def test_all_contains_every_capability(self) -> None:
        for flag in PERM_LETTERS.values():
            assert flag in Perm.ALL

    def test_none_grants_nothing(self) -> None:
        assert Perm.READ not in Perm.NONE

    def test_union_is_additive(self) -> None:
        perms = Perm.VIEW | Perm.READ
        assert Perm.VIEW in perms
        assert Perm.READ in perms
        assert Perm.WRITE not in perms

    def test_six_distinct_letters(self) -> None:
        assert set(PERM_LETTERS) == set("alswrv")


class TestFormatPerms:
    """Rendering in keyctl order."""

    def test_all_renders_alswrv(self) -> None:
        assert format_perms(Perm.ALL) == "alswrv"

    def test_view_only(self) -> None:
        assert format_perms(Perm.VIEW) == "v"

    def test_order_is_fixed(self) -> None:
        assert format_perms(Perm.VIEW | Perm.SETATTR | Perm.READ) == "arv"

    def test_none_renders_empty(self) -> None:
        assert format_perms(Perm.NONE) == ""


class TestParsePerms:
    """Parsing keyctl letters."""

    def test_any_order(self) -> None:
        assert parse_perms("vrw") == Perm.VIEW | Perm.READ | Perm.WRITE

    def test_dash_is_empty(self) -> None:
        assert parse_perms("-") == Perm.NONE

    def test_empty_is_empty(self) -> None:
        assert parse_perms("") == Perm.NONE

    def test_unknown_letter_raises(self) -> None:
        with pytest.raises(MaskFormatError) as excinfo:
            parse_perms("rx")
        assert excinfo.value.kind is ErrorKind.INVALID_FORMAT

    @given(perms=flag_sets)
    def test_format_then_parse_is_identity(self, perms: Perm) -> None:
        assert parse_perms(format_perms(perms)) == perms
