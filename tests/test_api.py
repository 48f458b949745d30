"""Tests for the KeyringService query API.

Every operation returns a Result; NOT_FOUND and DENIED must stay
distinguishable so callers can tell absence from lack of possession.
"""

from __future__ import annotations

import pytest

from keyreach.api import KeyringService, Result
from keyreach.core.graph import GraphStore, SessionAnchors
from keyreach.core.permissions import Perm, PermissionMask
from keyreach.core.usercred import UserCredential
from keyreach.exceptions import ErrorKind, NotFoundError

OWNER = 1000
STRANGER = 1001


class TestResult:

    def test_ok_result(self) -> None:
        result = Result(value=5)
        assert result.ok
        assert result.kind is None
        assert result.unwrap() == 5

    def test_error_result(self) -> None:
        error = NotFoundError("gone")
        result: Result[int] = Result(error=error)
        assert not result.ok
        assert result.kind is ErrorKind.NOT_FOUND
        with pytest.raises(NotFoundError):
            result.unwrap()


class TestAddAndLink:

    def test_add_returns_serial(self, service: KeyringService, anchors: SessionAnchors) -> None:
        result = service.add(OWNER, "k", b"x", anchors.user_root)
        assert result.ok
        assert service.store.get(result.unwrap()).owner == OWNER

    def test_add_to_missing_keyring_is_invalid_target(self, service: KeyringService) -> None:
        assert service.add(OWNER, "k", b"x", 999).kind is ErrorKind.INVALID_TARGET

    def test_add_to_someone_elses_keyring(
        self, service: KeyringService, anchors: SessionAnchors
    ) -> None:
        result = service.add(STRANGER, "k", b"x", anchors.user_root)
        assert result.ok
        assert service.store.get(result.unwrap()).owner == STRANGER

    def test_link_ok(self, service: KeyringService, anchors: SessionAnchors) -> None:
        result = service.link(anchors.user_root, anchors.session_root)
        assert result.ok
        assert result.value is None

    def test_link_unknown_is_not_found(
        self, service: KeyringService, anchors: SessionAnchors
    ) -> None:
        assert service.link(999, anchors.session_root).kind is ErrorKind.NOT_FOUND
        assert service.link(anchors.user_root, 999).kind is ErrorKind.NOT_FOUND

    def test_session_bootstraps(self, store: GraphStore) -> None:
        service = KeyringService(store)
        anchors = service.session(OWNER)
        assert store.anchors(OWNER) == anchors

    def test_default_store(self) -> None:
        service = KeyringService()
        assert len(service.store) == 0


class TestRead:

    def test_unknown_serial_is_not_found(
        self, service: KeyringService, anchors: SessionAnchors
    ) -> None:
        assert service.read(OWNER, anchors.session_root, 999).kind is ErrorKind.NOT_FOUND

    def test_owner_without_possession_is_denied(
        self, service: KeyringService, anchors: SessionAnchors
    ) -> None:
        key = service.add(OWNER, "k", b"x", anchors.user_root).unwrap()
        assert service.read(OWNER, anchors.session_root, key).kind is ErrorKind.DENIED

    def test_possessor_reads_payload_verbatim(
        self, service: KeyringService, anchors: SessionAnchors
    ) -> None:
        payload = bytes(range(256))
        key = service.add(OWNER, "k", payload, anchors.user_root).unwrap()
        assert service.read(OWNER, anchors.user_root, key).unwrap() == payload

    def test_keyring_is_invalid_target(
        self, service: KeyringService, anchors: SessionAnchors
    ) -> None:
        result = service.read(OWNER, anchors.user_root, anchors.user_root)
        assert result.kind is ErrorKind.INVALID_TARGET

    def test_owner_read_mask_allows_without_possession(
        self, service: KeyringService, anchors: SessionAnchors
    ) -> None:
        mask = PermissionMask(owner=Perm.VIEW | Perm.READ)
        key = service.add(OWNER, "k", b"x", anchors.user_root, mask=mask).unwrap()
        assert service.read(OWNER, anchors.session_root, key).unwrap() == b"x"
        assert service.read(STRANGER, anchors.session_root, key).kind is ErrorKind.DENIED

    def test_unknown_anchor_is_invalid_target(
        self, service: KeyringService, anchors: SessionAnchors
    ) -> None:
        key = service.add(OWNER, "k", b"x", anchors.session_root).unwrap()
        assert service.read(OWNER, 999, key).kind is ErrorKind.INVALID_TARGET

    def test_read_string(self, service: KeyringService, anchors: SessionAnchors) -> None:
        key = service.add(OWNER, "k", "héllo".encode("utf-8"), anchors.user_root).unwrap()
        assert service.read_string(OWNER, anchors.user_root, key).unwrap() == "héllo"

    def test_read_string_denied(self, service: KeyringService, anchors: SessionAnchors) -> None:
        key = service.add(OWNER, "k", b"x", anchors.user_root).unwrap()
        assert service.read_string(OWNER, anchors.session_root, key).kind is ErrorKind.DENIED


class TestUserCreds:

    def test_round_trip_through_store(
        self, service: KeyringService, anchors: SessionAnchors
    ) -> None:
        key = service.write_user_cred(
            OWNER, "router", "admin", "hunter2", anchors.user_root
        ).unwrap()
        cred = service.read_user_cred(OWNER, anchors.user_root, key).unwrap()
        assert cred == UserCredential("admin", "hunter2")

    def test_plain_payload_is_invalid_format(
        self, service: KeyringService, anchors: SessionAnchors
    ) -> None:
        key = service.add(OWNER, "k", b"token", anchors.user_root).unwrap()
        result = service.read_user_cred(OWNER, anchors.user_root, key)
        assert result.kind is ErrorKind.INVALID_FORMAT

    def test_bad_username_is_invalid_format(
        self, service: KeyringService, anchors: SessionAnchors
    ) -> None:
        result = service.write_user_cred(OWNER, "k", "a:b", "pw", anchors.user_root)
        assert result.kind is ErrorKind.INVALID_FORMAT

    def test_unpossessed_user_cred_is_denied(
        self, service: KeyringService, anchors: SessionAnchors
    ) -> None:
        key = service.write_user_cred(OWNER, "k", "admin", "pw", anchors.user_root).unwrap()
        assert service.read_user_cred(OWNER, anchors.session_root, key).kind is ErrorKind.DENIED


class TestLocate:

    def test_locate_not_found_before_link_then_found(
        self, service: KeyringService, anchors: SessionAnchors
    ) -> None:
        hidden = service.store.create_keyring("hidden", OWNER)
        key = service.add(OWNER, "k", b"x", hidden).unwrap()
        assert service.locate(OWNER, "k").kind is ErrorKind.NOT_FOUND
        assert service.read(OWNER, anchors.session_root, key).kind is ErrorKind.DENIED
        service.link(hidden, anchors.user_root)
        assert service.locate(OWNER, "k").unwrap() == key

    def test_locate_with_anchor(self, service: KeyringService, anchors: SessionAnchors) -> None:
        key = service.add(OWNER, "k", b"x", anchors.user_root).unwrap()
        assert service.locate(OWNER, "k", anchor=anchors.user_root).unwrap() == key
        assert service.locate(OWNER, "k", anchor=anchors.session_root).kind is ErrorKind.NOT_FOUND


class TestListReachable:

    def test_lists_possessed_credentials_in_bfs_order(
        self, service: KeyringService, anchors: SessionAnchors
    ) -> None:
        deep = service.add(OWNER, "deep", b"", anchors.user_root).unwrap()
        top = service.add(OWNER, "top", b"", anchors.session_root).unwrap()
        service.link(anchors.user_root, anchors.session_root)
        listed = service.list_reachable(OWNER, anchors.session_root).unwrap()
        assert [c.serial for c in listed] == [top, deep]

    def test_hides_credentials_without_view(
        self, service: KeyringService, anchors: SessionAnchors
    ) -> None:
        mask = PermissionMask(possessor=Perm.READ)
        service.add(OWNER, "blind", b"", anchors.user_root, mask=mask)
        visible = service.add(OWNER, "seen", b"", anchors.user_root).unwrap()
        listed = service.list_reachable(STRANGER, anchors.user_root).unwrap()
        assert [c.serial for c in listed] == [visible]

    def test_unreachable_credentials_not_listed(
        self, service: KeyringService, anchors: SessionAnchors
    ) -> None:
        service.add(OWNER, "k", b"", anchors.user_root)
        assert service.list_reachable(OWNER, anchors.session_root).unwrap() == []

    def test_unknown_anchor(self, service: KeyringService) -> None:
        assert service.list_reachable(OWNER, 999).kind is ErrorKind.NOT_FOUND
