"""GraphStore: the single source of truth for keyrings, credentials and links.

The store is an arena keyed by serial. Mutations (``add``, ``link``,
``bootstrap``) run under an exclusive write lock; readers take a shared lock.
Traversals copy the whole adjacency with ``adjacency()`` in one read, so a
single walk sees the graph as of one moment. A link made while the walk runs
shows up in the next query, not partway through this one.

Linking never touches credential records. Its whole effect is the new edge,
which every later reachability query observes.
"""

from __future__ import annotations

import itertools
import logging
import threading
from contextlib import contextmanager
from typing import Hashable, Iterator, Union

from keyreach.core.graph.models import (
    KEYRING_TYPE,
    Credential,
    Keyring,
    SessionAnchors,
)
from keyreach.core.permissions import (
    DEFAULT_KEY_MASK,
    DEFAULT_KEYRING_MASK,
    PermissionMask,
)
from keyreach.exceptions import InvalidTargetError, NotFoundError

logger = logging.getLogger(__name__)

Entity = Union[Credential, Keyring]


class _ReadWriteLock:
    """Writer-preferring shared/exclusive lock.

    Any number of readers may hold the lock together. A waiting writer blocks
    new readers so that a stream of queries cannot starve a link.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            while self._writer or self._readers:
                self._cond.wait()
            self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class GraphStore:
    """Arena of credentials and keyrings joined by directed link edges.

    Cycles are valid: ``link(a, b)`` followed by ``link(b, a)`` is accepted,
    and traversals guard against them with per-call visited sets.

    Args:
        identity: If given, that identity's user and session roots are
            created at construction.
        default_mask: Mask for credentials added without one.
        keyring_mask: Mask for keyrings created without one.
    """

    def __init__(
        self,
        identity: Hashable | None = None,
        default_mask: PermissionMask = DEFAULT_KEY_MASK,
        keyring_mask: PermissionMask = DEFAULT_KEYRING_MASK,
    ) -> None:
        self._entities: dict[int, Entity] = {}
        self._anchors: dict[Hashable, SessionAnchors] = {}
        self._serials = itertools.count(1)
        self._lock = _ReadWriteLock()
        self.default_mask = default_mask
        self.keyring_mask = keyring_mask
        if identity is not None:
            self.bootstrap(identity)

    # ------------------------------------------------------------------
    # Bootstrap
    # ------------------------------------------------------------------

    def bootstrap(self, identity: Hashable) -> SessionAnchors:
        """Create the user and session roots of ``identity``.

        Calling this again for the same identity returns the existing
        anchors unchanged.
        """
        with self._lock.write():
            existing = self._anchors.get(identity)
            if existing is not None:
                return existing
            user_root = self._new_keyring(f"_uid.{identity}", identity, self.keyring_mask)
            session_root = self._new_keyring(f"_ses.{identity}", identity, self.keyring_mask)
            anchors = SessionAnchors(
                identity=identity,
                user_root=user_root.serial,
                session_root=session_root.serial,
            )
            self._anchors[identity] = anchors
        logger.debug(
            "Bootstrapped %s: @u=%d @s=%d", identity, anchors.user_root, anchors.session_root
        )
        return anchors

    def anchors(self, identity: Hashable) -> SessionAnchors:
        """Return the anchors of a bootstrapped identity.

        Raises:
            NotFoundError: If ``identity`` was never bootstrapped.
        """
        with self._lock.read():
            anchors = self._anchors.get(identity)
        if anchors is None:
            raise NotFoundError(f"No session anchors for identity {identity!r}")
        return anchors

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(
        self,
        key_type: str,
        description: str,
        payload: bytes,
        target: int,
        owner: Hashable,
        mask: PermissionMask | None = None,
    ) -> int:
        """Create a credential owned by ``owner`` inside keyring ``target``.

        A ``key_type`` of ``"keyring"`` creates an empty keyring instead. If
        ``target`` already holds a credential with the same type and
        description, the new credential takes its slot there; the old record
        stays in the arena and in any other keyring that links it.

        Returns:
            The new serial.

        Raises:
            InvalidTargetError: If ``target`` is not an existing keyring.
            ValueError: If a keyring is given a payload.
        """
        if key_type == KEYRING_TYPE:
            if payload:
                raise ValueError("Keyrings cannot carry a payload")
            return self.create_keyring(description, owner, target=target, mask=mask)

        with self._lock.write():
            parent = self._resolve_target(target)
            credential = Credential(
                serial=next(self._serials),
                key_type=key_type,
                description=description,
                owner=owner,
                payload=bytes(payload),
                mask=mask if mask is not None else self.default_mask,
            )
            self._entities[credential.serial] = credential
            replaced = self._replace_member(parent, credential)
            if replaced is None:
                parent.members.append(credential.serial)
        if replaced is not None:
            logger.debug(
                "Added %s %r as %d into %d, replacing %d",
                key_type, description, credential.serial, target, replaced,
            )
        else:
            logger.debug(
                "Added %s %r as %d into %d", key_type, description, credential.serial, target
            )
        return credential.serial

    def create_keyring(
        self,
        description: str,
        owner: Hashable,
        target: int | None = None,
        mask: PermissionMask | None = None,
    ) -> int:
        """Create a keyring, optionally linked into keyring ``target``.

        Raises:
            InvalidTargetError: If ``target`` is given but is not a keyring.
        """
        with self._lock.write():
            parent = self._resolve_target(target) if target is not None else None
            keyring = self._new_keyring(
                description, owner, mask if mask is not None else self.keyring_mask
            )
            if parent is not None:
                parent.members.append(keyring.serial)
        logger.debug("Created keyring %r as %d", description, keyring.serial)
        return keyring.serial

    def link(self, child: int, parent: int) -> None:
        """Insert ``child`` into the member list of keyring ``parent``.

        Linking an existing member again is a no-op. Self-links and cycles
        are accepted.

        Raises:
            NotFoundError: If either serial is unknown.
            InvalidTargetError: If ``parent`` is a credential, not a keyring.
        """
        with self._lock.write():
            if child not in self._entities:
                raise NotFoundError(f"Cannot link unknown serial {child}")
            holder = self._entities.get(parent)
            if holder is None:
                raise NotFoundError(f"Cannot link into unknown serial {parent}")
            if not isinstance(holder, Keyring):
                raise InvalidTargetError(f"Serial {parent} is not a keyring")
            if child in holder.members:
                logger.debug("Link %d -> %d already present", child, parent)
                return
            holder.members.append(child)
        logger.debug("Linked %d into %d", child, parent)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, serial: int) -> Entity:
        """Return the credential or keyring with ``serial``.

        Raises:
            NotFoundError: If ``serial`` is unknown.
        """
        with self._lock.read():
            entity = self._entities.get(serial)
        if entity is None:
            raise NotFoundError(f"No credential or keyring with serial {serial}")
        return entity

    def get_keyring(self, serial: int) -> Keyring:
        """Return the keyring with ``serial``.

        Raises:
            NotFoundError: If ``serial`` is unknown.
            InvalidTargetError: If ``serial`` names a credential.
        """
        entity = self.get(serial)
        if not isinstance(entity, Keyring):
            raise InvalidTargetError(f"Serial {serial} is not a keyring")
        return entity

    def members(self, serial: int) -> tuple[int, ...]:
        """Snapshot the member serials of keyring ``serial`` in insertion order."""
        with self._lock.read():
            entity = self._entities.get(serial)
            if entity is None:
                raise NotFoundError(f"No keyring with serial {serial}")
            if not isinstance(entity, Keyring):
                raise InvalidTargetError(f"Serial {serial} is not a keyring")
            return tuple(entity.members)

    def adjacency(self, anchor: int | None = None) -> dict[int, tuple[int, ...]]:
        """Snapshot every keyring's members under one read lock.

        The returned mapping holds an entry for each keyring and none for
        credentials, so ``serial in snapshot`` tells the two apart. When
        ``anchor`` is given it is validated inside the same lock.

        Raises:
            NotFoundError: If ``anchor`` is unknown.
            InvalidTargetError: If ``anchor`` is not a keyring.
        """
        with self._lock.read():
            if anchor is not None:
                entity = self._entities.get(anchor)
                if entity is None:
                    raise NotFoundError(f"No keyring with serial {anchor}")
                if not isinstance(entity, Keyring):
                    raise InvalidTargetError(f"Serial {anchor} is not a keyring")
            return {
                serial: tuple(entity.members)
                for serial, entity in self._entities.items()
                if isinstance(entity, Keyring)
            }

    def __contains__(self, serial: object) -> bool:
        with self._lock.read():
            return serial in self._entities

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._entities)

    # ------------------------------------------------------------------
    # Internals (caller holds the write lock)
    # ------------------------------------------------------------------

    def _new_keyring(
        self, description: str, owner: Hashable, mask: PermissionMask
    ) -> Keyring:
        keyring = Keyring(
            serial=next(self._serials),
            description=description,
            owner=owner,
            mask=mask,
        )
        self._entities[keyring.serial] = keyring
        return keyring

    def _resolve_target(self, target: int) -> Keyring:
        holder = self._entities.get(target)
        if not isinstance(holder, Keyring):
            raise InvalidTargetError(f"Target {target} is not an existing keyring")
        return holder

    def _replace_member(self, parent: Keyring, credential: Credential) -> int | None:
        for index, serial in enumerate(parent.members):
            existing = self._entities[serial]
            if (
                isinstance(existing, Credential)
                and existing.key_type == credential.key_type
                and existing.description == credential.description
            ):
                parent.members[index] = credential.serial
                return serial
        return None
