"""Reachability evaluator: possession as graph reachability.

A caller *possesses* an entity when a directed path of link edges leads from
the caller's anchor keyring to it. Possession is recomputed from the live
graph on every call, so linking a keyring retroactively grants possession of
everything already inside it.

Effective Permissions:
    P(caller, anchor, e) = other(e) | group(e)
                         | owner(e)      if caller == owner(e)
                         | possessor(e)  if reachable(anchor, e)
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Hashable, Iterator

from keyreach.core.graph import Credential, GraphStore, Keyring
from keyreach.core.permissions import Perm, format_perms
from keyreach.exceptions import InvalidTargetError, PermissionDeniedError

logger = logging.getLogger(__name__)


class ReachabilityEvaluator:
    """Answers reachability and permission questions against a GraphStore.

    The evaluator holds no state of its own beyond the store reference;
    each traversal allocates its own visited set, so concurrent queries do
    not interfere.

    Args:
        store: The graph to evaluate against.
    """

    def __init__(self, store: GraphStore) -> None:
        self._store = store

    @property
    def store(self) -> GraphStore:
        return self._store

    def walk(self, anchor: int) -> Iterator[tuple[int, int]]:
        """Yield ``(serial, depth)`` for every entity reachable from ``anchor``.

        The anchor itself is yielded first at depth 0. Members of a keyring
        are yielded in insertion order, keyrings are expanded breadth-first,
        and each entity is yielded once even on cyclic graphs. The whole walk
        runs over one adjacency snapshot taken when iteration starts.

        Raises:
            NotFoundError: If ``anchor`` is unknown.
            InvalidTargetError: If ``anchor`` is not a keyring.
        """
        adjacency = self._store.adjacency(anchor)
        seen: set[int] = {anchor}
        visited: set[int] = {anchor}
        queue: deque[tuple[int, int]] = deque([(anchor, 0)])
        yield anchor, 0

        while queue:
            current, depth = queue.popleft()
            for member in adjacency[current]:
                if member not in seen:
                    seen.add(member)
                    yield member, depth + 1
                if member in adjacency and member not in visited:
                    visited.add(member)
                    queue.append((member, depth + 1))

    def reachable(self, anchor: int, target: int) -> bool:
        """Return True if ``target`` is reachable from keyring ``anchor``.

        An anchor always reaches itself and its direct members. Otherwise the
        keyrings below it are searched breadth-first, over one adjacency
        snapshot, until the target shows up as a member or the queue empties.

        Raises:
            NotFoundError: If ``anchor`` is unknown.
            InvalidTargetError: If ``anchor`` is not a keyring.
        """
        adjacency = self._store.adjacency(anchor)
        if target == anchor:
            return True

        visited: set[int] = {anchor}
        queue: deque[int] = deque([anchor])
        while queue:
            current = queue.popleft()
            members = adjacency[current]
            if target in members:
                return True
            for member in members:
                if member in adjacency and member not in visited:
                    visited.add(member)
                    queue.append(member)
        return False

    def effective_permissions(
        self,
        caller: Hashable,
        anchor: int,
        target: Credential | Keyring,
    ) -> Perm:
        """Compute the union of every permission class that applies to ``caller``.

        Args:
            caller: Identity of the requester.
            anchor: Keyring the request is rooted at.
            target: The credential or keyring being accessed.

        Returns:
            The effective ``Perm`` set. A capability is granted iff present.
        """
        mask = target.mask
        perms = mask.other | mask.group
        if caller == target.owner:
            perms |= mask.owner
        if self.reachable(anchor, target.serial):
            perms |= mask.possessor
        return perms

    def check(
        self,
        caller: Hashable,
        anchor: int,
        serial: int,
        required: Perm,
    ) -> Credential | Keyring:
        """Resolve ``serial`` and require ``required`` in the caller's permissions.

        Returns:
            The resolved credential or keyring.

        Raises:
            NotFoundError: If ``serial`` is unknown.
            InvalidTargetError: If ``anchor`` is not an existing keyring.
            PermissionDeniedError: If any flag of ``required`` is missing.
        """
        target = self._store.get(serial)
        if anchor not in self._store:
            raise InvalidTargetError(f"Anchor {anchor} is not an existing keyring")
        perms = self.effective_permissions(caller, anchor, target)
        if required not in perms:
            logger.debug(
                "Denied %s on %d to %s from anchor %d (has %r)",
                format_perms(required), serial, caller, anchor, format_perms(perms),
            )
            raise PermissionDeniedError(
                f"Serial {serial} exists but {caller!r} lacks "
                f"{format_perms(required)!r} from anchor {anchor}"
            )
        return target
