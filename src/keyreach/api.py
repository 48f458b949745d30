"""In-process query API for the possession engine.

``KeyringService`` wraps a ``GraphStore`` with typed operations that never
raise for the enumerated failure kinds. Each call returns a ``Result``
holding either a value or the ``KeyReachError`` that explains the failure,
so callers can tell "no such credential" (``ErrorKind.NOT_FOUND``) from
"exists but not possessed" (``ErrorKind.DENIED``) without exception
handling.

Usage::

    service = KeyringService(GraphStore())
    me = service.session(1000)
    key = service.add(1000, "token", b"s3cret", me.user_root).unwrap()
    service.read(1000, me.session_root, key).kind        # ErrorKind.DENIED
    service.link(me.user_root, me.session_root)
    service.read(1000, me.session_root, key).unwrap()    # b"s3cret"
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Generic, Hashable, TypeVar

from keyreach.core.graph import DEFAULT_KEY_TYPE, Credential, GraphStore, Keyring, SessionAnchors
from keyreach.core.permissions import Perm, PermissionMask
from keyreach.core.reachability import ReachabilityEvaluator
from keyreach.core.search import locate as _locate
from keyreach.core.usercred import UserCredential
from keyreach.exceptions import ErrorKind, InvalidTargetError, KeyReachError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a service operation: a value, or the error that prevented it."""

    value: T | None = None
    error: KeyReachError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> ErrorKind | None:
        """The failure kind, or None on success."""
        return self.error.kind if self.error is not None else None

    def unwrap(self) -> T:
        """Return the value, re-raising the stored error on failure."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


def _capture(operation: Callable[[], T]) -> Result[T]:
    try:
        return Result(value=operation())
    except KeyReachError as exc:
        logger.debug("Operation failed (%s): %s", exc.kind.value, exc)
        return Result(error=exc)


class KeyringService:
    """Typed add/link/read/locate operations over a keyring graph.

    Args:
        store: The graph to operate on. A fresh empty store is used if None.
    """

    def __init__(self, store: GraphStore | None = None) -> None:
        self._store = store if store is not None else GraphStore()
        self._evaluator = ReachabilityEvaluator(self._store)

    @property
    def store(self) -> GraphStore:
        return self._store

    @property
    def evaluator(self) -> ReachabilityEvaluator:
        return self._evaluator

    def session(self, identity: Hashable) -> SessionAnchors:
        """Bootstrap (or fetch) the user and session roots of ``identity``."""
        return self._store.bootstrap(identity)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(
        self,
        caller: Hashable,
        description: str,
        payload: bytes,
        target: int,
        mask: PermissionMask | None = None,
        key_type: str = DEFAULT_KEY_TYPE,
    ) -> Result[int]:
        """Add a credential owned by ``caller`` to keyring ``target``.

        Any existing keyring is an acceptable target regardless of who owns
        it; ownership of the new credential always goes to the caller.
        """
        return _capture(
            lambda: self._store.add(key_type, description, payload, target, caller, mask)
        )

    def link(self, child: int, parent: int) -> Result[None]:
        """Link ``child`` into keyring ``parent``. Idempotent."""
        return _capture(lambda: self._store.link(child, parent))

    def write_user_cred(
        self,
        caller: Hashable,
        description: str,
        username: str,
        password: str,
        target: int,
        mask: PermissionMask | None = None,
    ) -> Result[int]:
        """Store a username/password pair as a ``user`` credential."""
        return _capture(
            lambda: self._store.add(
                DEFAULT_KEY_TYPE,
                description,
                UserCredential(username, password).to_payload(),
                target,
                caller,
                mask,
            )
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _read_payload(self, caller: Hashable, anchor: int, serial: int) -> bytes:
        target = self._store.get(serial)
        if isinstance(target, Keyring):
            raise InvalidTargetError(f"Serial {serial} is a keyring, not a credential")
        credential = self._evaluator.check(caller, anchor, serial, Perm.READ)
        return credential.payload  # type: ignore[union-attr]

    def read(self, caller: Hashable, anchor: int, serial: int) -> Result[bytes]:
        """Return the payload of credential ``serial`` if ``caller`` may read it.

        Fails with ``NOT_FOUND`` for an unknown serial, ``INVALID_TARGET``
        for a keyring or for an ``anchor`` that is not an existing keyring,
        and ``DENIED`` when READ is not in the caller's effective
        permissions from ``anchor``.
        """
        return _capture(lambda: self._read_payload(caller, anchor, serial))

    def read_string(self, caller: Hashable, anchor: int, serial: int) -> Result[str]:
        """Like ``read``, decoding the payload as UTF-8."""
        return _capture(
            lambda: self._read_payload(caller, anchor, serial).decode("utf-8", errors="replace")
        )

    def read_user_cred(
        self, caller: Hashable, anchor: int, serial: int
    ) -> Result[UserCredential]:
        """Read and parse a ``username:password`` credential."""
        return _capture(
            lambda: UserCredential.from_payload(self._read_payload(caller, anchor, serial))
        )

    def locate(
        self,
        caller: Hashable,
        description: str,
        anchor: int | None = None,
        key_type: str = DEFAULT_KEY_TYPE,
    ) -> Result[int]:
        """Find a reachable credential by description.

        Without ``anchor`` the caller's session root is searched first, then
        its user root.
        """
        return _capture(
            lambda: _locate(self._evaluator, caller, description, anchor, key_type)
        )

    def list_reachable(self, caller: Hashable, anchor: int) -> Result[list[Credential]]:
        """List credentials reachable from ``anchor`` that ``caller`` may view.

        Credentials come back in breadth-first order.
        """

        def _collect() -> list[Credential]:
            found: list[Credential] = []
            for serial, _depth in self._evaluator.walk(anchor):
                entity = self._store.get(serial)
                if not isinstance(entity, Credential):
                    continue
                if Perm.VIEW in self._evaluator.effective_permissions(caller, anchor, entity):
                    found.append(entity)
            return found

        return _capture(_collect)
