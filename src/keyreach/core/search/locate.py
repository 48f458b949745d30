"""Locate credentials by description rather than by serial.

The search is a breadth-first walk of the keyring graph, so a credential can
only be found if it is reachable from a search root. Knowing a serial is not
enough: an unreachable credential never turns up here, even though a direct
``read`` of its serial reports it as existing (denied) rather than absent.

Search Order:
    1. An explicit anchor is the only root when given.
    2. Otherwise the caller's session root (``@s``) is searched, then the
       caller's user root (``@u``).
    3. Within one root, the first match in breadth-first order wins:
       shallower keyrings first, and members of one keyring in the order
       they were added or linked. The walk yields each entity once, so two
       matches never tie.
"""

from __future__ import annotations

import logging
from typing import Hashable

from keyreach.core.graph import DEFAULT_KEY_TYPE
from keyreach.core.permissions import Perm
from keyreach.core.reachability import ReachabilityEvaluator
from keyreach.exceptions import NotFoundError

logger = logging.getLogger(__name__)


def _search_root(
    evaluator: ReachabilityEvaluator,
    caller: Hashable,
    root: int,
    description: str,
    key_type: str,
) -> int | None:
    store = evaluator.store
    for serial, depth in evaluator.walk(root):
        if depth == 0:
            continue
        entity = store.get(serial)
        if entity.key_type != key_type or entity.description != description:
            continue
        # Matches without search permission are invisible to the caller.
        if Perm.SEARCH not in evaluator.effective_permissions(caller, root, entity):
            continue
        return serial
    return None


def locate(
    evaluator: ReachabilityEvaluator,
    caller: Hashable,
    description: str,
    anchor: int | None = None,
    key_type: str = DEFAULT_KEY_TYPE,
) -> int:
    """Find the serial of a reachable credential by type and description.

    Args:
        evaluator: Evaluator bound to the store to search.
        caller: Identity of the requester. Its anchors supply the default
            search path and its identity feeds the permission check.
        description: Description to match exactly.
        anchor: Restrict the search to the subgraph below this keyring.
        key_type: Type to match. Defaults to ``"user"``.

    Returns:
        The serial of the first match in search order.

    Raises:
        NotFoundError: If no reachable, searchable entity matches, or if
            ``anchor`` is None and ``caller`` has no session anchors.
    """
    if anchor is not None:
        roots: tuple[int, ...] = (anchor,)
    else:
        roots = evaluator.store.anchors(caller).search_path

    for root in roots:
        found = _search_root(evaluator, caller, root, description, key_type)
        if found is not None:
            logger.debug("Located %s %r as %d from root %d", key_type, description, found, root)
            return found

    raise NotFoundError(
        f"No reachable {key_type} credential described {description!r}"
    )
