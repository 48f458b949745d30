"""Shared fixtures for keyreach tests."""

import pytest

from keyreach.api import KeyringService
from keyreach.core.graph import GraphStore, SessionAnchors
from keyreach.core.reachability import ReachabilityEvaluator

OWNER = 1000
STRANGER = 1001


@pytest.fixture
def store() -> GraphStore:
    """An empty store with no identities bootstrapped."""
    return GraphStore()


@pytest.fixture
def anchors(store: GraphStore) -> SessionAnchors:
    """User and session roots of the default owner identity."""
    return store.bootstrap(OWNER)


@pytest.fixture
def evaluator(store: GraphStore) -> ReachabilityEvaluator:
    return ReachabilityEvaluator(store)


@pytest.fixture
def service(store: GraphStore) -> KeyringService:
    """A service sharing the ``store`` fixture."""
    return KeyringService(store)
