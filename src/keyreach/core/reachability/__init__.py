"""Reachability and effective-permission evaluation over the keyring graph.

Submodules:
    evaluator  -- ReachabilityEvaluator (reachable, effective_permissions, check)
"""

from keyreach.core.reachability.evaluator import ReachabilityEvaluator

__all__ = ["ReachabilityEvaluator"]
