"""Lookup by description along the keyring search path.

Submodules:
    locate  -- locate() BFS over the session root, then the user root
"""

from keyreach.core.search.locate import locate

__all__ = ["locate"]
