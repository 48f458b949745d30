"""keyreach: Possession-based access control for hierarchical credential stores."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
