"""Test utilities for detour applications::

    from detour.testing import TestClient
"""

from detour.testing.client import TestClient

__all__ = ["TestClient"]
