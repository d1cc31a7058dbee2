"""Test utilities for switchyard applications::

    from switchyard.testing import TestClient, multipart_body
"""

from switchyard.testing.client import TestClient
from switchyard.testing.multipart import multipart_body

__all__ = ["TestClient", "multipart_body"]
