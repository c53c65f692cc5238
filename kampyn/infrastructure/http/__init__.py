"""
HTTP access to the KAMPYN backend
"""

from .backend_client import BackendClient
from .request_tracker import RequestTracker

__all__ = ["BackendClient", "RequestTracker"]
