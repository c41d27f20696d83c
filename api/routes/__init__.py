"""
API Routes for the Bizplan Assistant.
"""

from . import leads, routing

__all__ = ["leads", "routing"]
