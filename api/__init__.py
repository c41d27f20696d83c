"""
API Module for the Bizplan Assistant.

FastAPI application with routes for:
- Model routing and research triggering
- Lead signal extraction and scoring
"""

from .main import create_app, app

__all__ = ["create_app", "app"]
