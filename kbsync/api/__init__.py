# kbsync/api/__init__.py
"""
kbsync REST API.

Provides HTTP endpoints for catalog inspection and for triggering sync passes.
"""

from kbsync.api.app import create_app

__all__ = ["create_app"]
