"""HTTP API for the Contract Timeline Analyzer."""

from .app import create_app

__all__ = ["create_app"]
