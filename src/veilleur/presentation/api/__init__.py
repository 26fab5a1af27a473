"""
HTTP API for Veilleur.
"""

from veilleur.presentation.api.app import create_app

__all__ = ["create_app"]
