"""
API routes for Veilleur.
"""

from veilleur.presentation.api.routes.status import router as status_router

__all__ = ["status_router"]
