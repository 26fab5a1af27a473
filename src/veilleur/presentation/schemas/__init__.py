"""
Response schemas for Veilleur.
"""

from veilleur.presentation.schemas.status import StatusResponse

__all__ = ["StatusResponse"]
