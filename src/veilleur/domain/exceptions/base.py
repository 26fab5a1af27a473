"""
Base exception for Veilleur.
"""


class VeilleurError(Exception):
    """Base exception for all Veilleur errors."""

    pass
