"""
Dependency injection for Veilleur.
"""

from veilleur.di.container import Container

__all__ = ["Container"]
