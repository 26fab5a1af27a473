"""
Shutdown handling for Veilleur.
"""

from veilleur.infrastructure.shutdown.shutdown_manager import (
    TERMINATION_SIGNALS,
    ShutdownManager,
)

__all__ = ["ShutdownManager", "TERMINATION_SIGNALS"]
