"""
Veilleur - Process template

Loads layered configuration, configures logging, serves a health check
endpoint and shuts down gracefully on SIGTERM/SIGINT.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
