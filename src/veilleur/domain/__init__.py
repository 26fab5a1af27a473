"""
Domain layer for Veilleur.
"""
