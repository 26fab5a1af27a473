"""
Presentation layer for Veilleur.
"""
