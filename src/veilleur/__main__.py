"""
Run with: python -m veilleur
"""

from veilleur.cli import main

if __name__ == "__main__":
    main()
