"""
Terrain Party: synthetic heightmaps for geographic squares.
"""

__version__ = "0.1.0"
