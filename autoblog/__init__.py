"""Autoblog - automated blog article generation with duplicate avoidance"""

__version__ = "1.0.0"
