"""Configuration for Autoblog"""

from .settings import Settings, get_settings
from .categories import CATEGORY_TREE, DEFAULT_SUBCATEGORY

__all__ = [
    "Settings",
    "get_settings",
    "CATEGORY_TREE",
    "DEFAULT_SUBCATEGORY",
]
