"""HTTP blueprints"""

from .blog import blog_api

__all__ = ['blog_api']
