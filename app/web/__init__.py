"""
Module web - Pages rendues côté serveur.
"""

from .pages import router, templates, PageRedirect

__all__ = ["router", "templates", "PageRedirect"]
