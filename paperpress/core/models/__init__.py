"""
Domain models — Pydantic types for the paper catalog.

    from paperpress.core.models import Site, Paper, PageDefaults
"""

from paperpress.core.models.site import PageDefaults, Paper, Site

__all__ = [
    "PageDefaults",
    "Paper",
    "Site",
]
