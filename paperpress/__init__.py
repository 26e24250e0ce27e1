"""paperpress — markdown papers to standalone HTML pages."""

__version__ = "0.1.0"
