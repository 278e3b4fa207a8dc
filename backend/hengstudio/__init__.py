"""Portfolio CMS backend for the studio website."""

__version__ = "1.0.0"
