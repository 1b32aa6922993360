"""Talent discovery backend with natural-language profile search."""

__version__ = "1.0.0"
