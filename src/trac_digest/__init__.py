"""
Top-level package for trac_digest.

This package builds a categorized markdown changelog from a Trac
revision log. The main CLI entry point lives in the
``trac_digest.cli`` module.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
