"""
Trac integration for trac_digest.

This package contains the :class:`TracClient` used to download the
revision log and look up ticket components.
"""

from .client import TracClient, TracError  # noqa: F401
