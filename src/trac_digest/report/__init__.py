"""
Report rendering for trac_digest.

See :mod:`trac_digest.report.renderer` for the markdown layout.
"""

from .renderer import render_report  # noqa: F401
