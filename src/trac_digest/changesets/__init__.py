"""
Changeset extraction and enrichment.

See :mod:`trac_digest.changesets.extractor` for turning the Trac log
into :class:`Changeset` records and :mod:`trac_digest.changesets.resolver`
for attaching ticket components to them.
"""

from .model import Changeset  # noqa: F401
from .extractor import extract_changesets  # noqa: F401
from .resolver import TicketLookup, resolve_components  # noqa: F401
