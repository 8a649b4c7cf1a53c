"""
Component resolution for changesets.

Each changeset references zero or more tickets, and each ticket belongs
to a component. :func:`resolve_components` looks up every referenced
ticket concurrently and records the component names on the changesets
that reference them. A failed lookup only costs that ticket's
component; the remaining lookups carry on.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from trac_digest.changesets.model import Changeset


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


ComponentFetcher = Callable[[str], str]


@dataclass
class TicketLookup:
    """Outcome of looking up a single ticket's component."""

    ticket: str
    component: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _lookup(fetch_component: ComponentFetcher, ticket: str) -> TicketLookup:
    try:
        component = fetch_component(ticket)
    except Exception as exc:
        logger.warning("Could not resolve component for ticket #%s: %s", ticket, exc)
        return TicketLookup(ticket=ticket, error=str(exc) or exc.__class__.__name__)
    logger.debug("Ticket #%s belongs to component %r", ticket, component)
    return TicketLookup(ticket=ticket, component=component)


def unique_tickets(changesets: Sequence[Changeset]) -> List[str]:
    """Return every referenced ticket id once, in order of first appearance."""
    seen: Dict[str, None] = {}
    for changeset in changesets:
        for ticket in changeset.related:
            seen.setdefault(ticket, None)
    return list(seen)


def resolve_components(
    changesets: Sequence[Changeset],
    fetch_component: ComponentFetcher,
    max_workers: Optional[int] = None,
) -> List[TicketLookup]:
    """Fill in ``components`` for each changeset.

    Parameters
    ----------
    changesets : Sequence[Changeset]
        Changesets produced by the extractor. Their ``components`` lists
        are extended in place.
    fetch_component : Callable[[str], str]
        Returns the component name of a ticket id and raises on failure.
    max_workers : int, optional
        Upper bound on concurrent lookups. Defaults to one worker per
        distinct ticket.

    Returns
    -------
    List[TicketLookup]
        One lookup per distinct ticket id, in order of first appearance.

    Notes
    -----
    Each distinct ticket is fetched once. Components are appended in the
    order of the changeset's ``related`` list, not in completion order,
    so ``components[0]`` always comes from the first ticket that
    resolved.
    """
    tickets = unique_tickets(changesets)
    if not tickets:
        return []

    workers = max(1, max_workers if max_workers is not None else len(tickets))
    logger.debug("Resolving %d ticket(s) with %d worker(s)", len(tickets), workers)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(_lookup, fetch_component, ticket) for ticket in tickets]
        lookups = [future.result() for future in futures]

    by_ticket = {lookup.ticket: lookup for lookup in lookups}
    for changeset in changesets:
        for ticket in changeset.related:
            lookup = by_ticket[ticket]
            if lookup.ok:
                changeset.components.append(lookup.component)
    return lookups
