"""
Markdown rendering of the changelog digest.

Changesets are grouped into buckets named after their first component,
each bucket becomes a ``###`` section, and every author and credited
contributor is thanked in a single closing line.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from trac_digest.changesets.model import Changeset


CODE_CHANGES_HEADING = "## Code Changes"
PROPS_HEADING = "## Props"


def bucket_changesets(changesets: Iterable[Changeset]) -> Dict[str, List[Changeset]]:
    """Group changesets by category, keeping first-seen bucket order."""
    buckets: Dict[str, List[Changeset]] = {}
    for changeset in changesets:
        buckets.setdefault(changeset.category, []).append(changeset)
    return buckets


def render_entry(changeset: Changeset) -> str:
    """Render one changeset as a markdown list item.

    A changeset without tickets still ends in a bare ``#``.
    """
    tickets = ", #".join(changeset.related)
    return f"* {changeset.description} {changeset.revision} #{tickets}"


def render_sections(buckets: Dict[str, List[Changeset]]) -> str:
    lines: List[str] = []
    for name, members in buckets.items():
        lines.append(f"### {name}")
        lines.extend(render_entry(changeset) for changeset in members)
        lines.append("")
    return "\n".join(lines)


def collect_contributors(changesets: Iterable[Changeset]) -> List[str]:
    """Return authors and props in changeset order.

    Committers are always credited; props follow their changeset's
    author. Empty handles are skipped on purpose: an author missing from
    the log would otherwise render as a bare ``@`` in the credit line.
    """
    handles: List[str] = []
    for changeset in changesets:
        handles.append(changeset.author)
        handles.extend(changeset.props)
    return [handle for handle in handles if handle]


def dedupe_contributors(handles: Iterable[str]) -> List[str]:
    """Sort handles case-insensitively and drop case-insensitive repeats.

    The sort is stable, so the spelling kept for a handle is the one
    seen first among its equals.
    """
    unique: List[str] = []
    for handle in sorted(handles, key=str.lower):
        if unique and unique[-1].lower() == handle.lower():
            continue
        unique.append(handle)
    return unique


def credit_line(handles: Sequence[str]) -> str:
    """Build the "Thanks to ..." sentence for the given handles.

    >>> credit_line(["alice", "bob", "carol"])
    'Thanks to @alice, @bob, and @carol for their contributions!'
    """
    if not handles:
        return ""
    if len(handles) == 1:
        return f"Thanks to @{handles[0]} for their contributions!"
    leading = ", @".join(handles[:-1])
    return f"Thanks to @{leading}, and @{handles[-1]} for their contributions!"


def render_report(changesets: Sequence[Changeset]) -> str:
    """Render the full markdown digest.

    Parameters
    ----------
    changesets : Sequence[Changeset]
        Changesets with their components resolved, in log order.

    Returns
    -------
    str
        A ``## Code Changes`` section with one ``###`` subsection per
        bucket, followed by a ``## Props`` section with the credit line.
    """
    sections = render_sections(bucket_changesets(changesets))
    credits = credit_line(dedupe_contributors(collect_contributors(changesets)))
    parts = [CODE_CHANGES_HEADING, "", sections, PROPS_HEADING, "", credits]
    return "\n".join(parts).rstrip("\n") + "\n"
