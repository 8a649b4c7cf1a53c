"""
Changeset extraction from the Trac verbose log.

The verbose revision log (``/log?...&verbose=on``) renders every
changeset as two consecutive ``tr.verbose`` rows: a metadata row with
the revision and author cells, and a description row holding the
rendered commit message. :func:`extract_changesets` walks those rows in
pairs and turns each pair into a :class:`Changeset`.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from trac_digest.changesets.model import Changeset
from trac_digest.changesets.normalizer import (
    clean_name_list,
    collapse_blank_lines,
    extract_props_clause,
    readd_code_markers,
    strip_fixes_and_see,
)


logger = logging.getLogger(__name__)
# Attach a null handler so that importing this module never emits
# "no handler" warnings. The CLI configures the root logger.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


_REVISION_RE = re.compile(r"@(.*)")
_TICKET_RE = re.compile(r"#(.*)")


def _cell(row: Tag, css_class: str) -> Optional[Tag]:
    return row.find("td", class_=css_class)


def _cell_text(row: Tag, css_class: str) -> str:
    cell = _cell(row, css_class)
    return cell.get_text().strip() if cell is not None else ""


def format_revision(raw: str) -> str:
    """Convert Trac's ``@N`` revision label to ``[N]``."""
    return _REVISION_RE.sub(r"[\1]", raw.strip(), count=1)


def ticket_references(description: Tag) -> List[str]:
    """Return the ticket ids linked from a description cell.

    Ids are returned in order of appearance without their leading ``#``.
    Repeated references are kept.
    """
    tickets: List[str] = []
    for link in description.find_all("a", class_="ticket"):
        tickets.append(_TICKET_RE.sub(r"\1", link.get_text().strip(), count=1))
    return tickets


def parse_changeset(meta_row: Tag, log_row: Tag) -> Changeset:
    """Build a :class:`Changeset` from a metadata row and a description row."""
    changeset = Changeset(
        revision=format_revision(_cell_text(meta_row, "rev")),
        author=_cell_text(meta_row, "author"),
    )

    description = _cell(log_row, "log")
    if description is None:
        return changeset

    readd_code_markers(description)
    changeset.related = ticket_references(description)

    text = strip_fixes_and_see(description.get_text())
    text, raw_props = extract_props_clause(text)
    if raw_props is not None:
        changeset.props = clean_name_list(raw_props)

    changeset.description = collapse_blank_lines(text).strip()
    return changeset


def extract_changesets(log_markup: str) -> List[Changeset]:
    """Parse the verbose log page into changesets.

    Parameters
    ----------
    log_markup : str
        HTML of the Trac log page rendered with ``verbose=on``.

    Returns
    -------
    List[Changeset]
        One changeset per complete pair of rows, in page order. A
        trailing row without its partner ends the extraction; the
        changesets parsed before it are returned.
    """
    rows = BeautifulSoup(log_markup, "html.parser").select("tr.verbose")
    changesets: List[Changeset] = []
    for index in range(0, len(rows), 2):
        if index + 1 >= len(rows):
            logger.debug("Ignoring unpaired trailing log row at index %d", index)
            break
        changesets.append(parse_changeset(rows[index], rows[index + 1]))
    logger.debug("Extracted %d changeset(s) from %d log row(s)", len(changesets), len(rows))
    return changesets
