"""
Heuristics for cleaning up Trac commit messages.

Commit messages carry semi-structured trailers written in free prose:
``Fixes #123.``, ``See #456.`` and ``Props jane, john for testing.``.
The helpers in this module strip or extract these trailers. They are
intentionally simple regular expressions so that they can be unit
tested without network access; known sharp edges (for instance a ticket
reference in the middle of a props sentence) are kept as-is.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from bs4 import Tag


_FIXES_RE = re.compile(r"[\n|, ]Fixes(.*)", re.IGNORECASE)
_SEE_RE = re.compile(r"\nSee(.*)", re.IGNORECASE)
_PROPS_RE = re.compile(r"\nProps:?([^.\n]*)\.?", re.IGNORECASE)
_FOR_PHRASE_RE = re.compile(r"\bfor\b[^,.]*", re.IGNORECASE)
_BLANK_LINES_RE = re.compile(r"\n{3,}")
_WHITESPACE_RE = re.compile(r"\s+")

CODE_TAGS = ("tt", "code")


def strip_fixes_and_see(text: str) -> str:
    """Remove the first "Fixes ..." and the first "See ..." clause.

    Each clause runs from its marker to the end of that line. The Fixes
    marker may follow a newline, comma, pipe or space; the See marker
    must start a line.
    """
    text = _FIXES_RE.sub("", text, count=1)
    return _SEE_RE.sub("", text, count=1)


def extract_props_clause(text: str) -> Tuple[str, Optional[str]]:
    """Split a "Props" clause off ``text``.

    Parameters
    ----------
    text : str
        The commit message.

    Returns
    -------
    Tuple[str, Optional[str]]
        The message with the clause removed and the raw name segment
        following the marker, or ``(text, None)`` if there is no clause.
        The clause ends at the first period; anything after it on the
        same line stays in the message.

    Examples
    --------
    >>> extract_props_clause("Tweak.\\nProps jane, bob.")
    ('Tweak.', ' jane, bob')
    """
    match = _PROPS_RE.search(text)
    if match is None:
        return text, None
    remaining = text[: match.start()] + text[match.end():]
    return remaining, match.group(1)


def clean_name_list(raw: str) -> List[str]:
    """Turn a raw props segment into a list of handles.

    Qualifiers such as "for testing" are dropped up to the next comma or
    period, periods are removed, and both commas and whitespace act as
    separators.

    >>> clean_name_list(" jane, john for testing, bob.")
    ['jane', 'john', 'bob']
    """
    cleaned = _FOR_PHRASE_RE.sub("", raw)
    cleaned = cleaned.replace(".", "")
    cleaned = _WHITESPACE_RE.sub(",", cleaned)
    return [name.strip() for name in cleaned.split(",") if name.strip()]


def collapse_blank_lines(text: str) -> str:
    """Limit runs of newlines to a single blank line."""
    return _BLANK_LINES_RE.sub("\n\n", text)


def readd_code_markers(fragment: Tag) -> Tag:
    """Replace inline code elements in ``fragment`` with backtick text.

    Trac renders ``{{{code}}}`` and backtick spans as ``<tt>`` (older
    releases) or ``<code>`` elements. Flattening the fragment to text
    would lose the markers, so this has to run first. The fragment is
    modified in place and returned for convenience.
    """
    for element in fragment.find_all(CODE_TAGS):
        element.replace_with(f"`{element.get_text()}`")
    return fragment
