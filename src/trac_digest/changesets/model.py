"""
Data model for changelog entries.

The :class:`Changeset` represents a single committed revision as it
appears in the digest: its revision label, the committer, the cleaned
up description, the tickets it references and the contributors credited
in its "Props" clause.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


DEFAULT_CATEGORY = "Misc"


@dataclass
class Changeset:
    """Representation of one changeset in the digest.

    Attributes
    ----------
    revision : str
        Revision label in its bracketed form, e.g. ``"[12345]"``.
    author : str
        Handle of the committer. May be empty if the log lacks it.
    description : str
        Normalized commit message without Fixes/See/Props clauses.
    related : List[str]
        Ticket ids referenced by the message, in order of appearance.
    components : List[str]
        Component names of the related tickets, in ``related`` order.
    props : List[str]
        Contributor handles credited in the message.
    """

    revision: str
    author: str
    description: str = ""
    related: List[str] = field(default_factory=list)
    components: List[str] = field(default_factory=list)
    props: List[str] = field(default_factory=list)

    @property
    def category(self) -> str:
        """The bucket this changeset is reported under."""
        if self.components:
            return self.components[0]
        return DEFAULT_CATEGORY
