#!/usr/bin/env python3
"""
Rule descriptor: one ordered entry of the rule table.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .field_state import has_value_set
from .processors import Processor
from .transforms import Transform
from .validators import Validator


@dataclass(frozen=True)
class Rule:
    """
    Immutable rule targeting a single field.

    Attributes:
        field: Name of the field the rule resolves
        pattern: Compiled pattern, or None for processor-only rules
        validator: Extra acceptance check applied to a match
        transform: Turns the matched text into the typed value
        processor: Custom logic run after matching (or instead of it)
        remove: Splice the matched text out of the working title
        keep_matching: Keep firing after the field is already resolved
        skip_if_first: Ignore a match that would be the first token found
        skip_if_before: Ignore a match starting before any of these fields
        skip_from_title: Do not let this match bound the clean title
        match_group: Capture group anchoring position and removed text
        value_group: Capture group providing the value text
    """
    field: str
    pattern: Optional[object] = None
    validator: Optional[Validator] = None
    transform: Optional[Transform] = None
    processor: Optional[Processor] = None
    remove: bool = False
    keep_matching: bool = False
    skip_if_first: bool = False
    skip_if_before: Tuple[str, ...] = ()
    skip_from_title: bool = False
    match_group: int = 0
    value_group: int = 1

    @property
    def accumulates(self) -> bool:
        """True for rules of multi-valued fields."""
        return has_value_set(self.field)

    def search(self, title: str):
        """
        Find the first acceptable match of the pattern in title.

        Returns:
            The match object, or None when the rule has no pattern, the
            pattern does not match or the validator rejects the match
        """
        if self.pattern is None:
            return None
        match = self.pattern.search(title)
        if match is None:
            return None
        if self.validator is not None and not self.validator(title, match):
            return None
        return match

    def value_text(self, match) -> str:
        """Text used as the tentative value: the value group, or the whole match."""
        group_count = len(match.groups())
        if group_count == 0:
            return match.group(0)
        group = self.value_group if self.value_group <= group_count else 0
        return match.group(group) or ''

    def anchor(self, match) -> Tuple[int, str]:
        """Position and raw text the field records for this match."""
        if self.match_group and match.start(self.match_group) >= 0:
            return match.start(self.match_group), match.group(self.match_group)
        return match.start(), match.group(0)
