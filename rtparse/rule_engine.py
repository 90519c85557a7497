#!/usr/bin/env python3
"""
Rule engine: the ordered rule interpreter.

The engine applies every rule once, in table order, to a working copy of the
title. Matched tokens are recorded as FieldStates and, when the rule asks for
it, spliced out of the working title so later rules never see them again.
The leftmost significant match offset is tracked as the title boundary; the
text before it is what the title cleaner later turns into the clean title.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

import regex

from .field_state import FieldMap, FieldState, new_state
from .rule import Rule

WHITESPACE = regex.compile(r'\s+')
UNDERSCORES = regex.compile(r'_+')
# A "[Group]" tag at the very start of the title
LEADING_BRACKET = regex.compile(r'^\[([^[\]]+)]')


def normalize_separators(title: str) -> str:
    """Collapse whitespace runs and underscore runs into single spaces."""
    return UNDERSCORES.sub(' ', WHITESPACE.sub(' ', title))


def splice(title: str, index: int, text: str) -> str:
    """Remove len(text) characters from title starting at index."""
    return title[:index] + title[index + len(text):]


@dataclass
class EngineOutcome:
    """Field map, remaining working title and title boundary of one run."""
    fields: FieldMap
    title: str
    boundary: int

    @property
    def title_span(self) -> str:
        """The part of the working title left of the boundary."""
        return self.title[:max(min(self.boundary, len(self.title)), 0)]


class RuleEngine:
    """Applies an ordered rule table to titles."""

    def __init__(self, rules: Iterable[Rule]):
        self.rules: Tuple[Rule, ...] = tuple(rules)

    def run(self, title: str) -> EngineOutcome:
        """
        Run every rule against title.

        Args:
            title: Raw release title

        Returns:
            EngineOutcome with the resolved fields (in first-match order), the
            shrunk working title and the title boundary offset
        """
        title = normalize_separators(title)
        fields: FieldMap = {}
        boundary = len(title)

        for rule in self.rules:
            title, boundary = self.apply(rule, title, fields, boundary)

        return EngineOutcome(fields=fields, title=title, boundary=boundary)

    def apply(self, rule: Rule, title: str, fields: FieldMap, boundary: int) -> Tuple[str, int]:
        """
        Apply a single rule.

        Returns:
            The (possibly shortened) working title and the updated boundary
        """
        field = rule.field
        skip_from_title = rule.skip_from_title
        state: Optional[FieldState] = fields.get(field)

        if rule.pattern is not None:
            if state is not None and not rule.keep_matching:
                return title, boundary

            match = rule.search(title)
            if match is None:
                return title, boundary
            if rule.skip_if_first and self.would_be_first(field, match.start(), fields):
                return title, boundary
            if self.starts_before(rule.skip_if_before, match.start(), fields):
                return title, boundary

            # matches inside a leading "[Group]" tag never end the title
            leading = LEADING_BRACKET.search(title)
            if match.group(0) in (leading.group(0) if leading else ''):
                skip_from_title = True

            if state is None:
                state = new_state(field)
                fields[field] = state

            state.match_index, state.matched_text = rule.anchor(match)
            if not rule.accumulates:
                state.value = rule.value_text(match)

        if rule.processor is not None:
            if state is not None:
                state = rule.processor(title, state, fields)
                fields[field] = state
            else:
                state = rule.processor(title, FieldState(field=field), fields)
                if state.value is not None:
                    fields[field] = state

        if state is None:
            return title, boundary

        if state.value is not None and rule.transform is not None:
            rule.transform(title, state, fields)

        if state.value is None:
            fields.pop(field, None)
            return title, boundary

        if state.claimed and not rule.keep_matching and not rule.accumulates:
            state.remove_pending = False
            return title, boundary

        removed = False
        if (rule.remove or state.remove_pending) and state.is_positioned:
            title = splice(title, state.match_index, state.matched_text)
            removed = True

        index = state.match_index
        if not skip_from_title and index is not None and 0 < index < boundary:
            boundary = index

        if removed and skip_from_title and index < boundary:
            # offsets right of the removed text moved left
            boundary -= len(state.matched_text)

        state.remove_pending = False
        state.claimed = True
        return title, boundary

    @staticmethod
    def would_be_first(field: str, start: int, fields: FieldMap) -> bool:
        """
        True when other fields are known but none of them is positioned at or
        before start, i.e. the candidate would be the first token of the title.
        """
        has_other = False
        for name, other in fields.items():
            if name == field:
                continue
            has_other = True
            if other.is_positioned and start >= other.match_index:
                return False
        return has_other

    @staticmethod
    def starts_before(names: Iterable[str], start: int, fields: FieldMap) -> bool:
        """True when start precedes the position of any listed, positioned field."""
        for name in names:
            other = fields.get(name)
            if other is not None and other.is_positioned and start < other.match_index:
                return True
        return False
