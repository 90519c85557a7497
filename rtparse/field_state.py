#!/usr/bin/env python3
"""
Per-field match state shared between the rule engine and rule primitives.

A FieldState records where a field was last matched in the working title,
the raw text consumed there and the typed value resolved so far. Values are
one of a small set of variants:

- Text:      str
- Boolean:   bool
- IntList:   List[int]
- StringSet: ValueSet
- Absent:    None

The variant-checked accessors raise FieldTypeError instead of letting a
mismatched value leak into the result.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional

from .exceptions import FieldTypeError


# Fields backed by a ValueSet instead of a scalar value
VALUE_SET_FIELDS = frozenset({
    'audio',
    'channels',
    'hdr',
    'languages',
    'release_types',
})


def has_value_set(field: str) -> bool:
    """Return True if the field accumulates values into a ValueSet."""
    return field in VALUE_SET_FIELDS


class ValueSet:
    """Ordered collection of strings with set semantics."""

    def __init__(self, values: Optional[Iterable[str]] = None):
        self._seen = set()
        self._values: List[str] = []
        if values:
            self.extend(values)

    def append(self, value: str) -> 'ValueSet':
        """Add a value unless it is already present. Returns self."""
        if value not in self._seen:
            self._seen.add(value)
            self._values.append(value)
        return self

    def extend(self, values: Iterable[str]) -> 'ValueSet':
        for value in values:
            self.append(value)
        return self

    def to_list(self) -> List[str]:
        return list(self._values)

    def __contains__(self, value: object) -> bool:
        return value in self._seen

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ValueSet):
            return self._values == other._values
        if isinstance(other, list):
            return self._values == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"ValueSet({self._values!r})"


@dataclass
class FieldState:
    """Mutable match record for one field during a single parse."""
    field: str = ''
    match_index: Optional[int] = None
    matched_text: str = ''
    value: Any = None
    remove_pending: bool = False
    claimed: bool = False

    @property
    def is_positioned(self) -> bool:
        """True when the state carries an authoritative match offset."""
        return self.match_index is not None

    def as_text(self) -> str:
        if not isinstance(self.value, str):
            raise FieldTypeError(self.field, 'text', self.value)
        return self.value

    def as_flag(self) -> bool:
        if not isinstance(self.value, bool):
            raise FieldTypeError(self.field, 'boolean', self.value)
        return self.value

    def as_numbers(self) -> List[int]:
        if not isinstance(self.value, list) or not all(
            isinstance(item, int) and not isinstance(item, bool) for item in self.value
        ):
            raise FieldTypeError(self.field, 'integer list', self.value)
        return list(self.value)

    def as_values(self) -> ValueSet:
        if not isinstance(self.value, ValueSet):
            raise FieldTypeError(self.field, 'value set', self.value)
        return self.value

    def copy_with(self, field: str, value: Any) -> 'FieldState':
        """Clone position and raw text into a state for another field."""
        return FieldState(
            field=field,
            match_index=self.match_index,
            matched_text=self.matched_text,
            value=value,
        )


FieldMap = Dict[str, FieldState]


def new_state(field: str) -> FieldState:
    """Create the initial state for a field seen for the first time."""
    state = FieldState(field=field)
    if has_value_set(field):
        state.value = ValueSet()
    return state
