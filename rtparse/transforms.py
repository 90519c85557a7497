#!/usr/bin/env python3
"""
Value transform primitives.

A transform turns the raw text captured by a rule into the typed value of
its field. Every transform has the signature::

    transform(title: str, state: FieldState, fields: FieldMap) -> None

and works by rewriting ``state.value``. Setting the value to None rejects the
match; the engine then drops the field as if the rule never fired.

Transforms are referenced by name from the rule table and built through
TRANSFORMS, e.g. ``["value", "4k"]`` or ``["date", "%Y %m %d"]``.
"""

from datetime import datetime
from typing import Callable, Dict, List, Sequence

import regex

from .field_state import FieldMap, FieldState, ValueSet


Transform = Callable[[str, FieldState, FieldMap], None]

NON_DIGITS = regex.compile(r'\D+')
DIGITS = regex.compile(r'\d+')
# text between two numbers that spells a range: 1-5, 1 ~ 5, S01-S03, 1 to 5, 1ª a 5ª
RANGE_SEPARATOR = regex.compile(
    r'(?i)^\W*ª?\W*(?:seasons?|temporadas?)?\W*(?:-|~|to|thru|ao|a|à)\W*(?:s|e|ep|seasons?|temporadas?)?\W*$'
)
NON_ALPHAS = regex.compile(r'\W+')

_ORDINAL_SUFFIX = regex.compile(r'(\d+)(?:st|nd|rd|th)')
_MONTH_NAMES = regex.compile(
    r'(?i)(?:feb(?:ruary)?|jan(?:uary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?'
    r'|aug(?:ust)?|sept?(?:ember)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)'
)
_DATE_SEPARATORS = regex.compile(r'[.\-/\\]')


def to_value(constant) -> Transform:
    def transform(title: str, state: FieldState, fields: FieldMap) -> None:
        state.value = constant
    return transform


def to_lowercase() -> Transform:
    def transform(title: str, state: FieldState, fields: FieldMap) -> None:
        state.value = state.as_text().lower()
    return transform


def to_uppercase() -> Transform:
    def transform(title: str, state: FieldState, fields: FieldMap) -> None:
        state.value = state.as_text().upper()
    return transform


def to_trimmed() -> Transform:
    def transform(title: str, state: FieldState, fields: FieldMap) -> None:
        state.value = state.as_text().strip()
    return transform


def to_boolean() -> Transform:
    def transform(title: str, state: FieldState, fields: FieldMap) -> None:
        state.value = True
    return transform


def to_clean_date() -> Transform:
    """Strip ordinal suffixes: '1st' -> '1'."""
    def transform(title: str, state: FieldState, fields: FieldMap) -> None:
        if isinstance(state.value, str):
            state.value = _ORDINAL_SUFFIX.sub(r'\1', state.value)
    return transform


def to_clean_month() -> Transform:
    """Shorten month names to their three-letter form: 'January' -> 'Jan'."""
    def transform(title: str, state: FieldState, fields: FieldMap) -> None:
        if isinstance(state.value, str):
            state.value = _MONTH_NAMES.sub(lambda m: m.group(0)[:3], state.value)
    return transform


def to_date(layout: str) -> Transform:
    """
    Parse the value with a strptime layout and format it as YYYY-MM-DD.

    Separator characters are normalized to a single space first, so the
    layout only needs spaces between components. Unparsable dates become
    an empty string; dates are best-effort.

    Args:
        layout: strptime format, e.g. "%Y %m %d" or "%d %b %y"
    """
    def transform(title: str, state: FieldState, fields: FieldMap) -> None:
        if isinstance(state.value, str):
            try:
                parsed = datetime.strptime(_DATE_SEPARATORS.sub(' ', state.value), layout)
            except ValueError:
                pass
            else:
                state.value = parsed.strftime('%Y-%m-%d')
                return
        state.value = ''
    return transform


def parse_year(text) -> str:
    """
    Resolve a year or a year range.

    Args:
        text: Raw text such as "2019", "2010-2015" or "1999-02"

    Returns:
        "2019", "2010-2015", "1999-2002", or "" when the range is invalid

    Example:
        >>> parse_year("2015-17")
        '2015-2017'
        >>> parse_year("2015-2010")
        ''
    """
    if not isinstance(text, str):
        return ''
    parts = NON_DIGITS.split(text)
    if len(parts) == 1:
        return parts[0]

    start, end = parts[0], parts[1]
    try:
        end_year = int(end)
    except ValueError:
        return start
    try:
        start_year = int(start)
    except ValueError:
        return ''

    # two-digit end years stay in the start year's century
    if end_year < 100:
        end_year = end_year + start_year - start_year % 100
    if end_year <= start_year:
        return ''
    return f"{start_year}-{end_year}"


def to_year() -> Transform:
    def transform(title: str, state: FieldState, fields: FieldMap) -> None:
        state.value = parse_year(state.value)
    return transform


def to_flag_on_range(target_field: str) -> Transform:
    """Install target_field=True when the value is a range like '2001-2005'."""
    def transform(title: str, state: FieldState, fields: FieldMap) -> None:
        if target_field in fields:
            return
        if isinstance(state.value, str) and '-' in state.value:
            fields[target_field] = state.copy_with(target_field, True)
    return transform


def is_range_separator(text: str) -> bool:
    """True when the text between two numbers reads as "from ... to"."""
    return RANGE_SEPARATOR.match(text) is not None


def parse_int_range(text):
    """
    Parse a run of numbers into an ascending, gap-free list.

    Two increasing numbers joined by a range separator (``-``, ``~``, ``to``,
    ``S01-S03``) expand to the inclusive range between them. Any other list,
    such as ``1,3`` or ``1+2``, must already be consecutive ascending,
    otherwise the numbers are treated as a decoy and None is returned.

    Example:
        >>> parse_int_range("1-5")
        [1, 2, 3, 4, 5]
        >>> parse_int_range("1,3") is None
        True
    """
    if not isinstance(text, str):
        return None

    numbers: List[int] = []
    for part in NON_DIGITS.sub(' ', text).strip().split(' '):
        try:
            numbers.append(int(part))
        except ValueError:
            numbers.append(0)

    if len(numbers) == 2 and numbers[0] < numbers[1]:
        first, second = DIGITS.finditer(text)
        if is_range_separator(text[first.end():second.start()]):
            numbers = list(range(numbers[0], numbers[1] + 1))

    for current, following in zip(numbers, numbers[1:]):
        if current + 1 != following:
            return None
    return numbers


def to_int_range() -> Transform:
    def transform(title: str, state: FieldState, fields: FieldMap) -> None:
        state.value = parse_int_range(state.value)
    return transform


def to_int_array() -> Transform:
    def transform(title: str, state: FieldState, fields: FieldMap) -> None:
        if isinstance(state.value, str):
            try:
                state.value = [int(state.value)]
                return
            except ValueError:
                pass
        state.value = []
    return transform


def to_with_suffix(suffix: str) -> Transform:
    def transform(title: str, state: FieldState, fields: FieldMap) -> None:
        if isinstance(state.value, str):
            state.value = state.value + suffix
        else:
            state.value = ''
    return transform


def to_value_set(constant: str) -> Transform:
    def transform(title: str, state: FieldState, fields: FieldMap) -> None:
        if isinstance(state.value, ValueSet):
            state.value.append(constant)
    return transform


_CASE_MAPPERS: Dict[str, Callable[[str], str]] = {
    'none': lambda text: text,
    'lower': str.lower,
    'upper': str.upper,
}


def to_value_set_from_match(case: str = 'none') -> Transform:
    """Append the raw matched text, optionally case-mapped."""
    mapper = _CASE_MAPPERS[case]

    def transform(title: str, state: FieldState, fields: FieldMap) -> None:
        if isinstance(state.value, ValueSet):
            state.value.append(mapper(state.matched_text))
    return transform


def to_value_set_split_upper() -> Transform:
    """Append every word of the raw match upper-cased: 'ova+ona' -> OVA, ONA."""
    def transform(title: str, state: FieldState, fields: FieldMap) -> None:
        if isinstance(state.value, ValueSet):
            state.value.extend(
                part.upper() for part in NON_ALPHAS.split(state.matched_text) if part
            )
    return transform


def chain(transforms: Sequence[Transform]) -> Transform:
    """Apply transforms in order, stopping once one rejects the value."""
    if len(transforms) == 1:
        return transforms[0]

    def transform(title: str, state: FieldState, fields: FieldMap) -> None:
        for step in transforms:
            if state.value is None:
                return
            step(title, state, fields)
    return transform


TRANSFORMS: Dict[str, Callable[..., Transform]] = {
    'value': to_value,
    'lowercase': to_lowercase,
    'uppercase': to_uppercase,
    'trim': to_trimmed,
    'boolean': to_boolean,
    'clean_date': to_clean_date,
    'clean_month': to_clean_month,
    'date': to_date,
    'year': to_year,
    'flag_on_range': to_flag_on_range,
    'int_range': to_int_range,
    'int_array': to_int_array,
    'with_suffix': to_with_suffix,
    'value_set': to_value_set,
    'value_set_from_match': to_value_set_from_match,
    'value_set_split_upper': to_value_set_split_upper,
}
