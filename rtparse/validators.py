#!/usr/bin/env python3
"""
Match validators.

A validator receives the title the rule was searched in and the candidate
match object, and returns False to discard the match. They stand in for
lookarounds and cross-group constraints a single pattern cannot express.
"""

from typing import Callable, Dict, Sequence

import regex


Validator = Callable[[str, 'regex.Match'], bool]

_TRAILING_YEAR = regex.compile(r'(?:\D*\d{4}\b)')
_CODEC_LETTER = regex.compile(r'(?i)\b[xh]\b')


def validate_and(validators: Sequence[Validator]) -> Validator:
    """Combine validators; the match survives only if every one accepts it."""
    if len(validators) == 1:
        return validators[0]

    def validate(title: str, match) -> bool:
        return all(validator(title, match) for validator in validators)
    return validate


def not_at_start() -> Validator:
    def validate(title: str, match) -> bool:
        return match.start() != 0
    return validate


def not_at_end() -> Validator:
    def validate(title: str, match) -> bool:
        return match.end() != len(title)
    return validate


def matches(pattern: str) -> Validator:
    """Accept only when the matched text contains the secondary pattern."""
    compiled = regex.compile(pattern)

    def validate(title: str, match) -> bool:
        return compiled.search(match.group(0)) is not None
    return validate


def not_matches(pattern: str) -> Validator:
    """Reject when the matched text contains the secondary pattern."""
    compiled = regex.compile(pattern)

    def validate(title: str, match) -> bool:
        return compiled.search(match.group(0)) is None
    return validate


def groups_equal(*indices: int) -> Validator:
    """
    Accept only when the listed capture groups hold identical text.

    Used by date rules so that every component shares one separator.
    """
    first, rest = indices[0], indices[1:]

    def validate(title: str, match) -> bool:
        expected = match.group(first)
        return all(match.group(index) == expected for index in rest)
    return validate


def year_not_followed_by_year() -> Validator:
    """Reject a year when another four-digit number follows it."""
    def validate(title: str, match) -> bool:
        return _TRAILING_YEAR.search(title[match.end(1):]) is None
    return validate


def standalone_year() -> Validator:
    """Year must not sit at the title start and must be exactly four digits."""
    def validate(title: str, match) -> bool:
        if match.start() < 2:
            return False
        return len(match.group(1)) == 4
    return validate


def leading_year() -> Validator:
    """
    Year at the very start of the title.

    A bare four-digit number at offset 0 is more likely part of the title
    (e.g. "2012.2009.1080p") so only bracketed forms are accepted there.
    """
    def validate(title: str, match) -> bool:
        matched = match.group(0)
        if len(matched) == 4:
            return match.start() != 0
        return len(matched.strip('()[]')) == 4
    return validate


def not_rip_suffix() -> Validator:
    def validate(title: str, match) -> bool:
        return not match.group(0).lower().endswith('rip')
    return validate


def not_after_codec_letter() -> Validator:
    """Reject '264'/'265' when a lone x or h precedes it (x 264, h.265)."""
    def validate(title: str, match) -> bool:
        return _CODEC_LETTER.search(title[:match.start()]) is None
    return validate


VALIDATORS: Dict[str, Callable[..., Validator]] = {
    'not_at_start': not_at_start,
    'not_at_end': not_at_end,
    'match': matches,
    'not_match': not_matches,
    'groups_equal': groups_equal,
    'year_not_followed_by_year': year_not_followed_by_year,
    'standalone_year': standalone_year,
    'leading_year': leading_year,
    'not_rip_suffix': not_rip_suffix,
    'not_after_codec_letter': not_after_codec_letter,
}
