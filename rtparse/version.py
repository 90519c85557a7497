#!/usr/bin/env python3
"""Package version."""

from dataclasses import dataclass

import regex

__version__ = "0.1.0"

_NON_DIGITS = regex.compile(r'\D+')


@dataclass(frozen=True)
class Version:
    """Dotted version string with a comparable integer form."""
    text: str

    @property
    def parts(self):
        major, minor, patch = (self.text.split('.') + ['0', '0'])[:3]
        return tuple(int(_NON_DIGITS.sub('', part) or 0) for part in (major, minor, patch))

    def __str__(self) -> str:
        return self.text

    def __int__(self) -> int:
        major, minor, patch = self.parts
        return major * 1_000_000 + minor * 1_000 + patch


def version() -> Version:
    """Return the library version, e.g. str(version()) == '0.1.0'."""
    return Version(__version__)
