#!/usr/bin/env python3
"""
Exception types raised by the release title parser.
"""


class RtParseError(Exception):
    """Base class for all parser errors."""


class FieldTypeError(RtParseError, TypeError):
    """A field value was read as a different variant than the one it holds."""

    def __init__(self, field: str, expected: str, actual: object):
        self.field = field
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"field '{field}' holds {type(actual).__name__}, expected {expected}"
        )


class RuleTableError(RtParseError):
    """The rule table could not be loaded, validated or compiled."""

    def __init__(self, message: str, problems=None):
        self.problems = list(problems or [])
        if self.problems:
            message = message + ":\n  " + "\n  ".join(self.problems)
        super().__init__(message)
