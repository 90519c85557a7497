#!/usr/bin/env python3
"""
Release title parser: rule engine, title cleanup and result assembly.

Usage:
    from title_parser import parse
    result = parse("The.Movie.2023.1080p.BluRay.x264-GROUP")
    result.title       # 'The Movie'
    result.resolution  # '1080p'
"""

import logging
import threading
from typing import Callable, Iterable, Optional

from rtparse import (
    EngineOutcome,
    ParseResult,
    RuleEngine,
    RuleLoader,
    assemble,
    clean_title,
    normalize,
)

logger = logging.getLogger(__name__)


class TitleParser:
    """Parser for extracting metadata from release titles."""

    def __init__(self, rules_path: Optional[str] = None, normalize: bool = False, rules=None):
        """
        Args:
            rules_path: Rule table to use instead of the bundled one
            normalize: Canonicalize synonym values on every parse
            rules: Already compiled rules; takes precedence over rules_path
        """
        if rules is None:
            rules = RuleLoader.load_rules(rules_path)
        self.rules_path = rules_path
        self.normalize = normalize
        self.engine = RuleEngine(rules)

    @property
    def rules(self):
        return self.engine.rules

    def run_rules(self, title: str) -> EngineOutcome:
        """Apply every rule, shrinking the title and collecting fields."""
        return self.engine.run(title)

    def build_result(self, outcome: EngineOutcome) -> ParseResult:
        """Clean the title span and assemble the public result."""
        return assemble(outcome.fields, clean_title(outcome.title_span))

    def parse(self, title: str) -> ParseResult:
        """
        Full parsing pipeline: rules → title cleanup → assembly → (normalize).

        Any unexpected failure is reported on the result instead of being
        raised; fields resolved before the failure are discarded.

        Args:
            title: Release title to parse

        Returns:
            ParseResult, check result.error before trusting other fields
        """
        try:
            result = self.build_result(self.run_rules(title))
        except Exception as exc:  # noqa: BLE001
            logger.exception("Failed to parse %r", title)
            return ParseResult(error=str(exc) or type(exc).__name__)

        if self.normalize:
            result = normalize(result)
        return result

    def partial(self, field_names: Iterable[str]) -> 'TitleParser':
        """
        Build a parser restricted to the rules of the given fields.

        Args:
            field_names: Fields to resolve, e.g. ["resolution", "year"]

        Returns:
            A TitleParser sharing this parser's compiled rules
        """
        wanted = set(field_names)
        rules = [rule for rule in self.rules if rule.field in wanted]
        logger.debug("Partial parser for %s uses %d of %d rules", sorted(wanted), len(rules), len(self.rules))
        return TitleParser(rules_path=self.rules_path, normalize=self.normalize, rules=rules)


_default_parser: Optional[TitleParser] = None
_default_lock = threading.Lock()


def get_parser() -> TitleParser:
    """Return the shared parser built from the bundled rule table."""
    global _default_parser
    if _default_parser is None:
        with _default_lock:
            if _default_parser is None:
                _default_parser = TitleParser()
    return _default_parser


def parse(title: str) -> ParseResult:
    """Parse a title with the bundled rule table."""
    return get_parser().parse(title)


def partial_parser(field_names: Iterable[str]) -> Callable[[str], ParseResult]:
    """
    Return a parse function that only runs the rules of the given fields.

    Example:
        >>> parse_resolution = partial_parser(["resolution"])
        >>> parse_resolution("Movie.2160p.mkv").resolution
        '4k'
    """
    return get_parser().partial(field_names).parse
