#!/usr/bin/env python3
"""
Rule table loader with schema validation and caching.

Rule tables are JSON documents holding data-only rule descriptors. Loading a
table validates it against ``schemas/rules.schema.json``, resolves every
transform, validator and processor name against the fixed registries and
compiles the patterns. Compiled tables are cached per path so repeated
parsers share one immutable tuple of rules.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import regex
from jsonschema import Draft7Validator

from .exceptions import RuleTableError
from .processors import PROCESSORS
from .rule import Rule
from .transforms import TRANSFORMS, chain
from .validators import VALIDATORS, validate_and

logger = logging.getLogger(__name__)

ROOT = Path(__file__).resolve().parent.parent

PathLike = Union[str, Path]


def _describe(position: int, descriptor: Any) -> str:
    field = descriptor.get('field', '?') if isinstance(descriptor, dict) else '?'
    return f"rules[{position}] ({field})"


def _construct(registry: Dict[str, Any], kind: str, entry: Sequence[Any]):
    name, args = entry[0], list(entry[1:])
    if name not in registry:
        raise RuleTableError(f"unknown {kind} '{name}'")
    try:
        return registry[name](*args)
    except regex.error as exc:
        raise RuleTableError(f"{kind} '{name}' has an invalid pattern: {exc}") from exc
    except (TypeError, KeyError, ValueError) as exc:
        raise RuleTableError(f"{kind} '{name}' rejected arguments {args!r}: {exc}") from exc


def build_rule(descriptor: Dict[str, Any]) -> Rule:
    """
    Turn one rule descriptor into an immutable Rule.

    Args:
        descriptor: Rule object from the table (already schema-validated)

    Returns:
        Compiled Rule

    Raises:
        RuleTableError: Unknown registry name, bad arguments or invalid pattern
    """
    pattern = None
    if descriptor.get('pattern') is not None:
        try:
            pattern = regex.compile(descriptor['pattern'])
        except regex.error as exc:
            raise RuleTableError(f"invalid pattern {descriptor['pattern']!r}: {exc}") from exc

    validator = None
    if descriptor.get('validate'):
        validator = validate_and([
            _construct(VALIDATORS, 'validator', entry) for entry in descriptor['validate']
        ])

    transform = None
    if descriptor.get('transform'):
        transform = chain([
            _construct(TRANSFORMS, 'transform', entry) for entry in descriptor['transform']
        ])

    processor = None
    if descriptor.get('process'):
        processor = _construct(PROCESSORS, 'processor', descriptor['process'])

    if pattern is None and processor is None:
        raise RuleTableError("rule needs a pattern or a processor")

    return Rule(
        field=descriptor['field'],
        pattern=pattern,
        validator=validator,
        transform=transform,
        processor=processor,
        remove=descriptor.get('remove', False),
        keep_matching=descriptor.get('keep_matching', False),
        skip_if_first=descriptor.get('skip_if_first', False),
        skip_if_before=tuple(descriptor.get('skip_if_before', ())),
        skip_from_title=descriptor.get('skip_from_title', False),
        match_group=descriptor.get('match_group', 0),
        value_group=descriptor.get('value_group', 1),
    )


class RuleLoader:
    """Centralized rule table loader with caching support."""

    # Compiled rule tables keyed by resolved path
    _cache: Dict[str, Tuple[Rule, ...]] = {}
    _schema: Optional[Dict[str, Any]] = None

    @staticmethod
    def get_rules_path(table_name: str = "default_rules.json") -> Path:
        """
        Get the absolute path to a bundled rule table.

        Args:
            table_name: Name of the rule table file

        Returns:
            Absolute path to the rule table
        """
        return ROOT / "rules" / table_name

    @staticmethod
    def get_schema_path() -> Path:
        return ROOT / "schemas" / "rules.schema.json"

    @classmethod
    def load_schema(cls) -> Dict[str, Any]:
        if cls._schema is None:
            with open(cls.get_schema_path(), 'r', encoding='utf-8') as f:
                cls._schema = json.load(f)
        return cls._schema

    @staticmethod
    def read_document(path: PathLike) -> Any:
        """
        Read a rule table document.

        Raises:
            RuleTableError: The file is missing, unreadable or not valid JSON
        """
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except FileNotFoundError as exc:
            raise RuleTableError(f"rule table not found: {path}") from exc
        except json.JSONDecodeError as exc:
            raise RuleTableError(f"rule table {path} is not valid JSON: {exc}") from exc
        except OSError as exc:
            raise RuleTableError(f"rule table {path} could not be read: {exc}") from exc

    @classmethod
    def schema_problems(cls, document: Any) -> List[str]:
        """Validate a document against the rule table schema."""
        validator = Draft7Validator(cls.load_schema())
        problems = []
        for error in sorted(validator.iter_errors(document), key=lambda e: list(e.absolute_path)):
            location = " > ".join(str(p) for p in error.absolute_path) or "root"
            problems.append(f"{location}: {error.message}")
        return problems

    @classmethod
    def check_document(cls, document: Any) -> List[str]:
        """
        Collect every problem in a rule table without raising.

        Schema problems are reported first; descriptors are only compiled
        once the document has the right shape.
        """
        problems = cls.schema_problems(document)
        if problems:
            return problems

        for position, descriptor in enumerate(document['rules']):
            try:
                build_rule(descriptor)
            except RuleTableError as exc:
                problems.append(f"{_describe(position, descriptor)}: {exc}")
        return problems

    @classmethod
    def build_rules(cls, document: Any, source: str = "<memory>") -> Tuple[Rule, ...]:
        """
        Validate and compile a rule table document.

        Raises:
            RuleTableError: When the document fails validation
        """
        problems = cls.schema_problems(document)
        if problems:
            raise RuleTableError(f"rule table {source} does not match the schema", problems)

        rules = []
        for position, descriptor in enumerate(document['rules']):
            try:
                rules.append(build_rule(descriptor))
            except RuleTableError as exc:
                raise RuleTableError(
                    f"rule table {source}: {_describe(position, descriptor)}: {exc}"
                ) from exc
        return tuple(rules)

    @classmethod
    def load_rules(cls, path: Optional[PathLike] = None, use_cache: bool = True) -> Tuple[Rule, ...]:
        """
        Load and compile a rule table.

        Args:
            path: Rule table to load, defaults to the bundled table
            use_cache: Whether to reuse an already compiled table

        Returns:
            Tuple of compiled rules in table order
        """
        resolved = Path(path) if path is not None else cls.get_rules_path()
        key = str(resolved.resolve())

        if use_cache and key in cls._cache:
            return cls._cache[key]

        rules = cls.build_rules(cls.read_document(resolved), source=str(resolved))
        logger.debug("Loaded %d rules from %s", len(rules), resolved)

        if use_cache:
            cls._cache[key] = rules
        return rules

    @classmethod
    def clear_cache(cls, path: Optional[PathLike] = None) -> None:
        """
        Clear the rule table cache.

        Args:
            path: Specific table to clear, or None to clear all
        """
        if path is not None:
            cls._cache.pop(str(Path(path).resolve()), None)
        else:
            cls._cache.clear()
