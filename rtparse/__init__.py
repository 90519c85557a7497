"""
Release title parser modules package.

This package contains the core processing modules:
- field_state: Per-field match state and the ordered value set
- transforms: Value transform primitives
- validators: Match validators
- processors: Custom processors for irregular rules
- rule: Immutable rule descriptor
- rule_loader: Rule table loading, schema validation and caching
- rule_engine: Ordered rule interpreter
- title_cleaner: Clean title heuristics
- result: Public result record and assembler
- normalizer: Synonym normalization of finished results
- batch_processor: Batch and parallel parsing
- excel_writer: Excel reports of parse results
"""

# Explicit imports make the public API clear and prevent namespace pollution
from .exceptions import RtParseError, FieldTypeError, RuleTableError
from .field_state import FieldState, FieldMap, ValueSet, has_value_set
from .rule import Rule
from .rule_loader import RuleLoader, build_rule
from .rule_engine import RuleEngine, EngineOutcome
from .title_cleaner import clean_title
from .result import ParseResult, assemble
from .normalizer import normalize
from .batch_processor import BatchProcessor, BatchResult
from .excel_writer import ExcelSheetData, write_excel_workbook, write_results_workbook
from .version import Version, version, __version__

__all__ = [
    'RtParseError',
    'FieldTypeError',
    'RuleTableError',
    'FieldState',
    'FieldMap',
    'ValueSet',
    'has_value_set',
    'Rule',
    'RuleLoader',
    'build_rule',
    'RuleEngine',
    'EngineOutcome',
    'clean_title',
    'ParseResult',
    'assemble',
    'normalize',
    'BatchProcessor',
    'BatchResult',
    'ExcelSheetData',
    'write_excel_workbook',
    'write_results_workbook',
    'Version',
    'version',
    '__version__',
]
