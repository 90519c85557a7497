#!/usr/bin/env python3
"""Validate rule tables against the JSON Schema, the registries and the regex engine."""

from __future__ import annotations

import sys
from collections import Counter
from pathlib import Path
from typing import List

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from rtparse import RuleLoader, RuleTableError  # noqa: E402


def check_fields(document) -> List[str]:
    """Report skip_if_before references to fields no rule in the table resolves."""
    if not isinstance(document, dict) or not isinstance(document.get("rules"), list):
        return []

    known = Counter(rule.get("field") for rule in document["rules"] if isinstance(rule, dict))
    warnings: List[str] = []
    for idx, rule in enumerate(document["rules"]):
        if not isinstance(rule, dict):
            continue
        for name in rule.get("skip_if_before") or []:
            if name not in known:
                warnings.append(f"rules[{idx}] ({rule.get('field')}): skip_if_before names unknown field '{name}'")
    return warnings


def validate(path: Path) -> List[str]:
    try:
        document = RuleLoader.read_document(path)
    except RuleTableError as exc:
        return [str(exc)]
    return RuleLoader.check_document(document)


def main(argv: List[str]) -> int:
    paths = [Path(arg) for arg in argv] or [RuleLoader.get_rules_path()]
    failed = False

    for path in paths:
        failures = validate(path)
        if failures:
            failed = True
            print(f"{path}: validation failed:")
            for failure in failures:
                print(f" - {failure}")
            continue

        for warning in check_fields(RuleLoader.read_document(path)):
            print(f"{path}: warning: {warning}")
        print(f"{path}: rule table validated successfully.")

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
