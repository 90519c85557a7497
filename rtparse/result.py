#!/usr/bin/env python3
"""
Public parse result and the assembler filling it from the engine's field map.
"""

import json
from dataclasses import dataclass, field, fields as dataclass_fields
from typing import Any, Dict, List, Optional

from .field_state import FieldMap

TEXT_FIELDS = (
    'bit_depth', 'codec', 'container', 'country', 'date', 'edition',
    'episode_code', 'extension', 'group', 'network', 'quality', 'region',
    'resolution', 'site', 'size', 'three_d', 'year',
)
FLAG_FIELDS = (
    'commentary', 'complete', 'convert', 'documentary', 'dubbed', 'extended',
    'hardcoded', 'ppv', 'proper', 'remastered', 'repack', 'retail', 'subbed',
    'uncensored', 'unrated', 'upscaled',
)
NUMBER_FIELDS = ('episodes', 'seasons', 'volumes')
LIST_FIELDS = ('audio', 'channels', 'hdr', 'languages', 'release_types')

# Attribute names that differ from their JSON keys
JSON_KEYS = {'three_d': '3d'}

_STATUS_FIELDS = ('error', 'normalized')


@dataclass
class ParseResult:
    """Metadata extracted from one release title. Absent values stay empty."""
    audio: List[str] = field(default_factory=list)
    bit_depth: str = ''
    channels: List[str] = field(default_factory=list)
    codec: str = ''
    commentary: bool = False
    complete: bool = False
    container: str = ''
    convert: bool = False
    country: str = ''
    date: str = ''
    documentary: bool = False
    dubbed: bool = False
    edition: str = ''
    episode_code: str = ''
    episodes: List[int] = field(default_factory=list)
    extended: bool = False
    extension: str = ''
    group: str = ''
    hardcoded: bool = False
    hdr: List[str] = field(default_factory=list)
    languages: List[str] = field(default_factory=list)
    network: str = ''
    ppv: bool = False
    proper: bool = False
    quality: str = ''
    region: str = ''
    release_types: List[str] = field(default_factory=list)
    remastered: bool = False
    repack: bool = False
    resolution: str = ''
    retail: bool = False
    seasons: List[int] = field(default_factory=list)
    site: str = ''
    size: str = ''
    subbed: bool = False
    three_d: str = ''
    title: str = ''
    uncensored: bool = False
    unrated: bool = False
    upscaled: bool = False
    volumes: List[int] = field(default_factory=list)
    year: str = ''

    error: Optional[str] = None
    normalized: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to a JSON-ready dictionary.

        The error slot is only included for failed parses; the normalization
        flag is never included.
        """
        data: Dict[str, Any] = {}
        for item in dataclass_fields(self):
            if item.name in _STATUS_FIELDS:
                continue
            value = getattr(self, item.name)
            data[JSON_KEYS.get(item.name, item.name)] = list(value) if isinstance(value, list) else value
        if self.error is not None:
            data['error'] = self.error
        return data

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def normalized_copy(self) -> 'ParseResult':
        """Shortcut for normalizer.normalize(self)."""
        from .normalizer import normalize
        return normalize(self)


def assemble(fields: FieldMap, title: str) -> ParseResult:
    """
    Build the public result from the engine's field map.

    Every value goes through the variant-checked accessor for its field, so
    a value of the wrong kind raises FieldTypeError instead of leaking into
    the result. Fields without a public attribute are ignored.

    Args:
        fields: Resolved field states keyed by field name
        title: Clean title

    Returns:
        Populated ParseResult
    """
    values: Dict[str, Any] = {'title': title}
    for name, state in fields.items():
        if name in TEXT_FIELDS:
            values[name] = state.as_text()
        elif name in FLAG_FIELDS:
            values[name] = state.as_flag()
        elif name in NUMBER_FIELDS:
            values[name] = state.as_numbers()
        elif name in LIST_FIELDS:
            values[name] = state.as_values().to_list()
    return ParseResult(**values)
