#!/usr/bin/env python3
"""
Custom processors for rules too irregular for pattern + transform.

A processor is called as ``processor(title, state, fields)`` where state is
the field's current FieldState, or a blank one when the field has not been
matched yet. It returns the (possibly mutated) state; a blank state that
comes back with a value is installed into the field map by the engine.
"""

from typing import Callable, Dict

import regex

from .field_state import FieldMap, FieldState, ValueSet


Processor = Callable[[str, FieldState, FieldMap], FieldState]

NON_DIGIT = regex.compile(r'\D')


def remove_from_value(pattern: str) -> Processor:
    """Delete every occurrence of pattern from a text value: '10-bit' -> '10bit'."""
    compiled = regex.compile(pattern)

    def process(title: str, state: FieldState, fields: FieldMap) -> FieldState:
        if isinstance(state.value, str) and state.value:
            state.value = compiled.sub('', state.value)
        return state
    return process


def remastered_from_edition() -> Processor:
    def process(title: str, state: FieldState, fields: FieldMap) -> FieldState:
        if state.value == 'Remastered' and 'remastered' not in fields:
            fields['remastered'] = state.copy_with('remastered', True)
        return state
    return process


def volumes_after_year() -> Processor:
    """
    Look for a 'vol 3' / 'volume.12' marker, starting from the year if one was
    found, and record it as a single-element volume list.
    """
    volume_re = regex.compile(r'(?i)\bvol(?:ume)?[. -]*(\d{1,3})')

    def process(title: str, state: FieldState, fields: FieldMap) -> FieldState:
        if state.value is not None:
            return state

        start = 0
        year = fields.get('year')
        if year is not None and year.is_positioned:
            start = min(year.match_index, len(title))

        match = volume_re.search(title[start:])
        if match is None:
            return state

        state.match_index = start + match.start()
        state.matched_text = match.group(0)
        state.value = [int(match.group(1))]
        state.remove_pending = True
        return state
    return process


def episodes_from_context() -> Processor:
    """
    Fallback episode detection for anime-style titles ("Show - 05", "[07]").

    The number is searched between the year/season markers and the first
    technical token (resolution, quality, codec, audio). Numbers attached to
    "movie"/"film", frame rates and bracketed resolutions are ignored.
    """
    before_tech_re = regex.compile(
        r'(?i)(?:movie\W*|film\W*|^)?(?:[ .]+-[ .]+|[(\[][ .]*)(\d{1,4})(?:a|b|v\d|\.\d)?(?:\W|$)(?:movie|film|\d+)?'
    )
    before_tech_neg_before = regex.compile(
        r'(?i)(?:movie\W*|film\W*)(?:[ .]+-[ .]+|[(\[][ .]*)(\d{1,4})'
    )
    before_tech_neg_after = regex.compile(
        r'(?i)(?:movie|film)|(\d{1,4})(?:a|b|v\d|\.\d)(?:\W)(?:\d+)'
    )
    middle_re = regex.compile(
        r'(?i)^(?:[(\[-][ .]?)?(\d{1,4})(?:a|b|v\d)?(?:\Wmovie|\Wfilm|-\d)?(?:\W|$)'
    )
    middle_neg_after = regex.compile(r'(?i)(\d{1,4})(?:a|b|v\d)?(?:\Wmovie|\Wfilm|-\d)')
    resolution_neg = regex.compile(r'\[(?:480|720|1080)\]')
    fps_neg = regex.compile(r'(?i)\d+(?:fps|帧率?)')

    def process(title: str, state: FieldState, fields: FieldMap) -> FieldState:
        if state.value is not None:
            return state

        start = 0
        for name in ('year', 'seasons'):
            other = fields.get(name)
            if other is not None and other.is_positioned and other.match_index > 0:
                if start == 0 or other.match_index < start:
                    start = other.match_index

        end = len(title)
        for name in ('resolution', 'quality', 'codec', 'audio'):
            other = fields.get(name)
            if other is not None and other.is_positioned and 0 < other.match_index < end:
                end = other.match_index

        beginning = title[:end]
        start = min(start, len(title))
        middle = title[start:max(end, start)]

        number = ''
        match = before_tech_re.search(beginning)
        if match is not None:
            candidate = match.group(0)
            rejected = (
                match.start() == 0
                or before_tech_neg_before.search(candidate)
                or before_tech_neg_after.search(candidate)
                or resolution_neg.search(candidate)
                or fps_neg.search(candidate)
            )
            if not rejected:
                number = match.group(1) or ''

        if not number:
            match = middle_re.search(middle)
            if match is not None and middle_neg_after.search(middle[match.start(1):]) is None:
                number = match.group(1)

        number = NON_DIGIT.sub('', number)
        if number:
            state.match_index = title.find(number)
            state.matched_text = number
            state.value = [int(number)]
        return state
    return process


def portuguese_from_context() -> Processor:
    """Add 'pt' for Brazilian releases ('Capitulo', 'Dublado') lacking a language."""
    chapter_re = regex.compile(r'(?i)capitulo|ao')
    dubbed_re = regex.compile(r'(?i)dublado')

    def process(title: str, state: FieldState, fields: FieldMap) -> FieldState:
        state.match_index = None
        state.matched_text = ''

        values = state.value if isinstance(state.value, ValueSet) else None
        if values is not None and ('pt' in values or 'es' in values):
            return state

        episodes = fields.get('episodes')
        from_episode = (
            episodes is not None
            and episodes.matched_text
            and chapter_re.search(episodes.matched_text)
        )
        if from_episode or dubbed_re.search(title):
            if values is None:
                values = ValueSet()
            state.value = values.append('pt')
        return state
    return process


def _flag_from_languages(*markers: str) -> Processor:
    def process(title: str, state: FieldState, fields: FieldMap) -> FieldState:
        languages = fields.get('languages')
        if languages is None:
            return state
        if isinstance(languages.value, ValueSet) and any(
            marker in languages.value for marker in markers
        ):
            state.value = True
        return state
    return process


def subbed_from_languages() -> Processor:
    return _flag_from_languages('multi subs')


def dubbed_from_languages() -> Processor:
    return _flag_from_languages('multi audio', 'dual audio')


def group_bracket_check() -> Processor:
    """
    Validate a release group taken from a leading "[Group]" tag.

    When any other positioned field starts inside the bracket span the tag
    was something else (e.g. "[1080p]") and the group value is blanked.
    Otherwise the group's position is cleared so it never bounds the title.
    """
    bracketed_re = regex.compile(r'^\[.+]$')

    def process(title: str, state: FieldState, fields: FieldMap) -> FieldState:
        if state.matched_text and bracketed_re.search(state.matched_text):
            end = (state.match_index or 0) + len(state.matched_text)
            for other in fields.values():
                if other is state or not other.is_positioned:
                    continue
                if 0 < other.match_index < end:
                    state.value = ''
                    return state

        state.match_index = None
        state.matched_text = ''
        return state
    return process


PROCESSORS: Dict[str, Callable[..., Processor]] = {
    'remove_from_value': remove_from_value,
    'remastered_from_edition': remastered_from_edition,
    'volumes_after_year': volumes_after_year,
    'episodes_from_context': episodes_from_context,
    'portuguese_from_context': portuguese_from_context,
    'subbed_from_languages': subbed_from_languages,
    'dubbed_from_languages': dubbed_from_languages,
    'group_bracket_check': group_bracket_check,
}
