#!/usr/bin/env python3
"""
Title cleanup for the text left of the title boundary.

By the time the cleaner runs every recognised token has been removed or
excluded by the boundary; what is left still carries decorative brackets,
release group markings, alternate-language titles and stray separators.
"""

from typing import List

import regex

# Scripts treated as "non-English" when picking one title variant
NON_ENGLISH = r'\p{Hiragana}\p{Katakana}\p{Han}\p{Cyrillic}'

MOVIE_INDICATOR = regex.compile(r'(?i)[\[(]movie[)\]]')
NOT_ALLOWED_AT_EDGES = regex.compile(
    r'^[^\w' + NON_ENGLISH + r'#\[【★]+|[ \-:/\\\[|{(#$&^]+$'
)
RUSSIAN_CAST = regex.compile(r'(\([^)]*[\p{Cyrillic}][^)]*\))$|(?:/.*?)(\(.*\))$')
GROUP_AT_START = regex.compile(r'^[\[【★].*[\]】★][ .]?(.+)')
GROUP_AT_END = regex.compile(r'(.+)[ .]?[\[【★].*[\]】★]$')
ALT_TITLES = regex.compile(
    r'[^/|(]*[' + NON_ENGLISH + r'][^/|]*[/|]|[/|][^/|(]*[' + NON_ENGLISH + r'][^/|]*'
)
NOT_ONLY_NON_ENGLISH = regex.compile(
    r'(?:[a-zA-Z][^' + NON_ENGLISH + r']+)([' + NON_ENGLISH + r'].*[' + NON_ENGLISH + r'])'
    r'|([' + NON_ENGLISH + r'].*[' + NON_ENGLISH + r'])(?:[^' + NON_ENGLISH + r']+[a-zA-Z])'
)
REMAINING_NOT_ALLOWED_AT_EDGES = regex.compile(r'^[^\w' + NON_ENGLISH + r'#]+|[\[\]({} ]+$')
REDUNDANT_AT_END = regex.compile(r'[ \-:./\\]+$')
WHITESPACE = regex.compile(r'\s+')

BRACKET_PAIRS = (('{', '}'), ('[', ']'), ('(', ')'))


def _remove_groups_once(title: str, groups: List[str]) -> str:
    for text in groups:
        if text:
            title = title.replace(text, '', 1)
    return title


def remove_russian_cast(title: str) -> str:
    """Drop trailing '(Cyrillic cast list)' or '/ ... (...)' segments."""
    for match in list(RUSSIAN_CAST.finditer(title)):
        title = _remove_groups_once(title, list(match.groups()))
    return title


def keep_one_language(title: str) -> str:
    """Drop the non-English run when Latin text sits on the other side of it."""
    match = NOT_ONLY_NON_ENGLISH.search(title)
    if match is None:
        return title
    return _remove_groups_once(title, list(match.groups()))


def drop_unbalanced_brackets(title: str) -> str:
    """Remove both characters of any bracket pair whose counts differ."""
    for opening, closing in BRACKET_PAIRS:
        if title.count(opening) != title.count(closing):
            title = title.replace(opening, '').replace(closing, '')
    return title


def clean_title(raw_title: str) -> str:
    """
    Turn the leftover title span into a presentable title.

    Args:
        raw_title: Working title cut at the title boundary

    Returns:
        Clean title, possibly empty

    Example:
        >>> clean_title("[HorribleSubs] Shingeki no Kyojin -")
        'Shingeki no Kyojin'
        >>> clean_title("The.Movie.")
        'The Movie'
    """
    title = raw_title.strip()
    title = title.replace('_', ' ')
    title = MOVIE_INDICATOR.sub('', title)
    title = NOT_ALLOWED_AT_EDGES.sub('', title)
    title = remove_russian_cast(title)
    title = GROUP_AT_START.sub(r'\1', title)
    title = GROUP_AT_END.sub(r'\1', title)
    title = ALT_TITLES.sub('', title)
    title = keep_one_language(title)
    title = REMAINING_NOT_ALLOWED_AT_EDGES.sub('', title)

    # dot separated release names
    if ' ' not in title and '.' in title:
        title = title.replace('.', ' ')

    title = drop_unbalanced_brackets(title)
    title = REDUNDANT_AT_END.sub('', title)
    title = WHITESPACE.sub(' ', title)
    return title.strip()
