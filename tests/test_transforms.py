#!/usr/bin/env python3
"""
Tests for value transform primitives.
"""

import pytest

from rtparse.field_state import FieldState, ValueSet
from rtparse.transforms import (
    TRANSFORMS,
    chain,
    parse_int_range,
    parse_year,
    to_clean_date,
    to_clean_month,
    to_date,
    to_flag_on_range,
    to_int_array,
    to_int_range,
    to_value_set,
    to_value_set_from_match,
    to_value_set_split_upper,
    to_with_suffix,
    to_year,
)


def apply(transform, value, matched_text='', fields=None, field='test'):
    state = FieldState(field=field, match_index=3, matched_text=matched_text, value=value)
    transform('title', state, fields if fields is not None else {})
    return state


class TestIntRange:
    """Tests for the integer range/sequence parser."""

    @pytest.mark.parametrize("text,expected", [
        ("1-5", [1, 2, 3, 4, 5]),
        ("01-03", [1, 2, 3]),
        ("7", [7]),
        ("1 2 3", [1, 2, 3]),
        ("1,2", [1, 2]),
        ("S01-S03", [1, 2, 3]),
        ("01-E03", [1, 2, 3]),
        ("1 ~ 4", [1, 2, 3, 4]),
        ("1 to 3", [1, 2, 3]),
        ("Season 1 to Season 3", [1, 2, 3]),
        ("1ª a 3ª", [1, 2, 3]),
    ])
    def test_accepts_ascending_sequences(self, text, expected):
        assert parse_int_range(text) == expected

    @pytest.mark.parametrize("text", ["1,3", "1+3", "1 & 3", "1 3", "2 and 4", "S01.S03"])
    def test_rejects_gaps(self, text):
        assert parse_int_range(text) is None

    def test_descending_pair_is_not_a_range(self):
        assert parse_int_range("5-1") is None

    def test_non_numeric_tokens_become_zero(self):
        # "a" is stripped as a separator, leaving a single empty token
        assert parse_int_range("a") == [0]

    def test_transform_rejects_non_text(self):
        assert apply(to_int_range(), True).value is None

    def test_transform_sets_none_for_gap(self):
        assert apply(to_int_range(), "2,4").value is None


class TestYear:
    """Tests for the year and year range parser."""

    @pytest.mark.parametrize("text,expected", [
        ("2019", "2019"),
        ("2010-2015", "2010-2015"),
        ("1999-02", ""),
        ("2015-17", "2015-2017"),
        ("2015 - 2017", "2015-2017"),
        ("2015-2010", ""),
        ("2015-2015", ""),
    ])
    def test_parse_year(self, text, expected):
        assert parse_year(text) == expected

    def test_non_text_clears_value(self):
        assert apply(to_year(), None).value == ''

    def test_year_range_flags_complete(self):
        fields = {}
        state = apply(chain([to_year(), to_flag_on_range('complete')]), "2001-2005", fields=fields)
        assert state.value == "2001-2005"
        assert fields['complete'].value is True
        assert fields['complete'].match_index == 3

    def test_single_year_does_not_flag_complete(self):
        fields = {}
        apply(chain([to_year(), to_flag_on_range('complete')]), "2001", fields=fields)
        assert 'complete' not in fields

    def test_existing_complete_is_kept(self):
        existing = FieldState(field='complete', match_index=9, value=True)
        fields = {'complete': existing}
        apply(to_flag_on_range('complete'), "2001-2005", fields=fields)
        assert fields['complete'] is existing


class TestDates:
    """Tests for date transforms."""

    @pytest.mark.parametrize("layout,text,expected", [
        ("%Y %m %d", "2020.01.05", "2020-01-05"),
        ("%d %m %Y", "05-01-2020", "2020-01-05"),
        ("%m %d %y", "01/05/20", "2020-01-05"),
        ("%Y%m%d", "20200105", "2020-01-05"),
    ])
    def test_layouts(self, layout, text, expected):
        assert apply(to_date(layout), text).value == expected

    def test_invalid_date_is_empty(self):
        assert apply(to_date("%Y %m %d"), "2020.13.45").value == ''

    def test_clean_date_and_month(self):
        composite = chain([to_clean_date(), to_clean_month(), to_date("%d %b %Y")])
        assert apply(composite, "1st January 2020").value == "2020-01-01"

    def test_clean_month_shortens_names(self):
        assert apply(to_clean_month(), "5 September 2011").value == "5 Sep 2011"


class TestScalars:
    """Tests for simple scalar transforms."""

    def test_registry_builds_constant(self):
        assert apply(TRANSFORMS['value']("4k"), "2160p").value == "4k"

    def test_lowercase_requires_text(self):
        from rtparse.exceptions import FieldTypeError

        with pytest.raises(FieldTypeError):
            apply(TRANSFORMS['lowercase'](), [1])

    def test_with_suffix(self):
        assert apply(to_with_suffix("p"), "720").value == "720p"
        assert apply(to_with_suffix("p"), True).value == ''

    def test_int_array(self):
        assert apply(to_int_array(), "12").value == [12]
        assert apply(to_int_array(), "x").value == []


class TestValueSets:
    """Tests for value set appenders."""

    def test_append_constant_once(self):
        values = ValueSet()
        state = apply(to_value_set("en"), values)
        state = apply(to_value_set("en"), state.value)
        assert state.value.to_list() == ["en"]

    def test_append_from_match_upper(self):
        state = apply(to_value_set_from_match("upper"), ValueSet(), matched_text="ova")
        assert state.value.to_list() == ["OVA"]

    def test_split_upper(self):
        state = apply(to_value_set_split_upper(), ValueSet(), matched_text="ova+ona")
        assert state.value.to_list() == ["OVA", "ONA"]

    def test_non_set_value_is_ignored(self):
        assert apply(to_value_set("en"), "text").value == "text"


def test_chain_stops_after_rejection():
    calls = []

    def record(title, state, fields):
        calls.append(state.value)

    state = apply(chain([to_int_range(), record]), "1,3")
    assert state.value is None
    assert calls == []
