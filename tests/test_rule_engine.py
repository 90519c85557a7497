#!/usr/bin/env python3
"""
Tests for the rule engine's matching, skip policies, removal and title
boundary tracking, using small hand-written rule tables.
"""

import pytest

from rtparse import RuleEngine, RuleLoader
from rtparse.rule_engine import normalize_separators, splice


def engine(*descriptors):
    return RuleEngine(RuleLoader.build_rules({"version": 1, "rules": list(descriptors)}))


def values(outcome):
    return {name: state.value for name, state in outcome.fields.items()}


YEAR = {"field": "year", "pattern": "\\d{4}"}


class TestHelpers:
    def test_normalize_separators(self):
        assert normalize_separators("The__Movie \t 2019") == "The Movie 2019"

    def test_splice(self):
        assert splice("Show x264 123", 5, "x264") == "Show  123"


class TestEligibility:
    def test_first_matching_rule_wins(self):
        outcome = engine(
            {"field": "resolution", "pattern": "(\\d{3,4})p", "transform": [["with_suffix", "p"]]},
            {"field": "resolution", "pattern": "4k", "transform": [["value", "4k"]]},
        ).run("Movie 720p 4k")
        assert values(outcome) == {"resolution": "720p"}

    def test_keep_matching_accumulates_value_sets(self):
        outcome = engine(
            {"field": "audio", "pattern": "DTS", "transform": [["value_set", "DTS"]], "keep_matching": True},
            {"field": "audio", "pattern": "AAC", "transform": [["value_set", "AAC"]], "keep_matching": True},
            {"field": "audio", "pattern": "DTS", "transform": [["value_set", "DTS"]], "keep_matching": True},
        ).run("Movie AAC DTS")
        assert outcome.fields["audio"].value.to_list() == ["DTS", "AAC"]

    def test_rejected_value_removes_field(self):
        outcome = engine(
            {"field": "seasons", "pattern": "S(\\d+-\\d+)", "transform": [["int_range"]], "remove": True},
        ).run("Show S3-1")
        assert outcome.fields == {}
        assert outcome.title == "Show S3-1"
        assert outcome.boundary == len("Show S3-1")


class TestRemoval:
    def test_removed_text_is_invisible_to_later_rules(self):
        outcome = engine(
            {"field": "codec", "pattern": "x264", "remove": True},
            {"field": "episodes", "pattern": "(\\d{3})", "transform": [["int_array"]]},
        ).run("Show x264 123")
        assert outcome.title == "Show  123"
        assert values(outcome) == {"codec": "x264", "episodes": [123]}

    def test_match_and_value_groups(self):
        outcome = engine({
            "field": "episode_code",
            "pattern": "([\\[(]([A-Z0-9]{8})[\\])])(?:\\.\\w+$|$)",
            "remove": True,
            "match_group": 1,
            "value_group": 2,
        }).run("Show [ABCD1234].mkv")
        state = outcome.fields["episode_code"]
        assert (state.value, state.match_index, state.matched_text) == ("ABCD1234", 5, "[ABCD1234]")
        assert outcome.title == "Show .mkv"


class TestBoundary:
    def test_no_matches_keeps_full_title(self):
        outcome = engine(YEAR).run("Just A Title")
        assert outcome.boundary == len("Just A Title")
        assert outcome.title_span == "Just A Title"

    def test_match_shrinks_boundary(self):
        outcome = engine(YEAR).run("Show Name 2019 extra")
        assert outcome.boundary == 10
        assert outcome.title_span == "Show Name "

    @pytest.mark.parametrize("remove", [True, False])
    def test_offset_zero_never_shrinks_boundary(self, remove):
        title = "www.site.com Show Name"
        outcome = engine({"field": "site", "pattern": "^www\\.\\w+\\.com ", "remove": remove}).run(title)
        assert outcome.fields["site"].match_index == 0
        assert outcome.boundary == len(title)

    def test_removed_offset_zero_leaves_rest_of_title(self):
        outcome = engine({"field": "site", "pattern": "^www\\.\\w+\\.com ", "remove": True}).run(
            "www.site.com Show Name"
        )
        assert outcome.title_span == "Show Name"

    def test_skip_from_title_retracts_after_removal(self):
        ppv = {"field": "ppv", "pattern": "PPV", "transform": [["boolean"]], "remove": True, "skip_from_title": True}
        outcome = engine(ppv).run("Fight PPV Night 2019")
        assert outcome.boundary == len("Fight PPV Night 2019") - len("PPV")
        assert outcome.title == "Fight  Night 2019"

        outcome = engine(ppv, YEAR).run("Fight PPV Night 2019")
        assert outcome.boundary == 13
        assert outcome.title_span == "Fight  Night "

    def test_match_inside_leading_bracket_does_not_bound_title(self):
        rule = {"field": "resolution", "pattern": "\\d{3,4}p"}
        assert engine(rule).run("[Grp 1080p] Show").boundary == len("[Grp 1080p] Show")
        assert engine(rule).run("Grp 1080p Show").boundary == 4

    def test_unpositioned_processor_state_does_not_bound_title(self):
        outcome = engine({"field": "languages", "process": ["portuguese_from_context"]}).run("Filme Dublado 2019")
        state = outcome.fields["languages"]
        assert state.value.to_list() == ["pt"]
        assert state.match_index is None
        assert outcome.boundary == len("Filme Dublado 2019")


class TestSkipPolicies:
    REGION = {"field": "region", "pattern": "R5", "skip_if_first": True}

    def test_skip_if_first_discards_leading_candidate(self):
        assert "region" not in engine(YEAR, self.REGION).run("R5 Movie 2019").fields

    def test_skip_if_first_keeps_later_candidate(self):
        assert engine(YEAR, self.REGION).run("Movie 2019 R5").fields["region"].value == "R5"

    def test_skip_if_first_without_other_fields(self):
        assert engine(self.REGION).run("R5 Movie").fields["region"].value == "R5"

    def test_skip_if_first_counts_offset_zero(self):
        group = {"field": "group", "pattern": "^\\w+"}
        outcome = engine(group, self.REGION).run("Grp R5")
        assert outcome.fields["group"].match_index == 0
        assert outcome.fields["region"].value == "R5"

    def test_skip_if_first_ignores_unpositioned_fields(self):
        languages = {"field": "languages", "process": ["portuguese_from_context"]}
        outcome = engine(languages, self.REGION).run("R5 Filme Dublado")
        assert "languages" in outcome.fields
        assert "region" not in outcome.fields

    @pytest.mark.parametrize("title,expected", [
        ("S01 Show 2019", None),
        ("Show 2019 S01", [1]),
    ])
    def test_skip_if_before(self, title, expected):
        seasons = {"field": "seasons", "pattern": "S(\\d+)", "transform": [["int_range"]], "skip_if_before": ["year"]}
        outcome = engine(YEAR, seasons).run(title)
        state = outcome.fields.get("seasons")
        assert (state.value if state else None) == expected


def test_field_map_keeps_first_match_order():
    outcome = engine(
        {"field": "year", "pattern": "\\d{4}"},
        {"field": "codec", "pattern": "x264"},
        {"field": "resolution", "pattern": "\\d{3,4}p"},
    ).run("Movie 2019 1080p x264")
    assert list(outcome.fields) == ["year", "codec", "resolution"]
