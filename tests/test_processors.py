#!/usr/bin/env python3
"""
Tests for the custom processors.
"""

from rtparse import ValueSet
from rtparse.field_state import FieldState
from rtparse.processors import (
    PROCESSORS,
    dubbed_from_languages,
    episodes_from_context,
    group_bracket_check,
    portuguese_from_context,
    remastered_from_edition,
    remove_from_value,
    subbed_from_languages,
    volumes_after_year,
)


def blank(field):
    return FieldState(field=field)


class TestValueProcessors:
    def test_remove_from_value(self):
        state = FieldState(field="bit_depth", value="10-bit")
        assert remove_from_value("[ -]")("", state, {}).value == "10bit"

    def test_remove_from_value_leaves_unset_state(self):
        assert remove_from_value("[ -]")("", blank("codec"), {}).value is None

    def test_remastered_from_edition(self):
        fields = {}
        state = FieldState(field="edition", match_index=6, matched_text="Remastered", value="Remastered")
        remastered_from_edition()("", state, fields)
        assert fields["remastered"].value is True
        assert fields["remastered"].match_index == 6


class TestVolumesAfterYear:
    def test_volume_after_year_uses_absolute_offset(self):
        title = "Comic 2019 vol 3"
        fields = {"year": FieldState(field="year", match_index=6, value="2019")}
        state = volumes_after_year()(title, blank("volumes"), fields)
        assert state.value == [3]
        assert state.match_index == title.index("vol")
        assert state.remove_pending is True

    def test_volume_before_year_is_ignored(self):
        fields = {"year": FieldState(field="year", match_index=12, value="2019")}
        assert volumes_after_year()("Comic vol 3 2019", blank("volumes"), fields).value is None

    def test_existing_volumes_are_kept(self):
        state = FieldState(field="volumes", match_index=0, value=[1, 2])
        assert volumes_after_year()("vol 5", state, {}).value == [1, 2]


class TestEpisodesFromContext:
    def test_dash_number_before_technical_tokens(self):
        title = "Show Name - 07 x264"
        fields = {"codec": FieldState(field="codec", match_index=15, value="x264")}
        state = episodes_from_context()(title, blank("episodes"), fields)
        assert state.value == [7]
        assert state.match_index == title.index("07")

    def test_movie_number_is_not_an_episode(self):
        title = "Show Movie - 2 x264"
        fields = {"codec": FieldState(field="codec", match_index=15, value="x264")}
        assert episodes_from_context()(title, blank("episodes"), fields).value is None

    def test_existing_episodes_are_kept(self):
        state = FieldState(field="episodes", match_index=3, value=[4])
        assert episodes_from_context()("Show - 07", state, {}).value == [4]


class TestLanguageProcessors:
    def test_dublado_adds_portuguese(self):
        state = portuguese_from_context()("Filme Dublado", blank("languages"), {})
        assert state.value.to_list() == ["pt"]
        assert state.match_index is None

    def test_spanish_release_is_left_alone(self):
        state = FieldState(field="languages", value=ValueSet(["es"]))
        assert portuguese_from_context()("Filme Dublado", state, {}).value.to_list() == ["es"]

    def test_chapter_episode_adds_portuguese(self):
        fields = {"episodes": FieldState(field="episodes", matched_text="Capitulo 3", value=[3])}
        assert portuguese_from_context()("Novela", blank("languages"), fields).value.to_list() == ["pt"]

    def test_subbed_and_dubbed_flags(self):
        fields = {"languages": FieldState(field="languages", value=ValueSet(["multi subs", "dual audio"]))}
        assert subbed_from_languages()("", blank("subbed"), fields).value is True
        assert dubbed_from_languages()("", blank("dubbed"), fields).value is True

    def test_flags_without_markers(self):
        fields = {"languages": FieldState(field="languages", value=ValueSet(["en"]))}
        assert subbed_from_languages()("", blank("subbed"), fields).value is None
        assert dubbed_from_languages()("", blank("dubbed"), {}).value is None


class TestGroupBracketCheck:
    def test_group_tag_without_overlap_is_kept(self):
        group = FieldState(field="group", match_index=0, matched_text="[Grp]", value="Grp")
        fields = {"group": group, "episodes": FieldState(field="episodes", match_index=12, value=[1])}
        state = group_bracket_check()("[Grp] Show - 01", group, fields)
        assert state.value == "Grp"
        assert state.match_index is None

    def test_group_tag_holding_another_field_is_blanked(self):
        group = FieldState(field="group", match_index=0, matched_text="[1080p Grp]", value="1080p Grp")
        fields = {"group": group, "resolution": FieldState(field="resolution", match_index=1, value="1080p")}
        assert group_bracket_check()("[1080p Grp] Show", group, fields).value == ""


def test_registry_names():
    assert set(PROCESSORS) == {
        'remove_from_value', 'remastered_from_edition', 'volumes_after_year',
        'episodes_from_context', 'portuguese_from_context', 'subbed_from_languages',
        'dubbed_from_languages', 'group_bracket_check',
    }
