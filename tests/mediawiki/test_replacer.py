"""
Tests for the Suggestion Replacer
=================================
"""

import pytest

from config_logging import UnmappableOffsetError
from mediawiki.mapping import PlainTextMapping
from mediawiki.models import ErrorMarker
from mediawiki.quick_check import WikipediaQuickCheck
from mediawiki.replacer import SuggestionReplacer, apply_suggestions
from nlp.base import GrammarMatch

EIFFEL = "The Eiffel Tower [[fr:La Tour Eiffel]] is tall"


def match_at(offset, length, replacements=(), rule_id="TEST_RULE"):
    return GrammarMatch(rule_id=rule_id, message="Problem", offset=offset,
                        length=length, replacements=list(replacements))


@pytest.fixture
def eiffel_mapping():
    return WikipediaQuickCheck.build_markup_mapping(EIFFEL)


class TestApplySuggestions:
    """Tests for apply_suggestions."""

    def test_eiffel_double_space(self, eiffel_mapping):
        """The double space left by a removed link maps to the gap before the link."""
        assert eiffel_mapping.plain_text == "The Eiffel Tower  is tall"
        applications = apply_suggestions(eiffel_mapping, EIFFEL, match_at(16, 2, [" "]))
        assert len(applications) == 1
        application = applications[0]
        assert (application.original_start, application.original_end) == (16, 17)
        assert application.original_error == " "
        assert "[[fr:La Tour Eiffel]]" in application.text
        assert application.text == EIFFEL[:16] + " " + EIFFEL[17:]
        assert application.replacement == " "

    def test_span_across_removed_link_keeps_link(self):
        markup = "Paris is big [[de:Paris]]and old."
        mapping = WikipediaQuickCheck.build_markup_mapping(markup)
        offset = mapping.plain_text.index("big and")
        application = apply_suggestions(mapping, markup, match_at(offset, 7, ["large"]))[0]
        assert application.original_error == "big "
        assert application.text == "Paris is large[[de:Paris]]and old."

    def test_marked_context(self):
        original = "A sentence with a error."
        application = apply_suggestions(PlainTextMapping.identity(original), original,
                                        match_at(16, 1, ["an"]), marker=ErrorMarker("***", "***"))[0]
        assert application.marked_context(5) == "with ***a*** erro"
        assert "***a***" in application.display_context(5)

    def test_one_application_per_suggestion(self):
        original = "This are good."
        mapping = PlainTextMapping.identity(original)
        applications = apply_suggestions(mapping, original, match_at(5, 3, ["is", "were"]))
        assert [a.text for a in applications] == ["This is good.", "This were good."]
        for application in applications:
            assert application.text == (original[:application.original_start]
                                         + application.replacement
                                         + original[application.original_end:])

    def test_replacement_in_markup(self):
        markup = "'''Paris''' are [[France|french]] capital."
        mapping = WikipediaQuickCheck.build_markup_mapping(markup)
        offset = mapping.plain_text.index("are")
        application = apply_suggestions(mapping, markup, match_at(offset, 3, ["is"]))[0]
        assert application.text == "'''Paris''' is [[France|french]] capital."

    def test_marker(self):
        original = "A sentence with a error."
        mapping = PlainTextMapping.identity(original)
        applications = apply_suggestions(mapping, original, match_at(16, 1, ["an"]),
                                         marker=ErrorMarker("<<", ">>"))
        assert len(applications) == 1
        assert applications[0].text == "A sentence with <<a>> error."
        assert applications[0].replacement is None

    def test_no_suggestions(self):
        original = "Some text."
        mapping = PlainTextMapping.identity(original)
        applications = apply_suggestions(mapping, original, match_at(0, 4))
        assert len(applications) == 1
        assert applications[0].text == original
        assert not applications[0].has_real_replacement

    @pytest.mark.parametrize("offset,length", [(-1, 2), (30, 2), (5, -1)])
    def test_unmappable(self, offset, length):
        original = "Some text."
        mapping = PlainTextMapping.identity(original)
        with pytest.raises(UnmappableOffsetError):
            apply_suggestions(mapping, original, match_at(offset, length, ["x"]))

    def test_original_shorter_than_mapping(self):
        mapping = PlainTextMapping.identity("a longer plain text")
        with pytest.raises(UnmappableOffsetError):
            apply_suggestions(mapping, "short", match_at(10, 3, ["x"]))

    def test_replacer_class(self):
        original = "Their going."
        replacer = SuggestionReplacer(PlainTextMapping.identity(original), original)
        assert replacer.apply(match_at(0, 5, ["They're"]))[0].text == "They're going."


class TestContext:
    """Tests for context excerpts."""

    @pytest.mark.parametrize("radius", [0, 5, 50])
    def test_bounded(self, eiffel_mapping, radius):
        application = apply_suggestions(eiffel_mapping, EIFFEL, match_at(16, 2, [" "]))[0]
        context = application.original_error_context(radius)
        span = application.original_end - application.original_start
        assert len(context) <= 2 * radius + span
        assert application.original_error in context

    def test_display_context_escapes_line_breaks(self):
        original = "First line.\nSecond line has a error."
        mapping = PlainTextMapping.identity(original)
        application = apply_suggestions(mapping, original, match_at(28, 1, ["an"]))[0]
        assert "\n" not in application.display_context(30)
        assert "\\n" in application.display_context(30)

    def test_to_dict(self):
        original = "Some text."
        application = apply_suggestions(PlainTextMapping.identity(original), original,
                                         match_at(5, 4, ["words"]))[0]
        data = application.to_dict(radius=2)
        assert data['original_start'] == 5
        assert data['replacement'] == "words"
        assert data['context'] == "e text."
