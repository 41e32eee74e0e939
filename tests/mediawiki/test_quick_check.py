"""
Tests for the Wikipedia Quick Check Orchestrator
================================================
A fake rule engine and a fake API client stand in for LanguageTool and the
network.
"""

import pytest

from config_logging import (
    FetchError,
    InvalidLocatorError,
    PageNotFoundError,
    RuleEngineError,
)
from mediawiki.models import CheckPhase, ErrorMarker, RevisionContent
from mediawiki.quick_check import WikipediaQuickCheck, is_redirect
from nlp.base import GrammarMatch, RuleEngineBase


def payload_for(content, timestamp="2024-01-01T00:00:00Z"):
    return (
        '<?xml version="1.0"?><api><query><pages><page title="Test"><revisions>'
        f'<rev timestamp="{timestamp}"><slots><slot xml:space="preserve">{content}</slot>'
        '</slots></rev></revisions></page></pages></query></api>'
    )


class FakeEngine(RuleEngineBase):
    """Returns canned matches; records what it saw."""

    def __init__(self, language, matches=(), error=None):
        super().__init__(language)
        self.matches = list(matches)
        self.error_to_raise = error
        self.checked = []
        self.closed = False
        self._available = True

    def check(self, text):
        self.checked.append(text)
        if self.error_to_raise:
            raise self.error_to_raise
        return list(self.matches)

    def close(self):
        self.closed = True


class FakeClient:
    def __init__(self, payload="", error=None):
        self.payload = payload
        self.error = error
        self.calls = []

    def fetch_revision_xml(self, locator):
        self.calls.append(locator)
        if self.error:
            raise self.error
        return self.payload

    def close(self):
        pass


def make_checker(payload="", matches=(), engine_error=None, client_error=None, **kwargs):
    engines = []
    factory_calls = []

    def factory(language, **factory_kwargs):
        factory_calls.append((language, factory_kwargs))
        engine = FakeEngine(language, matches, engine_error)
        engines.append(engine)
        return engine

    client = FakeClient(payload, client_error)
    checker = WikipediaQuickCheck(engine_factory=factory, client=client, **kwargs)
    return checker, client, engines, factory_calls


def match_at(offset, length, replacements=(), rule_id="TEST_RULE"):
    return GrammarMatch(rule_id=rule_id, message="Problem", offset=offset,
                        length=length, replacements=list(replacements))


class TestCheckPage:
    """Tests for check_page."""

    def test_success(self):
        checker, client, engines, calls = make_checker(
            payload_for("'''Paris''' are the capital."),
            matches=[match_at(6, 3, ["is"])],
        )
        result = checker.check_page("https://en.wikipedia.org/wiki/Paris")
        assert result.language == 'en'
        assert result.revision.timestamp == "2024-01-01T00:00:00Z"
        assert result.internal_errors == 0
        assert result.is_complete
        assert engines[0].checked == ["Paris are the capital."]
        application = result.applied_matches[0].applications[0]
        assert application.text == "'''Paris''' is the capital."
        assert checker.last_phase == CheckPhase.AGGREGATED
        assert engines[0].closed

    def test_marker(self):
        checker, *_ = make_checker(payload_for("It are fine."), matches=[match_at(3, 3, ["is"])])
        result = checker.check_page("https://en.wikipedia.org/wiki/X", ErrorMarker("***", "***"))
        assert result.applied_matches[0].applications[0].text == "It ***are*** fine."

    def test_eiffel_scenario(self):
        checker, client, engines, _ = make_checker(
            payload_for("The Eiffel Tower [[fr:La Tour Eiffel]] is tall"),
            matches=[match_at(16, 2, [" "], rule_id="WHITESPACE_RULE")],
        )
        result = checker.check_page("https://en.wikipedia.org/wiki/Eiffel_Tower")
        assert engines[0].checked == ["The Eiffel Tower  is tall"]
        application = result.applied_matches[0].applications[0]
        assert (application.original_start, application.original_end) == (16, 17)
        assert "[[fr:La Tour Eiffel]]" in application.text

    def test_partial_failure(self):
        text = "This is a test. Another sentence here."
        checker, *_ = make_checker(
            payload_for(text),
            matches=[match_at(0, 4, ["That"]), match_at(500, 3, ["x"]), match_at(16, 7, ["One"])],
        )
        result = checker.check_page("https://en.wikipedia.org/wiki/Test")
        assert len(result.applied_matches) == 2
        assert result.internal_errors == 1
        assert not result.is_complete
        assert checker.last_phase == CheckPhase.AGGREGATED

    def test_invalid_locator_no_network(self):
        checker, client, engines, _ = make_checker(payload_for("text"))
        with pytest.raises(InvalidLocatorError):
            checker.check_page("https://example.com/foo")
        assert client.calls == []
        assert engines == []
        assert checker.last_phase == CheckPhase.FAILED

    def test_redirect(self):
        checker, client, engines, _ = make_checker(payload_for("#REDIRECT [[Other Page]]"))
        with pytest.raises(PageNotFoundError) as exc_info:
            checker.check_page("https://en.wikipedia.org/wiki/Old_Page")
        assert exc_info.value.is_redirect
        assert exc_info.value.reason == "redirect"
        assert engines == []

    def test_localized_redirect(self):
        checker, *_ = make_checker(payload_for("#WEITERLEITUNG [[Berlin]]"))
        with pytest.raises(PageNotFoundError) as exc_info:
            checker.check_page("https://de.wikipedia.org/wiki/Berlin_(Stadt)")
        assert exc_info.value.is_redirect

    def test_empty_page(self):
        checker, *_ = make_checker('<api><query><pages><page missing=""/></pages></query></api>')
        with pytest.raises(PageNotFoundError) as exc_info:
            checker.check_page("https://en.wikipedia.org/wiki/Missing")
        assert exc_info.value.reason == "empty"
        assert not exc_info.value.is_redirect

    def test_fetch_error_propagates(self):
        checker, *_ = make_checker(client_error=FetchError("down", status_code=503))
        with pytest.raises(FetchError):
            checker.check_page("https://en.wikipedia.org/wiki/Paris")
        assert checker.last_phase == CheckPhase.FAILED

    def test_engine_closed_on_error(self):
        checker, client, engines, _ = make_checker(
            payload_for("Some text."), engine_error=RuleEngineError("crashed", language='en'),
        )
        with pytest.raises(RuleEngineError):
            checker.check_page("https://en.wikipedia.org/wiki/Paris")
        assert engines[0].closed
        assert checker.last_phase == CheckPhase.FAILED

    def test_engine_options(self, tmp_path):
        checker, client, engines, calls = make_checker(
            payload_for("Text."), disabled_rule_ids=['A', 'B'], ngram_dir=tmp_path,
        )
        checker.check_page("https://de.wikipedia.org/wiki/Text")
        language, kwargs = calls[0]
        assert language == 'de'
        assert kwargs['disabled_rule_ids'] == ('A', 'B')
        assert kwargs['ngram_dir'] == tmp_path

    def test_set_disabled_rule_ids(self):
        checker, client, engines, calls = make_checker(payload_for("Text."))
        checker.set_disabled_rule_ids(['WHITESPACE_RULE'])
        assert checker.disabled_rule_ids == ('WHITESPACE_RULE',)
        checker.check_page("https://en.wikipedia.org/wiki/Text")
        assert calls[0][1]['disabled_rule_ids'] == ('WHITESPACE_RULE',)

    def test_to_dict(self):
        checker, *_ = make_checker(payload_for("It are fine."), matches=[match_at(3, 3, ["is"])])
        data = checker.check_page("https://en.wikipedia.org/wiki/X").to_dict()
        assert data['language'] == 'en'
        assert data['internal_errors'] == 0
        assert data['applied_matches'][0]['rule_match']['rule_id'] == 'TEST_RULE'


class TestOtherOperations:
    """Tests for markup and plain-text helpers."""

    def test_check_markup_without_network(self):
        checker, client, engines, _ = make_checker(matches=[match_at(0, 2, ["It"])])
        result = checker.check_markup(RevisionContent("''Is'' fine."), 'en')
        assert engines[0].checked == ["Is fine."]
        assert result.applied_matches[0].applications[0].text == "''It'' fine."
        assert client.calls == []

    def test_check_plain_text(self):
        checker, client, engines, _ = make_checker(matches=[match_at(0, 5)])
        result = checker.check_plain_text("Their going.", 'en')
        assert result.plain_text == "Their going."
        assert result.matches[0].rule_id == 'TEST_RULE'
        assert engines[0].closed

    def test_get_plain_text(self):
        checker, *_ = make_checker()
        payload = payload_for("'''Linux''' is a [[kernel]].[[de:Linux]]")
        assert checker.get_plain_text(payload) == "Linux is a kernel."

    def test_get_plain_text_mapping(self):
        checker, *_ = make_checker()
        content = "'''Linux''' is a [[kernel]].[[de:Linux]]"
        mapping = checker.get_plain_text_mapping(payload_for(content))
        assert mapping.plain_text == "Linux is a kernel."
        for offset, char in enumerate(mapping.plain_text):
            assert content[mapping.to_original(offset)] == char

    def test_get_plain_text_matches_mapping(self):
        checker, *_ = make_checker()
        payload = payload_for("A [[File:x.png|thumb|caption]] and ''b''[[fr:B]] &amp; c")
        plain_text = checker.get_plain_text(payload)
        assert plain_text == "A caption and b & c"
        assert plain_text == checker.get_plain_text_mapping(payload).plain_text


class TestIsRedirect:

    @pytest.mark.parametrize("content,language,expected", [
        ("#REDIRECT [[A]]", 'en', True),
        ("  #redirect [[A]]", 'fr', True),
        ("#WEITERLEITUNG [[A]]", 'de', True),
        ("#WEITERLEITUNG [[A]]", 'en', False),
        ("Text about #redirect", 'en', False),
    ])
    def test_keywords(self, content, language, expected):
        assert is_redirect(content, language) is expected
