import pytest

from conneg.acceptparse import PreferenceEntry
from conneg.match import (
    CharsetMatcher,
    EncodingMatcher,
    LanguageMatcher,
    Matcher,
    MatchResult,
    MediaTypeMatcher,
)


class TestMediaTypeMatcher(object):
    @pytest.mark.parametrize('preference, candidate, specificity', [
        ('text/html', 'text/html', 3),
        ('TEXT/HTML', 'text/html', 3),
        ('text/html;level=1', 'text/html;level=1', 4),
        ('text/html;charset=UTF-8', 'text/html;charset=utf-8', 4),
        ('text/html', 'text/html;level=1', 3),
        ('text/*', 'text/html', 2),
        ('text/html', 'text/*', 2),
        ('*/*', 'text/html', 1),
        ('*/*', 'application/json;charset=utf-8', 1),
        ('*/*;level=1', 'text/html;level=1', 1),
        ('*/*', 'json', 1),
    ])
    def test_match(self, preference, candidate, specificity):
        assert MediaTypeMatcher().specificity(preference, candidate) == \
            specificity

    @pytest.mark.parametrize('preference, candidate', [
        ('text/html', 'text/plain'),
        ('text/*', 'image/png'),
        ('text/html;level=1', 'text/html'),
        ('text/html;level=1', 'text/html;level=2'),
        ('*/*;level=1', 'text/html'),
        ('foo', 'text/html'),
        ('text/html', 'foo'),
        ('*/*;level=1', 'json'),
        ('text/*', 'json'),
        ('', ''),
    ])
    def test_no_match(self, preference, candidate):
        assert MediaTypeMatcher().specificity(preference, candidate) == 0

    def test_specificity_order(self):
        matcher = MediaTypeMatcher()
        candidate = 'text/html;level=1'
        ranges = ['text/html;level=1', 'text/html', 'text/*', '*/*']
        scores = [matcher.specificity(r, candidate) for r in ranges]
        assert scores == sorted(scores, reverse=True)
        assert len(set(scores)) == 4

    def test_parse(self):
        assert MediaTypeMatcher().parse('Text/HTML;q=0.5') == [
            ('text/html', 0.5),
        ]

    @pytest.mark.parametrize('value, valid', [
        ('text/html', True),
        ('*/*', True),
        ('text/html;level=1', True),
        ('nonsense', False),
        ('"text/html"', False),
        ('', False),
    ])
    def test_is_valid(self, value, valid):
        assert MediaTypeMatcher().is_valid(value) is valid


class TestLanguageMatcher(object):
    @pytest.mark.parametrize('preference, candidate, specificity', [
        ('en', 'en', 3),
        ('EN-us', 'en-US', 3),
        ('en', 'en-US', 2),
        ('zh', 'zh-Hant-TW', 2),
        ('zh-Hant', 'zh-Hant-TW', 2),
        ('*', 'fr', 1),
        ('en-US', 'en', 0),
        ('en', 'english', 0),
        ('fr', 'en', 0),
    ])
    def test_specificity(self, preference, candidate, specificity):
        assert LanguageMatcher().specificity(preference, candidate) == \
            specificity

    def test_parse_drops_params(self):
        assert LanguageMatcher().parse('en;level=1;q=0.4') == [('en', 0.4)]


class TestCharsetMatcher(object):
    @pytest.mark.parametrize('preference, candidate, specificity', [
        ('utf-8', 'UTF-8', 2),
        ('*', 'utf-8', 1),
        ('iso-8859-1', 'utf-8', 0),
    ])
    def test_specificity(self, preference, candidate, specificity):
        assert CharsetMatcher().specificity(preference, candidate) == \
            specificity


class TestEncodingMatcher(object):
    @pytest.mark.parametrize('preference, candidate, specificity', [
        ('gzip', 'gzip', 2),
        ('GZIP', 'gzip', 2),
        ('x-gzip', 'gzip', 2),
        ('gzip', 'x-gzip', 2),
        ('x-compress', 'compress', 2),
        ('*', 'br', 1),
        ('gzip', 'br', 0),
        ('identity', 'gzip', 0),
    ])
    def test_specificity(self, preference, candidate, specificity):
        assert EncodingMatcher().specificity(preference, candidate) == \
            specificity


class TestMatcher(object):
    def test_match_result(self):
        result = MediaTypeMatcher().match(
            PreferenceEntry('text/*', 0.5), 'text/html', 3,
        )
        assert result == MatchResult('text/html', 0.5, 2, 3)

    def test_no_match(self):
        result = MediaTypeMatcher().match(
            PreferenceEntry('image/*', 0.5), 'text/html',
        )
        assert result is None

    def test_zero_weight_match_is_reported(self):
        result = LanguageMatcher().match(PreferenceEntry('en', 0.0), 'en-GB')
        assert result == MatchResult('en-GB', 0.0, 2, 0)

    def test_is_valid(self):
        assert LanguageMatcher().is_valid('en-GB')
        assert CharsetMatcher().is_valid('*')
        assert not EncodingMatcher().is_valid('')

    def test_base_class(self):
        with pytest.raises(NotImplementedError):
            Matcher().specificity('a', 'a')

    def test_domains(self):
        assert MediaTypeMatcher.header_name == 'Accept'
        assert LanguageMatcher.header_name == 'Accept-Language'
        assert CharsetMatcher.header_name == 'Accept-Charset'
        assert EncodingMatcher.header_name == 'Accept-Encoding'
        assert EncodingMatcher.domain == 'encoding'

    def test_repr(self):
        assert repr(CharsetMatcher()) == '<CharsetMatcher>'


class TestMatchResult(object):
    def test_sort_key(self):
        results = [
            MatchResult('a', 0.5, 3, 0),
            MatchResult('b', 1.0, 1, 1),
            MatchResult('c', 0.5, 4, 2),
            MatchResult('d', 0.5, 4, 3),
        ]
        ordered = sorted(results, key=MatchResult.sort_key)
        assert [r.candidate for r in ordered] == ['b', 'c', 'd', 'a']
