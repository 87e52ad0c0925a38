"""
Matching of server offers against the ranges in an ``Accept-*`` header.

Each header family has its own :class:`Matcher`. A matcher decides whether
a preference value from the header covers a candidate offered by the
application and, if it does, how specific the match is. Higher specificity
means a more precise match; 0 means no match.
"""

from collections import namedtuple

from conneg.acceptparse import (
    parse_media_range_list,
    parse_token_list,
)
from conneg.mediatype import MediaType

ANY_MEDIA_RANGE = MediaType('*', '*', ())


class MatchResult(namedtuple(
    'MatchResult', ['candidate', 'weight', 'specificity', 'index'],
)):
    """
    The score of one candidate against one preference.

    ``index`` is the position of the candidate in the offers, used as the
    last tie-break when ranking.
    """

    __slots__ = ()

    def sort_key(self):
        return (-self.weight, -self.specificity, self.index)


class Matcher(object):
    """
    Base class for the matching rules of one header family.
    """

    #: Name of the negotiation domain
    domain = None
    #: Name of the request header holding the client preferences
    header_name = None

    def parse(self, header_value):
        """Parse `header_value` into a list of preference entries."""
        return parse_token_list(header_value)

    def is_valid(self, preference_value):
        """
        Return ``True`` if `preference_value` is something this matcher can
        compare offers against.
        """
        return bool(preference_value)

    def specificity(self, preference_value, candidate):
        """
        Return how precisely `preference_value` covers `candidate`, or 0 if
        it does not cover it at all.
        """
        raise NotImplementedError

    def match(self, preference, candidate, index=0):
        """
        Match the :class:`~conneg.acceptparse.PreferenceEntry` `preference`
        against `candidate`.

        :return: a :class:`MatchResult`, or ``None`` if there is no match.
        """
        specificity = self.specificity(preference.value, candidate)
        if not specificity:
            return None
        return MatchResult(candidate, preference.weight, specificity, index)

    def __repr__(self):
        return '<%s>' % self.__class__.__name__


class MediaTypeMatcher(Matcher):
    """
    Matches media types against the media ranges of an ``Accept`` header.

    Specificity follows the example in :rfc:`RFC 7231, section 5.3.2
    <7231#section-5.3.2>`:

    4. ``type/subtype`` with matching media type parameters
    3. ``type/subtype``
    2. ``type/*``
    1. ``*/*``

    A range of exactly ``*/*`` matches any offer, including one that is
    not of the form ``type/subtype``; other ranges never match such an
    offer.
    """

    domain = 'media_type'
    header_name = 'Accept'

    def parse(self, header_value):
        return parse_media_range_list(header_value)

    def is_valid(self, preference_value):
        return MediaType.parse(preference_value) is not None

    def specificity(self, preference_value, candidate):
        media_range = MediaType.parse(preference_value)
        if media_range is None:
            return 0
        offer = MediaType.parse(candidate)
        if offer is None:
            # a bare */* covers any offer, even one that is not type/subtype
            return 1 if media_range == ANY_MEDIA_RANGE else 0
        types = (media_range.type, offer.type)
        subtypes = (media_range.subtype, offer.subtype)
        if types[0] != types[1] and '*' not in types:
            return 0
        if subtypes[0] != subtypes[1] and '*' not in subtypes:
            return 0
        # parameters on the range restrict the match; parameters only on
        # the offer do not prevent it
        if not offer.has_params(media_range.params):
            return 0
        if '*' in types:
            return 1
        if '*' in subtypes:
            return 2
        if media_range.params:
            return 4
        return 3


class LanguageMatcher(Matcher):
    """
    Matches language tags against the language ranges of an
    ``Accept-Language`` header.

    A range matches a tag that is equal to it, or that starts with it
    followed by ``-`` (``en`` matches ``en-GB``). Comparison is not case
    sensitive.
    """

    domain = 'language'
    header_name = 'Accept-Language'

    def specificity(self, preference_value, candidate):
        language_range = preference_value.lower()
        tag = candidate.lower()
        if language_range == tag:
            return 3
        if tag.startswith(language_range + '-'):
            return 2
        if language_range == '*':
            return 1
        return 0


class CharsetMatcher(Matcher):
    domain = 'charset'
    header_name = 'Accept-Charset'

    def normalize(self, value):
        return value.lower()

    def specificity(self, preference_value, candidate):
        preference_value = self.normalize(preference_value)
        if preference_value == self.normalize(candidate):
            return 2
        if preference_value == '*':
            return 1
        return 0


class EncodingMatcher(CharsetMatcher):
    """
    Matches content-codings against an ``Accept-Encoding`` header.

    ``x-gzip`` and ``x-compress`` are equivalent to ``gzip`` and
    ``compress`` (:rfc:`RFC 7230, section 4.2.3 <7230#section-4.2.3>`).
    """

    domain = 'encoding'
    header_name = 'Accept-Encoding'

    aliases = {
        'x-gzip': 'gzip',
        'x-compress': 'compress',
    }

    def normalize(self, value):
        value = value.lower()
        return self.aliases.get(value, value)
