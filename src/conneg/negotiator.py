"""
Server-driven content negotiation.

A :class:`Negotiator` picks, from the values an application can produce,
the one that best satisfies the preferences in an ``Accept-*`` header.
Candidates are ranked by the quality value of the most specific range that
matches them, then by the specificity of that match, then by their order in
the offers (the first offer wins a tie).
"""

from collections import namedtuple
from collections.abc import Mapping
import logging

from conneg.exceptions import ConfigurationError
from conneg.match import (
    CharsetMatcher,
    EncodingMatcher,
    LanguageMatcher,
    MatchResult,
    MediaTypeMatcher,
)

log = logging.getLogger(__name__)

#: Key of the fallback handler in a dispatch table
NO_MATCH = 'no_match'

# weight given to the implicit default of a domain
MINIMAL_WEIGHT = 0.001

_marker = object()


class NegotiationPolicy(namedtuple('NegotiationPolicy', [
    'treat_absent_as_accept_all',
    'treat_empty_as_absent',
    'implicit_default',
])):
    """
    How a :class:`Negotiator` behaves when the client states no preference.

    :param treat_absent_as_accept_all: when the header is not in the
        request, every candidate is acceptable and the first one wins
    :param treat_empty_as_absent: a header that is present but holds no
        usable entry (``''``, ``' , '``, or only values the matcher cannot
        use such as ``'nonsense'`` for media ranges) is handled as if it
        were absent, instead of as a header that accepts nothing
    :param implicit_default: a value (``'identity'`` for encodings) that is
        acceptable at minimal weight when the header is absent and
        `treat_absent_as_accept_all` is false
    """

    __slots__ = ()

    def __new__(cls, treat_absent_as_accept_all=True,
                treat_empty_as_absent=False, implicit_default=None):
        return super(NegotiationPolicy, cls).__new__(
            cls,
            bool(treat_absent_as_accept_all),
            bool(treat_empty_as_absent),
            implicit_default,
        )


class HandlerTable(Mapping):
    """
    A read-only mapping of offers to zero-argument producers, with a
    mandatory ``no_match`` fallback.

    The fallback may be given as the `no_match` argument or under the
    ``'no_match'`` key of `handlers`. A table without one cannot be built.

    :raises ConfigurationError: if there is no fallback, or if a handler
                                is not callable
    """

    def __init__(self, handlers=(), no_match=None):
        handlers = dict(handlers)
        fallback = handlers.pop(NO_MATCH, None)
        if no_match is None:
            no_match = fallback
        if no_match is None:
            raise ConfigurationError(
                'A handler table requires a %r handler.' % NO_MATCH
            )
        for key, handler in list(handlers.items()) + [(NO_MATCH, no_match)]:
            if not callable(handler):
                raise ConfigurationError(
                    'The handler for %r is not callable: %r' % (key, handler)
                )
        self._handlers = handlers
        self.no_match = no_match

    @property
    def offers(self):
        """The offers handled by the table, in registration order."""
        return list(self._handlers)

    def __getitem__(self, key):
        if key == NO_MATCH:
            return self.no_match
        return self._handlers[key]

    def __iter__(self):
        for key in self._handlers:
            yield key
        yield NO_MATCH

    def __len__(self):
        return len(self._handlers) + 1

    def __repr__(self):
        return '<%s: %r>' % (self.__class__.__name__, self.offers)


class Negotiator(object):
    """
    Negotiate one header family.

    :param matcher: the :class:`~conneg.match.Matcher` for the header family
    :param policy: a :class:`NegotiationPolicy`; the default accepts every
                   candidate when the header is absent

    Instances hold only read-only configuration, and can be shared between
    threads and requests.
    """

    def __init__(self, matcher, policy=None):
        self.matcher = matcher
        self.policy = policy if policy is not None else NegotiationPolicy()

    def __repr__(self):
        return '<%s %s %r>' % (
            self.__class__.__name__, self.matcher.domain, self.policy,
        )

    def _no_preference(self, candidates):
        if self.policy.treat_absent_as_accept_all:
            log.debug('no %s preference, accepting all offers',
                      self.matcher.domain)
            return [
                MatchResult(candidate, 1.0, 0, index)
                for index, candidate in enumerate(candidates)
            ]
        default = self.policy.implicit_default
        if default is None:
            log.debug('no %s preference, accepting nothing',
                      self.matcher.domain)
            return []
        log.debug('no %s preference, accepting only %r',
                  self.matcher.domain, default)
        return [
            MatchResult(candidate, MINIMAL_WEIGHT, 0, index)
            for index, candidate in enumerate(candidates)
            if self.matcher.specificity(default, candidate)
        ]

    def ranked(self, candidates, header_value):
        """
        Score `candidates` against `header_value`.

        :param candidates: iterable of ``str`` offers; it is not modified
        :param header_value: (``str`` or ``None``) the raw header value,
                             ``None`` if the header is not in the request
        :return: a list of :class:`~conneg.match.MatchResult`, one per
                 acceptable candidate, best first
        """
        candidates = list(candidates)
        if not candidates:
            return []
        if header_value is None:
            return self._no_preference(candidates)
        preferences = [
            preference for preference in self.matcher.parse(header_value)
            if self.matcher.is_valid(preference.value)
        ]
        if not preferences and self.policy.treat_empty_as_absent:
            return self._no_preference(candidates)

        results = []
        for index, candidate in enumerate(candidates):
            best = None
            for preference in preferences:
                result = self.matcher.match(preference, candidate, index)
                if result is None:
                    continue
                # the most specific range decides, so a q=0 on a specific
                # range rejects a candidate that a wildcard would accept
                if best is None or (result.specificity, result.weight) > (
                    best.specificity, best.weight,
                ):
                    best = result
            if best is not None and best.weight > 0:
                results.append(best)
        results.sort(key=MatchResult.sort_key)
        return results

    def choose_best(self, candidates, header_value, default_match=None):
        """
        Return the best of `candidates` for `header_value`.

        :param default_match: returned when no candidate is acceptable
        :return: an element of `candidates`, or `default_match`
        """
        results = self.ranked(candidates, header_value)
        if not results:
            log.debug('no acceptable %s for %r', self.matcher.domain,
                      header_value)
            return default_match
        chosen = results[0].candidate
        log.debug('chose %s %r for %r', self.matcher.domain, chosen,
                  header_value)
        return chosen

    def acceptable(self, candidates, header_value):
        """
        Return every acceptable candidate, best first.

        Candidates that match nothing in the header, or that the header
        rejects with ``q=0``, are left out.
        """
        return [
            result.candidate
            for result in self.ranked(candidates, header_value)
        ]

    def accepts(self, candidate, header_value):
        """Return ``True`` if `candidate` is acceptable."""
        return bool(self.ranked([candidate], header_value))

    def dispatch(self, handlers, header_value):
        """
        Call the handler of the best offer and return its result.

        :param handlers: a mapping of offers to zero-argument callables,
                         with an optional fallback under ``'no_match'``;
                         or a :class:`HandlerTable`
        :raises ConfigurationError: if nothing is acceptable and there is
                                    no ``'no_match'`` handler
        """
        offers = [key for key in handlers if key != NO_MATCH]
        chosen = self.choose_best(offers, header_value, _marker)
        if chosen is _marker:
            fallback = handlers.get(NO_MATCH)
            if fallback is None:
                raise ConfigurationError(
                    'No %s offer is acceptable and there is no %r handler.'
                    % (self.matcher.domain, NO_MATCH)
                )
            return fallback()
        return handlers[chosen]()


#: The negotiation domains, with the matcher class for each
DOMAINS = {
    'media_type': MediaTypeMatcher,
    'language': LanguageMatcher,
    'charset': CharsetMatcher,
    'encoding': EncodingMatcher,
}


def _domain_method(domain, operation):
    def method(self, *args, **kw):
        negotiator = self.negotiator_for(domain)
        return getattr(negotiator, operation)(*args, **kw)
    method.__doc__ = 'Call :meth:`Negotiator.%s` for the %s domain.' % (
        operation, domain.replace('_', ' '),
    )
    return method


class ContentNegotiator(object):
    """
    Negotiation for the four ``Accept-*`` header families.

    :param policies: optional mapping of domain name (``'media_type'``,
                     ``'language'``, ``'charset'``, ``'encoding'``) to a
                     :class:`NegotiationPolicy` replacing the default one

    By default an absent ``Accept``, ``Accept-Charset`` or
    ``Accept-Encoding`` header accepts every offer, while an absent
    ``Accept-Language`` header accepts none.
    """

    default_policies = {
        'media_type': NegotiationPolicy(),
        'language': NegotiationPolicy(treat_absent_as_accept_all=False),
        'charset': NegotiationPolicy(),
        'encoding': NegotiationPolicy(implicit_default='identity'),
    }

    def __init__(self, policies=None):
        policies = dict(policies or {})
        unknown = set(policies) - set(DOMAINS)
        if unknown:
            raise ConfigurationError(
                'Unknown negotiation domain(s): %s' % ', '.join(sorted(unknown))
            )
        self._negotiators = {}
        for domain, matcher_class in DOMAINS.items():
            policy = policies.get(domain, self.default_policies[domain])
            if not isinstance(policy, NegotiationPolicy):
                raise ConfigurationError(
                    'The %s policy must be a NegotiationPolicy, got %r'
                    % (domain, policy)
                )
            self._negotiators[domain] = Negotiator(matcher_class(), policy)

    def negotiator_for(self, domain):
        """
        Return the :class:`Negotiator` of `domain`.

        :raises ConfigurationError: if `domain` is not a known domain
        """
        try:
            return self._negotiators[domain]
        except KeyError:
            raise ConfigurationError('Unknown negotiation domain %r' % domain)

    choose_media_type = _domain_method('media_type', 'choose_best')
    choose_language = _domain_method('language', 'choose_best')
    choose_charset = _domain_method('charset', 'choose_best')
    choose_encoding = _domain_method('encoding', 'choose_best')

    acceptable_media_types = _domain_method('media_type', 'acceptable')
    acceptable_languages = _domain_method('language', 'acceptable')
    acceptable_charsets = _domain_method('charset', 'acceptable')
    acceptable_encodings = _domain_method('encoding', 'acceptable')

    accepts_media_type = _domain_method('media_type', 'accepts')
    accepts_language = _domain_method('language', 'accepts')
    accepts_charset = _domain_method('charset', 'accepts')
    accepts_encoding = _domain_method('encoding', 'accepts')

    dispatch_media_type = _domain_method('media_type', 'dispatch')
    dispatch_language = _domain_method('language', 'dispatch')
    dispatch_charset = _domain_method('charset', 'dispatch')
    dispatch_encoding = _domain_method('encoding', 'dispatch')
