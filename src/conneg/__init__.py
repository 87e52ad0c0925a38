from conneg.acceptparse import (
    PreferenceEntry,
    parse_accept,
    parse_media_range_list,
    parse_token_list,
    serialize_accept,
)
from conneg.exceptions import ConfigurationError
from conneg.match import (
    CharsetMatcher,
    EncodingMatcher,
    LanguageMatcher,
    MatchResult,
    MediaTypeMatcher,
)
from conneg.mediatype import MediaType
from conneg.negotiator import (
    NO_MATCH,
    ContentNegotiator,
    HandlerTable,
    NegotiationPolicy,
    Negotiator,
)
from conneg.request import RequestNegotiation, negotiation_property

__all__ = [
    'CharsetMatcher',
    'ConfigurationError',
    'ContentNegotiator',
    'EncodingMatcher',
    'HandlerTable',
    'LanguageMatcher',
    'MatchResult',
    'MediaType',
    'MediaTypeMatcher',
    'NO_MATCH',
    'NegotiationPolicy',
    'Negotiator',
    'PreferenceEntry',
    'RequestNegotiation',
    'negotiation_property',
    'parse_accept',
    'parse_media_range_list',
    'parse_token_list',
    'serialize_accept',
]
