"""
Request-level negotiation helpers.

:class:`RequestNegotiation` binds a :class:`~conneg.negotiator.ContentNegotiator`
to the headers of one request. The headers are read through a callable, so
any framework can supply them::

    negotiation = RequestNegotiation(request.headers.get)
    negotiation.choose_media_type('application/json', 'text/html')

For WSGI, :meth:`RequestNegotiation.from_environ` reads them from the
environ, and :func:`negotiation_property` adds a ``negotiation`` attribute
to a request class that has an ``environ``.
"""

import textwrap

from conneg.negotiator import ContentNegotiator
from conneg.util import header_docstring, header_to_environ_key

_default_negotiator = ContentNegotiator()

# domain -> (header, RFC 7231 section)
_headers = {
    'media_type': ('Accept', '5.3.2'),
    'charset': ('Accept-Charset', '5.3.3'),
    'encoding': ('Accept-Encoding', '5.3.4'),
    'language': ('Accept-Language', '5.3.5'),
}


def _offers_method(domain, operation, doc):
    header, rfc_section = _headers[domain]

    def method(self, *candidates):
        negotiator = self.negotiator.negotiator_for(domain)
        return getattr(negotiator, operation)(
            candidates, self.get_header(header),
        )
    method.__doc__ = doc + '\n\n' + header_docstring(header, rfc_section)
    return method


def _single_method(domain, operation, doc):
    header, rfc_section = _headers[domain]

    def method(self, argument):
        negotiator = self.negotiator.negotiator_for(domain)
        return getattr(negotiator, operation)(
            argument, self.get_header(header),
        )
    method.__doc__ = doc + '\n\n' + header_docstring(header, rfc_section)
    return method


def _raw_method(domain):
    def method(self, candidates, header_value, default_match=None):
        negotiator = self.negotiator.negotiator_for(domain)
        return negotiator.choose_best(candidates, header_value, default_match)
    method.__doc__ = (
        'Like ``choose_%s``, but negotiates against `header_value` instead '
        'of the request header.' % domain
    )
    return method


_choose_doc = 'Return the best of the offered values, or ``None``.'
_acceptable_doc = 'Return the acceptable offered values, best first.'
_accepts_doc = 'Return ``True`` if the offered value is acceptable.'
_dispatch_doc = (
    'Call the handler of the best offer in a mapping of offers to '
    'zero-argument callables, falling back to its ``no_match`` handler.'
)


class RequestNegotiation(object):
    """
    Content negotiation against the headers of one request.

    :param get_header: callable taking a header name and returning the raw
                       header value, or ``None`` if the request does not
                       have the header
    :param negotiator: a :class:`~conneg.negotiator.ContentNegotiator`; a
                       shared instance with the default policies is used if
                       not given
    """

    def __init__(self, get_header, negotiator=None):
        self.get_header = get_header
        if negotiator is None:
            negotiator = _default_negotiator
        self.negotiator = negotiator

    @classmethod
    def from_environ(cls, environ, negotiator=None):
        """Create an instance reading the headers from a WSGI environ."""
        def get_header(name):
            return environ.get(header_to_environ_key(name))
        return cls(get_header, negotiator)

    def __repr__(self):
        return '<%s>' % self.__class__.__name__

    choose_media_type = _offers_method('media_type', 'choose_best', _choose_doc)
    choose_language = _offers_method('language', 'choose_best', _choose_doc)
    choose_charset = _offers_method('charset', 'choose_best', _choose_doc)
    choose_encoding = _offers_method('encoding', 'choose_best', _choose_doc)

    acceptable_media_types = _offers_method(
        'media_type', 'acceptable', _acceptable_doc,
    )
    acceptable_languages = _offers_method(
        'language', 'acceptable', _acceptable_doc,
    )
    acceptable_charsets = _offers_method(
        'charset', 'acceptable', _acceptable_doc,
    )
    acceptable_encodings = _offers_method(
        'encoding', 'acceptable', _acceptable_doc,
    )

    accepts_media_type = _single_method('media_type', 'accepts', _accepts_doc)
    accepts_language = _single_method('language', 'accepts', _accepts_doc)
    accepts_charset = _single_method('charset', 'accepts', _accepts_doc)
    accepts_encoding = _single_method('encoding', 'accepts', _accepts_doc)

    dispatch_media_type = _single_method(
        'media_type', 'dispatch', _dispatch_doc,
    )
    dispatch_language = _single_method('language', 'dispatch', _dispatch_doc)
    dispatch_charset = _single_method('charset', 'dispatch', _dispatch_doc)
    dispatch_encoding = _single_method('encoding', 'dispatch', _dispatch_doc)

    raw_choose_media_type = _raw_method('media_type')
    raw_choose_language = _raw_method('language')
    raw_choose_charset = _raw_method('charset')
    raw_choose_encoding = _raw_method('encoding')


def negotiation_property(negotiator=None):
    doc = """
        Content negotiation helpers for the request.

        A new :class:`RequestNegotiation` reading the ``Accept-*`` headers
        from the request environ is created every time we *get* the value
        of the property.
    """

    def fget(request):
        return RequestNegotiation.from_environ(request.environ, negotiator)

    return property(fget, doc=textwrap.dedent(doc))
