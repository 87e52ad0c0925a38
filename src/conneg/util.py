_environ_special = {
    'CONTENT-TYPE': 'CONTENT_TYPE',
    'CONTENT-LENGTH': 'CONTENT_LENGTH',
}


def header_to_environ_key(header_name):
    """Translate an HTTP header name to its WSGI ``environ`` key."""
    header_name = header_name.upper()
    if header_name in _environ_special:
        return _environ_special[header_name]
    return 'HTTP_' + header_name.replace('-', '_')


def header_docstring(header, rfc_section):
    link = 'https://tools.ietf.org/html/rfc7231#section-{}'.format(
        rfc_section,
    )
    return 'Negotiates against the ``{}`` header (`RFC 7231 section {} <{}>`_).'.format(
        header,
        rfc_section,
        link,
    )
