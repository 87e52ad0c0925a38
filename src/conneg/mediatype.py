"""
Media type values as they appear in ``Accept`` media ranges and in the
offers of an application.

A media type has the form::

    type/subtype;param=value;param2="quoted value"

Either ``type`` or ``subtype`` may be the ``*`` wildcard.
"""

from collections import namedtuple
import re

# RFC 7230 Section 3.2.3 "Whitespace"
# OWS            = *( SP / HTAB )
#                ; optional whitespace
OWS_re = '[ \t]*'

# RFC 7230 Section 3.2.6 "Field Value Components":
# tchar          = "!" / "#" / "$" / "%" / "&" / "'" / "*"
#                / "+" / "-" / "." / "^" / "_" / "`" / "|" / "~"
#                / DIGIT / ALPHA
tchar_re = r"[!#$%&'*+\-.^_`|~0-9A-Za-z]"

# token          = 1*tchar
token_re = tchar_re + '+'
token_compiled_re = re.compile('^' + token_re + '$')

# quoted-string  = DQUOTE *( qdtext / quoted-pair ) DQUOTE
quoted_string_re = r'"(?:[^"\\]|\\.)*"'

type_subtype_compiled_re = re.compile(
    '^' + OWS_re + '(' + token_re + ')/(' + token_re + ')' + OWS_re + '$',
)
parameter_compiled_re = re.compile(
    '^' + OWS_re + '(' + token_re + ')' + OWS_re + '=' + OWS_re +
    '(' + token_re + '|' + quoted_string_re + ')' + OWS_re + '$',
)

# Parameter values compared without regard to case
CASE_INSENSITIVE_PARAMS = frozenset(['charset'])


def split_unquoted(value, separator):
    """
    Split `value` on each `separator` that is not inside a quoted-string.

    Empty segments are kept, so ``';q=1'`` splits into ``['', 'q=1']``. An
    unterminated quoted-string runs to the end of `value`.
    """
    segments = []
    start = 0
    in_quotes = False
    escaped = False
    for index, char in enumerate(value):
        if escaped:
            escaped = False
        elif in_quotes:
            if char == '\\':
                escaped = True
            elif char == '"':
                in_quotes = False
        elif char == '"':
            in_quotes = True
        elif char == separator:
            segments.append(value[start:index])
            start = index + 1
    segments.append(value[start:])
    return segments


def split_params(value):
    """
    Split `value` on the semicolons that are not inside quoted strings.
    """
    return [segment.strip() for segment in split_unquoted(value, ';')]


def unquote(token):
    """Remove the quotes and backslash escapes from a quoted-string."""
    if len(token) >= 2 and token.startswith('"') and token.endswith('"'):
        token = token[1:-1]
        return re.sub(r'\\(.)', r'\1', token)
    return token


def quote(value):
    """
    Quote a parameter value where it is not a plain token.

    Only the ``\\`` and ``"`` characters are escaped.
    """
    if token_compiled_re.match(value):
        return value
    return '"' + value.replace('\\', '\\\\').replace('"', '\\"') + '"'


def parse_parameter(segment):
    """
    Parse one ``name=value`` segment.

    :return: a ``(name, value)`` tuple with the name lower-cased and the
             value unquoted, or ``None`` if `segment` is not a parameter.
    """
    match = parameter_compiled_re.match(segment)
    if match is None:
        return None
    name, value = match.groups()
    return name.lower(), unquote(value)


class MediaType(namedtuple('MediaType', ['type', 'subtype', 'params'])):
    """
    A parsed media type or media range.

    ``params`` is a tuple of ``(name, value)`` pairs in their original order.
    Names, type and subtype are lower-cased; values are unquoted and keep
    their case.
    """

    __slots__ = ()

    @classmethod
    def parse(cls, value):
        """
        Parse `value` into a :class:`MediaType`.

        :return: the parsed media type, or ``None`` when `value` has no
                 ``type/subtype`` part. Malformed parameters are ignored.
        """
        segments = split_params(value)
        if not segments:
            return None
        match = type_subtype_compiled_re.match(segments[0])
        if match is None:
            return None
        type_, subtype = (part.lower() for part in match.groups())
        params = []
        for segment in segments[1:]:
            param = parse_parameter(segment)
            if param is not None:
                params.append(param)
        return cls(type_, subtype, tuple(params))

    def param_value(self, name):
        """Return the value of parameter `name`, or ``None``."""
        name = name.lower()
        for param_name, param_value in self.params:
            if param_name == name:
                return param_value
        return None

    def has_params(self, params):
        """
        Return ``True`` if every ``(name, value)`` pair in `params` is
        present on this media type.
        """
        for name, value in params:
            own = self.param_value(name)
            if own is None:
                return False
            if name in CASE_INSENSITIVE_PARAMS:
                if own.lower() != value.lower():
                    return False
            elif own != value:
                return False
        return True

    def __str__(self):
        media_range = self.type + '/' + self.subtype
        for name, value in self.params:
            media_range += ';' + name + '=' + quote(value)
        return media_range
