"""
Parses a variety of ``Accept-*`` headers.

These headers generally take the form of::

    value1; q=0.5, value2; q=0

Where the ``q`` parameter is optional.  Parsing is lenient: text that does
not follow the grammar of :rfc:`RFC 7231, section 5.3 <7231#section-5.3>`
is interpreted as well as possible and never raises.
"""

from collections import namedtuple
import logging
import math

from conneg.mediatype import (
    MediaType,
    split_unquoted,
    split_params,
    unquote,
)

log = logging.getLogger(__name__)


class PreferenceEntry(namedtuple('PreferenceEntry', ['value', 'weight'])):
    """
    One element of an ``Accept-*`` header: a value and its quality weight.
    """

    __slots__ = ()

    def __str__(self):
        return _item_qvalue_pair_to_header_element((self.value, self.weight))


def _item_qvalue_pair_to_header_element(pair):
    item, qvalue = pair
    if qvalue == 1.0:
        element = item
    elif qvalue == 0.0:
        element = '{};q=0'.format(item)
    else:
        element = '{};q={}'.format(item, _format_qvalue(qvalue))
    return element


def _format_qvalue(qvalue):
    # RFC 7231 allows at most three digits after the decimal point, and a
    # positive weight must not round to a rejection
    return ('%.3f' % max(qvalue, 0.001)).rstrip('0').rstrip('.')


def parse_qvalue(raw):
    """
    Convert the text of a ``q`` parameter to a weight in ``[0, 1]``.

    Values that are not numbers give the default weight of 1, and values
    outside the range are clamped.
    """
    raw = unquote(raw.strip())
    try:
        qvalue = float(raw)
    except ValueError:
        log.debug('ignoring malformed qvalue %r', raw)
        return 1.0
    if math.isnan(qvalue):
        log.debug('ignoring malformed qvalue %r', raw)
        return 1.0
    return max(min(qvalue, 1.0), 0.0)


def _parse_element(element, keep_params):
    parts = split_params(element)
    if not parts or not parts[0]:
        return None
    value = parts[0]
    weight = 1.0
    params = []
    for part in parts[1:]:
        name, sep, raw = part.partition('=')
        if name.strip().lower() == 'q':
            weight = parse_qvalue(raw)
            # anything after the weight is an accept-ext parameter
            break
        params.append(part)
    if keep_params and params:
        value = ';'.join([value] + params)
    return PreferenceEntry(value, weight)


def parse_accept(value, keep_params=True):
    """
    Parse an ``Accept-*`` style header.

    :param value: (``str`` or ``None``) header value, ``None`` when the
                  header is not in the request
    :param keep_params: whether the parameters that precede the ``q``
                        parameter are kept as part of each value (the media
                        type parameters of an ``Accept`` header)
    :return: a list of :class:`PreferenceEntry`, in header order. ``weight``
             is 1.0 if it was not given. Duplicates are kept.
    """
    if value is None:
        return []
    result = []
    for element in split_unquoted(value, ','):
        entry = _parse_element(element.strip(), keep_params)
        if entry is not None:
            result.append(entry)
    log.debug('parsed %d preference(s) from %r', len(result), value)
    return result


def parse_media_range_list(value):
    """
    Parse an ``Accept`` header.

    Media ranges are returned in canonical form (lower-case type, subtype
    and parameter names, parameter values quoted only where needed). A
    range that is not of the form ``type/subtype`` is returned unchanged.
    """
    result = []
    for entry in parse_accept(value):
        media_range = MediaType.parse(entry.value)
        if media_range is not None:
            entry = entry._replace(value=str(media_range))
        result.append(entry)
    return result


def parse_token_list(value):
    """
    Parse an ``Accept-Language``, ``Accept-Charset`` or ``Accept-Encoding``
    header.

    Any parameter other than ``q`` is dropped.
    """
    return parse_accept(value, keep_params=False)


def serialize_accept(entries):
    """
    Render :class:`PreferenceEntry` items (or ``(value, weight)`` pairs) as
    header text.
    """
    return ', '.join(
        _item_qvalue_pair_to_header_element(tuple(entry))
        for entry in entries
    )
