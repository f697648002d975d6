"""Cookie date parsing.

Implements the relaxed cookie-date grammar of RFC 6265 section 5.1.1.
Servers send a wide variety of date formats in the Expires attribute, so
the algorithm does not look for a fixed layout: the string is cut into
tokens on a set of delimiter characters and every token is offered, in
order, to the time, day-of-month, month and year fields that are still
missing.

"""

import calendar
from collections import namedtuple

__all__ = ['CookieDate', 'MONTHS', 'parse_cookie_date']


MONTHS = ('jan', 'feb', 'mar', 'apr', 'may', 'jun',
          'jul', 'aug', 'sep', 'oct', 'nov', 'dec')
_MONTH_NUMBERS = {name: number for number, name in enumerate(MONTHS, 1)}


def _char_table(*codes):
    table = bytearray(256)
    for code in codes:
        if isinstance(code, tuple):
            lo, hi = code
        else:
            lo = hi = code
        for i in range(lo, hi + 1):
            table[i] = 1
    return bytes(table)


# delimiter = %x09 / %x20-2F / %x3B-40 / %x5B-60 / %x7B-7E
_DELIMITERS = _char_table(0x09, (0x20, 0x2F), (0x3B, 0x40),
                          (0x5B, 0x60), (0x7B, 0x7E))
_DIGITS = _char_table((0x30, 0x39))


def _is_delimiter(char):
    code = ord(char)
    return code < 256 and _DELIMITERS[code] == 1


def _is_digit(char):
    code = ord(char)
    return code < 256 and _DIGITS[code] == 1


class CookieDate(namedtuple('CookieDate',
                            'year month day hour minute second')):
    """A date accepted by :func:`parse_cookie_date`.

    The fields are range checked but not checked against the calendar:
    February 31st or hour 30 are representable.  :meth:`timestamp` folds
    such overflow into the following days, the same way
    :func:`calendar.timegm` does.

    """

    __slots__ = ()

    def timestamp(self):
        """Return the date as POSIX seconds, interpreted as UTC."""
        return calendar.timegm((self.year, self.month, self.day,
                                self.hour, self.minute, self.second,
                                0, 0, 0))


def _date_tokens(text):
    start = None
    # the trailing tab guarantees the last token is terminated
    for i, char in enumerate(text + '\t'):
        if _is_delimiter(char):
            if start is not None:
                yield text[start:i]
                start = None
        elif start is None:
            start = i


def _read_digits(token, pos, min_count, max_count):
    """Read a run of ``min_count`` to ``max_count`` digits at ``pos``.

    Returns ``(value, end)``, or None if the run is shorter than
    ``min_count`` or longer than ``max_count``.

    """
    end = pos
    while end < len(token) and _is_digit(token[end]):
        end += 1
        if end - pos > max_count:
            return None
    if end - pos < min_count:
        return None
    return int(token[pos:end]), end


def _match_time(token):
    # hms-time ( non-digit *OCTET )
    fields = []
    pos = 0
    for i in range(3):
        if i:
            if pos >= len(token) or token[pos] != ':':
                return None
            pos += 1
        found = _read_digits(token, pos, 1, 2)
        if found is None:
            return None
        value, pos = found
        fields.append(value)
    return tuple(fields)


def _match_day_of_month(token):
    found = _read_digits(token, 0, 1, 2)
    if found is None:
        return None
    return found[0]


def _match_month(token):
    return _MONTH_NUMBERS.get(token[:3].lower())


def _match_year(token):
    found = _read_digits(token, 0, 2, 4)
    if found is None:
        return None
    return found[0]


def parse_cookie_date(text):
    """Parse a cookie-date string.

    Returns a :class:`CookieDate`, or None if ``text`` is not a date.

    >>> parse_cookie_date('Sun Nov  6 08:49:37 1994')
    CookieDate(year=1994, month=11, day=6, hour=8, minute=49, second=37)

    """
    time = day = month = year = None

    for token in _date_tokens(text):
        if time is None:
            time = _match_time(token)
            if time is not None:
                continue
        if day is None:
            day = _match_day_of_month(token)
            if day is not None:
                continue
        if month is None:
            month = _match_month(token)
            if month is not None:
                continue
        if year is None:
            year = _match_year(token)

    if time is None or day is None or month is None or year is None:
        return None

    if 70 <= year <= 99:
        year += 1900
    elif 0 <= year <= 69:
        year += 2000

    hour, minute, second = time
    if not 1 <= day <= 31:
        return None
    if year < 1601:
        return None
    if hour > 32 or minute > 59 or second > 59:
        return None

    return CookieDate(year, month, day, hour, minute, second)
