"""Set-Cookie parsing, RFC 6265 section 5.2.

:func:`parse_set_cookie` turns one Set-Cookie entry into a
:class:`CookieDraft`: the name-value pair plus the attributes that were
understood and accepted.  Turning a draft into a stored
:class:`CookieEntry` (domain and path resolution, expiry) is the job of
the cookie store.

"""

import enum
import re
import time

from .dates import parse_cookie_date
from .errors import MalformedCookie
from .log import parser_logger
from .matching import default_path
from .uri import request_uri

__all__ = ['AttributeKind', 'CookieDraft', 'CookieEntry',
           'SESSION_EXPIRY', 'parse_set_cookie']


# Expiry time given to session cookies: the largest 32-bit POSIX time.
SESSION_EXPIRY = 2 ** 31 - 1


class AttributeKind(enum.Enum):
    EXPIRES = 'expires'
    MAX_AGE = 'max-age'
    DOMAIN = 'domain'
    PATH = 'path'
    SECURE = 'secure'
    HTTPONLY = 'httponly'


_max_age_re = re.compile(r"-?[0-9]+")


def _parse_expires(value, now):
    date = parse_cookie_date(value)
    if date is None:
        return None
    return date.timestamp()


def _parse_max_age(value, now):
    if not _max_age_re.fullmatch(value):
        return None
    delta = int(value)
    if delta <= 0:
        return 0
    return now + delta


def _parse_domain(value, now):
    if value.startswith('.'):
        value = value[1:]
    if not value:
        return None
    return value.lower()


def _parse_path(value, now):
    if not value.startswith('/'):
        return None
    return value


def _parse_flag(value, now):
    return True


_ATTRIBUTE_PARSERS = {
    AttributeKind.EXPIRES: _parse_expires,
    AttributeKind.MAX_AGE: _parse_max_age,
    AttributeKind.DOMAIN: _parse_domain,
    AttributeKind.PATH: _parse_path,
    AttributeKind.SECURE: _parse_flag,
    AttributeKind.HTTPONLY: _parse_flag,
}


class CookieDraft:
    """A parsed Set-Cookie entry that has not been stored yet.

    ``attributes`` maps each :class:`AttributeKind` that was accepted to
    its parsed value: a POSIX timestamp for Expires and Max-Age, a string
    for Domain and Path and True for the flags.

    """

    def __init__(self, name, value, default_path, attributes, created):
        self.name = name
        self.value = value
        self.default_path = default_path
        self.attributes = attributes
        self.created = created

    def __repr__(self):
        attrs = ", ".join("%s=%r" % (kind.value, value)
                          for kind, value in self.attributes.items())
        return "<CookieDraft %s=%s [%s]>" % (self.name, self.value, attrs)


class CookieEntry:
    """HTTP Cookie, as held by the cookie store.

    This is deliberately a very simple class.  It just holds attributes.
    ``(name, domain, path)`` identifies the cookie within a store.

    Times are POSIX timestamps.  ``expires`` is only meaningful for
    persistent cookies; session cookies carry :data:`SESSION_EXPIRY`.

    """

    def __init__(self, name, value, domain, path,
                 host_only=True,
                 secure=False,
                 http_only=False,
                 persistent=False,
                 expires=SESSION_EXPIRY,
                 created=None,
                 last_accessed=None,
                 ):
        if created is None:
            created = time.time()
        if last_accessed is None:
            last_accessed = created

        self.name = name
        self.value = value
        self.domain = domain.lower()
        self.path = path
        self.host_only = host_only
        self.secure = secure
        self.http_only = http_only
        self.persistent = persistent
        self.expires = expires
        self.created = created
        self.last_accessed = last_accessed

    @property
    def key(self):
        return self.name, self.domain, self.path

    def is_expired(self, now=None):
        if not self.persistent:
            return False
        if now is None:
            now = time.time()
        return self.expires < now

    def __str__(self):
        return "<Cookie %s=%s for %s%s>" % (self.name, self.value,
                                            self.domain, self.path)

    def __repr__(self):
        args = []
        for name in ("name", "value", "domain", "path", "host_only",
                     "secure", "http_only", "persistent", "expires",
                     "created", "last_accessed"):
            attr = getattr(self, name)
            args.append("%s=%s" % (name, repr(attr)))
        return "CookieEntry(%s)" % ", ".join(args)


def parse_set_cookie(text, uri, now=None):
    """Parse a single Set-Cookie entry received in response to ``uri``.

    Attributes with values that cannot be understood are dropped; only
    the first accepted occurrence of each attribute counts.  Raises
    :exc:`MalformedCookie` if the entry has no name-value pair or the
    name is empty.

    """
    if now is None:
        now = time.time()
    uri = request_uri(uri)

    name_value, _, unparsed_attributes = text.partition(';')
    if '=' not in name_value:
        raise MalformedCookie("malformed cookie: no '='")
    name, _, value = name_value.partition('=')
    name = name.strip()
    value = value.strip()
    if not name:
        raise MalformedCookie("malformed cookie: empty name")

    path_default = default_path(uri.path)

    attributes = {}
    if unparsed_attributes:
        for cookie_av in unparsed_attributes.split(';'):
            attr_name, _, attr_value = cookie_av.partition('=')
            attr_name = attr_name.strip().lower()
            attr_value = attr_value.strip()
            try:
                kind = AttributeKind(attr_name)
            except ValueError:
                if attr_name:
                    parser_logger.debug("ignoring unknown attribute %r of "
                                        "cookie %s", attr_name, name)
                continue
            if kind in attributes:
                # only first value is significant
                continue
            parsed = _ATTRIBUTE_PARSERS[kind](attr_value, now)
            if parsed is None and kind is AttributeKind.PATH:
                parsed = path_default
            if parsed is None:
                parser_logger.debug("ignoring invalid %s attribute %r of "
                                    "cookie %s", kind.value, attr_value, name)
                continue
            attributes[kind] = parsed

    return CookieDraft(name, value, path_default, attributes, now)
