"""HTTP cookie storage for web clients.

Storage model and Cookie header construction follow RFC 6265 sections
5.3 and 5.4.

"""

import collections.abc
import re
import threading
import time
from collections import defaultdict
from operator import attrgetter

from .cookie import AttributeKind, CookieEntry, SESSION_EXPIRY, \
    parse_set_cookie
from .errors import MissingHeader
from .log import jar_logger
from .matching import domain_match, path_match
from .uri import request_uri

__all__ = ['CookieJar', 'CookieStore', 'MAX_COOKIES',
           'MAX_COOKIES_PER_DOMAIN', 'split_set_cookie_header']


MAX_COOKIES = 3000
MAX_COOKIES_PER_DOMAIN = 50

# A comma starts a new cookie only when a "name=" follows it; commas
# inside Expires dates ("Wed, 09 Jun 2021 ...") are never followed by one.
_entry_separator_re = re.compile(r",(?=[ \t]*[^;,=\s]+[ \t]*=)")


def split_set_cookie_header(text):
    """Split a combined Set-Cookie header value into cookie entries."""
    entries = []
    for entry in _entry_separator_re.split(text):
        entry = entry.strip()
        if entry:
            entries.append(entry)
    return entries


def _set_cookie_values(headers):
    if headers is None:
        raise MissingHeader()
    if isinstance(headers, str):
        values = [headers]
    elif hasattr(headers, 'get_all'):
        # email.message.Message, as returned by http.client
        values = headers.get_all('Set-Cookie', [])
    elif isinstance(headers, collections.abc.Mapping):
        values = []
        for key, value in headers.items():
            if key.lower() == 'set-cookie':
                if value is None:
                    continue
                if isinstance(value, str):
                    values.append(value)
                else:
                    values.extend(value)
    else:
        raise TypeError("headers must be a string or a mapping, got %r"
                        % type(headers).__name__)
    values = [value for value in values if value and value.strip()]
    if not values:
        raise MissingHeader()
    return values


def _deepvalues(mapping):
    """Iterates over nested mapping, depth-first, in insertion order."""
    for obj in mapping.values():
        if isinstance(obj, dict):
            yield from _deepvalues(obj)
        else:
            yield obj


class CookieStore:
    """Cookies indexed by domain, path and name.

    Every read or write first runs :meth:`cleanup`, which drops expired
    cookies and, once more than ``max_cookies`` are held, evicts the least
    recently used ones.

    The store is not thread safe; :class:`CookieJar` serialises access.

    """

    def __init__(self, max_cookies=MAX_COOKIES,
                 max_cookies_per_domain=MAX_COOKIES_PER_DOMAIN):
        self.max_cookies = max_cookies
        self.max_cookies_per_domain = max_cookies_per_domain
        self._cookies = {}

    def _set(self, cookie):
        c = self._cookies
        if cookie.domain not in c:
            c[cookie.domain] = {}
        c2 = c[cookie.domain]
        if cookie.path not in c2:
            c2[cookie.path] = {}
        c3 = c2[cookie.path]
        c3[cookie.name] = cookie

    def _get(self, domain, path, name):
        return self._cookies.get(domain, {}).get(path, {}).get(name)

    def _replace_all(self, cookies):
        self._cookies = {}
        for cookie in cookies:
            self._set(cookie)

    def _evict(self, cookies):
        by_domain = defaultdict(list)
        for cookie in cookies:
            by_domain[cookie.domain].append(cookie)

        evicted = set()
        for domain, domain_cookies in by_domain.items():
            excess = len(domain_cookies) - self.max_cookies_per_domain
            if excess > 0:
                domain_cookies.sort(key=attrgetter('last_accessed'))
                jar_logger.debug("evicting %d cookies of %s", excess, domain)
                evicted.update(c.key for c in domain_cookies[:excess])
        cookies = [c for c in cookies if c.key not in evicted]

        excess = len(cookies) - self.max_cookies
        if excess > 0:
            jar_logger.debug("evicting %d least recently used cookies",
                             excess)
            oldest = sorted(cookies, key=attrgetter('last_accessed'))
            evicted = set(c.key for c in oldest[:excess])
            cookies = [c for c in cookies if c.key not in evicted]
        return cookies

    def cleanup(self, now=None):
        """Remove expired cookies, then enforce the storage limits.

        Returns the number of cookies left.

        """
        if now is None:
            now = time.time()
        cookies = list(self)
        kept = [c for c in cookies if not c.is_expired(now)]
        if len(kept) > self.max_cookies:
            kept = self._evict(kept)
        if len(kept) != len(cookies):
            self._replace_all(kept)
        return len(kept)

    def add(self, draft, uri, now=None):
        """Store the cookie described by ``draft``, set by ``uri``.

        A stored cookie with the same name, domain and path is replaced,
        keeping its creation time.  Returns the new :class:`CookieEntry`;
        a cookie that is already expired replaces the stored one and is then
        removed right away.

        """
        uri = request_uri(uri)
        self.cleanup(now)
        attrs = draft.attributes

        domain = attrs.get(AttributeKind.DOMAIN)
        if domain is not None:
            host_only = False
            if not domain_match(domain, uri.host):
                jar_logger.warning("cookie %s: domain %s does not "
                                   "domain-match request host %s",
                                   draft.name, domain, uri.host)
        else:
            host_only = True
            domain = uri.host

        # Max-Age has precedence over Expires
        if AttributeKind.MAX_AGE in attrs:
            persistent, expires = True, attrs[AttributeKind.MAX_AGE]
        elif AttributeKind.EXPIRES in attrs:
            persistent, expires = True, attrs[AttributeKind.EXPIRES]
        else:
            persistent, expires = False, SESSION_EXPIRY

        cookie = CookieEntry(draft.name, draft.value, domain,
                             attrs.get(AttributeKind.PATH, draft.default_path),
                             host_only=host_only,
                             secure=attrs.get(AttributeKind.SECURE, False),
                             http_only=attrs.get(AttributeKind.HTTPONLY, False),
                             persistent=persistent,
                             expires=expires,
                             created=draft.created)

        old = self._get(cookie.domain, cookie.path, cookie.name)
        if old is not None:
            cookie.created = old.created
        jar_logger.debug("setting cookie: %s", cookie)
        self._set(cookie)
        # the insertion may have taken the store over its limits
        self.cleanup(now)
        return cookie

    def _return_ok(self, cookie, uri):
        if cookie.host_only:
            if cookie.domain != uri.host:
                return False
        elif not domain_match(cookie.domain, uri.host):
            return False
        if not path_match(uri.path, cookie.path):
            return False
        if cookie.secure and uri.scheme != 'https':
            return False
        return True

    def cookies_for_request(self, uri, now=None):
        """Return the cookies to send with a request to ``uri``.

        Cookies with longer paths are listed first; among equal paths,
        the earlier created cookie comes first.  Every returned cookie
        has its last access time set to ``now``.

        """
        if now is None:
            now = time.time()
        uri = request_uri(uri)
        self.cleanup(now)

        cookies = [c for c in self if self._return_ok(c, uri)]
        for cookie in cookies:
            cookie.last_accessed = now
        cookies.sort(key=lambda c: (-len(c.path), c.created))
        return cookies

    def build_header(self, uri, now=None):
        """Return the Cookie header for a request to ``uri`` as a dict."""
        cookies = self.cookies_for_request(uri, now)
        return {'Cookie': "; ".join("%s=%s" % (c.name, c.value)
                                    for c in cookies)}

    def clear(self, domain=None, path=None, name=None):
        """Clear some cookies.

        Invoking this method without arguments will clear all cookies.  If
        given a single argument, only cookies belonging to that domain will be
        removed.  If given two arguments, cookies belonging to the specified
        path within that domain are removed.  If given three arguments, then
        the cookie with the specified name, path and domain is removed.

        Raises KeyError if no matching cookie exists.

        """
        if name is not None:
            if (domain is None) or (path is None):
                raise ValueError(
                    "domain and path must be given to remove a cookie by name")
            del self._cookies[domain][path][name]
        elif path is not None:
            if domain is None:
                raise ValueError(
                    "domain must be given to remove cookies by path")
            del self._cookies[domain][path]
        elif domain is not None:
            del self._cookies[domain]
        else:
            self._cookies = {}

    def clear_session_cookies(self, now=None):
        """Discard all session cookies.

        Returns the number of cookies left.

        """
        self.cleanup(now)
        self._replace_all([c for c in self if c.persistent])
        return len(self)

    def __iter__(self):
        return _deepvalues(self._cookies)

    def __len__(self):
        """Return number of contained cookies."""
        return sum(1 for cookie in self)

    def __repr__(self):
        r = []
        for cookie in self:
            r.append(repr(cookie))
        return "<%s[%s]>" % (self.__class__.__name__, ", ".join(r))


class CookieJar:
    """Collection of HTTP cookies.

    Feed it the Set-Cookie headers of responses with :meth:`ingest` and
    ask it for the Cookie header of the next request with
    :meth:`get_cookie_header`.  All public methods are safe to call from
    several threads.

    """

    def __init__(self, max_cookies=MAX_COOKIES,
                 max_cookies_per_domain=MAX_COOKIES_PER_DOMAIN):
        self._store = CookieStore(max_cookies, max_cookies_per_domain)
        self._lock = threading.Lock()

    def ingest(self, headers, uri):
        """Store the cookies set by a response to a request for ``uri``.

        ``headers`` is either the Set-Cookie header value, possibly several
        cookies joined with commas, or a headers mapping holding it.  Returns
        the stored cookies.

        Raises :exc:`MissingHeader` if there is no Set-Cookie header and
        :exc:`MalformedCookie` on the first entry that cannot be parsed.
        Cookies stored before that entry are kept.

        """
        values = _set_cookie_values(headers)
        uri = request_uri(uri)
        stored = []
        with self._lock:
            for value in values:
                for text in split_set_cookie_header(value):
                    draft = parse_set_cookie(text, uri)
                    stored.append(self._store.add(draft, uri))
        return stored

    def end_session(self):
        """Discard the session cookies; returns the number of cookies left."""
        with self._lock:
            return self._store.clear_session_cookies()

    def get_cookie_header(self, uri):
        with self._lock:
            return self._store.build_header(uri)

    def filter_cookies(self, uri):
        """Return the cookies that would be sent with a request to ``uri``."""
        with self._lock:
            return self._store.cookies_for_request(uri)

    def clear(self, domain=None, path=None, name=None):
        with self._lock:
            self._store.clear(domain, path, name)

    def clear_expired_cookies(self):
        """Discard expired cookies and enforce the storage limits."""
        with self._lock:
            return self._store.cleanup()

    def __iter__(self):
        with self._lock:
            return iter(list(self._store))

    def __len__(self):
        with self._lock:
            return len(self._store)

    def __repr__(self):
        with self._lock:
            r = [repr(cookie) for cookie in self._store]
        return "<%s[%s]>" % (self.__class__.__name__, ", ".join(r))
