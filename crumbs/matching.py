"""Domain and path matching, RFC 6265 sections 5.1.3 and 5.1.4."""

from http.cookiejar import IPV4_RE

__all__ = ['default_path', 'domain_match', 'is_ip_literal', 'path_match']


def is_ip_literal(host):
    """Return True if ``host`` is an IPv4 or IPv6 address literal."""
    if ':' in host or host.startswith('['):
        return True
    return bool(IPV4_RE.search(host))


def domain_match(cookie_domain, host):
    """Return True if ``host`` domain-matches ``cookie_domain``.

    Either the two are identical, or ``cookie_domain`` is a suffix of
    ``host`` preceded by a dot and ``host`` is a host name rather than an
    IP address.  Both arguments are expected to be lower-cased already.

    """
    if cookie_domain == host:
        return True
    if not host.endswith('.' + cookie_domain):
        return False
    return not is_ip_literal(host)


def path_match(request_path, cookie_path):
    if request_path == cookie_path:
        return True
    if not request_path.startswith(cookie_path):
        return False
    if cookie_path.endswith('/'):
        return True
    return request_path[len(cookie_path)] == '/'


def default_path(uri_path):
    """Compute the default cookie path for a request path.

    Everything from the right-most ``/`` on is dropped; the root path is
    used when nothing would remain or the path is not absolute.

    """
    if not uri_path or not uri_path.startswith('/'):
        return '/'
    i = uri_path.rfind('/')
    if i == 0:
        return '/'
    return uri_path[:i]
