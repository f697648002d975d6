"""Adapting caller supplied URLs to the pieces the cookie jar looks at."""

import re
import urllib.parse
from collections import namedtuple

__all__ = ['RequestURI', 'request_uri']


RequestURI = namedtuple('RequestURI', 'scheme host path')

cut_port_re = re.compile(r":\d+$", re.ASCII)


def request_uri(url):
    """Return the (scheme, host, path) of ``url`` as a :class:`RequestURI`.

    ``url`` is either a URL string or an already parsed object exposing
    ``scheme``, ``host`` and ``path`` attributes, such as ``yarl.URL``.
    The host is lowercased and stripped of any port, for convenient
    comparison; an empty path means the root path.

    """
    if isinstance(url, str):
        parts = urllib.parse.urlsplit(url)
        scheme, path = parts.scheme, parts.path
        host = parts.netloc.rpartition('@')[2]
        # remove port, if present
        host = cut_port_re.sub("", host, 1)
    else:
        scheme, host, path = url.scheme, url.host, url.path
    return RequestURI((scheme or '').lower(), (host or '').lower(),
                      path or '/')
