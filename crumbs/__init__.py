__version__ = '0.15.0'

from .cookie import (AttributeKind, CookieDraft, CookieEntry,  # noqa
                     SESSION_EXPIRY, parse_set_cookie)
from .cookiejar import (CookieJar, CookieStore, MAX_COOKIES,  # noqa
                        MAX_COOKIES_PER_DOMAIN, split_set_cookie_header)
from .dates import CookieDate, parse_cookie_date  # noqa
from .errors import CookieError, MalformedCookie, MissingHeader  # noqa
from .matching import (default_path, domain_match, is_ip_literal,  # noqa
                       path_match)
from .uri import RequestURI, request_uri  # noqa


__all__ = ('AttributeKind', 'CookieDraft', 'CookieEntry', 'SESSION_EXPIRY',
           'parse_set_cookie',
           'CookieJar', 'CookieStore', 'MAX_COOKIES',
           'MAX_COOKIES_PER_DOMAIN', 'split_set_cookie_header',
           'CookieDate', 'parse_cookie_date',
           'CookieError', 'MalformedCookie', 'MissingHeader',
           'default_path', 'domain_match', 'is_ip_literal', 'path_match',
           'RequestURI', 'request_uri')
