import pytest

from .cookiejar import MAX_COOKIES, CookieJar, CookieStore
from .uri import request_uri


def pytest_addoption(parser):
    parser.addoption("--cookie-max", type=int, default=MAX_COOKIES,
                     help=("Total number of cookies the cookie_jar "
                           "fixture keeps before evicting.\n"
                           "%d by default." % MAX_COOKIES))


@pytest.fixture
def cookie_jar(request):
    """Empty cookie jar"""
    return CookieJar(max_cookies=request.config.getoption("--cookie-max"))


@pytest.fixture
def cookie_store():
    """Empty cookie store with the default limits"""
    return CookieStore()


@pytest.fixture
def make_request_uri():
    """Factory turning URL strings into request URIs"""

    def _make_request_uri(url):
        return request_uri(url)

    return _make_request_uri
