from yarl import URL

from crumbs.uri import RequestURI, request_uri


def test_from_string() -> None:
    assert request_uri("HTTPS://Example.COM:8443/a/b?q=1") == \
        RequestURI("https", "example.com", "/a/b")


def test_userinfo_is_dropped() -> None:
    assert request_uri("http://user:pw@example.com/").host == "example.com"


def test_empty_path_is_root() -> None:
    assert request_uri("http://example.com").path == "/"


def test_ipv6_host() -> None:
    assert request_uri("http://[::1]:8080/").host == "[::1]"


def test_request_uri_is_normalised() -> None:
    assert request_uri(RequestURI("HTTP", "Example.COM", "")) == \
        RequestURI("http", "example.com", "/")


def test_normalised_request_uri_is_unchanged() -> None:
    uri = RequestURI("https", "example.com", "/a")
    assert request_uri(uri) == uri


def test_yarl_url() -> None:
    assert request_uri(URL("http://Example.com/x")) == \
        RequestURI("http", "example.com", "/x")
