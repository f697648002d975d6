import calendar

import pytest
from freezegun import freeze_time

from crumbs.cookie import SESSION_EXPIRY, AttributeKind, CookieEntry, \
    parse_set_cookie
from crumbs.errors import CookieError, MalformedCookie


URI = "http://example.com/docs/index.html"


def test_name_and_value() -> None:
    draft = parse_set_cookie("id=a3fWa", URI)
    assert draft.name == "id"
    assert draft.value == "a3fWa"
    assert draft.attributes == {}


def test_whitespace_is_trimmed() -> None:
    draft = parse_set_cookie("  id  =  a3fWa  ; Secure", URI)
    assert draft.name == "id"
    assert draft.value == "a3fWa"


def test_empty_value() -> None:
    draft = parse_set_cookie("id=", URI)
    assert draft.value == ""


def test_value_keeps_later_equal_signs() -> None:
    assert parse_set_cookie("token=a=b==", URI).value == "a=b=="


@pytest.mark.parametrize('text', ["novalue", "novalue; Path=/", ""])
def test_missing_equal_sign(text) -> None:
    with pytest.raises(MalformedCookie) as ctx:
        parse_set_cookie(text, URI)
    assert ctx.value.reason == "malformed cookie: no '='"


def test_empty_name() -> None:
    with pytest.raises(MalformedCookie) as ctx:
        parse_set_cookie("  =value", URI)
    assert ctx.value.reason == "malformed cookie: empty name"


def test_malformed_cookie_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        parse_set_cookie("=", URI)
    assert issubclass(MalformedCookie, CookieError)


def test_default_path() -> None:
    assert parse_set_cookie("id=1", URI).default_path == "/docs"


def test_created_time() -> None:
    with freeze_time("2021-06-09 10:00:00"):
        draft = parse_set_cookie("id=1", URI)
    assert draft.created == calendar.timegm((2021, 6, 9, 10, 0, 0))


def test_explicit_now() -> None:
    assert parse_set_cookie("id=1", URI, now=1000).created == 1000


def test_flags() -> None:
    draft = parse_set_cookie("id=1; Secure; HttpOnly", URI)
    assert draft.attributes == {AttributeKind.SECURE: True,
                                AttributeKind.HTTPONLY: True}


def test_flag_values_are_ignored() -> None:
    draft = parse_set_cookie("id=1; secure=false", URI)
    assert draft.attributes[AttributeKind.SECURE] is True


def test_attribute_names_case_insensitive() -> None:
    draft = parse_set_cookie("id=1; PATH=/x; dOmAiN=Example.COM", URI)
    assert draft.attributes[AttributeKind.PATH] == "/x"
    assert draft.attributes[AttributeKind.DOMAIN] == "example.com"


def test_unknown_attributes_are_ignored() -> None:
    draft = parse_set_cookie("id=1; SameSite=Lax; Priority; ; Path=/", URI)
    assert draft.attributes == {AttributeKind.PATH: "/"}


def test_expires() -> None:
    draft = parse_set_cookie(
        "id=1; Expires=Wed, 09 Jun 2021 10:18:14 GMT", URI)
    assert draft.attributes[AttributeKind.EXPIRES] == \
        calendar.timegm((2021, 6, 9, 10, 18, 14))


def test_invalid_expires_is_dropped() -> None:
    draft = parse_set_cookie("id=1; Expires=string; Path=/", URI)
    assert AttributeKind.EXPIRES not in draft.attributes
    assert draft.attributes[AttributeKind.PATH] == "/"


def test_max_age() -> None:
    draft = parse_set_cookie("id=1; Max-Age=3600", URI, now=1000)
    assert draft.attributes[AttributeKind.MAX_AGE] == 4600


@pytest.mark.parametrize('value', ["0", "-1", "-3600"])
def test_non_positive_max_age_is_epoch(value) -> None:
    draft = parse_set_cookie("id=1; Max-Age=" + value, URI, now=1000)
    assert draft.attributes[AttributeKind.MAX_AGE] == 0


@pytest.mark.parametrize('value', ["", "string", "1.5", "+10", "10s", "--1"])
def test_invalid_max_age_is_dropped(value) -> None:
    draft = parse_set_cookie("id=1; Max-Age=" + value, URI)
    assert AttributeKind.MAX_AGE not in draft.attributes


def test_domain_leading_dot_is_removed() -> None:
    draft = parse_set_cookie("id=1; Domain=.Example.com", URI)
    assert draft.attributes[AttributeKind.DOMAIN] == "example.com"


@pytest.mark.parametrize('value', ["", "."])
def test_empty_domain_is_dropped(value) -> None:
    draft = parse_set_cookie("id=1; Domain=" + value, URI)
    assert AttributeKind.DOMAIN not in draft.attributes


def test_relative_path_falls_back_to_default() -> None:
    draft = parse_set_cookie("id=1; Path=relative", URI)
    assert draft.attributes[AttributeKind.PATH] == "/docs"


def test_empty_path_falls_back_to_default() -> None:
    draft = parse_set_cookie("id=1; Path=", URI)
    assert draft.attributes[AttributeKind.PATH] == "/docs"


def test_first_attribute_wins() -> None:
    draft = parse_set_cookie(
        "id=1; Path=/first; Path=/second; Max-Age=10; Max-Age=20",
        URI, now=0)
    assert draft.attributes[AttributeKind.PATH] == "/first"
    assert draft.attributes[AttributeKind.MAX_AGE] == 10


def test_rejected_attribute_does_not_shadow_later_one() -> None:
    draft = parse_set_cookie(
        "id=1; Expires=never; Expires=09 Jun 2021 10:18:14", URI)
    assert draft.attributes[AttributeKind.EXPIRES] == \
        calendar.timegm((2021, 6, 9, 10, 18, 14))


def test_draft_repr() -> None:
    draft = parse_set_cookie("id=1; Secure", URI)
    assert repr(draft) == "<CookieDraft id=1 [secure=True]>"


def test_entry_defaults() -> None:
    entry = CookieEntry("id", "1", "Example.com", "/", created=5)
    assert entry.domain == "example.com"
    assert entry.host_only
    assert not entry.secure
    assert not entry.http_only
    assert not entry.persistent
    assert entry.expires == SESSION_EXPIRY
    assert entry.last_accessed == 5
    assert entry.key == ("id", "example.com", "/")


def test_entry_is_expired() -> None:
    entry = CookieEntry("id", "1", "example.com", "/",
                        persistent=True, expires=100)
    assert not entry.is_expired(99)
    assert not entry.is_expired(100)
    assert entry.is_expired(101)


def test_session_entry_never_expires() -> None:
    entry = CookieEntry("id", "1", "example.com", "/", expires=0)
    assert not entry.is_expired(SESSION_EXPIRY + 1)


def test_entry_str() -> None:
    entry = CookieEntry("id", "1", "example.com", "/docs")
    assert str(entry) == "<Cookie id=1 for example.com/docs>"


def test_entry_repr() -> None:
    entry = CookieEntry("id", "1", "example.com", "/", created=5)
    assert repr(entry).startswith("CookieEntry(name='id', value='1', ")
    assert "last_accessed=5" in repr(entry)
