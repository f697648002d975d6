"""Cookie related exceptions."""

__all__ = ['CookieError', 'MissingHeader', 'MalformedCookie']


class CookieError(ValueError):
    """Base class for errors raised while ingesting cookies.

    The human readable explanation is kept in ``reason``.
    """

    def __init__(self, reason):
        super().__init__(reason)
        self.reason = reason


class MissingHeader(CookieError):
    """No Set-Cookie header was supplied."""

    def __init__(self, reason="missing Set-Cookie header"):
        super().__init__(reason)


class MalformedCookie(CookieError):
    """A Set-Cookie entry has no name-value pair or an empty name."""
