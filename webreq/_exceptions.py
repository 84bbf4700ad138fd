from __future__ import annotations

import typing

if typing.TYPE_CHECKING:
    import httpx


class WebError(Exception):
    """Base class for errors raised by webreq itself."""


class SyntaxFailure(WebError, ValueError):
    """
    A ``Req`` was put together incorrectly (a ``?`` in the URL, for
    example). Raised before any network I/O happens.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class HTTPFailure(WebError):
    """
    The server answered with a status outside ``200-299``. Redirects are
    followed by the client before this check, so a ``3xx`` only shows up
    here when the redirect could not be resolved.
    """

    def __init__(self, response: httpx.Response) -> None:
        self.response = response
        super().__init__(self.status)

    @property
    def status_code(self) -> int:
        return self.response.status_code

    @property
    def status(self) -> str:
        return f"{self.response.status_code} {self.response.reason_phrase}".rstrip()

    def __str__(self) -> str:
        return self.status


class DecodeFailure(WebError, TypeError):
    """The response decoded fine but does not fit the destination."""
