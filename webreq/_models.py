from __future__ import annotations

import dataclasses
import logging
import time
import typing

import httpx

from ._codecs import decode_into, encode_body
from ._config import Config, defaults
from ._exceptions import HTTPFailure, SyntaxFailure
from ._types import Headers, QueryValues, encode_values

__all__ = ["Req", "submit"]

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class Req:
    """
    A human-friendly description of one web request, closer to a curl
    command line than to the HTTP specification (one value per header
    name, for example).

    ``body`` decides what is sent:

        Form           form-encoded, sets the Content-Type
        bytes          reserved for uuencoding, sends nothing for now
        str            sent as is
        YAMLObject     YAML (also anything with ``to_yaml()``)
        dict, list,    JSON (also dataclasses and anything with
        tuple          ``__json__()``)
        other          ``bytes(body)``, ``str(body)`` or ``format(body)``

    ``data`` decides where the response goes:

        dict           YAML/JSON decoded and merged in
        str, Text      the raw response text
        bytes          reserved for uudecoding, left alone for now
        unmarshal_yaml the decoded value is handed to that method
        write()        the raw response is written to it
        PrettyJSON     not supported yet, left alone
        other          YAML/JSON decoded into it (dataclasses, objects,
                       lists, ints, ``None`` ...)

    Query strings belong in ``query``, never in ``url``, so that they are
    always URL-encoded. A ``Req`` is changed by ``submit`` (url, headers,
    data, resp) and must not be submitted from two threads at once.
    """

    url: str = ""
    method: str = ""
    query: QueryValues | None = None
    headers: Headers = dataclasses.field(default_factory=dict)
    body: typing.Any = None
    data: typing.Any = None
    timeout: float | httpx.Timeout | None = None
    config: Config | None = dataclasses.field(default=None, repr=False)
    resp: httpx.Response | None = dataclasses.field(default=None, repr=False)

    def submit(self) -> None:
        """
        Send the request and decode the response into ``data``.

        Anything but a ``2xx`` response raises ``HTTPFailure``. Transport
        errors (``httpx.TransportError``) and decoding errors propagate
        unchanged. ``resp`` is set whenever a response was received, even
        when an error is raised afterwards.
        """
        config = self.config if self.config is not None else defaults

        if not self.method:
            self.method = "GET"

        if "?" in self.url:
            raise SyntaxFailure("URL contains '?' (use query instead)")
        query = encode_values(self.query)
        if query:
            self.url = f"{self.url}?{query}"

        if self.headers is None:
            self.headers = {}

        content, content_type = encode_body(self.body)
        if content_type is not None:
            _set_header(self.headers, "Content-Type", content_type)
        _set_header(self.headers, "Content-Length", str(len(content)))

        timeout = self.timeout if self.timeout is not None else config.timeout
        # A number bounds the whole call; an httpx.Timeout only its phases.
        deadline = None
        if not isinstance(timeout, httpx.Timeout):
            deadline = time.monotonic() + timeout
        client = config.client
        request = client.build_request(
            self.method,
            self.url,
            content=content,
            headers=self.headers,
            timeout=timeout,
        )

        logger.debug("%s %s", self.method, self.url)
        self.resp = None
        response = client.send(request, stream=True)
        try:
            self.resp = response
            logger.debug(
                "%s %s -> %s", self.method, self.url, response.status_code
            )
            raw = _read(response, deadline)
            if not response.is_success:
                raise HTTPFailure(response)
        finally:
            response.close()

        if not raw:
            return
        self.data = decode_into(self.data, raw, response.charset_encoding)


def _set_header(headers: Headers, name: str, value: str) -> None:
    for key in [k for k in headers if k.lower() == name.lower()]:
        del headers[key]
    headers[name] = value


def _read(response: httpx.Response, deadline: float | None) -> bytes:
    """
    Read the whole body, raising ``httpx.ReadTimeout`` once ``deadline``
    has passed. The body is cached on the response like ``read()`` does.
    """
    if deadline is None:
        return response.read()
    chunks = []
    for chunk in response.iter_bytes():
        _check_deadline(response, deadline)
        chunks.append(chunk)
    _check_deadline(response, deadline)
    # Same caching as httpx.Response.read(), so resp.text stays usable.
    response._content = b"".join(chunks)
    return response._content


def _check_deadline(response: httpx.Response, deadline: float) -> None:
    if time.monotonic() > deadline:
        raise httpx.ReadTimeout(
            "deadline exceeded while reading the response",
            request=response.request,
        )


def submit(req: Req) -> None:
    """Functional spelling of ``req.submit()``."""
    req.submit()
