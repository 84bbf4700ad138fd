from __future__ import annotations

import typing

import httpx

from ._config import Config
from ._models import Req
from ._types import Headers, QueryValues

__all__ = ["delete", "get", "patch", "post", "put", "request"]


def request(
    method: str,
    url: str,
    *,
    query: QueryValues | None = None,
    headers: Headers | None = None,
    body: typing.Any = None,
    data: typing.Any = None,
    timeout: float | httpx.Timeout | None = None,
    config: Config | None = None,
) -> Req:
    """
    Build a ``Req``, submit it and return it.

    The decoded response is on ``.data`` and the raw response on
    ``.resp``. Errors are raised exactly as ``Req.submit`` raises them.

    ```
    >>> req = webreq.get("https://api.example.org/users/1", data={})
    >>> req.data["name"]
    'Alice'
    ```
    """
    req = Req(
        url=url,
        method=method,
        query=query,
        headers=dict(headers or {}),
        body=body,
        data=data,
        timeout=timeout,
        config=config,
    )
    req.submit()
    return req


def get(url: str, **kwargs: typing.Any) -> Req:
    """Sends a `GET` request. See `request` for the keyword arguments."""
    return request("GET", url, **kwargs)


def post(url: str, **kwargs: typing.Any) -> Req:
    """Sends a `POST` request. See `request` for the keyword arguments."""
    return request("POST", url, **kwargs)


def put(url: str, **kwargs: typing.Any) -> Req:
    """Sends a `PUT` request. See `request` for the keyword arguments."""
    return request("PUT", url, **kwargs)


def patch(url: str, **kwargs: typing.Any) -> Req:
    """Sends a `PATCH` request. See `request` for the keyword arguments."""
    return request("PATCH", url, **kwargs)


def delete(url: str, **kwargs: typing.Any) -> Req:
    """Sends a `DELETE` request. See `request` for the keyword arguments."""
    return request("DELETE", url, **kwargs)
