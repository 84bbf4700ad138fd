from __future__ import annotations

import json
import typing
from urllib.parse import urlencode


__all__ = ["Form", "Headers", "PrettyJSON", "QueryValues", "Text", "encode_values"]

# One value per header name. Send through httpx directly when duplicate
# header names are needed.
Headers = typing.Dict[str, str]

QueryValues = typing.Mapping[str, typing.Union[str, typing.Sequence[str]]]


def encode_values(values: QueryValues | None) -> str:
    """URL-encode ``values`` in insertion order, one pair per list item."""
    if not values:
        return ""
    pairs: list[tuple[str, str]] = []
    for key, value in values.items():
        if isinstance(value, str):
            pairs.append((key, value))
        else:
            pairs.extend((key, item) for item in value)
    return urlencode(pairs)


class Form(typing.Dict[str, typing.List[str]]):
    """
    Key/value pairs sent as ``application/x-www-form-urlencoded``.

    >>> form = Form(name=["webreq"])
    >>> form.add("tag", "a")
    >>> form.add("tag", "b")
    >>> form.encode()
    'name=webreq&tag=a&tag=b'
    """

    def __init__(self, *args: typing.Any, **kwargs: typing.Any) -> None:
        super().__init__()
        for key, value in dict(*args, **kwargs).items():
            self[key] = [value] if isinstance(value, str) else list(value)

    def add(self, key: str, value: str) -> None:
        self.setdefault(key, []).append(value)

    def encode(self) -> str:
        return encode_values(self)


class Text:
    """Holds the raw response text when used as a ``Req.data`` destination."""

    def __init__(self, value: str = "") -> None:
        self.value = value

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"Text({self.value!r})"

    def __eq__(self, other: typing.Any) -> bool:
        if isinstance(other, Text):
            return self.value == other.value
        return isinstance(other, str) and self.value == other


class PrettyJSON:
    """
    Wraps any JSON-friendly value so it renders as indented JSON.

    Decoding a response into a ``PrettyJSON`` destination is not
    supported yet; ``Req.submit`` logs a warning and leaves it alone.
    """

    def __init__(self, this: typing.Any = None, indent: int = 2) -> None:
        self.this = this
        self.indent = indent

    def __str__(self) -> str:
        return json.dumps(self.this, indent=self.indent, default=_jsonable)

    def __repr__(self) -> str:
        return f"PrettyJSON({self.this!r})"

    def print(self) -> None:
        print(str(self))


def _jsonable(value: typing.Any) -> typing.Any:
    if hasattr(value, "__json__"):
        return value.__json__()
    if hasattr(value, "__dict__"):
        return vars(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
