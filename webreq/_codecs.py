"""
Body encoding and response decoding for ``Req.submit``.

Both directions dispatch on an explicit kind. The order of the checks in
``classify_body`` and ``classify_data`` is significant: a value is
handled by the first kind it qualifies for, so a dataclass goes out as
JSON rather than through its ``__str__``.
"""

from __future__ import annotations

import dataclasses
import enum
import io
import json
import logging
import typing

import yaml

from ._exceptions import DecodeFailure, SyntaxFailure
from ._types import Form, PrettyJSON, Text

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class BodyKind(enum.Enum):
    EMPTY = "empty"
    FORM = "form"
    BINARY = "binary"
    TEXT = "text"
    YAML = "yaml"
    JSON = "json"
    MARSHAL_TEXT = "marshal_text"
    STRINGER = "stringer"
    DEFAULT = "default"


class DataKind(enum.Enum):
    MAPPING = "mapping"
    TEXT = "text"
    BINARY = "binary"
    YAML_UNMARSHALER = "yaml_unmarshaler"
    WRITER = "writer"
    PRETTY_JSON = "pretty_json"
    DEFAULT = "default"


# ---------------------------------------------------------------------------
# Body
# ---------------------------------------------------------------------------


def _has_method(value: typing.Any, name: str) -> bool:
    return callable(getattr(value, name, None))


def _overrides_str(value: typing.Any) -> bool:
    return type(value).__str__ is not object.__str__


def classify_body(body: typing.Any) -> BodyKind:
    if body is None:
        return BodyKind.EMPTY
    if isinstance(body, Form):
        return BodyKind.FORM
    if isinstance(body, (bytes, bytearray, memoryview)):
        return BodyKind.BINARY
    if isinstance(body, str):
        return BodyKind.TEXT
    if isinstance(body, yaml.YAMLObject) or _has_method(body, "to_yaml"):
        return BodyKind.YAML
    if (
        _has_method(body, "__json__")
        or (dataclasses.is_dataclass(body) and not isinstance(body, type))
        or isinstance(body, (dict, list, tuple))
    ):
        return BodyKind.JSON
    if _has_method(body, "__bytes__"):
        return BodyKind.MARSHAL_TEXT
    if _overrides_str(body):
        return BodyKind.STRINGER
    return BodyKind.DEFAULT


def _to_json(body: typing.Any) -> typing.Any:
    if _has_method(body, "__json__"):
        return body.__json__()
    if dataclasses.is_dataclass(body) and not isinstance(body, type):
        return {
            f.metadata.get("key", f.name): getattr(body, f.name)
            for f in dataclasses.fields(body)
        }
    return body


def _json_default(value: typing.Any) -> typing.Any:
    if _has_method(value, "__json__") or (
        dataclasses.is_dataclass(value) and not isinstance(value, type)
    ):
        return _to_json(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def encode_body(body: typing.Any) -> tuple[bytes, str | None]:
    """
    Serialize ``body`` and return ``(content, content_type)``.

    ``content_type`` is only set for forms; every other kind leaves the
    caller's ``Content-Type`` header alone.
    """
    kind = classify_body(body)
    if kind is BodyKind.EMPTY:
        return b"", None
    if kind is BodyKind.FORM:
        return body.encode().encode("utf-8"), FORM_CONTENT_TYPE
    if kind is BodyKind.BINARY:
        logger.warning("planned, but unimplemented, would uuencode %d bytes", len(body))
        return b"", None
    if kind is BodyKind.TEXT:
        text = body
    elif kind is BodyKind.YAML:
        # YAMLObject.to_yaml is the classmethod hook used by the dumper.
        if isinstance(body, yaml.YAMLObject):
            text = yaml.dump(body)
        else:
            text = body.to_yaml()
    elif kind is BodyKind.JSON:
        text = json.dumps(_to_json(body), default=_json_default)
    elif kind is BodyKind.MARSHAL_TEXT:
        return bytes(body), None
    elif kind is BodyKind.STRINGER:
        text = str(body)
    else:
        text = format(body)
    return text.encode("utf-8"), None


# ---------------------------------------------------------------------------
# Destination
# ---------------------------------------------------------------------------


def classify_data(data: typing.Any) -> DataKind:
    if isinstance(data, dict):
        return DataKind.MAPPING
    if isinstance(data, (str, Text)):
        return DataKind.TEXT
    if isinstance(data, (bytes, bytearray)):
        return DataKind.BINARY
    if _has_method(data, "unmarshal_yaml"):
        return DataKind.YAML_UNMARSHALER
    if _has_method(data, "write"):
        return DataKind.WRITER
    if isinstance(data, PrettyJSON):
        return DataKind.PRETTY_JSON
    return DataKind.DEFAULT


def _load(raw: bytes, encoding: str | None = None) -> typing.Any:
    # Without a declared charset PyYAML sniffs UTF-8/UTF-16 from the bytes.
    if encoding is None:
        return yaml.safe_load(raw)
    return yaml.safe_load(raw.decode(encoding))


def _field_keys(data: typing.Any) -> dict[str, str]:
    if dataclasses.is_dataclass(data):
        return {f.metadata.get("key", f.name): f.name for f in dataclasses.fields(data)}
    return {name: name for name in vars(data) if not name.startswith("_")}


def _decode_default(
    data: typing.Any, raw: bytes, encoding: str | None
) -> typing.Any:
    loaded = _load(raw, encoding)
    if data is None:
        return loaded
    if isinstance(data, bool):
        if not isinstance(loaded, bool):
            raise DecodeFailure(f"cannot decode {type(loaded).__name__} into bool")
        return loaded
    if isinstance(data, (int, float)):
        if isinstance(loaded, bool) or not isinstance(loaded, (int, float)):
            raise DecodeFailure(
                f"cannot decode {type(loaded).__name__} into {type(data).__name__}"
            )
        if isinstance(data, int) and not isinstance(loaded, int):
            raise DecodeFailure(f"cannot decode {loaded!r} into int")
        return type(data)(loaded)
    if isinstance(data, list):
        if loaded is None:
            return data
        if not isinstance(loaded, list):
            raise DecodeFailure(f"cannot decode {type(loaded).__name__} into list")
        data[:] = loaded
        return data
    if not (dataclasses.is_dataclass(data) or hasattr(data, "__dict__")):
        raise SyntaxFailure(f"unsupported data type: {type(data).__name__}")
    if loaded is None:
        return data
    if not isinstance(loaded, dict):
        raise DecodeFailure(
            f"cannot decode {type(loaded).__name__} into {type(data).__name__}"
        )
    keys = _field_keys(data)
    for key, value in loaded.items():
        name = keys.get(str(key))
        if name is not None:
            setattr(data, name, value)
    return data


def decode_into(
    data: typing.Any, raw: bytes, encoding: str | None = None
) -> typing.Any:
    """
    Decode the response body ``raw`` into the destination ``data``.

    Mutable destinations are updated in place. The return value is what
    ``Req.data`` should hold afterwards, which only differs from ``data``
    for immutable destinations such as ``str`` or ``int``. ``encoding`` is
    the charset the response declared, if any.
    """
    kind = classify_data(data)
    if kind is DataKind.MAPPING:
        loaded = _load(raw, encoding)
        if loaded is None:
            return data
        if not isinstance(loaded, dict):
            raise DecodeFailure(f"cannot decode {type(loaded).__name__} into dict")
        data.update(loaded)
        return data
    if kind is DataKind.TEXT:
        text = raw.decode(encoding or "utf-8")
        if isinstance(data, Text):
            data.value = text
            return data
        return text
    if kind is DataKind.BINARY:
        logger.warning("planned, but unimplemented, would uudecode %d bytes", len(raw))
        return data
    if kind is DataKind.YAML_UNMARSHALER:
        data.unmarshal_yaml(_load(raw, encoding))
        return data
    if kind is DataKind.WRITER:
        if isinstance(data, io.TextIOBase):
            data.write(raw.decode(encoding or "utf-8"))
        else:
            data.write(raw)
        return data
    if kind is DataKind.PRETTY_JSON:
        logger.warning("pretty JSON destination planned, but unimplemented")
        return data
    return _decode_default(data, raw, encoding)
