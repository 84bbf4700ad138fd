# ruff: noqa: I001
from .__version__ import __description__, __title__, __version__
from ._api import delete, get, patch, post, put, request
from ._codecs import BodyKind, DataKind, classify_body, classify_data
from ._config import Config, defaults
from ._exceptions import DecodeFailure, HTTPFailure, SyntaxFailure, WebError
from ._models import Req, submit
from ._types import Form, Headers, PrettyJSON, Text

try:
    from .cli import main
except ImportError:

    def main() -> None:  # type: ignore[misc]
        import sys

        print(
            'The "webreq" command requires the CLI extra. '
            'Install it with: pip install "webreq[cli]"',
            file=sys.stderr,
        )
        sys.exit(1)


_EXCLUDED_FROM_ALL = {"cli", "main"}

__all__ = sorted(
    (
        member
        for member in list(vars().keys())
        if (
            not member.startswith("_")
            or member in ["__description__", "__title__", "__version__"]
        )
        and member not in _EXCLUDED_FROM_ALL
    ),
    key=str.casefold,
)
