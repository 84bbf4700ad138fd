from __future__ import annotations

import json
import logging
import sys
import typing

import click
import httpx
from rich.console import Console
from rich.syntax import Syntax

from .__version__ import __version__
from ._api import request
from ._exceptions import HTTPFailure, WebError
from ._types import Form, Text

# ---------------------------------------------------------------------------
# Argument parsing helpers
# ---------------------------------------------------------------------------


def parse_header(header: str) -> tuple[str, str]:
    """Parse a 'Key: Value' header string."""
    if ":" not in header:
        raise click.BadParameter(
            f"Invalid header format: '{header}'. Expected 'Key: Value'."
        )
    key, _, value = header.partition(":")
    return key.strip(), value.strip()


def parse_pair(pair: str) -> tuple[str, str]:
    """Parse a 'key=value' query or form field."""
    if "=" not in pair:
        raise click.BadParameter(f"Invalid field: '{pair}'. Expected 'key=value'.")
    key, _, value = pair.partition("=")
    return key, value


def collect_pairs(pairs: typing.Iterable[str]) -> Form:
    form = Form()
    for pair in pairs:
        key, value = parse_pair(pair)
        form.add(key, value)
    return form


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def echo_result(text: str, content_type: str, use_rich: bool) -> None:
    if "json" in content_type.lower() and text:
        try:
            formatted = json.dumps(json.loads(text), indent=4, ensure_ascii=False)
        except json.JSONDecodeError:
            formatted = None
        if formatted is not None:
            if use_rich:
                Console().print(Syntax(formatted, "json", theme="monokai"))
            else:
                click.echo(formatted)
            return
    click.echo(text)


def echo_error(exc: Exception, use_rich: bool) -> None:
    if isinstance(exc, HTTPFailure):
        message = exc.status
    else:
        message = f"{type(exc).__name__}: {exc}"
    if use_rich:
        Console(stderr=True).print(f"[bold red]{message}[/bold red]")
    else:
        click.echo(message, err=True)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@click.group(help="Common web requests, friendlier than curl.")
@click.version_option(__version__, prog_name="webreq")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log requests.")
@click.option("--no-color", is_flag=True, default=False, help="Disable colored output.")
@click.pass_context
def main(ctx: click.Context, verbose: bool, no_color: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )
    ctx.obj = {"use_rich": not no_color and sys.stdout.isatty()}


def _send(
    ctx: click.Context,
    method: str,
    url: str,
    queries: tuple[str, ...],
    headers: tuple[str, ...],
    timeout: float | None,
    body: typing.Any = None,
) -> None:
    use_rich = ctx.obj["use_rich"]
    header_dict = dict(parse_header(h) for h in headers)
    try:
        req = request(
            method,
            url,
            query=collect_pairs(queries),
            headers=header_dict,
            body=body,
            data=Text(),
            timeout=timeout,
        )
    except (WebError, httpx.HTTPError) as exc:
        echo_error(exc, use_rich)
        sys.exit(1)
    content_type = req.resp.headers.get("content-type", "") if req.resp else ""
    echo_result(req.data.value, content_type, use_rich)


def _common_options(func: typing.Callable[..., None]) -> typing.Callable[..., None]:
    func = click.option(
        "--timeout", type=float, default=None, help="Timeout in seconds."
    )(func)
    func = click.option(
        "-H",
        "--header",
        "headers",
        multiple=True,
        help='Add a header, e.g. -H "Authorization: Bearer token".',
    )(func)
    func = click.option(
        "-q",
        "--query",
        "queries",
        multiple=True,
        help="Add a query parameter, e.g. -q page=2.",
    )(func)
    func = click.argument("url")(func)
    return func


def _body_options(func: typing.Callable[..., None]) -> typing.Callable[..., None]:
    func = click.option(
        "-f",
        "--form",
        "form_fields",
        multiple=True,
        help="Add a form field, e.g. -f name=value.",
    )(func)
    func = click.option(
        "-d", "--data", "content", default=None, help="Text to send as the body."
    )(func)
    return func


def _body(content: str | None, form_fields: tuple[str, ...]) -> typing.Any:
    if content is not None and form_fields:
        raise click.UsageError("Use either --data or --form, not both.")
    if form_fields:
        return collect_pairs(form_fields)
    return content


@main.command(help="Submit an HTTP GET request.")
@_common_options
@click.pass_context
def get(
    ctx: click.Context,
    url: str,
    queries: tuple[str, ...],
    headers: tuple[str, ...],
    timeout: float | None,
) -> None:
    _send(ctx, "GET", url, queries, headers, timeout)


@main.command(help="Submit an HTTP DELETE request.")
@_common_options
@click.pass_context
def delete(
    ctx: click.Context,
    url: str,
    queries: tuple[str, ...],
    headers: tuple[str, ...],
    timeout: float | None,
) -> None:
    _send(ctx, "DELETE", url, queries, headers, timeout)


def _body_command(method: str) -> click.Command:
    @main.command(name=method.lower(), help=f"Submit an HTTP {method} request.")
    @_common_options
    @_body_options
    @click.pass_context
    def command(
        ctx: click.Context,
        url: str,
        queries: tuple[str, ...],
        headers: tuple[str, ...],
        timeout: float | None,
        content: str | None,
        form_fields: tuple[str, ...],
    ) -> None:
        _send(ctx, method, url, queries, headers, timeout, _body(content, form_fields))

    return command


post = _body_command("POST")
put = _body_command("PUT")
patch = _body_command("PATCH")
