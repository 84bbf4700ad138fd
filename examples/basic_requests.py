"""
Basic Requests
==============

Demonstrates the top-level convenience functions: get, post, put, patch, delete.
Each one builds a ``webreq.Req``, submits it and hands it back, with the
decoded body on ``.data`` and the raw response on ``.resp``.
"""

import dataclasses

import webreq


@dataclasses.dataclass
class Echo:
    url: str = ""
    data: str = ""
    form: dict = dataclasses.field(default_factory=dict)


def main() -> None:
    # ── GET into a plain dict ────────────────────────────────────────────
    req = webreq.get("https://httpbin.org/get", query={"q": ["web req"]}, data={})
    print(f"GET  → {req.resp.status_code} {req.resp.reason_phrase}")
    print(f"  URL:  {req.url}")
    print(f"  args: {req.data['args']}")
    print()

    # ── POST a string into a dataclass ───────────────────────────────────
    echo = Echo()
    webreq.post("https://httpbin.org/post", body="Hello, world!", data=echo)
    print(f"POST → body echoed: {echo.data}")
    print()

    # ── PUT a form ───────────────────────────────────────────────────────
    form = webreq.Form(name="webreq")
    form.add("tag", "cli")
    webreq.put("https://httpbin.org/put", body=form, data=echo)
    print(f"PUT  → form echoed: {echo.form}")
    print()

    # ── PATCH JSON, keep the raw text ────────────────────────────────────
    req = webreq.patch("https://httpbin.org/patch", body={"partial": True}, data="")
    print(f"PATCH → {len(req.data)} characters of text")
    print()

    # ── DELETE with the descriptor spelled out ───────────────────────────
    req = webreq.Req(method="DELETE", url="https://httpbin.org/delete", timeout=10)
    req.submit()
    print(f"DELETE → {req.resp.status_code}")


if __name__ == "__main__":
    main()
