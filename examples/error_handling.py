"""
Error Handling
==============

Demonstrates the four ways ``Req.submit`` can fail.

    webreq.SyntaxFailure    the Req itself is wrong, nothing was sent
    webreq.HTTPFailure      the server answered outside 200-299
    httpx.TransportError    DNS, refused connections, timeouts ...
    yaml.YAMLError /        the body could not be decoded into ``data``
    webreq.DecodeFailure
"""

import httpx

import webreq


def main() -> None:
    # ── SyntaxFailure ────────────────────────────────────────────────────
    print("── SyntaxFailure ──────────────────────────────────────────────")
    try:
        webreq.get("https://httpbin.org/get?page=2")
    except webreq.SyntaxFailure as exc:
        print(f"  Caught: {exc}")
    print()

    # ── HTTPFailure ──────────────────────────────────────────────────────
    print("── HTTPFailure ────────────────────────────────────────────────")
    req = webreq.Req(url="https://httpbin.org/status/404")
    try:
        req.submit()
    except webreq.HTTPFailure as exc:
        print(f"  404: Caught HTTPFailure → {exc}")
        print(f"       response status: {exc.response.status_code}")
        print(f"       req.resp is the same response: {req.resp is exc.response}")
    print()

    # ── Timeout handling ─────────────────────────────────────────────────
    print("── Timeout handling ───────────────────────────────────────────")
    webreq.defaults.timeout = 1.0
    try:
        webreq.get("https://httpbin.org/delay/10")
    except httpx.TimeoutException as exc:
        print(f"  Caught TimeoutException: {type(exc).__name__}")
    print()

    # ── Destination mismatch ─────────────────────────────────────────────
    print("── DecodeFailure ──────────────────────────────────────────────")
    try:
        webreq.get("https://httpbin.org/uuid", data=0)
    except webreq.DecodeFailure as exc:
        print(f"  Caught: {exc}")


if __name__ == "__main__":
    main()
