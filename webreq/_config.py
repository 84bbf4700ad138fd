from __future__ import annotations

import logging
import os
import threading

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0
TIMEOUT_ENV = "WEBREQ_TIMEOUT"


def _timeout_from_environ() -> float:
    raw = os.environ.get(TIMEOUT_ENV, "").strip()
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        raise ValueError(f"{TIMEOUT_ENV} must be a number of seconds, got {raw!r}")
    if timeout <= 0:
        raise ValueError(f"{TIMEOUT_ENV} must be positive, got {raw!r}")
    logger.debug("default timeout %ss taken from %s", timeout, TIMEOUT_ENV)
    return timeout


class Config:
    """
    Settings shared by every ``Req.submit`` call that does not bring its
    own: the default timeout (seconds) and the HTTP client.

    The client is created on first use and follows redirects, so callers
    only ever see the final response. Assign ``client`` to swap in another
    ``httpx.Client``, for instance one built on ``httpx.MockTransport``.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.Client | None = None,
    ) -> None:
        self.timeout = timeout
        self._client = client
        self._owns_client = False
        self._lock = threading.Lock()

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            with self._lock:
                if self._client is None:
                    self._client = httpx.Client(follow_redirects=True)
                    self._owns_client = True
        return self._client

    @client.setter
    def client(self, client: httpx.Client | None) -> None:
        with self._lock:
            self._client = client
            self._owns_client = False

    def close(self) -> None:
        """Close the client if this config created it."""
        with self._lock:
            if self._client is not None and self._owns_client:
                self._client.close()
                self._client = None
                self._owns_client = False

    def __repr__(self) -> str:
        return f"Config(timeout={self.timeout!r}, client={self._client!r})"


defaults = Config(timeout=_timeout_from_environ())
