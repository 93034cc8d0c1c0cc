"""Thin synchronous HTTP client for the ``/api`` surface.

Wraps one ``httpx.Client`` so the session cookie set by login is replayed on
every later call. Non-2xx responses raise ``httpx.HTTPStatusError``.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx


class ApiClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        *,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = 5.0,
    ) -> None:
        self._client = httpx.Client(base_url=base_url, transport=transport, timeout=timeout)

    def request(self, method: str, path: str, **kwargs: Any) -> Any:
        resp = self._client.request(method, f"/api{path}", **kwargs)
        resp.raise_for_status()
        if not resp.content:
            return None
        return resp.json()

    def get(self, path: str, **kwargs: Any) -> Any:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, json: Any = None, **kwargs: Any) -> Any:
        return self.request("POST", path, json=json, **kwargs)

    def put(self, path: str, json: Any = None, **kwargs: Any) -> Any:
        return self.request("PUT", path, json=json, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> Any:
        return self.request("DELETE", path, **kwargs)

    @property
    def cookies(self) -> httpx.Cookies:
        return self._client.cookies

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


__all__ = ["ApiClient"]
