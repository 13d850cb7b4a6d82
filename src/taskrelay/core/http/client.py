from __future__ import annotations

import os

import httpx

from .errors import TaskRelayHTTPNetworkError, TaskRelayHTTPStatusError

_DEFAULT_TIMEOUT_S = 60.0
_DEFAULT_CONNECT_TIMEOUT_S = 10.0
_DEFAULT_USER_AGENT = "TaskRelay/1.0"

_client: httpx.AsyncClient | None = None


def _get_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _build_timeout() -> httpx.Timeout:
    read_total = max(0.1, _get_float_env("TASKRELAY_HTTP_TIMEOUT_S", _DEFAULT_TIMEOUT_S))
    connect_s = max(0.1, _get_float_env("TASKRELAY_HTTP_CONNECT_TIMEOUT_S", _DEFAULT_CONNECT_TIMEOUT_S))
    return httpx.Timeout(read_total, connect=min(connect_s, read_total))


def get_http_client() -> httpx.AsyncClient:
    global _client
    if _client is None or _client.is_closed:
        user_agent = os.getenv("TASKRELAY_HTTP_USER_AGENT", _DEFAULT_USER_AGENT)
        _client = httpx.AsyncClient(timeout=_build_timeout(), headers={"User-Agent": user_agent})
    return _client


async def close_http_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None


async def post_json(
    url: str,
    payload: dict,
    *,
    headers: dict[str, str] | None = None,
    client: httpx.AsyncClient | None = None,
) -> httpx.Response:
    """Send one JSON POST. There is no retry: callers surface failures as-is."""
    http = client or get_http_client()
    try:
        response = await http.post(url, json=payload, headers=headers)
    except httpx.HTTPError as exc:
        raise TaskRelayHTTPNetworkError(f"HTTP request error for {url}: {exc.__class__.__name__}: {exc}") from exc

    if not 200 <= response.status_code < 300:
        raise TaskRelayHTTPStatusError(
            f"HTTP status {response.status_code} for {url}",
            status_code=response.status_code,
            body=response.text,
        )
    return response
