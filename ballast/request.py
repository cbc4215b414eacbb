"""A single timed HTTP request against a configured endpoint."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import Any, Awaitable

import httpx

from .config import EndpointConfig, Method

_SUPPORTED_METHODS = {Method.GET, Method.POST, Method.PUT, Method.DELETE, Method.PATCH}


@dataclass
class RequestOutput:
    """Outcome of one request; ``duration`` is in whole milliseconds."""

    duration: int
    success: bool
    status: int
    response_body: Any = None
    response_headers: dict[str, str] | None = None


def timed_request(client: httpx.AsyncClient, endpoint: EndpointConfig) -> Awaitable[RequestOutput]:
    """Prepare a request for ``endpoint``; await the result to send it.

    Raises ValueError straight away for methods that cannot be sent.
    """
    if endpoint.method not in _SUPPORTED_METHODS:
        raise ValueError(f"Invalid HTTP method: {endpoint.method}")
    content = None
    if endpoint.body is not None:
        content = json.dumps(endpoint.body, separators=(",", ":"), ensure_ascii=False).encode()
    return _send(client, endpoint, content)


async def _send(
    client: httpx.AsyncClient, endpoint: EndpointConfig, content: bytes | None
) -> RequestOutput:
    start = time.perf_counter_ns()
    try:
        request = client.build_request(
            str(endpoint.method), endpoint.url, headers=endpoint.headers, content=content
        )
        response = await client.send(request, stream=True)
    except (httpx.HTTPError, httpx.InvalidURL):
        return RequestOutput(
            duration=(time.perf_counter_ns() - start) // 1_000_000, success=False, status=0
        )
    duration = (time.perf_counter_ns() - start) // 1_000_000
    try:
        headers: dict[str, str] = {}
        for key, value in response.headers.multi_items():
            headers[key.lower()] = value
        body = None
        try:
            await response.aread()
            body = response.json()
        except (httpx.HTTPError, ValueError):
            body = None
    finally:
        await response.aclose()
    return RequestOutput(
        duration=duration,
        success=True,
        status=response.status_code,
        response_body=body,
        response_headers=headers or None,
    )