"""Drives warm-up ramps and load cycles against every configured endpoint."""

from __future__ import annotations

import asyncio
import math
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator

import httpx

from .config import Config, EndpointConfig
from .printer import Printer
from .request import RequestOutput, timed_request


@dataclass
class SingleLoad:
    """All results of the load run for one endpoint, one list per cycle."""

    cycles: list[list[RequestOutput]] = field(default_factory=list)
    num_cycles: int = 0
    num_concurrent_requests: int = 0
    endpoint_name: str = ""
    endpoint_url: str = ""


def ramp_sizes(cycles: int, concurrent_requests: int) -> list[int]:
    """Request counts for a logarithmic warm-up over half as many cycles."""
    max_count = math.ceil(cycles / 2)
    if concurrent_requests <= 0:
        return [0] * max_count
    log_scale = math.log(concurrent_requests)
    return [
        min(math.ceil(math.exp(i / max_count * log_scale)), concurrent_requests)
        for i in range(max_count)
    ]


class Runner:
    """Runs the configured load against each endpoint in turn."""

    cycle_delay = 0.1

    def __init__(self, config: Config, client: httpx.AsyncClient | None = None) -> None:
        self.config = config
        self._client = client

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
        else:
            async with httpx.AsyncClient() as client:
                yield client

    async def _cycle(
        self, client: httpx.AsyncClient, endpoint: EndpointConfig, size: int
    ) -> list[RequestOutput]:
        requests = [timed_request(client, endpoint) for _ in range(size)]
        results = await asyncio.gather(*requests)
        await asyncio.sleep(self.cycle_delay)
        return list(results)

    async def _ramp(self, client: httpx.AsyncClient, endpoint: EndpointConfig) -> None:
        for size in ramp_sizes(endpoint.cycles, endpoint.concurrent_requests):
            await self._cycle(client, endpoint, size)

    async def log_ramp(self, endpoint: EndpointConfig) -> None:
        """Warm the endpoint up with a logarithmically growing number of requests."""
        async with self._session() as client:
            await self._ramp(client, endpoint)

    async def run(self, printer: Printer) -> list[SingleLoad]:
        loads: list[SingleLoad] = []
        async with self._session() as client:
            for endpoint in self.config.endpoints:
                if endpoint.ramp is not False:
                    printer.print_with_yellow(
                        "Warming", f"up {endpoint.name} with a logarithmic ramp", 4
                    )
                    await self._ramp(client, endpoint)
                    printer.clear_previous().print_with_green(
                        "Warmed", f"up {endpoint.name} with a logarithmic ramp", 4
                    )
                printer.print_with_yellow("Running", f"load for {endpoint.name}", 4)
                results = [
                    await self._cycle(client, endpoint, endpoint.concurrent_requests)
                    for _ in range(endpoint.cycles)
                ]
                loads.append(
                    SingleLoad(
                        cycles=results,
                        num_cycles=endpoint.cycles,
                        num_concurrent_requests=endpoint.concurrent_requests,
                        endpoint_name=endpoint.name,
                        endpoint_url=endpoint.url,
                    )
                )
                printer.clear_previous()
                printer.print_with_green("Finished", f"load for {endpoint.name}", 4)
        return loads