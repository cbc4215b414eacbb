"""Reports processed tests next to the previous snapshot."""

from __future__ import annotations

import json
from typing import Iterable

from .config import Config
from .printer import Printer
from .process import DEFAULT_THRESHOLD, Test
from .snapshot import Snapshot


def _number(value: float) -> str:
    value = float(value)
    return str(int(value)) if value.is_integer() else repr(value)


def _diff(current: float, previous: Test | None, attribute: str) -> float | None:
    if previous is None:
        return None
    return current - getattr(previous.stats, attribute)


def compare_tests(
    tests: Iterable[Test], config: Config, latest: Snapshot | None, printer: Printer
) -> None:
    """Print the verdict and timing statistics of every test."""
    for test in tests:
        name = test.config.endpoint_name
        other = None
        if latest is not None:
            other = next((t for t in latest.tests if t.config.endpoint_name == name), None)
        endpoint = config.endpoint(name)
        label = f"{name} {test.config.endpoint_url}"

        if test.success:
            printer.blank_line().print_with_green("PASS", label, 0)
        else:
            printer.blank_line().print_with_red("FAIL", label, 0)
            if not test.within_threshold and other is not None:
                threshold = DEFAULT_THRESHOLD if endpoint.threshold is None else endpoint.threshold
                printer.print_with_yellow(
                    "Threshold",
                    f"average response time {_number(test.stats.average_response_time)}ms "
                    f"(expected {_number(other.stats.average_response_time)}ms "
                    f"+/- {threshold}ms)",
                    4,
                )
            if test.expected.status_code is False:
                printer.print_with_yellow(
                    "Expected", f"expected status code {endpoint.expected_status}", 4
                )
            if test.expected.body is False:
                printer.print_with_yellow(
                    "Expected", f"expected body {json.dumps(endpoint.expected_body)}", 4
                )
            if test.expected.headers is False:
                printer.print_with_yellow(
                    "Expected", f"expected headers {json.dumps(endpoint.expected_headers)}", 4
                )

        stats = test.stats
        printer.print_stat(
            "Avg response time",
            stats.average_response_time,
            _diff(stats.average_response_time, other, "average_response_time"),
            "ms",
        ).print_stat(
            "Max response time",
            stats.max_response_time,
            _diff(stats.max_response_time, other, "max_response_time"),
            "ms",
        ).print_stat(
            "Min response time",
            stats.min_response_time,
            _diff(stats.min_response_time, other, "min_response_time"),
            "ms",
        )