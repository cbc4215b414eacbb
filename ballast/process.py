"""Turns raw load results into pass/fail test records with timing statistics."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, Iterable

from .config import Config, EndpointConfig
from .request import RequestOutput
from .runner import SingleLoad

if TYPE_CHECKING:
    from .snapshot import Snapshot

DEFAULT_THRESHOLD = 250


def _as_bool(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"field {key!r} must be a boolean")
    return value


def _as_optional_bool(value: Any, key: str) -> bool | None:
    return None if value is None else _as_bool(value, key)


def _as_float(value: Any, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"field {key!r} must be a number")
    return float(value)


def _as_uint(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"field {key!r} must be a non-negative integer")
    return value


def _as_str(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


def _json_equal(left: Any, right: Any) -> bool:
    """Compare JSON values strictly: booleans, integers and floats never mix."""
    if isinstance(left, dict) or isinstance(right, dict):
        return (
            isinstance(left, dict)
            and isinstance(right, dict)
            and left.keys() == right.keys()
            and all(_json_equal(left[key], right[key]) for key in left)
        )
    if isinstance(left, list) or isinstance(right, list):
        return (
            isinstance(left, list)
            and isinstance(right, list)
            and len(left) == len(right)
            and all(_json_equal(a, b) for a, b in zip(left, right))
        )
    if isinstance(left, (bool, int, float)) or isinstance(right, (bool, int, float)):
        return type(left) is type(right) and left == right
    return left == right


@dataclass
class LoadStats:
    """Response times of a load run, in milliseconds."""

    average_response_time: float
    min_response_time: float
    max_response_time: float


@dataclass
class Expected:
    """Which expectations held; ``None`` means the expectation was not configured."""

    body: bool | None = None
    status_code: bool | None = None
    headers: bool | None = None

    def passes(self) -> bool:
        return all(value is not False for value in (self.body, self.status_code, self.headers))


@dataclass
class SimpleConfig:
    """The part of an endpoint's configuration kept with its results."""

    num_cycles: int
    num_concurrent_requests: int
    endpoint_name: str
    endpoint_url: str


@dataclass
class Test:
    """The processed outcome of loading one endpoint."""

    __test__ = False

    success: bool
    within_threshold: bool
    expected: Expected
    stats: LoadStats
    config: SimpleConfig

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Any) -> Test:
        try:
            expected = data["expected"]
            stats = data["stats"]
            config = data["config"]
            return cls(
                success=_as_bool(data["success"], "success"),
                within_threshold=_as_bool(data["within_threshold"], "within_threshold"),
                expected=Expected(
                    body=_as_optional_bool(expected.get("body"), "body"),
                    status_code=_as_optional_bool(expected.get("status_code"), "status_code"),
                    headers=_as_optional_bool(expected.get("headers"), "headers"),
                ),
                stats=LoadStats(
                    average_response_time=_as_float(
                        stats["average_response_time"], "average_response_time"
                    ),
                    min_response_time=_as_float(stats["min_response_time"], "min_response_time"),
                    max_response_time=_as_float(stats["max_response_time"], "max_response_time"),
                ),
                config=SimpleConfig(
                    num_cycles=_as_uint(config["num_cycles"], "num_cycles"),
                    num_concurrent_requests=_as_uint(
                        config["num_concurrent_requests"], "num_concurrent_requests"
                    ),
                    endpoint_name=_as_str(config["endpoint_name"], "endpoint_name"),
                    endpoint_url=_as_str(config["endpoint_url"], "endpoint_url"),
                ),
            )
        except (KeyError, TypeError, AttributeError) as exc:
            raise ValueError(f"malformed test record: {exc}") from exc


def reduce_expectations(expectations: Iterable[Expected], endpoint: EndpointConfig) -> Expected:
    """Combine expectations: a configured expectation holds only if it held everywhere."""
    expectations = list(expectations)

    def combine(configured: bool, attribute: str) -> bool | None:
        if not configured:
            return None
        return all(getattr(e, attribute) is True for e in expectations)

    return Expected(
        body=combine(endpoint.expected_body is not None, "body"),
        status_code=combine(endpoint.expected_status is not None, "status_code"),
        headers=combine(endpoint.expected_headers is not None, "headers"),
    )


def _match(expected: Any, actual: Any, equal) -> bool | None:
    if expected is None:
        return None
    if actual is None:
        return False
    return equal(expected, actual)


def _check_request(endpoint: EndpointConfig, output: RequestOutput) -> Expected:
    status = None
    if endpoint.expected_status is not None:
        status = endpoint.expected_status == output.status
    return Expected(
        body=_match(endpoint.expected_body, output.response_body, _json_equal),
        status_code=status,
        headers=_match(
            endpoint.expected_headers, output.response_headers, lambda a, b: a == b
        ),
    )


def _load_stats(cycles: list[list[RequestOutput]]) -> LoadStats:
    if not cycles or not all(cycles):
        raise ValueError("a load needs at least one cycle with at least one request")
    durations = [[output.duration for output in cycle] for cycle in cycles]
    average = sum(sum(cycle) // len(cycle) for cycle in durations) // len(durations)
    return LoadStats(
        average_response_time=float(average),
        min_response_time=float(min(min(cycle) for cycle in durations)),
        max_response_time=float(max(max(cycle) for cycle in durations)),
    )


def _process_load(load: SingleLoad, config: Config, snapshot: Snapshot | None) -> Test:
    endpoint = config.endpoint(load.endpoint_name)
    cycles_expected = [
        reduce_expectations((_check_request(endpoint, output) for output in cycle), endpoint)
        for cycle in load.cycles
    ]
    expected = reduce_expectations(cycles_expected, endpoint)
    stats = _load_stats(load.cycles)

    within_threshold = True
    if snapshot is not None:
        previous = next(
            (t for t in snapshot.tests if t.config.endpoint_name == load.endpoint_name), None
        )
        if previous is None:
            raise KeyError(load.endpoint_name)
        threshold = DEFAULT_THRESHOLD if endpoint.threshold is None else endpoint.threshold
        within_threshold = (
            stats.average_response_time < previous.stats.average_response_time + threshold
        )

    return Test(
        success=expected.passes() and within_threshold,
        within_threshold=within_threshold,
        expected=expected,
        stats=stats,
        config=SimpleConfig(
            num_cycles=len(load.cycles),
            num_concurrent_requests=len(load.cycles[0]),
            endpoint_name=load.endpoint_name,
            endpoint_url=endpoint.url,
        ),
    )


def process(
    loads: Iterable[SingleLoad], config: Config, snapshot: Snapshot | None = None
) -> list[Test]:
    """Evaluate every load against its endpoint's expectations and the previous snapshot."""
    return [_process_load(load, config, snapshot) for load in loads]