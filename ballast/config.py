"""Load-test configuration read from a JSON file."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

_U16_MAX = 2**16 - 1
_U64_MAX = 2**64 - 1
_U128_MAX = 2**128 - 1


class ConfigError(ValueError):
    """Raised when a configuration cannot be read or is malformed."""


class Method(Enum):
    """HTTP methods an endpoint may use."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Any) -> Method:
        """Accept either the capitalised name (``Get``) or the upper-case form (``GET``)."""
        if isinstance(value, str):
            for method in cls:
                if value in (method.value, method.value.capitalize()):
                    return method
        raise ConfigError(f"unknown HTTP method: {value!r}")


def _require(data: dict, key: str) -> Any:
    if key not in data or data[key] is None:
        raise ConfigError(f"missing field {key!r}")
    return data[key]


def _check_str(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"field {key!r} must be a string")
    return value


def _check_int(value: Any, key: str, maximum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= maximum:
        raise ConfigError(f"field {key!r} must be an integer between 0 and {maximum}")
    return value


def _optional_int(data: dict, key: str, maximum: int) -> int | None:
    value = data.get(key)
    return None if value is None else _check_int(value, key, maximum)


def _optional_headers(data: dict, key: str) -> dict[str, str] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in value.items()
    ):
        raise ConfigError(f"field {key!r} must map strings to strings")
    return dict(value)


@dataclass
class EndpointConfig:
    """One endpoint to put under load."""

    name: str
    url: str
    method: Method
    concurrent_requests: int
    cycles: int
    headers: dict[str, str] | None = None
    body: Any = None
    expected_status: int | None = None
    expected_body: Any = None
    expected_headers: dict[str, str] | None = None
    threshold: int | None = None
    ramp: bool | None = None

    @classmethod
    def from_dict(cls, data: Any) -> EndpointConfig:
        if not isinstance(data, dict):
            raise ConfigError("an endpoint must be a JSON object")
        ramp = data.get("ramp")
        if ramp is not None and not isinstance(ramp, bool):
            raise ConfigError("field 'ramp' must be a boolean")
        return cls(
            name=_check_str(_require(data, "name"), "name"),
            url=_check_str(_require(data, "url"), "url"),
            method=Method.parse(_require(data, "method")),
            concurrent_requests=_check_int(
                _require(data, "concurrent_requests"), "concurrent_requests", _U64_MAX
            ),
            cycles=_check_int(_require(data, "cycles"), "cycles", _U64_MAX),
            headers=_optional_headers(data, "headers"),
            body=data.get("body"),
            expected_status=_optional_int(data, "expected_status", _U16_MAX),
            expected_body=data.get("expected_body"),
            expected_headers=_optional_headers(data, "expected_headers"),
            threshold=_optional_int(data, "threshold", _U128_MAX),
            ramp=ramp,
        )


@dataclass
class Config:
    """The whole load-test configuration."""

    endpoints: list[EndpointConfig] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> Config:
        if not isinstance(data, dict):
            raise ConfigError("the configuration must be a JSON object")
        endpoints = _require(data, "endpoints")
        if not isinstance(endpoints, list):
            raise ConfigError("field 'endpoints' must be a list")
        return cls(endpoints=[EndpointConfig.from_dict(item) for item in endpoints])

    @classmethod
    def from_config_file(cls, path: str | Path) -> Config:
        try:
            contents = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"cannot read {path}: {exc}") from exc
        try:
            data = json.loads(contents)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"invalid JSON in {path}: {exc}") from exc
        return cls.from_dict(data)

    def endpoint(self, name: str) -> EndpointConfig:
        """Return the first endpoint with the given name."""
        for endpoint in self.endpoints:
            if endpoint.name == name:
                return endpoint
        raise KeyError(name)