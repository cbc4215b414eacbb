import json

import pytest

from ballast.config import Config, ConfigError, EndpointConfig, Method


def _endpoint(**overrides):
    data = {
        "name": "items",
        "url": "http://localhost:8080/items",
        "method": "GET",
        "concurrent_requests": 4,
        "cycles": 3,
    }
    data.update(overrides)
    return data


def test_minimal_endpoint_defaults():
    endpoint = EndpointConfig.from_dict(_endpoint())
    assert endpoint.name == "items"
    assert endpoint.method is Method.GET
    assert endpoint.concurrent_requests == 4
    assert endpoint.cycles == 3
    assert endpoint.headers is None
    assert endpoint.threshold is None
    assert endpoint.ramp is None


@pytest.mark.parametrize(
    "raw, expected",
    [("GET", Method.GET), ("Get", Method.GET), ("POST", Method.POST), ("Patch", Method.PATCH),
     ("OPTIONS", Method.OPTIONS)],
)
def test_method_spellings(raw, expected):
    assert EndpointConfig.from_dict(_endpoint(method=raw)).method is expected


@pytest.mark.parametrize("raw, shown", [("Delete", "DELETE"), ("OPTIONS", "OPTIONS"), ("Put", "PUT")])
def test_method_display(raw, shown):
    method = EndpointConfig.from_dict(_endpoint(method=raw)).method
    assert str(method) == shown
    assert f"{method}" == shown


@pytest.mark.parametrize("raw", ["get", "TRACE", 5])
def test_unknown_method_rejected(raw):
    with pytest.raises(ConfigError):
        EndpointConfig.from_dict(_endpoint(method=raw))


def test_optional_fields_parsed():
    endpoint = EndpointConfig.from_dict(
        _endpoint(
            headers={"x-trace": "abc"},
            body={"name": "widget"},
            expected_status=201,
            expected_body=[1, 2],
            expected_headers={"content-type": "application/json"},
            threshold=100,
            ramp=False,
        )
    )
    assert endpoint.headers == {"x-trace": "abc"}
    assert endpoint.body == {"name": "widget"}
    assert endpoint.expected_status == 201
    assert endpoint.expected_body == [1, 2]
    assert endpoint.expected_headers == {"content-type": "application/json"}
    assert endpoint.threshold == 100
    assert endpoint.ramp is False


@pytest.mark.parametrize("missing", ["name", "url", "method", "concurrent_requests", "cycles"])
def test_missing_required_field(missing):
    data = _endpoint()
    del data[missing]
    with pytest.raises(ConfigError):
        EndpointConfig.from_dict(data)


@pytest.mark.parametrize(
    "overrides",
    [
        {"cycles": -1},
        {"cycles": "3"},
        {"concurrent_requests": True},
        {"expected_status": 70000},
        {"headers": {"a": 1}},
        {"ramp": "yes"},
    ],
)
def test_bad_values_rejected(overrides):
    with pytest.raises(ConfigError):
        EndpointConfig.from_dict(_endpoint(**overrides))


def test_config_from_file_round_trip(tmp_path):
    path = tmp_path / "ballast.json"
    path.write_text(json.dumps({"endpoints": [_endpoint(), _endpoint(name="other")]}))
    config = Config.from_config_file(path)
    assert [e.name for e in config.endpoints] == ["items", "other"]
    assert config.endpoint("other").name == "other"


def test_config_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        Config.from_config_file(tmp_path / "absent.json")


def test_config_invalid_json(tmp_path):
    path = tmp_path / "ballast.json"
    path.write_text("{not json")
    with pytest.raises(ConfigError):
        Config.from_config_file(path)


def test_config_requires_endpoints():
    with pytest.raises(ConfigError):
        Config.from_dict({})
    with pytest.raises(ConfigError):
        Config.from_dict({"endpoints": {}})


def test_unknown_endpoint_lookup():
    config = Config.from_dict({"endpoints": [_endpoint()]})
    with pytest.raises(KeyError):
        config.endpoint("missing")