import io

import pytest

from ballast.compare import compare_tests
from ballast.config import Config, EndpointConfig, Method
from ballast.printer import Printer
from ballast.process import Expected, LoadStats, SimpleConfig
from ballast.process import Test as ProcessedTest
from ballast.snapshot import Snapshot

URL = "http://api.test/users"


def _config(**overrides):
    values = dict(name="users", url=URL, method=Method.GET, concurrent_requests=1, cycles=1)
    values.update(overrides)
    return Config(endpoints=[EndpointConfig(**values)])


def _test(success=True, within=True, expected=None, avg=50.0, mx=80.0, mn=20.0, name="users"):
    return ProcessedTest(
        success=success,
        within_threshold=within,
        expected=expected or Expected(),
        stats=LoadStats(average_response_time=avg, min_response_time=mn, max_response_time=mx),
        config=SimpleConfig(1, 1, name, URL),
    )


def _run(tests, config, latest=None):
    stream = io.StringIO()
    compare_tests(tests, config, latest, Printer(stream))
    return stream.getvalue().splitlines()


def test_pass_without_previous():
    lines = _run([_test()], _config())
    assert f"PASS users {URL}" in lines
    assert "    Avg response time: 50 ms" in lines
    assert "    Max response time: 80 ms" in lines
    assert "    Min response time: 20 ms" in lines


def test_pass_starts_with_blank_line():
    lines = _run([_test()], _config())
    assert lines[0] == ""


def test_diffs_against_previous():
    latest = Snapshot(tests=[_test(avg=50.0, mn=25.0)], timestamp=1)
    lines = _run([_test(avg=60.0, mn=20.0)], _config(), latest)
    assert "    Avg response time: 60 (+10ms)" in lines
    assert "    Min response time: 20 (-5ms)" in lines


def test_no_change_shows_plus_zero():
    latest = Snapshot(tests=[_test()], timestamp=1)
    lines = _run([_test()], _config(), latest)
    assert "    Max response time: 80 (+0ms)" in lines


def test_failed_status_is_reported():
    test = _test(success=False, expected=Expected(status_code=False))
    lines = _run([test], _config(expected_status=200))
    assert f"FAIL users {URL}" in lines
    assert "    Expected expected status code 200" in lines


def test_failed_body_is_reported():
    test = _test(success=False, expected=Expected(body=False))
    lines = _run([test], _config(expected_body={"a": 1}))
    assert '    Expected expected body {"a": 1}' in lines


def test_threshold_is_reported():
    latest = Snapshot(tests=[_test(avg=50.0)], timestamp=1)
    test = _test(success=False, within=False, avg=60.0)
    lines = _run([test], _config(threshold=5), latest)
    assert "    Threshold average response time 60ms (expected 50ms +/- 5ms)" in lines


def test_unknown_endpoint_raises():
    with pytest.raises(KeyError):
        _run([_test(name="missing")], _config())