# ballast

Snapshot performance testing for local HTTP APIs.

`ballast` sends cycles of concurrent requests to each endpoint you configure.
It checks every response against what you expect. It also records response
times in a snapshot file. Each later run is compared with the most recent
snapshot. An endpoint fails in two cases:

- one of its expectations is not met in some response, or
- its average response time is not below the previous average plus a threshold.

## Installation

```
pip install .
```

To install the test tools as well:

```
pip install ".[test]"
```

## Configuration

Put a `ballast.json` file in the directory you run from:

```json
{
  "endpoints": [
    {
      "name": "list users",
      "url": "http://localhost:8080/users",
      "method": "GET",
      "concurrent_requests": 10,
      "cycles": 5,
      "headers": {"Authorization": "Bearer token"},
      "expected_status": 200,
      "expected_body": [{"id": 1, "name": "example"}],
      "threshold": 100,
      "ramp": true
    }
  ]
}
```

### Required fields

`name`, `url`, `method`, `concurrent_requests` and `cycles` must be given.

`method` may be written in upper case (`GET`) or capitalised (`Get`). Requests
can be sent with `GET`, `POST`, `PUT`, `DELETE` and `PATCH`. `OPTIONS` is
accepted in the file, but a run against such an endpoint stops with an error.

### Optional fields

- `headers` and `body`: sent with every request. `body` is sent as compact
  JSON text.
- `expected_status`: the response status code must equal this value.
- `expected_body`: the JSON body of the response must equal this value. The
  comparison is strict, so `1` and `1.0` are different values.
- `expected_headers`: must equal the complete set of response headers, with
  header names in lower case.
- `threshold`: how many milliseconds the average response time may grow over
  the last snapshot. The default is 250.
- `ramp`: warms the endpoint up before the load is measured. It is on unless
  it is set to `false`.

Every response in every cycle must meet every expectation that is configured.

## Running

```
ballast
```

For each endpoint, `ballast` does the following:

1. Unless `ramp` is `false`, it sends a warm-up ramp. The ramp lasts half as
   many cycles as configured, rounded up. The number of requests grows
   logarithmically up to `concurrent_requests`.
2. It runs `cycles` cycles of `concurrent_requests` concurrent requests.
3. It pauses 100 ms after each cycle.

Response times are measured in whole milliseconds. The average is the mean of
the per-cycle averages.

Each endpoint is then reported as `PASS` or `FAIL`, with the reasons for a
failure. The report also gives the average, maximum and minimum response times
and how each has changed since the last snapshot. Colours are used only when
output goes to a terminal.

The results are appended to `.ballast_snapshot.json`, which holds the whole
history of runs. To run without recording a new snapshot:

```
ballast --no-snapshot
```

If there is no `ballast.json`, `ballast` prints an error and exits with status
0. If the configuration or the snapshot file cannot be read, it exits with
status 1.

## Using it from Python

The pieces of a run can also be used on their own:

```python
import asyncio

from ballast.compare import compare_tests
from ballast.config import Config
from ballast.printer import Printer
from ballast.process import process
from ballast.runner import Runner
from ballast.snapshot import Snapshot

config = Config.from_config_file("ballast.json")
printer = Printer()
loads = asyncio.run(Runner(config).run(printer))
latest = Snapshot.latest()
tests = process(loads, config, latest)
compare_tests(tests, config, latest, printer)
Snapshot.create(tests).write()
```

- `Config.from_config_file` raises `ConfigError` for a file that is missing,
  is not valid JSON or is malformed.
- `Runner` accepts an existing `httpx.AsyncClient` as its second argument.
- `Snapshot.read`, `Snapshot.latest` and `Snapshot.write` take an optional
  path. `Snapshot.read` and `Snapshot.latest` raise `SnapshotError` when the
  file cannot be parsed. `Snapshot.write` raises it when the file cannot be
  written.
- `ramp_sizes(cycles, concurrent_requests)` in `ballast.runner` returns the
  request counts of the warm-up ramp.

## Limitations

- The configuration is always read from `ballast.json`, and the snapshot is
  always stored in `.ballast_snapshot.json`, both in the current directory.
  The command has no options to choose other paths.
- Once a snapshot exists, every configured endpoint must appear in it. If you
  add an endpoint to `ballast.json` after a snapshot has been taken,
  processing fails with a `KeyError` for that endpoint.
- Every endpoint needs at least one cycle with at least one request.
  Otherwise processing raises `ValueError`.