import httpx
import pytest
import respx

from ballast.config import EndpointConfig
from ballast.request import RequestOutput, timed_request

URL = "http://api.test/items"


def _endpoint(**overrides):
    data = {"name": "items", "url": URL, "method": "GET", "concurrent_requests": 1, "cycles": 1}
    data.update(overrides)
    return EndpointConfig.from_dict(data)


@pytest.mark.asyncio
async def test_get_collects_status_body_and_headers():
    with respx.mock() as router:
        router.get(URL).mock(return_value=httpx.Response(200, json={"id": 7}))
        async with httpx.AsyncClient() as client:
            output = await timed_request(client, _endpoint())
    assert output.success is True
    assert output.status == 200
    assert output.response_body == {"id": 7}
    assert output.response_headers["content-type"] == "application/json"
    assert output.duration >= 0


@pytest.mark.asyncio
async def test_post_sends_compact_body_and_headers():
    with respx.mock() as router:
        route = router.post(URL).mock(return_value=httpx.Response(201))
        async with httpx.AsyncClient() as client:
            output = await timed_request(
                client,
                _endpoint(method="POST", body={"name": "widget"}, headers={"x-trace": "abc"}),
            )
    sent = route.calls.last.request
    assert sent.content == b'{"name":"widget"}'
    assert sent.headers["x-trace"] == "abc"
    assert output.status == 201
    assert output.response_body is None


@pytest.mark.asyncio
async def test_non_json_body_is_none():
    with respx.mock() as router:
        router.delete(URL).mock(return_value=httpx.Response(200, text="plain words"))
        async with httpx.AsyncClient() as client:
            output = await timed_request(client, _endpoint(method="DELETE"))
    assert output.success is True
    assert output.response_body is None


@pytest.mark.asyncio
async def test_connection_failure():
    with respx.mock() as router:
        router.put(URL).mock(side_effect=httpx.ConnectError("refused"))
        async with httpx.AsyncClient() as client:
            output = await timed_request(client, _endpoint(method="PUT"))
    assert output == RequestOutput(duration=output.duration, success=False, status=0)


@pytest.mark.asyncio
async def test_options_is_rejected():
    async with httpx.AsyncClient() as client:
        with pytest.raises(ValueError, match="OPTIONS"):
            timed_request(client, _endpoint(method="OPTIONS"))