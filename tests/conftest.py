from json import dumps
from typing import NamedTuple

import pytest
from aiohttp import CookieJar, ClientResponseError, RequestInfo
from multidict import CIMultiDict, CIMultiDictProxy
from yarl import URL

from aiosteamtrade import SteamTradeClient

from data import STEAM_ID, API_KEY, SESSION_ID


class RecordedRequest(NamedTuple):
    method: str
    url: URL
    params: dict
    data: dict
    headers: dict


class FakeResponse:
    def __init__(self, url: URL, status: int, text: str | bytes, headers: dict):
        self.url = url
        self.status = status
        self.headers = CIMultiDictProxy(CIMultiDict(headers))
        self._text = text
        self.released = False

    async def text(self) -> str:
        if isinstance(self._text, bytes):
            return self._text.decode("utf-8")
        return self._text


class _FakeRequestContext:
    def __init__(self, session: "FakeSession", method: str, url: URL, response):
        self._session = session
        self._method = method
        self._url = url
        self._response = response

    async def __aenter__(self) -> FakeResponse:
        if isinstance(self._response, Exception):
            raise self._response

        status, text, headers = self._response
        if self._session._raise_for_status and status >= 400:
            info = RequestInfo(self._url, self._method, CIMultiDictProxy(CIMultiDict()), self._url)
            raise ClientResponseError(info, (), status=status, message="Error")

        self.response = FakeResponse(self._url, status, text, headers)
        return self.response

    async def __aexit__(self, *exc_info):
        if hasattr(self, "response"):
            self.response.released = True
            self._session.released += 1


class FakeSession:
    """
    Stand-in for `aiohttp.ClientSession`.
    Serves registered responses by method and url without query, records every request.
    """

    def __init__(self, *, raise_for_status=True):
        self._raise_for_status = raise_for_status
        self.headers = CIMultiDict()
        self.cookie_jar = CookieJar()
        self.routes: dict[tuple[str, str], list] = {}
        self.calls: list[RecordedRequest] = []
        self.released = 0
        self.closed = False

    def add(
        self,
        method: str,
        url: str | URL,
        *,
        json=None,
        text: str | bytes = "",
        status=200,
        headers: dict = None,
        exc: Exception = None,
    ):
        if exc is not None:
            response = exc
        else:
            response = (status, dumps(json) if json is not None else text, headers or {})
        self.routes.setdefault((method, str(URL(url).with_query(None))), []).append(response)

    def request(self, method: str, url, *, params=None, data=None, headers=None, allow_redirects=True):
        url = URL(url)
        if params:
            url = url.update_query({k: str(v) for k, v in params.items()})
        self.calls.append(RecordedRequest(method, url, dict(params or {}), dict(data or {}), dict(headers or {})))

        queue = self.routes.get((method, str(url.with_query(None))))
        if not queue:
            raise AssertionError(f"Unexpected request {method} {url}")
        response = queue.pop(0) if len(queue) > 1 else queue[0]

        return _FakeRequestContext(self, method, url, response)

    @property
    def last_call(self) -> RecordedRequest:
        return self.calls[-1]

    async def close(self):
        self.closed = True


@pytest.fixture()
async def session() -> FakeSession:
    return FakeSession()


@pytest.fixture()
async def client(session) -> SteamTradeClient:
    return SteamTradeClient(STEAM_ID, API_KEY, SESSION_ID, session=session)
