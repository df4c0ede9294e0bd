from typing import overload, Literal

from yarl import URL

from ..constants import EResult, T_PARAMS, T_HEADERS
from ..decorators import api_key_required
from ..exceptions import EResultError, DecodeError
from .http import SteamHTTPTransportMixin, SteamResponse


RESULT_HEADER = "X-Eresult"


class SteamWebApiMixin(SteamHTTPTransportMixin):
    """
    Contain methods related to `Steam Web API`.
    All of them, except `call_public_api`, require `Steam Web API` key.

    .. seealso:: https://steamapi.xpaw.me
    """

    __slots__ = ()

    # required instance attributes
    _api_key: str | None

    @overload
    async def call_web_api(
        self,
        url: str | URL,
        *,
        params: T_PARAMS = ...,
        headers: T_HEADERS = ...,
    ) -> dict[str, ...]:
        ...

    @overload
    async def call_web_api(
        self,
        url: str | URL,
        *,
        data: T_PARAMS = ...,
        headers: T_HEADERS = ...,
        method: Literal["POST"],
    ) -> dict[str, ...]:
        ...

    @api_key_required
    async def call_web_api(
        self,
        url: str | URL,
        *,
        params: T_PARAMS = None,
        data: T_PARAMS = None,
        headers: T_HEADERS = None,
        method: Literal["GET", "POST"] = "GET",
    ) -> dict[str, ...]:
        """
        Make request to a `Steam Web API`, decode response envelope.
        Api key is passed in query for `GET` and in form data for `POST` requests.

        :param url:
        :param params: params to pass with url
        :param data: form data to send with request
        :param headers:
        :param method: http request method
        :return: content of the `response` field
        :raises TransportError:
        :raises HTTPStatusError:
        :raises DecodeError: body is not a JSON object with `response` field
        """

        if method == "GET":
            params = {**(params or {}), "key": self._api_key}
        else:
            data = {**(data or {}), "key": self._api_key}

        r = await self.request(url, method=method, params=params, data=data, headers=headers)
        return self._unwrap_response(r)

    async def call_public_api(
        self,
        url: str | URL,
        *,
        params: T_PARAMS = None,
        headers: T_HEADERS = None,
    ) -> dict[str, ...]:
        """
        Make `GET` request to a `Steam Web API` method that does not need a key, decode response envelope.

        :raises DecodeError: body is not a JSON object with `response` field
        """

        r = await self.request(url, params=params, headers=headers)
        return self._unwrap_response(r)

    @staticmethod
    def _unwrap_response(r: SteamResponse) -> dict[str, ...]:
        rj = r.json()
        if not isinstance(rj, dict) or not isinstance(rj.get("response"), dict):
            raise DecodeError(f"Unexpected response envelope from '{r.url}'", rj)

        return rj["response"]

    @api_key_required
    async def call_web_api_for_result(
        self,
        url: str | URL,
        *,
        data: T_PARAMS = None,
        headers: T_HEADERS = None,
    ) -> SteamResponse:
        """
        Make `POST` request to a `Steam Web API` method which signals result only with `X-Eresult` header.

        :raises EResultError: result header is not `1`
        """

        r = await self.request(url, method="POST", data={**(data or {}), "key": self._api_key}, headers=headers)
        raw = r.headers.get(RESULT_HEADER)
        if raw != "1":
            result = EResult.parse(raw)
            raise EResultError(f"Request to '{url}' failed with result {raw} ({result.name})", result, raw)

        return r
