import asyncio
import logging
from json import loads, JSONDecodeError
from typing import NamedTuple, Literal
from warnings import warn

from yarl import URL
from aiohttp import ClientSession, ClientResponseError, ClientError
from multidict import CIMultiDictProxy

from ..constants import STEAM_URL, Language, T_PARAMS, T_PAYLOAD, T_HEADERS
from ..exceptions import TransportError, HTTPStatusError, DecodeError
from ..utils import get_cookie_value_from_session, remove_cookie_from_session, add_cookie_to_session

_log = logging.getLogger(__name__)

SESSION_ID_COOKIE = "sessionid"
LANG_COOKIE = "Steam_Language"


class SteamResponse(NamedTuple):
    """Fully read response. Connection is already released when you get it"""

    status: int
    headers: CIMultiDictProxy[str]
    text: str
    url: URL

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> dict:
        """
        :raises DecodeError:
        """

        try:
            return loads(self.text)
        except JSONDecodeError as e:
            raise DecodeError(f"Response from '{self.url}' is not a valid JSON", self.text) from e


class SteamHTTPTransportMixin:
    """Handler of session instance, helper cookies getters/setters, request maker."""

    __slots__ = ()

    # required instance attributes
    session: ClientSession

    @property
    def user_agent(self) -> str | None:
        return self.session.headers.get("User-Agent")

    @user_agent.setter
    def user_agent(self, value: str | None):
        if value is None:
            self.session.headers.pop("User-Agent", None)
        else:
            self.session.headers["User-Agent"] = value

    @property
    def language(self) -> Language | None:
        """Language of Steam html pages, json info, descriptions, etc."""
        value = get_cookie_value_from_session(self.session, STEAM_URL.COMMUNITY, LANG_COOKIE)
        return Language(value) if value else None

    @language.setter
    def language(self, value: Language | None):
        if value is None:
            remove_cookie_from_session(self.session, STEAM_URL.COMMUNITY, LANG_COOKIE)
        else:
            add_cookie_to_session(self.session, STEAM_URL.COMMUNITY, LANG_COOKIE, value.value, secure=True)

    # because this cookie set to guests also
    @property
    def session_id(self) -> str | None:
        """`sessionid` cookie value for `Steam Community` domain (https://steamcommunity.com)"""
        return get_cookie_value_from_session(self.session, STEAM_URL.COMMUNITY, SESSION_ID_COOKIE)

    @session_id.setter
    def session_id(self, value: str | None):
        if value is None:
            remove_cookie_from_session(self.session, STEAM_URL.COMMUNITY, SESSION_ID_COOKIE)
        else:
            add_cookie_to_session(
                self.session,
                STEAM_URL.COMMUNITY,
                SESSION_ID_COOKIE,
                value,
                samesite="None",
                secure=True,
            )

    @staticmethod
    def _session_helper(session: ClientSession = None) -> ClientSession:
        """
        Helper function. Creates new `ClientSession` instance if needed.
        Check passed session for `raise_for_status`.
        """

        if session is None:
            return ClientSession(raise_for_status=True)

        if not session._raise_for_status:
            warn(
                "A session instance should be created with `raise_for_status=True`, "
                "non 2xx responses will be checked by client",
                category=UserWarning,
            )

        return session

    async def request(
        self,
        url: str | URL,
        *,
        method: Literal["GET", "POST"] = "GET",
        params: T_PARAMS = None,
        data: T_PAYLOAD = None,
        headers: T_HEADERS = None,
        allow_redirects=True,
    ) -> SteamResponse:
        """
        Make single request and read the whole body. Connection is released on every exit path.

        :return: read response
        :raises TransportError: connection level failure
        :raises HTTPStatusError: non 2xx status code
        :raises DecodeError: body is not a valid text in response charset
        """

        _log.debug("%s %s", method, url)
        try:
            async with self.session.request(
                method,
                url,
                params=params,
                data=data,
                headers=headers,
                allow_redirects=allow_redirects,
            ) as r:
                response = SteamResponse(r.status, r.headers, await r.text(), r.url)
        except UnicodeDecodeError as e:
            raise DecodeError(f"Unable to decode response body from '{url}': {e.reason}") from e
        except ClientResponseError as e:  # session with `raise_for_status`
            raise HTTPStatusError(e.status, str(url)) from e
        except (ClientError, asyncio.TimeoutError) as e:
            raise TransportError(f"Failed to make {method} request to '{url}': {e!r}") from e

        if not response.ok:
            raise HTTPStatusError(response.status, str(url))

        return response
