import os
from typing import final

from aiohttp import ClientSession
from dotenv import load_dotenv

from .constants import Language
from .utils import to_steam_id64
from .mixins.trade import TradeMixin
from .mixins.apps import SteamAppsMixin


class SteamTradeClientBase(TradeMixin, SteamAppsMixin):
    __slots__ = ()

    SLOTS = ("session", "steam_id", "_api_key", "_owns_session")

    def __init__(
        self,
        steam_id: int,
        api_key: str = None,
        session_id: str = None,
        *,
        language: Language | None = Language.ENGLISH,
        session: ClientSession = None,
        user_agent: str = None,
    ):
        """
        Base `Steam` trade offers client class.
        Session must be already authenticated, login is not a concern of the client.

        .. note:: Subclass this if you want to make your custom client

        :param steam_id: steam id (id64) or account id (id32)
        :param api_key: `Steam Web API` key to have access to `Steam Web API`
        :param session_id: `sessionid` cookie value. Will be set to a cookie if passed
        :param language: language of `Steam` descriptions, responses, etc... Will be set to a cookie
        :param session: session instance with auth cookies.
            Should be created with `raise_for_status=True`. Client creates own if not passed
        :param user_agent: user agent header value. Strongly advisable to set this
        """

        self._owns_session = session is None
        self.session = self._session_helper(session)

        if user_agent:
            self.user_agent = user_agent

        if language is not None:
            self.language = language
        if session_id is not None:
            self.session_id = session_id

        self.steam_id = to_steam_id64(steam_id)
        self._api_key = api_key

    @classmethod
    def from_env(cls, prefix="STEAM_", *, session: ClientSession = None, **kwargs):
        """
        Create client from environment variables, `.env` file is loaded before.
        `{prefix}ID` is required, `{prefix}API_KEY`, `{prefix}SESSION_ID` are optional.

        :raises ValueError: steam id is missing or malformed
        """

        load_dotenv()

        raw_steam_id = os.getenv(f"{prefix}ID")
        if not raw_steam_id:
            raise ValueError(f"Environment variable '{prefix}ID' is required")
        try:
            steam_id = int(raw_steam_id)
        except ValueError as e:
            raise ValueError(f"Environment variable '{prefix}ID' must be an integer") from e

        return cls(
            steam_id,
            os.getenv(f"{prefix}API_KEY") or None,
            os.getenv(f"{prefix}SESSION_ID") or None,
            session=session,
            **kwargs,
        )

    async def close(self):
        """Close session if client created it"""

        if self._owns_session:
            await self.session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(steam_id={self.steam_id}, language={self.language})"


@final
class SteamTradeClient(SteamTradeClientBase):
    __slots__ = SteamTradeClientBase.SLOTS
