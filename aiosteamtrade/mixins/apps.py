from ..constants import STEAM_URL, App
from ..exceptions import DecodeError
from .web_api import SteamWebApiMixin


class SteamAppsMixin(SteamWebApiMixin):
    """`ISteamApps` interface methods"""

    __slots__ = ()

    async def get_required_app_version(self, app: App | int) -> int:
        """
        Fetch version of the app that game servers must run to be up to date.

        :param app: `App` or app id
        :raises DecodeError:
        """

        data = await self.call_public_api(
            STEAM_URL.API.ISteamApps.UpToDateCheck,
            params={"appid": int(app), "version": 0},
        )
        try:
            return int(data["required_version"])
        except (KeyError, TypeError, ValueError) as e:
            raise DecodeError(f"No required version for app {int(app)} in response", data) from e
