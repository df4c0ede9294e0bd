import pytest

from aiosteamtrade import App, STEAM_URL, DecodeError, SteamTradeClient

from data import STEAM_ID

URL = STEAM_URL.API.ISteamApps.UpToDateCheck


async def test_required_app_version(client, session):
    session.add("GET", URL, json={"response": {"success": True, "up_to_date": False, "required_version": 14020}})

    assert await client.get_required_app_version(App.CS2) == 14020
    assert session.last_call.params == {"appid": 730, "version": 0}


async def test_required_app_version_without_api_key(session):
    client = SteamTradeClient(STEAM_ID, session=session)
    session.add("GET", URL, json={"response": {"success": True, "up_to_date": True, "required_version": 1911}})

    assert await client.get_required_app_version(570) == 1911
    assert "key" not in session.last_call.params


async def test_required_app_version_missing(client, session):
    session.add("GET", URL, json={"response": {"success": False, "error": "Couldn't get app info"}})

    with pytest.raises(DecodeError):
        await client.get_required_app_version(1)


async def test_required_app_version_bad_envelope(client, session):
    session.add("GET", URL, json={"success": False})

    with pytest.raises(DecodeError):
        await client.get_required_app_version(730)
