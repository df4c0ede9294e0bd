import pytest

from aiosteamtrade import SteamTradeClient, Language

from conftest import FakeSession
from data import STEAM_ID, ACCOUNT_ID, API_KEY, SESSION_ID, UA


async def test_client_init(session):
    client = SteamTradeClient(ACCOUNT_ID, API_KEY, SESSION_ID, session=session, user_agent=UA)

    assert client.steam_id == STEAM_ID
    assert client.session is session
    assert client.session_id == SESSION_ID
    assert client.language is Language.ENGLISH
    assert client.user_agent == UA


async def test_client_cookies(client):
    client.language = Language.GERMAN
    assert client.language is Language.GERMAN

    client.session_id = None
    assert client.session_id is None

    client.session_id = "new"
    assert client.session_id == "new"


async def test_warn_session_without_raise_for_status():
    with pytest.warns(UserWarning):
        SteamTradeClient(STEAM_ID, session=FakeSession(raise_for_status=False))


async def test_close_foreign_session(client, session):
    async with client:
        pass

    assert not session.closed


async def test_close_own_session():
    client = SteamTradeClient(STEAM_ID)

    async with client:
        assert not client.session.closed

    assert client.session.closed


async def test_from_env(monkeypatch, session):
    monkeypatch.setenv("TEST_STEAM_ID", str(STEAM_ID))
    monkeypatch.setenv("TEST_STEAM_API_KEY", API_KEY)
    monkeypatch.delenv("TEST_STEAM_SESSION_ID", raising=False)

    client = SteamTradeClient.from_env("TEST_STEAM_", session=session, language=None)

    assert client.steam_id == STEAM_ID
    assert client._api_key == API_KEY
    assert client.session_id is None
    assert client.language is None


@pytest.mark.parametrize("value", [None, "not a number"])
async def test_from_env_bad_steam_id(monkeypatch, session, value):
    if value is None:
        monkeypatch.delenv("TEST_STEAM_ID", raising=False)
    else:
        monkeypatch.setenv("TEST_STEAM_ID", value)

    with pytest.raises(ValueError):
        SteamTradeClient.from_env("TEST_STEAM_", session=session)
