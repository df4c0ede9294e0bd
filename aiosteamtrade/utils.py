"""Abstract utils within `Steam` context and not"""

from datetime import datetime
from functools import wraps
from http.cookies import SimpleCookie
from typing import Literal

from aiohttp import ClientSession
from yarl import URL


__all__ = (
    "get_cookie_value_from_session",
    "add_cookie_to_session",
    "remove_cookie_from_session",
    "account_id_to_steam_id",
    "steam_id_to_account_id",
    "to_steam_id64",
    "to_account_id",
    "to_timestamp",
    "attribute_required",
)

_ID32_LIMIT = 4294967296  # 2**32


def get_cookie_value_from_session(session: ClientSession, url: URL | str, field: str) -> str | None:
    """Get value from session cookies. Passed `url` must include scheme (for ex. `https://url.com`)."""

    c = session.cookie_jar.filter_cookies(URL(url))
    return c[field].value if field in c else None


def remove_cookie_from_session(session: ClientSession, url: URL | str, field: str) -> bool:
    """Remove cookie from session cookies. Return `True` if cookie was present and removed."""

    url = URL(url)
    present = get_cookie_value_from_session(session, url, field) is not None
    session.cookie_jar.clear(lambda m: m.key == field and m["domain"] == url.host)
    return present


def add_cookie_to_session(
    session: ClientSession,
    url: URL | str,
    name: str,
    value: str,
    *,
    path="/",
    samesite: str | Literal[True] = None,
    secure: bool = False,
):
    if isinstance(url, str):
        url = URL(url)

    c = SimpleCookie()
    c[name] = value
    c[name]["path"] = path
    c[name]["domain"] = url.host
    if samesite is not None:
        c[name]["samesite"] = samesite
    if secure:
        c[name]["secure"] = secure

    session.cookie_jar.update_cookies(cookies=c, response_url=url)


def steam_id_to_account_id(steam_id: int) -> int:
    """Convert steam id64 to steam id32."""

    return steam_id & 0xFFFFFFFF


def account_id_to_steam_id(account_id: int) -> int:
    """Convert steam id32 to steam id64."""

    return 1 << 56 | 1 << 52 | 1 << 32 | account_id


def to_steam_id64(steam_id: int) -> int:
    """Accept id32 or id64, return id64."""

    return account_id_to_steam_id(steam_id) if steam_id < _ID32_LIMIT else steam_id


def to_account_id(steam_id: int) -> int:
    """Accept id32 or id64, return id32."""

    return steam_id if steam_id < _ID32_LIMIT else steam_id_to_account_id(steam_id)


def to_timestamp(value: int | datetime) -> int:
    if isinstance(value, datetime):
        return int(value.timestamp())  # trunc ms
    return int(value)


# generic, but less performant due to getattr
def attribute_required(attr: str, msg: str = None):
    """Generate a decorator that check required `attr` on instance before call a wrapped method"""

    def decorator(func):
        @wraps(func)
        def wrapper(self, *args, **kwargs):
            if getattr(self, attr, None) is None:
                raise AttributeError(msg or f"You must provide a value for '{attr}' before using this method")
            return func(self, *args, **kwargs)

        return wrapper

    return decorator
