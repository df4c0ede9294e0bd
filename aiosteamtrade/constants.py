"""Constants and enums, some types"""

from sys import version_info
from typing import TypeAlias, Any, TypeVar, Coroutine, Mapping
from enum import Enum, IntEnum, Flag, auto

from yarl import URL
from aenum import extend_enum

_T = TypeVar("_T")

CORO: TypeAlias = Coroutine[Any, Any, _T]


if version_info < (3, 11):

    class StrEnum(str, Enum):
        """Enum with possibility to be a query param serializable"""

        def __str__(self):
            return self.value

else:
    from enum import StrEnum


class App(IntEnum):
    """App enum. Add new member, when missing"""

    # predefined
    CS2 = 730
    CSGO = CS2  # alias

    DOTA2 = 570
    RUST = 252490
    TF2 = 440
    PUBG = 578080

    STEAM = 753

    @classmethod
    def extend(cls, name: str, value: int) -> "App":
        return extend_enum(cls, name, value)

    @classmethod
    def _missing_(cls, value: int):
        return cls.extend(f"{cls.__name__}_{value}", value)  # add new member when missing

    @property
    def app_id(self) -> int:
        return self.value


class Language(StrEnum):
    """
    Steam languages.

    .. seealso:: https://partner.steamgames.com/doc/store/localization/languages
    """

    SIMPLIFIED_CHINESE = "schinese"
    ENGLISH = "english"
    FRENCH = "french"
    GERMAN = "german"
    POLISH = "polish"
    PORTUGUESE_BRAZIL = "brazilian"
    RUSSIAN = "russian"
    SPANISH = "spanish"
    UKRAINIAN = "ukrainian"


class TradeOfferState(IntEnum):
    """
    `trade_offer_state` field of a trade offer.

    .. seealso:: https://developer.valvesoftware.com/wiki/Steam_Web_API/IEconService#ETradeOfferState
    """

    NONE = 0  # not sent yet
    INVALID = 1
    ACTIVE = 2
    ACCEPTED = 3
    COUNTERED = 4
    EXPIRED = 5
    CANCELED = 6
    DECLINED = 7
    INVALID_ITEMS = 8
    CREATED_NEEDS_CONFIRMATION = 9
    CANCELED_BY_TWO_FACTOR = 10
    IN_ESCROW = 11


TERMINAL_STATES = frozenset(
    (
        TradeOfferState.INVALID,
        TradeOfferState.ACCEPTED,
        TradeOfferState.EXPIRED,
        TradeOfferState.CANCELED,
        TradeOfferState.DECLINED,
    )
)


class ConfirmationMethod(IntEnum):
    NONE = 0
    EMAIL = 1  # deprecated by Steam, never set by this library
    MOBILE_APP = 2
    MOBILE = 3


class TradeOfferFilter(Flag):
    """
    Filter flags for `GetTradeOffers`. Combine with `|`.
    Every flag toggles exactly one group of request params, no flag implies another.
    """

    NONE = 0
    SENT_OFFERS = auto()
    RECEIVED_OFFERS = auto()
    ACTIVE_ONLY = auto()  # requires `time_historical_cutoff`
    HISTORICAL_ONLY = auto()
    ITEM_DESCRIPTIONS = auto()


# https://github.com/DoctorMcKay/node-steamcommunity/blob/master/resources/EResult.js
class EResult(IntEnum):
    """
    `X-Eresult` header value and `success` field in response data from Steam.

    .. seealso:: https://steamerrors.com
    """

    UNKNOWN = -1  # special case, value is not a known code

    INVALID = 0
    OK = 1
    FAIL = 2
    NO_CONNECTION = 3
    INVALID_PASSWORD = 5
    LOGGED_IN_ELSEWHERE = 6
    INVALID_PARAM = 8
    FILE_NOT_FOUND = 9
    BUSY = 10
    INVALID_STATE = 11
    ACCESS_DENIED = 15
    TIMEOUT = 16
    BANNED = 17
    ACCOUNT_NOT_FOUND = 18
    INVALID_STEAM_ID = 19
    SERVICE_UNAVAILABLE = 20
    NOT_LOGGED_ON = 21
    PENDING = 22
    INSUFFICIENT_PRIVILEGE = 24
    LIMIT_EXCEEDED = 25
    REVOKED = 26
    EXPIRED = 27
    DUPLICATE_REQUEST = 29
    BLOCKED = 40
    IGNORED = 41
    NO_MATCH = 42
    ACCOUNT_DISABLED = 43
    SERVICE_READ_ONLY = 44
    REMOTE_CALL_FAILED = 55
    RATE_LIMIT_EXCEEDED = 84
    ITEM_DELETED = 86
    ACCOUNT_LOGIN_DENIED_THROTTLE = 87
    TWO_FACTOR_CODE_MISMATCH = 88
    NOT_MODIFIED = 91
    NO_MOBILE_DEVICE = 92
    TIME_NOT_SYNCED = 93
    TOO_MANY_PENDING = 108
    ACCOUNT_NOT_FRIENDS = 111
    LIMITED_USER_ACCOUNT = 112
    CANT_REMOVE_ITEM = 113

    @classmethod
    def _missing_(cls, value):
        return cls.UNKNOWN

    @classmethod
    def parse(cls, raw: str | int | None) -> "EResult":
        """Parse raw header value. Everything that is not an integer becomes `UNKNOWN`"""

        try:
            return cls(int(raw))
        except (TypeError, ValueError):
            return cls.UNKNOWN


_API_BASE = URL("https://api.steampowered.com")
_v = "v1"


class STEAM_URL:
    COMMUNITY = URL("https://steamcommunity.com")
    # specific
    TRADE = COMMUNITY / "tradeoffer"
    RECEIPT = COMMUNITY / "trade"

    class API:
        BASE = _API_BASE

        # interfaces
        class IEconService:
            _Base = _API_BASE / "IEconService"

            GetTradeOffer = _Base / "GetTradeOffer" / _v
            GetTradeOffers = _Base / "GetTradeOffers" / _v
            GetTradeOffersSummary = _Base / "GetTradeOffersSummary" / _v
            DeclineTradeOffer = _Base / "DeclineTradeOffer" / _v
            CancelTradeOffer = _Base / "CancelTradeOffer" / _v

        class ISteamApps:
            _Base = _API_BASE / "ISteamApps"

            UpToDateCheck = _Base / "UpToDateCheck" / _v


# offers made on the website expire after two weeks
OFFER_LIFETIME = 14 * 24 * 60 * 60

T_PARAMS: TypeAlias = Mapping[str, int | str | float]
T_PAYLOAD: TypeAlias = Mapping[str, str | int | float | bool | None | list | Mapping]
T_HEADERS: TypeAlias = Mapping[str, str]
