from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, NamedTuple, Sequence

from yarl import URL

from .constants import STEAM_URL, TradeOfferState, ConfirmationMethod, TERMINAL_STATES
from .typed import EconItemData, AssetData, TradeOfferData, TradeOffersSummaryData
from .utils import account_id_to_steam_id, to_account_id
from . import lifecycle

if TYPE_CHECKING:
    from .mixins.trade import TradeMixin

T_DESCRIPTION_KEY = tuple[str, str]  # class id, instance id


class ItemAction(NamedTuple):
    link: str
    name: str


class ItemDescriptionEntry(NamedTuple):
    value: str
    color: str | None  # hexadecimal
    type: str = "html"
    name: str | None = None


class ItemTag(NamedTuple):
    category: str
    internal_name: str
    localized_category_name: str
    localized_tag_name: str
    color: str | None  # hexadecimal


@dataclass(eq=False, slots=True, frozen=True, kw_only=True)
class ItemDescription:
    """
    Catalog data of an item class (`EconItemDesc`).
    Steam returns it once per distinct item type, items refer to it by `class_id` and `instance_id`.
    """

    class_id: str
    instance_id: str
    app_id: int
    currency: int = 0

    name: str = ""
    market_name: str = ""
    market_hash_name: str = ""
    type: str | None = None

    name_color: str | None = None  # hexadecimal
    background_color: str | None = None

    icon: str = ""
    icon_large: str | None = None

    actions: tuple[ItemAction, ...] = ()
    tags: tuple[ItemTag, ...] = ()
    descriptions: tuple[ItemDescriptionEntry, ...] = ()

    commodity: bool = False
    tradable: bool = False
    marketable: bool = False
    market_tradable_restriction: int | None = None
    market_marketable_restriction: int | None = None

    @classmethod
    def from_data(cls, data: dict) -> "ItemDescription":
        return cls(
            class_id=str(data["classid"]),
            instance_id=str(data.get("instanceid", "0")),
            app_id=int(data["appid"]),
            currency=int(data.get("currency", 0)),
            name=data.get("name", ""),
            market_name=data.get("market_name", ""),
            market_hash_name=data.get("market_hash_name", ""),
            type=data.get("type") or None,
            name_color=data.get("name_color") or None,
            background_color=data.get("background_color") or None,
            icon=data.get("icon_url", ""),
            icon_large=data.get("icon_url_large") or None,
            actions=tuple(ItemAction(a["link"], a["name"]) for a in data.get("actions") or ()),
            tags=tuple(
                ItemTag(
                    t["category"],
                    t["internal_name"],
                    t.get("localized_category_name", ""),
                    t.get("localized_tag_name", ""),
                    t.get("color"),
                )
                for t in data.get("tags") or ()
            ),
            descriptions=tuple(
                ItemDescriptionEntry(d["value"], d.get("color"), d.get("type", "html"), d.get("name"))
                for d in data.get("descriptions") or ()
                if d["value"] != " "  # ha, surprise!
            ),
            commodity=bool(data.get("commodity", False)),
            tradable=bool(data.get("tradable", False)),
            marketable=bool(data.get("marketable", False)),
            market_tradable_restriction=data.get("market_tradable_restriction"),
            market_marketable_restriction=data.get("market_marketable_restriction"),
        )

    @property
    def key(self) -> T_DESCRIPTION_KEY:
        return self.class_id, self.instance_id

    @property
    def icon_url(self) -> URL:
        return URL("https://community.akamai.steamstatic.com") / f"economy/image/{self.icon}/96fx96f"

    def __eq__(self, other):
        if isinstance(other, ItemDescription):
            return (self.app_id, *self.key) == (other.app_id, *other.key)
        return False

    def __hash__(self):
        return hash((self.app_id, *self.key))


@dataclass(eq=False, slots=True, frozen=True, kw_only=True)
class EconItem:
    """
    Item (asset) inside trade offer.
    Id fields and `amount` are kept as strings exactly as Steam sent them.
    """

    asset_id: str
    app_id: int
    context_id: str
    amount: str = "1"
    class_id: str = ""
    instance_id: str = ""

    missing: bool = False  # item is no longer in the inventory
    est_usd: int = 0

    @classmethod
    def from_data(cls, data: EconItemData) -> "EconItem":
        return cls(
            asset_id=str(data.get("assetid", "")),
            class_id=str(data.get("classid", "")),
            instance_id=str(data.get("instanceid", "")),
            app_id=int(data["appid"]),
            context_id=str(data["contextid"]),
            amount=str(data.get("amount", "1")),
            missing=bool(data.get("missing", False)),
            est_usd=int(data.get("est_usd") or 0),
        )

    def to_data(self) -> EconItemData:
        data: EconItemData = {"appid": self.app_id, "contextid": self.context_id, "amount": self.amount}
        if self.asset_id:
            data["assetid"] = self.asset_id
        if self.class_id:
            data["classid"] = self.class_id
        if self.instance_id:
            data["instanceid"] = self.instance_id
        if self.missing:
            data["missing"] = True
        if self.est_usd:
            data["est_usd"] = str(self.est_usd)
        return data

    def to_asset_data(self) -> AssetData:
        """Asset dict for `json_tradeoffer` payload"""

        return {
            "appid": self.app_id,
            "contextid": self.context_id,
            "amount": self.amount,
            "assetid": self.asset_id,
        }

    @property
    def description_key(self) -> T_DESCRIPTION_KEY:
        return self.class_id, self.instance_id

    def __eq__(self, other):
        if isinstance(other, EconItem):
            return (self.app_id, self.context_id, self.asset_id) == (other.app_id, other.context_id, other.asset_id)
        return False

    def __hash__(self):
        return hash((self.app_id, self.context_id, self.asset_id))


@dataclass(eq=False, slots=True, frozen=True, kw_only=True)
class InventoryItem:
    """Item received in a trade, taken from trade receipt page."""

    asset_id: str  # new asset id after the trade
    class_id: str
    instance_id: str
    app_id: int
    context_id: str
    amount: str = "1"

    description: ItemDescription | None = None

    @classmethod
    def from_data(cls, data: dict) -> "InventoryItem":
        return cls(
            asset_id=str(data["id"]),
            class_id=str(data["classid"]),
            instance_id=str(data.get("instanceid", "0")),
            app_id=int(data["appid"]),
            context_id=str(data["contextid"]),
            amount=str(data.get("amount", "1")),
            description=ItemDescription.from_data(data) if "market_hash_name" in data else None,
        )


@dataclass(eq=False, slots=True, frozen=True, kw_only=True)
class TradeOffer:
    """
    Steam trade offer entity. Immutable, state transitions produce new instances.

    Timestamps are unix seconds, `0` means unset.
    """

    id: int = 0
    """The trade offer's unique numeric ID. 0 before it was sent"""
    partner_id: int = 0  # id32

    is_our_offer: bool = False

    items_to_give: tuple[EconItem, ...] = ()
    items_to_receive: tuple[EconItem, ...] = ()

    message: str = ""

    state: TradeOfferState = TradeOfferState.NONE
    confirmation_method: ConfirmationMethod = ConfirmationMethod.NONE

    time_created: int = 0
    time_updated: int = 0
    expiration_time: int = 0
    escrow_end_date: int = 0

    trade_id: int = 0
    """A numeric trade (receipt) ID, if the offer was accepted"""
    from_real_time_trade: bool = False

    @classmethod
    def new(
        cls,
        partner: int,
        to_give: Sequence[EconItem] = (),
        to_receive: Sequence[EconItem] = (),
        message="",
    ) -> "TradeOffer":
        """Create not yet sent trade offer. `partner` can be id32 or id64"""

        return cls(
            partner_id=to_account_id(partner),
            items_to_give=tuple(to_give),
            items_to_receive=tuple(to_receive),
            message=message,
        )

    @classmethod
    def from_data(cls, data: TradeOfferData) -> "TradeOffer":
        return cls(
            id=int(data["tradeofferid"]),
            partner_id=int(data["accountid_other"]),
            is_our_offer=bool(data.get("is_our_offer", False)),
            items_to_give=tuple(EconItem.from_data(i) for i in data.get("items_to_give", ())),
            items_to_receive=tuple(EconItem.from_data(i) for i in data.get("items_to_receive", ())),
            message=data.get("message", ""),
            state=TradeOfferState(data["trade_offer_state"]),
            confirmation_method=ConfirmationMethod(data.get("confirmation_method", 0)),
            time_created=data.get("time_created", 0),
            time_updated=data.get("time_updated", 0),
            expiration_time=data.get("expiration_time", 0),
            escrow_end_date=data.get("escrow_end_date", 0),
            trade_id=int(data.get("tradeid", 0)),
            from_real_time_trade=bool(data.get("from_real_time_trade", False)),
        )

    def __eq__(self, other):
        if isinstance(other, TradeOffer):
            return self.id == other.id and self.state == other.state and self.time_updated == other.time_updated
        return False

    def __hash__(self):
        return hash((self.id, self.state, self.time_updated))

    @property
    def partner_id64(self) -> int:
        return account_id_to_steam_id(self.partner_id)

    @property
    def receipt_id(self) -> int:
        """Alias for `trade_id`"""
        return self.trade_id

    @property
    def url(self) -> URL:
        return STEAM_URL.TRADE / str(self.id)

    @property
    def expires_at(self) -> datetime | None:
        return datetime.fromtimestamp(self.expiration_time) if self.expiration_time else None

    @property
    def escrow_ends_at(self) -> datetime | None:
        return datetime.fromtimestamp(self.escrow_end_date) if self.escrow_end_date else None

    # shorthands
    @property
    def active(self) -> bool:
        return self.state is TradeOfferState.ACTIVE

    @property
    def accepted(self) -> bool:
        return self.state is TradeOfferState.ACCEPTED

    @property
    def declined(self) -> bool:
        return self.state is TradeOfferState.DECLINED

    @property
    def canceled(self) -> bool:
        return self.state is TradeOfferState.CANCELED

    @property
    def countered(self) -> bool:
        return self.state is TradeOfferState.COUNTERED

    @property
    def needs_confirmation(self) -> bool:
        return self.state is TradeOfferState.CREATED_NEEDS_CONFIRMATION

    @property
    def terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    async def send(self, client: "TradeMixin", partner: int = None, token="") -> "TradeOffer":
        """
        Send this offer. Return new `TradeOffer` with id and state assigned by Steam.

        :param client:
        :param partner: id32 or id64 of partner. Defaults to `partner_id` of the offer
        :param token: partner trade token
        """

        return await client.send_trade_offer(self, partner if partner is not None else self.partner_id, token)

    async def accept(self, client: "TradeMixin") -> "lifecycle.AcceptOfferResult":
        """
        Accept this offer.

        :raises InvalidLocalState: offer is not active
        """

        lifecycle.ensure_can_accept(self)
        return await client.accept_trade_offer(self.id, self.partner_id)

    async def cancel(self, client: "TradeMixin"):
        """
        Cancel our offer or decline offer of partner.

        :raises InvalidLocalState: offer is already in terminal state
        """

        lifecycle.ensure_can_cancel(self)
        if self.is_our_offer:
            await client.cancel_trade_offer(self.id)
        else:
            await client.decline_trade_offer(self.id)


class EscrowSteamGuardInfo(NamedTuple):
    """Trade hold durations from trade offer page. `error_msg` is set when Steam refused to show the page"""

    my_days: int = 0
    them_days: int = 0
    error_msg: str = ""


@dataclass(slots=True, frozen=True)
class TradeOffersSummary:
    pending_received_count: int = 0
    new_received_count: int = 0
    updated_received_count: int = 0
    historical_received_count: int = 0
    pending_sent_count: int = 0
    newly_accepted_sent_count: int = 0
    updated_sent_count: int = 0
    historical_sent_count: int = 0
    escrow_received_count: int = 0
    escrow_sent_count: int = 0

    @classmethod
    def from_data(cls, data: TradeOffersSummaryData) -> "TradeOffersSummary":
        return cls(**{f: int(data.get(f, 0)) for f in cls.__dataclass_fields__})


class TradeOffersResponse(NamedTuple):
    sent: list[TradeOffer]
    received: list[TradeOffer]
    descriptions: dict[T_DESCRIPTION_KEY, ItemDescription]
    next_cursor: int = 0

    def description_for(self, item: EconItem) -> ItemDescription | None:
        return self.descriptions.get(item.description_key)
