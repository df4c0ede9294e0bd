import logging
from datetime import datetime
from json import dumps as jdumps
from time import time as time_time
from typing import AsyncIterator, TypeAlias

from yarl import URL

from ..constants import STEAM_URL, CORO, T_HEADERS, T_PARAMS, TradeOfferFilter
from ..decorators import session_id_required
from ..exceptions import DecodeError, OfferNotFound, InvalidLocalState
from ..extraction import parse_escrow_info, parse_trade_token, parse_receipt_items
from ..lifecycle import SendOfferResult, AcceptOfferResult, apply_send_result
from ..models import (
    TradeOffer,
    TradeOffersResponse,
    TradeOffersSummary,
    ItemDescription,
    EscrowSteamGuardInfo,
    InventoryItem,
    T_DESCRIPTION_KEY,
)
from ..utils import to_account_id, to_steam_id64, to_timestamp
from .web_api import SteamWebApiMixin

_log = logging.getLogger(__name__)

T_SHARED_DESCRIPTIONS: TypeAlias = dict[T_DESCRIPTION_KEY, ItemDescription]

# flag : params it toggles
_FILTER_PARAMS: dict[TradeOfferFilter, str] = {
    TradeOfferFilter.SENT_OFFERS: "get_sent_offers",
    TradeOfferFilter.RECEIVED_OFFERS: "get_received_offers",
    TradeOfferFilter.ACTIVE_ONLY: "active_only",
    TradeOfferFilter.HISTORICAL_ONLY: "historical_only",
    TradeOfferFilter.ITEM_DESCRIPTIONS: "get_descriptions",
}


class TradeMixin(SteamWebApiMixin):
    """
    Mixin with trade offers related methods.
    Depends on `SteamWebApiMixin`.
    """

    __slots__ = ()

    async def get_trade_offer(self, offer_id: int, *, headers: T_HEADERS = None) -> TradeOffer:
        """
        Fetch trade offer from Steam.

        :param offer_id:
        :param headers: extra headers to send with request
        :raises OfferNotFound: Steam returned empty response
        :raises DecodeError:
        """

        data = await self.call_web_api(
            STEAM_URL.API.IEconService.GetTradeOffer,
            params={"tradeofferid": offer_id},
            headers=headers,
        )
        if not data.get("offer"):
            raise OfferNotFound(offer_id)

        return self._create_trade_offer(data["offer"])

    @staticmethod
    def _create_trade_offer(data: dict) -> TradeOffer:
        try:
            return TradeOffer.from_data(data)
        except (KeyError, TypeError, ValueError) as e:
            raise DecodeError("Malformed trade offer data", data) from e

    @staticmethod
    def _update_item_descrs_map(descrs: list[dict], item_descrs_map: T_SHARED_DESCRIPTIONS):
        for d_data in descrs:
            try:
                descr = ItemDescription.from_data(d_data)
            except (KeyError, TypeError, ValueError) as e:
                raise DecodeError("Malformed item description data", d_data) from e

            if descr.key not in item_descrs_map:
                item_descrs_map[descr.key] = descr

    @staticmethod
    def build_trade_offers_params(
        filter: TradeOfferFilter,
        time_historical_cutoff: int | datetime = None,
        cursor=0,
    ) -> dict[str, int]:
        """
        Build query params for `GetTradeOffers`.
        Each flag of `filter` toggles only own params, absent flags omit them.

        .. note:: `ACTIVE_ONLY` and `HISTORICAL_ONLY` are not checked for contradiction,
            that is on the caller.

        :raises TypeError: `filter` is not a `TradeOfferFilter`
        :raises ValueError: `ACTIVE_ONLY` passed without `time_historical_cutoff`
        """

        if not isinstance(filter, TradeOfferFilter):
            raise TypeError(f"`filter` must be a `TradeOfferFilter`, got {type(filter).__name__}")

        params = {param: 1 for flag, param in _FILTER_PARAMS.items() if flag in filter}
        if TradeOfferFilter.ACTIVE_ONLY in filter:
            if time_historical_cutoff is None:
                raise ValueError("`ACTIVE_ONLY` filter requires `time_historical_cutoff`")
            params["time_historical_cutoff"] = to_timestamp(time_historical_cutoff)

        if cursor:
            params["cursor"] = cursor

        return params

    async def get_trade_offers(
        self,
        filter: TradeOfferFilter,
        time_historical_cutoff: int | datetime = None,
        *,
        cursor=0,
        params: T_PARAMS = {},
        headers: T_HEADERS = None,
        _item_descriptions_map: T_SHARED_DESCRIPTIONS = None,
    ) -> TradeOffersResponse:
        """
        Fetch trade offers from `Steam Web Api`.

        .. note:: You can paginate by yourself passing `cursor` arg.
            Returned cursor with 0 value means that there is no more pages

        .. seealso:: https://steamapi.xpaw.me/#IEconService/GetTradeOffers

        :param filter: combination of `TradeOfferFilter` flags
        :param time_historical_cutoff: timestamp for `ACTIVE_ONLY`
        :param cursor: cursor integer, need to paginate over
        :param params: extra params to pass to url
        :param headers: extra headers to send with request
        :return: sent, received trade offers, descriptions of items and next cursor
        :raises TypeError:
        :raises ValueError:
        :raises DecodeError:
        """

        params = {**self.build_trade_offers_params(filter, time_historical_cutoff, cursor), **params}
        data = await self.call_web_api(STEAM_URL.API.IEconService.GetTradeOffers, params=params, headers=headers)

        if _item_descriptions_map is None:
            _item_descriptions_map = {}

        if "descriptions" in data:
            self._update_item_descrs_map(data["descriptions"], _item_descriptions_map)

        sent = [self._create_trade_offer(d) for d in data.get("trade_offers_sent", ())]
        received = [self._create_trade_offer(d) for d in data.get("trade_offers_received", ())]
        _log.debug("Fetched %d sent and %d received trade offers", len(sent), len(received))

        return TradeOffersResponse(sent, received, _item_descriptions_map, int(data.get("next_cursor", 0)))

    async def trade_offers(
        self,
        filter: TradeOfferFilter,
        time_historical_cutoff: int | datetime = None,
        *,
        cursor=0,
        params: T_PARAMS = {},
        headers: T_HEADERS = None,
    ) -> AsyncIterator[TradeOffersResponse]:
        """
        Fetch trade offers from `Steam Web Api`. Return async iterator to paginate over offers pages.
        Descriptions map is shared and accumulated between pages.

        :return: `AsyncIterator` that yields `TradeOffersResponse` for each page
        """

        item_descriptions_map: T_SHARED_DESCRIPTIONS = {}

        more_offers = True
        while more_offers:
            page = await self.get_trade_offers(
                filter,
                time_historical_cutoff,
                cursor=cursor,
                params=params,
                headers=headers,
                _item_descriptions_map=item_descriptions_map,
            )
            cursor = page.next_cursor
            more_offers = bool(cursor)

            yield page

    async def get_trade_offers_summary(self, time_last_visit=0, *, headers: T_HEADERS = None) -> TradeOffersSummary:
        """
        Get trade offers summary from `Steam Web Api`.

        :param time_last_visit: timestamp. With 0 Steam uses time of last visit of trade offers page
        :param headers: extra headers to send with request
        :return: trade offers summary
        """

        params = {}
        if time_last_visit:
            params["time_last_visit"] = time_last_visit

        data = await self.call_web_api(
            STEAM_URL.API.IEconService.GetTradeOffersSummary,
            params=params,
            headers=headers,
        )
        try:
            return TradeOffersSummary.from_data(data)
        except (TypeError, ValueError) as e:
            raise DecodeError("Malformed trade offers summary", data) from e

    async def get_my_trade_token(self) -> str:
        """
        Fetch trade token of current account from trade offers privacy page.

        :raises ExtractionFailed:
        """

        r = await self.request(STEAM_URL.COMMUNITY / "my/tradeoffers/privacy")
        return parse_trade_token(r.text)

    def get_escrow_guard_info(self, partner: int, token: str) -> CORO[EscrowSteamGuardInfo]:
        """
        Fetch trade hold durations for new trade offer to `partner`.

        :param partner: id32 or id64 of partner
        :param token: partner trade token
        """

        url = (STEAM_URL.TRADE / "new/") % {"partner": to_account_id(partner), "token": token}
        return self.get_escrow(url)

    def get_escrow_guard_info_for_trade(self, offer_id: int) -> CORO[EscrowSteamGuardInfo]:
        """Fetch trade hold durations for existing trade offer"""

        return self.get_escrow(STEAM_URL.TRADE / str(offer_id))

    async def get_escrow(self, url: str | URL) -> EscrowSteamGuardInfo:
        """
        Fetch trade offer page and find trade hold durations in it.

        :raises HTTPStatusError: before any page parsing
        """

        r = await self.request(url)
        return parse_escrow_info(r.text)

    async def get_trade_received_items(self, receipt_id: int) -> list[InventoryItem]:
        """
        Fetch items received in trade from trade receipt page.

        :param receipt_id: `trade_id` of accepted `TradeOffer`
        :raises ReceiptParseFailed: there is no items in the page
        :raises DecodeError:
        """

        r = await self.request(STEAM_URL.RECEIPT / f"{receipt_id}/receipt")
        items = parse_receipt_items(r.text)
        _log.debug("Found %d items in trade receipt %s", len(items), receipt_id)
        return items

    @session_id_required
    async def send_trade_offer(
        self,
        offer: TradeOffer,
        partner: int,
        token="",
        *,
        headers: T_HEADERS = {},
    ) -> TradeOffer:
        """
        Make (send) trade offer to partner.

        .. note:: Make sure that partner is in friends list if you not pass trade token.

        :param offer: not sent `TradeOffer`
        :param partner: id32 or id64 of partner
        :param token: partner trade token
        :param headers: extra headers to send with request
        :return: new `TradeOffer` with id and state assigned
        :raises InvalidLocalState: offer has been sent already
        :raises ValueError: trade is empty
        :raises RemoteRejected:
        :raises NoOfferID:
        """

        if offer.id:
            raise InvalidLocalState(f"Trade offer {offer.id} has been sent already")
        if not offer.items_to_give and not offer.items_to_receive:
            raise ValueError("You can't make empty trade offer!")

        referer = (STEAM_URL.TRADE / "new/") % {"partner": to_account_id(partner)}
        offer_params = {}
        if token:
            referer %= {"token": token}
            offer_params["trade_offer_access_token"] = token

        data = {
            "sessionid": self.session_id,
            "serverid": 1,
            "partner": to_steam_id64(partner),
            "tradeoffermessage": offer.message,
            "json_tradeoffer": jdumps(
                {
                    "newversion": True,
                    "version": 3,
                    "me": {"assets": [i.to_asset_data() for i in offer.items_to_give], "currency": [], "ready": False},
                    "them": {
                        "assets": [i.to_asset_data() for i in offer.items_to_receive],
                        "currency": [],
                        "ready": False,
                    },
                }
            ),
            "captcha": "",
            "trade_offer_create_params": jdumps(offer_params),
        }

        r = await self.request(
            STEAM_URL.TRADE / "new/send",
            method="POST",
            data=data,
            headers={"Referer": str(referer), **headers},
        )
        result = SendOfferResult.from_response(r.json())
        sent = apply_send_result(offer, result, int(time_time()), partner)
        _log.info("Trade offer %s sent to %s, state %s", sent.id, sent.partner_id, sent.state.name)

        return sent

    @session_id_required
    async def accept_trade_offer(
        self,
        offer_id: int,
        partner: int = None,
        *,
        headers: T_HEADERS = {},
    ) -> AcceptOfferResult:
        """
        Accept trade offer, yes.

        .. note:: Steam signals errors in response body for this method

        :param offer_id:
        :param partner: id32 or id64 of partner
        :param headers: extra headers to send with request
        :raises HTTPStatusError:
        :raises RemoteRejected:
        """

        data = {
            "sessionid": self.session_id,
            "serverid": 1,
            "tradeofferid": offer_id,
            "captcha": "",
        }
        if partner:
            data["partner"] = to_steam_id64(partner)

        url_base = STEAM_URL.TRADE / str(offer_id)
        r = await self.request(
            url_base / "accept",
            method="POST",
            data=data,
            headers={"Referer": str(url_base) + "/", **headers},
        )
        result = AcceptOfferResult.from_response(r.json())
        _log.info("Trade offer %s accepted", offer_id)

        return result

    async def decline_trade_offer(self, offer_id: int, *, headers: T_HEADERS = None):
        """
        Decline incoming trade offer.

        .. note:: Steam signals errors with `X-Eresult` header for this method

        :raises EResultError:
        """

        await self.call_web_api_for_result(
            STEAM_URL.API.IEconService.DeclineTradeOffer,
            data={"tradeofferid": offer_id},
            headers=headers,
        )
        _log.info("Trade offer %s declined", offer_id)

    async def cancel_trade_offer(self, offer_id: int, *, headers: T_HEADERS = None):
        """
        Cancel outgoing trade offer.

        .. note:: Steam signals errors with `X-Eresult` header for this method

        :raises EResultError:
        """

        await self.call_web_api_for_result(
            STEAM_URL.API.IEconService.CancelTradeOffer,
            data={"tradeofferid": offer_id},
            headers=headers,
        )
        _log.info("Trade offer %s canceled", offer_id)
