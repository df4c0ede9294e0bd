from datetime import datetime, timezone
from functools import reduce
from itertools import combinations
from operator import or_

import pytest
from aiohttp import ClientConnectionError

from aiosteamtrade import (
    STEAM_URL,
    TradeOfferFilter,
    TradeOfferState,
    OfferNotFound,
    DecodeError,
    HTTPStatusError,
    TransportError,
    ReceiptParseFailed,
    SteamTradeClient,
)
from aiosteamtrade.mixins.trade import TradeMixin

from data import (
    API_KEY,
    OFFER_DATA,
    DESCRIPTION_DATA,
    SUMMARY_DATA,
    ESCROW_PAGE,
    PRIVACY_PAGE,
    RECEIPT_PAGE,
    RECEIPT_PAGE_EMPTY,
    PARTNER_ID64,
    PARTNER_ID32,
    STEAM_ID,
)

API = STEAM_URL.API.IEconService
CUTOFF = 1700000000

FLAG_PARAMS = {
    TradeOfferFilter.SENT_OFFERS: "get_sent_offers",
    TradeOfferFilter.RECEIVED_OFFERS: "get_received_offers",
    TradeOfferFilter.ACTIVE_ONLY: "active_only",
    TradeOfferFilter.HISTORICAL_ONLY: "historical_only",
    TradeOfferFilter.ITEM_DESCRIPTIONS: "get_descriptions",
}

ALL_FILTERS = [
    combo for size in range(len(FLAG_PARAMS) + 1) for combo in combinations(FLAG_PARAMS, size)
]


@pytest.mark.parametrize("flags", ALL_FILTERS)
def test_filter_flags_are_independent(flags):
    params = TradeMixin.build_trade_offers_params(reduce(or_, flags, TradeOfferFilter.NONE), CUTOFF)

    expected = {FLAG_PARAMS[flag]: 1 for flag in flags}
    if TradeOfferFilter.ACTIVE_ONLY in flags:
        expected["time_historical_cutoff"] = CUTOFF

    assert params == expected


def test_filter_active_only_requires_cutoff():
    with pytest.raises(ValueError):
        TradeMixin.build_trade_offers_params(TradeOfferFilter.ACTIVE_ONLY)


def test_filter_must_be_flag():
    with pytest.raises(TypeError):
        TradeMixin.build_trade_offers_params(3, CUTOFF)


def test_filter_cutoff_datetime_and_cursor():
    dt = datetime.fromtimestamp(CUTOFF, timezone.utc)
    params = TradeMixin.build_trade_offers_params(
        TradeOfferFilter.RECEIVED_OFFERS | TradeOfferFilter.ACTIVE_ONLY, dt, 5
    )

    assert params == {"get_received_offers": 1, "active_only": 1, "time_historical_cutoff": CUTOFF, "cursor": 5}


async def test_get_trade_offers(client, session):
    session.add(
        "GET",
        API.GetTradeOffers,
        json={
            "response": {
                "trade_offers_sent": [OFFER_DATA],
                "descriptions": [DESCRIPTION_DATA, DESCRIPTION_DATA],
                "next_cursor": 0,
            }
        },
    )

    res = await client.get_trade_offers(TradeOfferFilter.SENT_OFFERS | TradeOfferFilter.ACTIVE_ONLY, CUTOFF)

    assert session.last_call.params == {
        "get_sent_offers": 1,
        "active_only": 1,
        "time_historical_cutoff": CUTOFF,
        "key": API_KEY,
    }
    assert len(res.sent) == 1
    assert res.received == []
    assert res.sent[0].id == 6543210987
    assert res.sent[0].state is TradeOfferState.ACTIVE
    assert res.next_cursor == 0
    assert len(res.descriptions) == 1
    assert res.description_for(res.sent[0].items_to_give[0]).name == "AK-47 | Redline"
    assert res.description_for(res.sent[0].items_to_receive[0]) is None


async def test_get_trade_offers_malformed_offer(client, session):
    session.add("GET", API.GetTradeOffers, json={"response": {"trade_offers_received": [{"tradeofferid": "1"}]}})

    with pytest.raises(DecodeError):
        await client.get_trade_offers(TradeOfferFilter.RECEIVED_OFFERS)


async def test_get_trade_offers_bad_envelope(client, session):
    session.add("GET", API.GetTradeOffers, text="<html>Service Unavailable</html>")

    with pytest.raises(DecodeError):
        await client.get_trade_offers(TradeOfferFilter.RECEIVED_OFFERS)


async def test_trade_offers_pages(client, session):
    second = {**OFFER_DATA, "tradeofferid": "6543210988"}
    session.add("GET", API.GetTradeOffers, json={"response": {"trade_offers_received": [OFFER_DATA], "next_cursor": 7}})
    session.add(
        "GET",
        API.GetTradeOffers,
        json={"response": {"trade_offers_received": [second], "descriptions": [DESCRIPTION_DATA]}},
    )

    pages = [page async for page in client.trade_offers(TradeOfferFilter.RECEIVED_OFFERS)]

    assert [p.received[0].id for p in pages] == [6543210987, 6543210988]
    assert "cursor" not in session.calls[0].params
    assert session.calls[1].params["cursor"] == 7
    assert pages[0].descriptions is pages[1].descriptions


async def test_get_trade_offer(client, session):
    session.add("GET", API.GetTradeOffer, json={"response": {"offer": OFFER_DATA}})

    offer = await client.get_trade_offer(6543210987)

    assert offer.id == 6543210987
    assert session.last_call.params == {"tradeofferid": 6543210987, "key": API_KEY}


async def test_get_trade_offer_not_found(client, session):
    session.add("GET", API.GetTradeOffer, json={"response": {}})

    with pytest.raises(OfferNotFound) as exc_info:
        await client.get_trade_offer(404)

    assert str(exc_info.value) == "Trade offer 404 not found"


async def test_summary_without_last_visit(client, session):
    session.add("GET", API.GetTradeOffersSummary, json={"response": SUMMARY_DATA})

    summary = await client.get_trade_offers_summary()

    assert summary.pending_sent_count == 3
    assert session.last_call.params == {"key": API_KEY}


async def test_summary_with_last_visit(client, session):
    session.add("GET", API.GetTradeOffersSummary, json={"response": SUMMARY_DATA})

    await client.get_trade_offers_summary(CUTOFF)

    assert session.last_call.params == {"time_last_visit": CUTOFF, "key": API_KEY}


async def test_api_key_required(session):
    client = SteamTradeClient(STEAM_ID, session=session)

    with pytest.raises(AttributeError):
        await client.get_trade_offer(1)
    assert session.calls == []


async def test_my_trade_token(client, session):
    session.add("GET", STEAM_URL.COMMUNITY / "my/tradeoffers/privacy", text=PRIVACY_PAGE)

    assert await client.get_my_trade_token() == "AbC-d_9x"


async def test_escrow_for_new_offer(client, session):
    session.add("GET", STEAM_URL.TRADE / "new/", text=ESCROW_PAGE)

    info = await client.get_escrow_guard_info(PARTNER_ID64, "tok")

    assert info == (15, 7, "")
    assert dict(session.last_call.url.query) == {"partner": str(PARTNER_ID32), "token": "tok"}


async def test_escrow_for_existing_offer(client, session):
    session.add("GET", STEAM_URL.TRADE / "6543210987", text=ESCROW_PAGE)

    assert await client.get_escrow_guard_info_for_trade(6543210987) == (15, 7, "")


async def test_escrow_http_error_before_parsing(client, session):
    session.add("GET", STEAM_URL.TRADE / "6543210987", status=500, text=ESCROW_PAGE)

    with pytest.raises(HTTPStatusError) as exc_info:
        await client.get_escrow_guard_info_for_trade(6543210987)

    assert exc_info.value.status == 500


async def test_escrow_transport_error(client, session):
    session.add("GET", STEAM_URL.TRADE / "6543210987", exc=ClientConnectionError("Connection reset by peer"))

    with pytest.raises(TransportError):
        await client.get_escrow_guard_info_for_trade(6543210987)


async def test_trade_received_items(client, session):
    session.add("GET", STEAM_URL.RECEIPT / "4077916301283748950/receipt", text=RECEIPT_PAGE)

    items = await client.get_trade_received_items(4077916301283748950)

    assert [i.asset_id for i in items] == ["30123456789", "30123456790"]
    assert session.released == 1


async def test_trade_received_items_empty_receipt(client, session):
    session.add("GET", STEAM_URL.RECEIPT / "4077916301283748950/receipt", text=RECEIPT_PAGE_EMPTY)

    with pytest.raises(ReceiptParseFailed):
        await client.get_trade_received_items(4077916301283748950)


async def test_undecodable_page(client, session):
    session.add("GET", STEAM_URL.TRADE / "6543210987", text=b"<html>\xff\xfe broken</html>")

    with pytest.raises(DecodeError):
        await client.get_escrow_guard_info_for_trade(6543210987)
    assert session.released == 1
