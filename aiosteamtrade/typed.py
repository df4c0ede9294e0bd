"""Typed dicts for responses and methods."""

from typing import TypedDict


class EconItemData(TypedDict, total=False):
    assetid: str
    classid: str
    instanceid: str
    appid: int
    contextid: str
    amount: str
    missing: bool
    est_usd: str


class AssetData(TypedDict):
    appid: int
    contextid: str
    amount: str
    assetid: str


class TradeOfferData(TypedDict, total=False):
    tradeofferid: str
    accountid_other: int
    tradeid: str
    message: str
    items_to_give: list[EconItemData]
    items_to_receive: list[EconItemData]
    trade_offer_state: int
    confirmation_method: int
    time_created: int
    time_updated: int
    expiration_time: int
    escrow_end_date: int
    from_real_time_trade: bool
    is_our_offer: bool


class TradeOffersSummaryData(TypedDict):
    pending_received_count: int
    new_received_count: int
    updated_received_count: int
    historical_received_count: int
    pending_sent_count: int
    newly_accepted_sent_count: int
    updated_sent_count: int
    historical_sent_count: int
    escrow_received_count: int
    escrow_sent_count: int


class SendOfferResponse(TypedDict, total=False):
    strError: str
    tradeofferid: str
    needs_mobile_confirmation: bool
    needs_email_confirmation: bool  # deprecated, ignored
    email_domain: str


class AcceptOfferResponse(TypedDict, total=False):
    strError: str
    tradeid: str
    needs_mobile_confirmation: bool
    needs_email_confirmation: bool
    email_domain: str
