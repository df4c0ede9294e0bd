"""
Create, list, accept, decline and cancel steam trade offers.
"""

from .exceptions import (
    SteamError,
    TransportError,
    HTTPStatusError,
    DecodeError,
    ExtractionFailed,
    ReceiptParseFailed,
    RemoteRejected,
    NoOfferID,
    EResultError,
    OfferNotFound,
    InvalidLocalState,
)
from .constants import (
    App,
    STEAM_URL,
    Language,
    EResult,
    TradeOfferState,
    ConfirmationMethod,
    TradeOfferFilter,
)
from .client import SteamTradeClient
from .lifecycle import SendOfferResult, AcceptOfferResult
from .models import (
    EconItem,
    ItemDescription,
    InventoryItem,
    TradeOffer,
    EscrowSteamGuardInfo,
    TradeOffersSummary,
    TradeOffersResponse,
)
