"""
Trade offer state transitions.

Everything here is pure: functions take an offer and decoded Steam response
and return new values, so transitions can be checked without any request.
"""

from dataclasses import replace
from typing import TYPE_CHECKING, NamedTuple

from .constants import TradeOfferState, ConfirmationMethod, TERMINAL_STATES, OFFER_LIFETIME
from .exceptions import RemoteRejected, NoOfferID, DecodeError, InvalidLocalState
from .typed import SendOfferResponse, AcceptOfferResponse
from .utils import to_account_id

if TYPE_CHECKING:
    from .models import TradeOffer

__all__ = (
    "SendOfferResult",
    "AcceptOfferResult",
    "apply_send_result",
    "can_accept",
    "can_cancel",
    "ensure_can_accept",
    "ensure_can_cancel",
)


def _parse_id(data: dict, key: str) -> int:
    try:
        return int(data.get(key) or 0)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"Malformed '{key}' field in response", data) from e


class SendOfferResult(NamedTuple):
    offer_id: int
    needs_mobile_confirmation: bool = False

    @classmethod
    def from_response(cls, data: SendOfferResponse) -> "SendOfferResult":
        """
        :raises RemoteRejected: `strError` is present
        :raises NoOfferID: Steam did not assign id to the offer
        """

        if not isinstance(data, dict):
            raise DecodeError("Unexpected send trade offer response", data)
        if data.get("strError"):
            raise RemoteRejected(data["strError"], data)

        offer_id = _parse_id(data, "tradeofferid")
        if not offer_id:
            raise NoOfferID("No trade offer id included in response", data)

        # email confirmation is deprecated by Steam, don't even look at `needs_email_confirmation`
        return cls(offer_id, bool(data.get("needs_mobile_confirmation", False)))


class AcceptOfferResult(NamedTuple):
    trade_id: int = 0  # receipt id, present when trade completed immediately
    needs_mobile_confirmation: bool = False

    @classmethod
    def from_response(cls, data: AcceptOfferResponse) -> "AcceptOfferResult":
        """
        :raises RemoteRejected: `strError` is present
        """

        if not isinstance(data, dict):
            raise DecodeError("Unexpected accept trade offer response", data)
        if data.get("strError"):
            raise RemoteRejected(data["strError"], data)

        return cls(_parse_id(data, "tradeid"), bool(data.get("needs_mobile_confirmation", False)))


def apply_send_result(offer: "TradeOffer", result: SendOfferResult, now: int, partner: int = None) -> "TradeOffer":
    """
    Post-creation state of the `offer` after Steam accepted it with `result`.
    `partner` (id32 or id64) is the account offer was sent to, defaults to `partner_id` of the offer.
    """

    if result.needs_mobile_confirmation:
        state = TradeOfferState.CREATED_NEEDS_CONFIRMATION
        method = ConfirmationMethod.MOBILE_APP
    else:
        state = TradeOfferState.ACTIVE
        method = offer.confirmation_method

    return replace(
        offer,
        id=result.offer_id,
        partner_id=to_account_id(partner) if partner is not None else offer.partner_id,
        is_our_offer=True,
        time_created=now,
        time_updated=now,
        expiration_time=now + OFFER_LIFETIME,
        from_real_time_trade=False,
        state=state,
        confirmation_method=method,
    )


def can_accept(offer: "TradeOffer") -> bool:
    return offer.state is TradeOfferState.ACTIVE


def can_cancel(offer: "TradeOffer") -> bool:
    return offer.state not in TERMINAL_STATES


def ensure_can_accept(offer: "TradeOffer"):
    if not can_accept(offer):
        raise InvalidLocalState(f"Unable to accept a non-active trade offer ({offer.state.name})")


def ensure_can_cancel(offer: "TradeOffer"):
    if not offer.id:
        raise InvalidLocalState("Trade offer has not been sent yet")
    if not can_cancel(offer):
        raise InvalidLocalState(f"Unable to cancel or decline trade offer in {offer.state.name} state")
