"""
Extraction of data embedded in `Steam Community` html pages.

Patterns are registered by name in `PATTERNS`, call sites refer to them only by name.
When `Steam` changes page markup only the pattern definition needs to be changed.
"""

import logging
from re import compile as re_compile, Pattern
from json import loads, JSONDecodeError

from .exceptions import ExtractionFailed, ReceiptParseFailed, DecodeError
from .models import EscrowSteamGuardInfo, InventoryItem

__all__ = (
    "PATTERNS",
    "find",
    "find_all",
    "find_one",
    "parse_escrow_info",
    "parse_trade_token",
    "parse_receipt_items",
)

_log = logging.getLogger(__name__)

MY_ESCROW_DAYS = "my_escrow_days"
THEIR_ESCROW_DAYS = "their_escrow_days"
ERROR_MSG = "error_msg"
TRADE_TOKEN = "trade_token"
RECEIPT_ITEM = "receipt_item"

# each pattern must have exactly one capturing group
PATTERNS: dict[str, Pattern[str]] = {
    MY_ESCROW_DAYS: re_compile(r"var g_daysMyEscrow = (\d+);"),
    THEIR_ESCROW_DAYS: re_compile(r"var g_daysTheirEscrow = (\d+);"),
    ERROR_MSG: re_compile(r"<div id=\"error_msg\">\s*([^<]+?)\s*</div>"),
    TRADE_TOKEN: re_compile(r"token=([a-zA-Z0-9-_]+)"),
    # oItem = {"id":"...",...}; (javascript code)
    RECEIPT_ITEM: re_compile(r"oItem =\s(.+?});"),
}


def find(name: str, text: str) -> str | None:
    """First captured value of pattern `name` in `text` or `None`"""

    m = PATTERNS[name].search(text)
    return m[1] if m is not None else None


def find_all(name: str, text: str) -> list[str]:
    """All captured values of pattern `name` in `text`, in source order"""

    return PATTERNS[name].findall(text)


def find_one(name: str, text: str) -> str:
    """
    Captured value of pattern `name` that must be present in `text`.
    Repeated occurrences are allowed only if all of them captured the same value.

    :raises ExtractionFailed:
    """

    values = set(find_all(name, text))
    if len(values) != 1:
        raise ExtractionFailed(name, f"Expected exactly one '{name}' value in page text, found {len(values)}")

    return values.pop()


def _find_days(name: str, text: str) -> int:
    value = find(name, text)
    if value is None:
        _log.warning("Pattern '%s' not found, assume 0 days", name)
        return 0
    return int(value)


def parse_escrow_info(text: str) -> EscrowSteamGuardInfo:
    """
    Find trade hold durations and error message in trade offer page.

    .. note:: Missing values default to 0 and empty string,
        so "0 days" and "not found" are indistinguishable.
    """

    error_msg = find(ERROR_MSG, text) or ""
    if error_msg:
        _log.warning("Trade offer page contains error message: %s", error_msg)

    return EscrowSteamGuardInfo(
        my_days=_find_days(MY_ESCROW_DAYS, text),
        them_days=_find_days(THEIR_ESCROW_DAYS, text),
        error_msg=error_msg,
    )


def parse_trade_token(text: str) -> str:
    """
    Find trade token in trade offers privacy page.

    :raises ExtractionFailed:
    """

    return find_one(TRADE_TOKEN, text)


def parse_receipt_items(text: str) -> list[InventoryItem]:
    """
    Decode every item embedded in trade receipt page.

    :raises ReceiptParseFailed: there is no items in the page
    :raises DecodeError: any of found items is malformed
    """

    fragments = find_all(RECEIPT_ITEM, text)
    if not fragments:
        raise ReceiptParseFailed(RECEIPT_ITEM, "Unable to match items in trade receipt")

    items = []
    for index, fragment in enumerate(fragments):
        try:
            items.append(InventoryItem.from_data(loads(fragment)))
        except (JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise DecodeError(f"Malformed item #{index} in trade receipt", fragment) from e

    return items
