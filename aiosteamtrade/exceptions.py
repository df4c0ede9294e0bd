from .constants import EResult


class SteamError(Exception):
    """All errors related to Steam"""


class TransportError(SteamError):
    """Raised when request failed on the connection level (DNS, refused, reset, timeout)"""


class HTTPStatusError(SteamError):
    """Raised when Steam responded with non 2xx status code"""

    def __init__(self, status: int, url: str, msg: str = ""):
        self.status = status
        self.url = url
        self.msg = msg or f"Steam responded with {status} status code to '{url}'"

    def __str__(self):
        return self.msg


class DecodeError(SteamError):
    """Raised when response body is not a valid JSON or its shape is unexpected"""

    def __init__(self, msg: str, data=None):
        self.msg = msg
        self.data = data

    def __str__(self):
        return self.msg


class ExtractionFailed(SteamError):
    """
    Raised when page was fetched but expected pattern not found in it.
    Usually means that `Steam` changed markup of the page.
    """

    def __init__(self, pattern: str, msg: str = ""):
        self.pattern = pattern
        self.msg = msg or f"Unable to match '{pattern}' pattern in page text"

    def __str__(self):
        return self.msg


class ReceiptParseFailed(ExtractionFailed):
    """Raised when trade receipt page contains no items"""


class RemoteRejected(SteamError):
    """Raised when Steam response data contain `strError` field"""

    def __init__(self, msg: str, data=None):
        self.msg = msg
        self.data = data

    def __str__(self):
        return self.msg


class NoOfferID(RemoteRejected):
    """Raised when Steam acknowledged trade offer creation but did not assign an id to it"""


class EResultError(SteamError):
    """Raised when Steam response contain `X-Eresult` header with error code"""

    def __init__(self, msg: str, result: EResult, raw: str | None = None):
        self.msg = msg
        self.result = result
        self.raw = raw  # header value as is

    def __str__(self):
        return self.msg


class OfferNotFound(SteamError):
    """Raised when Steam returned empty response for requested trade offer"""

    def __init__(self, offer_id: int):
        self.offer_id = offer_id

    def __str__(self):
        return f"Trade offer {self.offer_id} not found"


class InvalidLocalState(SteamError):
    """Raised when current state of a trade offer forbids the operation"""
