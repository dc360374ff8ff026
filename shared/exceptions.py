"""Withings client exception hierarchy.

Every failure extends WithingsError and keeps its details as attributes,
so callers can log or branch on them without parsing the message.
"""

from typing import Any


class WithingsError(Exception):
    """Base class for all errors raised by the Withings client."""


class InvalidOptionsError(WithingsError):
    """A disallowed combination of request options was supplied."""

    def __init__(self, options: list[str], detail: str):
        self.options = options
        self.detail = detail
        super().__init__(detail)


class UnknownSymbolError(WithingsError):
    """A filter symbol is not present in the relevant code table."""

    def __init__(self, table: str, symbol: Any):
        self.table = table
        self.symbol = symbol
        super().__init__(f"Unknown {table} symbol: {symbol!r}")


class TransportError(WithingsError):
    """The HTTP exchange failed: non-200 status or an undecodable envelope."""

    def __init__(self, status: int, body: str = ""):
        self.status = status
        self.body = body
        super().__init__(f"Unsuccessful Withings response: HTTP {status}")


class VendorError(WithingsError):
    """HTTP 200, but the vendor status code reported a failure.

    ``status`` is the resolved status symbol, or the raw integer when the
    vendor sent a code this client does not know.
    """

    def __init__(self, status: Any, error: str | None = None, code: int | None = None):
        self.status = status
        self.error = error
        self.code = code
        message = f"Unsuccessful Withings response: {status}"
        if error:
            message = f"{message} ({error})"
        super().__init__(message)


class OAuthHandshakeError(WithingsError):
    """A token endpoint answered without the expected credential fields."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)
