"""Response interpreter: HTTP status + decoded envelope → payload or error.

Three outcomes per request:
- HTTP status != 200, or an envelope that is not a JSON object → TransportError
- HTTP 200 with a vendor status other than success → VendorError
- HTTP 200 with vendor status success → the envelope's `body`

Nothing here retries; every failure is surfaced to the caller.
"""

from collections.abc import Mapping
from typing import Any

from shared.exceptions import TransportError, VendorError
from withings.codes import STATUS_CODES, StatusCode


def interpret_response(http_status: int, body: Any, raw: str = "") -> dict[str, Any]:
    """Classify a vendor response and unwrap the success payload.

    Args:
        http_status: The HTTP status code of the response.
        body: The decoded JSON envelope, {status, body?, error?}.
        raw: The undecoded response text, kept on TransportError.

    Returns:
        The envelope's `body` object (empty if the vendor sent none).
    """
    if http_status != 200:
        raise TransportError(http_status, raw)
    if not isinstance(body, Mapping):
        raise TransportError(http_status, raw)

    code = body.get("status")
    status = STATUS_CODES.resolve(code)
    if status != StatusCode.SUCCESS:
        raise VendorError(status, body.get("error"), code)

    return dict(body.get("body") or {})
