"""OAuth 1.0a credentials for the Withings API.

The handshake is three calls:

1. oauth_consumer() builds the consumer from the application key and secret.
2. request_access() fetches a temporary token and the URL the end-user must
   visit to authorize it.
3. authorize_credentials() trades the authorized temporary token for
   long-lived Credentials.

sign_request() then produces the OAuth parameters for each API call.
Signatures are HMAC-SHA1 and are computed by oauthlib; this module only
wires the vendor endpoints and response fields around it.
"""

from collections.abc import Mapping
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit

import httpx
import structlog
from oauthlib import oauth1
from pydantic import BaseModel, ConfigDict

from shared.config import settings
from shared.exceptions import OAuthHandshakeError, TransportError

logger = structlog.get_logger()


class Consumer(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    secret: str
    request_token_url: str
    access_token_url: str
    authorize_url: str


class TemporaryToken(BaseModel):
    model_config = ConfigDict(frozen=True)

    oauth_token: str
    oauth_token_secret: str


class AccessRequest(BaseModel):
    """A temporary token plus the URL where the end-user authorizes it."""

    model_config = ConfigDict(frozen=True)

    temp_token: TemporaryToken
    authorization_url: str


class Credentials(BaseModel):
    """Long-lived credentials for API calls. Serialize with model_dump()."""

    model_config = ConfigDict(frozen=True)

    consumer_key: str
    consumer_secret: str
    oauth_token: str
    oauth_token_secret: str
    user_id: str


def oauth_consumer(key: str, secret: str, oauth_url: str | None = None) -> Consumer:
    """Construct an OAuth 1.0 consumer using the given key and secret."""
    base = (oauth_url or settings.oauth_url).rstrip("/")
    return Consumer(
        key=key,
        secret=secret,
        request_token_url=f"{base}/request_token",
        access_token_url=f"{base}/access_token",
        authorize_url=f"{base}/authorize",
    )


def sign_request(
    credentials: Credentials, method: str, url: str, params: Mapping[str, Any]
) -> dict[str, str]:
    """Return the OAuth parameters authorizing `method url?params`.

    The parameters are meant to travel in the query string alongside `params`.
    """
    client = oauth1.Client(
        credentials.consumer_key,
        client_secret=credentials.consumer_secret,
        resource_owner_key=credentials.oauth_token,
        resource_owner_secret=credentials.oauth_token_secret,
        signature_method=oauth1.SIGNATURE_HMAC,
        signature_type=oauth1.SIGNATURE_TYPE_QUERY,
    )
    return _oauth_params(client, method, url, params)


def _oauth_params(
    client: oauth1.Client, method: str, url: str, params: Mapping[str, Any]
) -> dict[str, str]:
    query = urlencode([(k, str(v)) for k, v in params.items()])
    signed_uri, _, _ = client.sign(f"{url}?{query}" if query else url, http_method=method)
    return {
        key: value
        for key, value in parse_qsl(urlsplit(signed_uri).query, keep_blank_values=True)
        if key.startswith("oauth_")
    }


def _token_request(client: oauth1.Client, url: str, http: httpx.Client | None) -> dict[str, str]:
    """Signed GET against a token endpoint; returns the form-encoded reply."""
    params = _oauth_params(client, "GET", url, {})
    if http is None:
        with httpx.Client(timeout=settings.request_timeout_seconds) as owned:
            response = owned.get(url, params=params)
    else:
        response = http.get(url, params=params)

    if response.status_code != 200:
        raise TransportError(response.status_code, response.text)
    return dict(parse_qsl(response.text, keep_blank_values=True))


def request_access(
    consumer: Consumer,
    callback_url: str | None = None,
    http: httpx.Client | None = None,
) -> AccessRequest:
    """Retrieve a temporary token credential for the end-user to authorize.

    Returns the temporary token and the URL the user must visit to approve
    the consumer's access.
    """
    client = oauth1.Client(
        consumer.key,
        client_secret=consumer.secret,
        callback_uri=callback_url,
        signature_method=oauth1.SIGNATURE_HMAC,
        signature_type=oauth1.SIGNATURE_TYPE_QUERY,
    )
    reply = _token_request(client, consumer.request_token_url, http)
    if not reply.get("oauth_token") or not reply.get("oauth_token_secret"):
        raise OAuthHandshakeError("Request-token response is missing the temporary token")

    temp_token = TemporaryToken(
        oauth_token=reply["oauth_token"],
        oauth_token_secret=reply["oauth_token_secret"],
    )
    logger.info("oauth_request_token", consumer_key=consumer.key)
    query = urlencode({"oauth_token": temp_token.oauth_token})
    return AccessRequest(
        temp_token=temp_token,
        authorization_url=f"{consumer.authorize_url}?{query}",
    )


def authorize_credentials(
    consumer: Consumer,
    temp_token: TemporaryToken,
    verifier: str | None = None,
    http: httpx.Client | None = None,
) -> Credentials:
    """Trade the authorized temporary token for long-term credentials.

    Call after request_access() and the user's authorization.
    """
    client = oauth1.Client(
        consumer.key,
        client_secret=consumer.secret,
        resource_owner_key=temp_token.oauth_token,
        resource_owner_secret=temp_token.oauth_token_secret,
        verifier=verifier,
        signature_method=oauth1.SIGNATURE_HMAC,
        signature_type=oauth1.SIGNATURE_TYPE_QUERY,
    )
    reply = _token_request(client, consumer.access_token_url, http)

    user_id = reply.get("userid") or reply.get("user_id")
    missing = [
        name
        for name, value in (
            ("oauth_token", reply.get("oauth_token")),
            ("oauth_token_secret", reply.get("oauth_token_secret")),
            ("userid", user_id),
        )
        if not value
    ]
    if missing:
        raise OAuthHandshakeError(
            f"Access-token response is missing: {', '.join(missing)}"
        )

    logger.info("oauth_access_token", consumer_key=consumer.key, user_id=user_id)
    return Credentials(
        consumer_key=consumer.key,
        consumer_secret=consumer.secret,
        oauth_token=reply["oauth_token"],
        oauth_token_secret=reply["oauth_token_secret"],
        user_id=user_id,
    )
