"""
Header Functions
=================
Assembling the authentication headers of a signed request.
"""

from typing import Optional
import structlog

from .canonical import build_canonical_request
from .keys import SigningContext
from .models import CONTENT_TYPE, SignedRequest
from .signature import sign_content, build_authorization, generate_nonce, generate_date

logger = structlog.get_logger(__name__)


def create_signed_headers(
    context: SigningContext,
    api_key: str,
    method: str,
    uri: str,
    body: Optional[bytes] = None,
    nonce: Optional[str] = None,
    date: Optional[str] = None,
) -> SignedRequest:
    """
    Sign a request and build the headers that carry the signature.

    The nonce and date embedded in the signed string are the same values
    sent in the x-api-nonce and Date headers.

    Args:
        context: Signing key
        api_key: API key issued by custody
        method: HTTP method
        uri: Request path with optional query string
        body: Exact request body bytes
        nonce: Override the generated nonce
        date: Override the generated RFC 1123 date

    Returns:
        SignedRequest with the canonical request, signature and headers
    """
    nonce = nonce or generate_nonce()
    date = date or generate_date()

    canonical = build_canonical_request(method, uri, date, nonce, api_key, body)
    signature = sign_content(canonical.to_sign(), context)
    authorization = build_authorization(context.key_id, signature)

    headers = {
        "x-api-key": api_key,
        "x-api-nonce": nonce,
        "Accept": CONTENT_TYPE,
        "Date": date,
        "Content-Type": CONTENT_TYPE,
        "Authorization": authorization,
    }
    if canonical.content_hash:
        headers["Content-SHA256"] = canonical.content_hash

    logger.debug(
        "Request signed",
        method=canonical.method,
        uri=canonical.formatted_uri,
        nonce=nonce[:8],
    )
    return SignedRequest(
        canonical=canonical,
        signature=signature,
        authorization=authorization,
        headers=headers,
    )
