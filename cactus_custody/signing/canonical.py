"""
Canonical Request Construction
==============================
Builds the deterministic string that every custody API request is signed over.

Example of a signed GET:

    GET
    application/json

    application/json
    Tue, 03 Mar 2020 12:26:57 GMT
    x-api-key:X5SGmgTAoYaVw1t7oD2p82pHgf0eNNVw3wxYGgM2
    x-api-nonce:36dbe33ed529455cb0638eef0f5f59e3
    /custody/v1/api/wallets?{b_id=[4a3e2fb4], coin_names=[BTC,LTC], hide_no_coin_wallet=[false]}
"""

import re
from typing import Dict, List, Optional
from urllib.parse import urlsplit, parse_qsl, unquote

from ..exceptions import InvalidRequestError
from .models import CanonicalRequest
from .signature import hash_body

# Methods whose body is covered by Content-SHA256
BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def _split_uri(uri: str):
    if _CONTROL_CHARS.search(uri):
        raise InvalidRequestError(f"Invalid control character in URI: {uri!r}")
    try:
        parts = urlsplit(uri)
    except ValueError as e:
        raise InvalidRequestError(f"Malformed URI {uri!r}: {e}")
    if _BAD_ESCAPE.search(parts.path):
        raise InvalidRequestError(f"Invalid percent-escape in URI path: {uri!r}")
    return parts


def format_uri(uri: str) -> str:
    """
    Format a URI with its query parameters in canonical form.

    Parameter names are sorted; the values of a repeated name keep their
    original order and are joined with commas:

        /custody/v1/api/wallets?{b_id=[4a3e], coin_names=[BTC,LTC]}

    Args:
        uri: Request path, optionally carrying a query string

    Returns:
        The path alone when there is no query, otherwise path?{...}

    Raises:
        InvalidRequestError: If the URI cannot be parsed
    """
    parts = _split_uri(uri)
    path = unquote(parts.path)

    query: Dict[str, List[str]] = {}
    for name, value in parse_qsl(parts.query, keep_blank_values=True):
        query.setdefault(name, []).append(value)

    if not query:
        return path

    params = ", ".join(
        f"{name}=[{','.join(query[name])}]" for name in sorted(query)
    )
    return f"{path}?{{{params}}}"


def build_canonical_request(
    method: str,
    uri: str,
    date: str,
    nonce: str,
    api_key: str,
    body: Optional[bytes] = None,
) -> CanonicalRequest:
    """Build the canonical request for one logical call."""
    method = method.upper()
    content_hash = hash_body(body) if method in BODY_METHODS else ""
    return CanonicalRequest(
        method=method,
        content_hash=content_hash,
        date=date,
        api_key=api_key,
        nonce=nonce,
        formatted_uri=format_uri(uri),
    )


def build_content_to_sign(
    method: str,
    uri: str,
    date: str,
    nonce: str,
    api_key: str,
    body: Optional[bytes] = None,
) -> str:
    """Build the canonical string to sign for a request."""
    return build_canonical_request(method, uri, date, nonce, api_key, body).to_sign()
