"""
Request Signing Module
======================
Canonical request construction and ECDSA signing for the custody API.
"""

from .models import CanonicalRequest, SignedRequest, CONTENT_TYPE
from .keys import SigningContext, load_signing_key
from .signature import (
    hash_body,
    sign_content,
    verify_content_signature,
    build_authorization,
    generate_nonce,
    generate_date,
)
from .canonical import (
    format_uri,
    build_canonical_request,
    build_content_to_sign,
    BODY_METHODS,
)
from .headers import create_signed_headers

__all__ = [
    # Models
    "CanonicalRequest",
    "SignedRequest",
    "CONTENT_TYPE",
    # Keys
    "SigningContext",
    "load_signing_key",
    # Signature
    "hash_body",
    "sign_content",
    "verify_content_signature",
    "build_authorization",
    "generate_nonce",
    "generate_date",
    # Canonical
    "format_uri",
    "build_canonical_request",
    "build_content_to_sign",
    "BODY_METHODS",
    # Headers
    "create_signed_headers",
]
