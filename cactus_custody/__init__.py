"""
Cactus Custody Client
=====================
Signed, retrying async client for the Cactus Custody API.
"""

__version__ = "0.1.0"

# Exceptions
from cactus_custody.exceptions import (
    CustodyError,
    InvalidRequestError,
    SigningError,
    KeyLoadError,
    TransientTransportError,
    RetryExhaustedError,
    RequestCancelledError,
    ApiError,
    ResponseDecodeError,
)

# Signing
from cactus_custody.signing import (
    CanonicalRequest,
    SignedRequest,
    SigningContext,
    load_signing_key,
    hash_body,
    sign_content,
    verify_content_signature,
    build_authorization,
    generate_nonce,
    generate_date,
    format_uri,
    build_content_to_sign,
    create_signed_headers,
)

# Transport
from cactus_custody.http import (
    TransportConfig,
    ResilientTransport,
    TransportResponse,
)

# Dispatcher
from cactus_custody.dispatcher import RequestDispatcher, build_uri

# Client
from cactus_custody.config import CustodyConfig
from cactus_custody.client import CustodyClient
from cactus_custody.models import (
    CheckAddressRequest,
    CheckAddressResponse,
    CreateOrderRequest,
    CreateOrderResponse,
    DestAddressItem,
    TxSummaryRequest,
    TxSummaryResponse,
    TxDetailRequest,
    TxDetailResponse,
    GetAddressesRequest,
    GetAddressesResponse,
)

# Logging
from cactus_custody.log_config import setup_logging

__all__ = [
    # Exceptions
    "CustodyError",
    "InvalidRequestError",
    "SigningError",
    "KeyLoadError",
    "TransientTransportError",
    "RetryExhaustedError",
    "RequestCancelledError",
    "ApiError",
    "ResponseDecodeError",
    # Signing
    "CanonicalRequest",
    "SignedRequest",
    "SigningContext",
    "load_signing_key",
    "hash_body",
    "sign_content",
    "verify_content_signature",
    "build_authorization",
    "generate_nonce",
    "generate_date",
    "format_uri",
    "build_content_to_sign",
    "create_signed_headers",
    # Transport
    "TransportConfig",
    "ResilientTransport",
    "TransportResponse",
    # Dispatcher
    "RequestDispatcher",
    "build_uri",
    # Client
    "CustodyConfig",
    "CustodyClient",
    "CheckAddressRequest",
    "CheckAddressResponse",
    "CreateOrderRequest",
    "CreateOrderResponse",
    "DestAddressItem",
    "TxSummaryRequest",
    "TxSummaryResponse",
    "TxDetailRequest",
    "TxDetailResponse",
    "GetAddressesRequest",
    "GetAddressesResponse",
    # Logging
    "setup_logging",
]
