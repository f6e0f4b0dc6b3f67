"""
Signature Functions
===================
Content hashing, ECDSA signing and verification for request authentication.
"""

import base64
import binascii
import hashlib
import uuid
from email.utils import formatdate
from typing import Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec, utils

from ..exceptions import SigningError
from .keys import SigningContext

# Configuration
AUTHORIZATION_SCHEME = "api"


def hash_body(body: Optional[bytes]) -> str:
    """
    Compute the Content-SHA256 value of a request body.

    Args:
        body: Exact bytes that will be transmitted; None counts as empty

    Returns:
        Base64-encoded (standard alphabet, padded) SHA-256 digest
    """
    digest = hashlib.sha256(body or b"").digest()
    return base64.b64encode(digest).decode("ascii")


def sign_content(content: str, context: Optional[SigningContext]) -> str:
    """
    Sign a canonical string with the ECDSA private key.

    The SHA-256 digest of the content is signed and the (r, s) pair is
    returned as base64 of its DER SEQUENCE encoding.

    Args:
        content: Canonical string to sign
        context: Loaded signing key

    Returns:
        Base64-encoded DER signature

    Raises:
        SigningError: If the key is absent or the signing primitive fails
    """
    if context is None or context.private_key is None:
        raise SigningError("No signing key configured")

    digest = hashlib.sha256(content.encode("utf-8")).digest()
    try:
        der = context.private_key.sign(
            digest, ec.ECDSA(utils.Prehashed(hashes.SHA256()))
        )
    except Exception as e:
        raise SigningError(f"ECDSA signing failed: {e}")
    return base64.b64encode(der).decode("ascii")


def verify_content_signature(
    content: str,
    signature: str,
    public_key: ec.EllipticCurvePublicKey,
) -> bool:
    """
    Verify a base64 DER signature over a canonical string.

    Args:
        content: Canonical string that was signed
        signature: Base64-encoded DER signature
        public_key: The signer's public key

    Returns:
        True if the signature is valid for content
    """
    try:
        der = base64.b64decode(signature, validate=True)
        public_key.verify(der, content.encode("utf-8"), ec.ECDSA(hashes.SHA256()))
    except (InvalidSignature, binascii.Error, ValueError):
        return False
    return True


def build_authorization(key_id: str, signature: str) -> str:
    """Build the Authorization header value: ``api {key_id}:{signature}``."""
    return f"{AUTHORIZATION_SCHEME} {key_id}:{signature}"


def generate_nonce() -> str:
    """Generate a unique nonce for request signing."""
    return str(uuid.uuid4())


def generate_date() -> str:
    """Current time as an RFC 1123 GMT date, e.g. ``Mon, 02 Jan 2006 15:04:05 GMT``."""
    return formatdate(usegmt=True)
