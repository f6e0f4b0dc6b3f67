"""
Signing Keys
============
Loading the ECDSA private key used to sign custody API requests.

Usage:
    from cactus_custody.signing import load_signing_key

    context = load_signing_key("/secrets/api.p12", "passphrase", key_id="AK_ID")
"""

from pathlib import Path
from typing import Optional, Union
from dataclasses import dataclass
import structlog

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import pkcs12

from ..exceptions import KeyLoadError

logger = structlog.get_logger(__name__)

PEM_ARMOR = b"-----BEGIN "


@dataclass(frozen=True)
class SigningContext:
    """
    An immutable EC private key and the key id the server knows it by.

    Safe to share between concurrent requests; nothing mutates it.
    """
    private_key: ec.EllipticCurvePrivateKey
    key_id: str

    def __repr__(self) -> str:
        return f"SigningContext(key_id={self.key_id!r}, curve={self.private_key.curve.name})"

    @property
    def public_key(self) -> ec.EllipticCurvePublicKey:
        return self.private_key.public_key()

    @classmethod
    def from_pem(
        cls,
        pem_data: Union[str, bytes],
        key_id: str,
        password: Optional[str] = None,
    ) -> "SigningContext":
        """Build a context from PEM data (SEC1 ``EC PRIVATE KEY`` or PKCS#8)."""
        if isinstance(pem_data, str):
            pem_data = pem_data.encode("ascii")
        try:
            key = serialization.load_pem_private_key(
                pem_data, password=password.encode() if password else None
            )
        except (ValueError, TypeError) as e:
            raise KeyLoadError(f"Invalid PEM private key: {e}")
        return cls(private_key=_require_ec(key), key_id=key_id)


def _require_ec(key) -> ec.EllipticCurvePrivateKey:
    if not isinstance(key, ec.EllipticCurvePrivateKey):
        raise KeyLoadError(
            f"Private key is {type(key).__name__}, expected an ECDSA key"
        )
    return key


def load_signing_key(
    path: Union[str, Path],
    passphrase: Optional[str],
    key_id: str,
) -> SigningContext:
    """
    Load the signing key from a PKCS#12 keystore or a PEM file.

    Args:
        path: PKCS#12 keystore (any name, e.g. .p12 or .keystore) or PEM file
        passphrase: Keystore password, may be empty
        key_id: The AK id issued for the uploaded public key

    Returns:
        SigningContext wrapping the private key

    Raises:
        KeyLoadError: If the file is unreadable or holds no EC private key
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise KeyLoadError(f"Cannot read key file {path}: {e}")

    # Container chosen by content, not file name: PEM armor, otherwise PKCS#12
    if PEM_ARMOR in data:
        context = SigningContext.from_pem(data, key_id=key_id, password=passphrase)
    else:
        try:
            key, _cert, _chain = pkcs12.load_key_and_certificates(
                data, passphrase.encode() if passphrase else None
            )
        except (ValueError, TypeError) as e:
            raise KeyLoadError(f"Cannot decode PKCS#12 keystore {path}: {e}")
        if key is None:
            raise KeyLoadError(f"PKCS#12 keystore {path} holds no private key")
        context = SigningContext(private_key=_require_ec(key), key_id=key_id)

    logger.info("Signing key loaded", path=str(path), key_id=key_id, curve=context.private_key.curve.name)
    return context
