"""
Signing Models
==============
Value types produced while authenticating a request.
"""

from typing import Dict
from dataclasses import dataclass

CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class CanonicalRequest:
    """The fields covered by a request signature."""
    method: str
    content_hash: str
    date: str
    api_key: str
    nonce: str
    formatted_uri: str
    content_type: str = CONTENT_TYPE

    def to_sign(self) -> str:
        """Render the exact string that is hashed and signed."""
        return (
            f"{self.method}\n"
            f"{self.content_type}\n"
            f"{self.content_hash}\n"
            f"{self.content_type}\n"
            f"{self.date}\n"
            f"x-api-key:{self.api_key}\n"
            f"x-api-nonce:{self.nonce}\n"
            f"{self.formatted_uri}"
        )


@dataclass(frozen=True)
class SignedRequest:
    """A canonical request together with its signature and headers."""
    canonical: CanonicalRequest
    signature: str
    authorization: str
    headers: Dict[str, str]
