"""
Custody Client Configuration
============================
Account and endpoint settings for the custody API connection.
"""

import os
from dataclasses import dataclass


@dataclass
class CustodyConfig:
    """Configuration for the custody API connection."""
    base_url: str = os.environ.get("CACTUS_BASE_URL", "https://api.mycactus.dev")
    api_key: str = os.environ.get("CACTUS_API_KEY", "")
    ak_id: str = os.environ.get("CACTUS_AK_ID", "")              # Issued for the uploaded public key
    key_path: str = os.environ.get("CACTUS_KEY_PATH", "")        # PKCS#12 keystore or PEM file
    key_password: str = os.environ.get("CACTUS_KEY_PASSWORD", "")
    bid: str = os.environ.get("CACTUS_BID", "")                  # Business line id
    eth_wallet: str = os.environ.get("CACTUS_ETH_WALLET", "")
    public_ip_url: str = os.environ.get("CACTUS_PUBLIC_IP_URL", "https://ipconfig.io")
