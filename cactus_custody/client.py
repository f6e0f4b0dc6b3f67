"""
Custody API Client
==================
Endpoint wrappers over the authenticated request dispatcher.

Usage:
    from cactus_custody import CustodyClient, CheckAddressRequest

    async with CustodyClient() as client:
        result = await client.check_address(
            CheckAddressRequest(addresses=["3SYQn32Y..."], coin_name="USDT_SOL")
        )
"""

import logging
from typing import Optional, Type, TypeVar
from pydantic import BaseModel, ValidationError

from .config import CustodyConfig
from .dispatcher import RequestDispatcher
from .exceptions import ApiError, ResponseDecodeError
from .http import ResilientTransport, TransportConfig, TransportResponse
from .models import (
    CheckAddressRequest,
    CheckAddressResponse,
    CreateOrderRequest,
    CreateOrderResponse,
    TxDetailRequest,
    TxDetailResponse,
    TxSummaryRequest,
    TxSummaryResponse,
    GetAddressesRequest,
    GetAddressesResponse,
)
from .signing import SigningContext, load_signing_key

# Generic type for Pydantic models
T = TypeVar("T", bound=BaseModel)

logger = logging.getLogger(__name__)


class CustodyClient:
    """
    Client for the custody REST API.

    Features:
    - Address validation
    - Withdrawal order creation
    - Transaction summaries and details
    - Wallet address listing
    - Public IP lookup (for whitelisting)
    """

    def __init__(
        self,
        config: Optional[CustodyConfig] = None,
        signing_context: Optional[SigningContext] = None,
        transport: Optional[ResilientTransport] = None,
    ):
        self.config = config or CustodyConfig()
        if signing_context is None:
            signing_context = load_signing_key(
                self.config.key_path, self.config.key_password, key_id=self.config.ak_id
            )
        self.transport = transport or ResilientTransport(TransportConfig.from_env())
        self.dispatcher = RequestDispatcher(
            base_url=self.config.base_url,
            api_key=self.config.api_key,
            signing_context=signing_context,
            transport=self.transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.close()

    async def close(self):
        await self.transport.aclose()

    def _decode(self, response: TransportResponse, model: Type[T]) -> T:
        if not 200 <= response.status_code < 300:
            logger.error(f"Custody API returned {response.status_code}: {response.text[:200]}")
            raise ApiError(
                "Custody API request failed",
                status_code=response.status_code,
                details=response.text,
            )
        try:
            return model.model_validate_json(response.content)
        except ValidationError as e:
            raise ResponseDecodeError(
                f"Cannot decode {model.__name__}: {e.error_count()} errors",
                status_code=response.status_code,
                details=response.text,
            )

    # Addresses

    async def check_address(self, req: CheckAddressRequest) -> CheckAddressResponse:
        """Check whether addresses are valid for a coin."""
        response = await self.dispatcher.send(
            "POST", "/custody/v1/api/addresses/type/check", body=req.to_body()
        )
        return self._decode(response, CheckAddressResponse)

    async def get_address_list(
        self, req: GetAddressesRequest, wallet_code: Optional[str] = None
    ) -> GetAddressesResponse:
        """List the addresses of a wallet (defaults to the configured ETH wallet)."""
        wallet = wallet_code or self.config.eth_wallet
        path = f"/custody/v1/api/projects/{self.config.bid}/wallets/{wallet}/addresses"
        response = await self.dispatcher.send("GET", path, params=req.to_params())
        return self._decode(response, GetAddressesResponse)

    # Orders

    async def create_order(self, req: CreateOrderRequest) -> CreateOrderResponse:
        """Create a withdrawal order."""
        path = f"/custody/v1/api/projects/{self.config.bid}/order/create"
        response = await self.dispatcher.send("POST", path, body=req.to_body())
        return self._decode(response, CreateOrderResponse)

    # Transactions

    async def tx_summary(
        self, req: TxSummaryRequest, wallet_code: Optional[str] = None
    ) -> TxSummaryResponse:
        """Query transaction summaries of a wallet."""
        wallet = wallet_code or self.config.eth_wallet
        path = f"/custody/v1/api/projects/{self.config.bid}/wallets/{wallet}/tx-summaries"
        response = await self.dispatcher.send("GET", path, params=req.to_params())
        return self._decode(response, TxSummaryResponse)

    async def tx_detail(self, req: TxDetailRequest) -> TxDetailResponse:
        """Query transaction details of a wallet."""
        path = f"/custody/v1/api/projects/{req.b_id}/wallets/{req.wallet_code}/tx-details"
        response = await self.dispatcher.send("GET", path, params=req.to_params())
        return self._decode(response, TxDetailResponse)

    # Network

    async def get_public_ip(self) -> str:
        """Public IP of this host as seen by the IP echo service (unsigned)."""
        response = await self.transport.request("GET", self.config.public_ip_url)
        if response.status_code != 200:
            raise ApiError("Unexpected status from IP echo service", status_code=response.status_code)
        return response.text.strip()
