"""
Custody API Models
==================
Request and response payloads of the custody endpoints.
"""

from decimal import Decimal
from typing import Generic, List, Optional, TypeVar
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

T = TypeVar("T")


class CustodyModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def _null_as_default(cls, value, info: ValidationInfo):
        # Servers send null for unset fields; treat it like an absent key
        if value is None and info.field_name:
            field = cls.model_fields[info.field_name]
            if not field.is_required():
                return field.get_default(call_default_factory=True)
        return value

    def to_body(self) -> bytes:
        """JSON body with unset optional fields omitted."""
        return self.model_dump_json(exclude_none=True).encode("utf-8")

    def to_params(self) -> dict:
        """Query parameters; list fields are sent comma-joined (tx_types=WITHDRAW,DEPOSIT)."""
        return {
            name: ",".join(str(v) for v in value) if isinstance(value, list) else value
            for name, value in self.model_dump(exclude_none=True).items()
        }


class ApiResponse(CustodyModel, Generic[T]):
    """Envelope shared by every custody response."""
    code: int = 0
    message: str = ""
    successful: bool = False
    data: Optional[T] = None


class Page(CustodyModel, Generic[T]):
    total: int = 0
    offset: int = 0
    limit: int = 0
    list: List[T] = Field(default_factory=list)


# Address check

class CheckAddressRequest(CustodyModel):
    addresses: List[str]
    coin_name: str


class CheckAddressResponse(ApiResponse[List[str]]):
    pass


# Withdrawal orders

class DestAddressItem(CustodyModel):
    dest_address: str
    amount: Decimal
    is_all_withdrawal: bool = False
    memo_type: Optional[str] = None
    memo: Optional[str] = None
    remark: Optional[str] = None
    contract_transfer: Optional[bool] = None
    contract_aggre: Optional[bool] = None


class CreateOrderRequest(CustodyModel):
    from_wallet_code: str
    coin_name: str
    order_no: str
    dest_address_item_list: List[DestAddressItem]
    from_address: Optional[str] = None
    description: Optional[str] = None
    fee_rate_level: Optional[float] = None
    fee_rate: Optional[float] = None


class OrderNo(CustodyModel):
    order_no: str = ""


class CreateOrderResponse(ApiResponse[OrderNo]):
    pass


# Transaction summaries

class TxSummaryRequest(CustodyModel):
    coin_name: str
    tx_types: Optional[List[str]] = None
    addresses: Optional[List[str]] = None
    offset: Optional[int] = None
    limit: Optional[int] = None
    create_time_order: Optional[int] = None   # 0 = descending, 1 = ascending
    start_time: Optional[int] = None
    end_time: Optional[int] = None


class TxSummary(CustodyModel):
    wallet_code: str = ""
    chain: Optional[str] = None
    wallet_type: str = ""
    coin_name: str = ""
    order_no: str = ""
    block_height: int = 0
    tx_id: str = ""
    tx_type: str = ""
    amount: Decimal = Decimal(0)
    wallet_balance: Decimal = Decimal(0)
    remark_detail: Optional[str] = None
    tx_time_stamp: int = 0
    create_time_stamp: int = 0


class TxSummaryResponse(ApiResponse[Page[TxSummary]]):
    pass


# Transaction details

class TxDetailRequest(CustodyModel):
    b_id: str = Field(exclude=True)
    wallet_code: str = Field(exclude=True)
    coin_name: Optional[str] = None
    tx_types: Optional[List[str]] = None
    addresses: Optional[List[str]] = None
    id: Optional[int] = None
    tx_id: Optional[str] = None
    order_no: Optional[str] = None
    offset: Optional[int] = None
    limit: Optional[int] = None
    create_time_order: Optional[int] = None
    start_time: Optional[int] = None
    end_time: Optional[int] = None


class Vin(CustodyModel):
    address: str = ""
    index: int = Field(0, alias="idx")
    tag: Optional[str] = None
    amount: Optional[Decimal] = None
    balance: Optional[Decimal] = None
    is_change: int = 0
    desc: Optional[str] = None


class Vout(Vin):
    pass


class TxDetail(CustodyModel):
    id: int = 0
    domain_id: str = ""
    wallet_code: str = ""
    wallet_type: str = ""
    coin_name: str = ""
    order_no: Optional[str] = None
    block_height: int = 0
    confirm_ratio: Optional[str] = None
    tx_id: str = ""
    tx_size: int = 0
    tx_type: str = ""
    withdraw_amount: Optional[Decimal] = None
    gas_price: Optional[str] = None
    gas_limit: Optional[str] = None
    tx_fee: Decimal = Decimal(0)
    miner_reward: Optional[str] = None
    deposit_amount: Decimal = Decimal(0)
    wallet_balance: Decimal = Decimal(0)
    tx_status: str = ""
    remark_detail: Optional[str] = None
    tx_time_stamp: int = 0
    create_time_stamp: int = 0
    vins: List[Vin] = Field(default_factory=list)
    vouts: List[Vout] = Field(default_factory=list)


class TxDetailResponse(ApiResponse[Page[TxDetail]]):
    pass


# Wallet addresses

class GetAddressesRequest(CustodyModel):
    coin_name: str
    hide_no_coin_address: Optional[bool] = None
    key_word: Optional[str] = None
    offset: Optional[int] = None
    limit: Optional[int] = None
    sort_by_balance: Optional[str] = None     # "DESC" / "ASC"
    min_balance: Optional[int] = None
    max_balance: Optional[int] = None
    manage_wallet_address: Optional[bool] = None


class AddressInfo(CustodyModel):
    domain_id: str = ""
    b_id: str = ""
    wallet_code: str = ""
    wallet_type: str = ""
    address: str = ""
    address_type: str = ""
    address_storage: str = ""
    coin_name: str = ""
    bch_address_format: Optional[str] = None
    description: str = ""
    freeze_amount: Decimal = Decimal(0)
    total_amount: Decimal = Decimal(0)
    available_amount: Decimal = Decimal(0)


class GetAddressesResponse(ApiResponse[Page[AddressInfo]]):
    pass
