"""
Unit Tests for the Custody Endpoint Client
==========================================
"""

import json
from decimal import Decimal

import httpx
import pytest

from conftest import API_KEY, BASE_URL, KEY_ID, canonical_from_wire, signature_from_wire


def make_client(signing_context, transport):
    from cactus_custody.client import CustodyClient
    from cactus_custody.config import CustodyConfig

    config = CustodyConfig(
        base_url=BASE_URL,
        api_key=API_KEY,
        ak_id=KEY_ID,
        bid="b1",
        eth_wallet="ETH001",
        public_ip_url="https://ip.test/",
    )
    return CustodyClient(config, signing_context=signing_context, transport=transport)


class TestCustodyClient:
    """Tests for endpoint wrappers."""

    @pytest.mark.asyncio
    async def test_check_address(self, signing_context, make_transport):
        """Should POST the request and decode the envelope."""
        from cactus_custody.models import CheckAddressRequest
        from cactus_custody.signing import verify_content_signature

        captured = []

        def handler(request):
            captured.append(request)
            return httpx.Response(200, json={
                "code": 0, "message": "ok", "successful": True, "data": ["3SYQn32Y"],
            })

        client = make_client(signing_context, make_transport(handler))
        result = await client.check_address(
            CheckAddressRequest(addresses=["3SYQn32Y"], coin_name="USDT_SOL")
        )

        assert result.successful is True
        assert result.data == ["3SYQn32Y"]
        request = captured[0]
        assert request.method == "POST"
        assert request.url.path == "/custody/v1/api/addresses/type/check"
        assert json.loads(request.content) == {"addresses": ["3SYQn32Y"], "coin_name": "USDT_SOL"}
        assert verify_content_signature(
            canonical_from_wire(request), signature_from_wire(request), signing_context.public_key
        )

    @pytest.mark.asyncio
    async def test_create_order_omits_unset_fields(self, signing_context, make_transport):
        """Optional fields left as None should not be serialized."""
        from cactus_custody.models import CreateOrderRequest, DestAddressItem

        captured = []

        def handler(request):
            captured.append(request)
            return httpx.Response(200, json={
                "code": 0, "successful": True, "data": {"order_no": "ORD-1"},
            })

        client = make_client(signing_context, make_transport(handler))
        result = await client.create_order(CreateOrderRequest(
            from_wallet_code="ETH001",
            coin_name="ETH",
            order_no="ORD-1",
            dest_address_item_list=[DestAddressItem(dest_address="0xabc", amount=Decimal("1.25"))],
        ))

        assert result.data.order_no == "ORD-1"
        request = captured[0]
        assert request.url.path == "/custody/v1/api/projects/b1/order/create"
        sent = json.loads(request.content)
        assert "description" not in sent
        assert "from_address" not in sent
        assert sent["dest_address_item_list"][0]["dest_address"] == "0xabc"
        assert Decimal(str(sent["dest_address_item_list"][0]["amount"])) == Decimal("1.25")

    @pytest.mark.asyncio
    async def test_tx_detail_query(self, signing_context, make_transport):
        """Should GET tx-details with the filters as query parameters."""
        from cactus_custody.models import TxDetailRequest
        from cactus_custody.signing import format_uri

        captured = []

        def handler(request):
            captured.append(request)
            return httpx.Response(200, json={
                "code": 0,
                "successful": True,
                "data": {
                    "total": 1, "offset": 0, "limit": 10,
                    "list": [{
                        "id": 7, "tx_id": "0xdead", "tx_type": "DEPOSIT",
                        "deposit_amount": "2.5", "tx_fee": "0.001",
                        "vins": [{"address": "a", "idx": 0, "amount": "2.5", "is_change": 0}],
                    }],
                },
            })

        client = make_client(signing_context, make_transport(handler))
        result = await client.tx_detail(TxDetailRequest(
            b_id="b9", wallet_code="W9", tx_types=["WITHDRAW", "DEPOSIT"], id=7,
        ))

        request = captured[0]
        assert request.method == "GET"
        assert format_uri(request.url.raw_path.decode()) == (
            "/custody/v1/api/projects/b9/wallets/W9/tx-details?{id=[7], tx_types=[WITHDRAW,DEPOSIT]}"
        )
        assert "Content-SHA256" not in request.headers
        detail = result.data.list[0]
        assert detail.deposit_amount == Decimal("2.5")
        assert detail.vins[0].index == 0

    @pytest.mark.asyncio
    async def test_address_list_uses_configured_wallet(self, signing_context, make_transport):
        """Should default to the configured ETH wallet."""
        from cactus_custody.models import GetAddressesRequest

        captured = []

        def handler(request):
            captured.append(request)
            return httpx.Response(200, json={
                "code": 0, "successful": True,
                "data": {"total": 1, "list": [{"address": "0xabc", "coin_name": "ETH", "total_amount": 3}]},
            })

        client = make_client(signing_context, make_transport(handler))
        result = await client.get_address_list(
            GetAddressesRequest(coin_name="ETH", hide_no_coin_address=True)
        )

        request = captured[0]
        assert request.url.path == "/custody/v1/api/projects/b1/wallets/ETH001/addresses"
        assert request.url.params["hide_no_coin_address"] == "true"
        assert result.data.list[0].total_amount == Decimal(3)

    @pytest.mark.asyncio
    async def test_tx_summary(self, signing_context, make_transport):
        """Should decode transaction summaries."""
        from cactus_custody.models import TxSummaryRequest

        def handler(request):
            assert request.url.path == "/custody/v1/api/projects/b1/wallets/W2/tx-summaries"
            return httpx.Response(200, json={
                "code": 0, "successful": True,
                "data": {"total": 1, "list": [{"tx_id": "t1", "amount": 1.5}]},
            })

        client = make_client(signing_context, make_transport(handler))
        result = await client.tx_summary(TxSummaryRequest(coin_name="ETH", limit=5), wallet_code="W2")

        assert result.data.list[0].tx_id == "t1"

    @pytest.mark.asyncio
    async def test_non_2xx_raises_api_error(self, signing_context, make_transport):
        """A 4xx response should raise ApiError with the status."""
        from cactus_custody.exceptions import ApiError
        from cactus_custody.models import CheckAddressRequest

        client = make_client(
            signing_context,
            make_transport(lambda request: httpx.Response(403, text="ip not whitelisted")),
        )

        with pytest.raises(ApiError) as exc_info:
            await client.check_address(CheckAddressRequest(addresses=["a"], coin_name="BTC"))
        assert exc_info.value.status_code == 403
        assert exc_info.value.details == "ip not whitelisted"

    @pytest.mark.asyncio
    async def test_undecodable_body_raises(self, signing_context, make_transport):
        """A non-JSON body should raise ResponseDecodeError."""
        from cactus_custody.exceptions import ResponseDecodeError
        from cactus_custody.models import CheckAddressRequest

        client = make_client(
            signing_context, make_transport(lambda request: httpx.Response(200, text="<html>"))
        )

        with pytest.raises(ResponseDecodeError):
            await client.check_address(CheckAddressRequest(addresses=["a"], coin_name="BTC"))

    @pytest.mark.asyncio
    async def test_server_errors_exhaust_retries(self, signing_context, make_transport):
        """Persistent 5xx should surface as RetryExhaustedError."""
        from cactus_custody.exceptions import RetryExhaustedError
        from cactus_custody.models import CheckAddressRequest

        client = make_client(
            signing_context, make_transport(lambda request: httpx.Response(500), max_retries=1)
        )

        with pytest.raises(RetryExhaustedError):
            await client.check_address(CheckAddressRequest(addresses=["a"], coin_name="BTC"))

    @pytest.mark.asyncio
    async def test_get_public_ip_unsigned(self, signing_context, make_transport):
        """Should return the stripped body without auth headers."""
        captured = []

        def handler(request):
            captured.append(request)
            return httpx.Response(200, text="203.0.113.7\n")

        client = make_client(signing_context, make_transport(handler))

        assert await client.get_public_ip() == "203.0.113.7"
        assert "Authorization" not in captured[0].headers
        assert captured[0].url.host == "ip.test"

    def test_missing_key_file_fails_at_construction(self, tmp_path):
        """Without an injected key, a bad key path should raise KeyLoadError."""
        from cactus_custody.client import CustodyClient
        from cactus_custody.config import CustodyConfig
        from cactus_custody.exceptions import KeyLoadError

        with pytest.raises(KeyLoadError):
            CustodyClient(CustodyConfig(key_path=str(tmp_path / "missing.p12")))


class TestResponseModels:
    """Tests for decoding server payloads."""

    def test_null_fields_take_defaults(self):
        """JSON null in optional or defaulted fields should decode like an absent key."""
        from cactus_custody.models import TxSummaryResponse

        result = TxSummaryResponse.model_validate_json(json.dumps({
            "code": 0,
            "message": None,
            "successful": True,
            "data": {
                "total": 1,
                "offset": None,
                "list": [{
                    "tx_id": "t1",
                    "order_no": None,
                    "remark_detail": None,
                    "amount": None,
                    "wallet_balance": "10.5",
                }],
            },
        }))

        summary = result.data.list[0]
        assert result.message == ""
        assert result.data.offset == 0
        assert summary.order_no == ""
        assert summary.remark_detail is None
        assert summary.amount == Decimal(0)
        assert summary.wallet_balance == Decimal("10.5")

    def test_null_page_list_is_empty(self):
        """A null page list should decode as an empty list."""
        from cactus_custody.models import GetAddressesResponse, TxDetailResponse

        addresses = GetAddressesResponse.model_validate_json(
            '{"code":0,"successful":true,"data":{"total":0,"list":null}}'
        )
        details = TxDetailResponse.model_validate_json(
            '{"code":0,"successful":true,"data":{"total":1,"list":[{"tx_id":"t","vins":null,"vouts":null}]}}'
        )

        assert addresses.data.list == []
        assert details.data.list[0].vins == []
        assert details.data.list[0].vouts == []

    def test_null_required_field_rejected(self):
        """Required fields should still refuse null."""
        from pydantic import ValidationError
        from cactus_custody.models import CheckAddressRequest

        with pytest.raises(ValidationError):
            CheckAddressRequest.model_validate({"addresses": None, "coin_name": "BTC"})

    @pytest.mark.asyncio
    async def test_client_decodes_null_fields(self, signing_context, make_transport):
        """An endpoint reply with null fields should not raise ResponseDecodeError."""
        from cactus_custody.models import GetAddressesRequest

        client = make_client(
            signing_context,
            make_transport(lambda request: httpx.Response(200, content=(
                b'{"code":0,"message":null,"successful":true,'
                b'"data":{"total":1,"list":[{"address":"0xabc","bch_address_format":null,'
                b'"description":null,"total_amount":null}]}}'
            ))),
        )

        result = await client.get_address_list(GetAddressesRequest(coin_name="ETH"))

        info = result.data.list[0]
        assert info.description == ""
        assert info.total_amount == Decimal(0)
