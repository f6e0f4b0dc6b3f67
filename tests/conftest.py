import httpx
import pytest
from cryptography.hazmat.primitives.asymmetric import ec

from cactus_custody.http import ResilientTransport, TransportConfig
from cactus_custody.signing import SigningContext, format_uri

BASE_URL = "https://custody.test"
API_KEY = "X5SGmgTAoYaVw1t7oD2p82pHgf0eNNVw3wxYGgM2"
KEY_ID = "test-ak-id"


@pytest.fixture(scope="session")
def ec_private_key():
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture
def signing_context(ec_private_key):
    return SigningContext(private_key=ec_private_key, key_id=KEY_ID)


@pytest.fixture
def make_transport():
    """Factory for a transport backed by an httpx.MockTransport handler."""
    def factory(handler, **overrides):
        settings = dict(
            max_retries=3,
            max_elapsed_time=5.0,
            initial_interval=0.01,
            max_interval=0.05,
            randomization_factor=0,
        )
        settings.update(overrides)
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return ResilientTransport(TransportConfig(**settings), client=client)
    return factory


def canonical_from_wire(request: httpx.Request) -> str:
    """Rebuild the signed string the way the server does, from what was sent."""
    return (
        f"{request.method}\n"
        "application/json\n"
        f"{request.headers.get('Content-SHA256', '')}\n"
        "application/json\n"
        f"{request.headers['Date']}\n"
        f"x-api-key:{request.headers['x-api-key']}\n"
        f"x-api-nonce:{request.headers['x-api-nonce']}\n"
        f"{format_uri(request.url.raw_path.decode('ascii'))}"
    )


def signature_from_wire(request: httpx.Request) -> str:
    scheme, _, credentials = request.headers["Authorization"].partition(" ")
    assert scheme == "api"
    key_id, _, signature = credentials.partition(":")
    assert key_id == KEY_ID
    return signature
