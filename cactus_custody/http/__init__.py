from .config import TransportConfig
from .backoff import BudgetedExponentialWait
from .transport import ResilientTransport, TransportResponse

__all__ = [
    "TransportConfig",
    "BudgetedExponentialWait",
    "ResilientTransport",
    "TransportResponse",
]
