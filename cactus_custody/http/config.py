"""
Transport Configuration
=======================
Retry policy and connection settings for the resilient transport.
"""

import os
from typing import Dict
from dataclasses import dataclass, field


@dataclass(frozen=True)
class TransportConfig:
    """Configuration for ResilientTransport. Immutable once built."""
    timeout: float = 30.0                  # Per-attempt socket timeout (seconds)
    max_retries: int = 3                   # Retries after the first attempt
    max_elapsed_time: float = 60.0         # Overall budget for one logical call
    insecure_skip_verify: bool = False     # Development only
    default_headers: Dict[str, str] = field(default_factory=dict)

    # Backoff shape
    initial_interval: float = 0.5
    multiplier: float = 1.5
    max_interval: float = 60.0
    randomization_factor: float = 0.5

    def __post_init__(self):
        if self.max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        if self.max_elapsed_time <= 0:
            raise ValueError("max_elapsed_time must be positive")
        if not 0 <= self.randomization_factor < 1:
            raise ValueError("randomization_factor must be in [0, 1)")

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    @classmethod
    def from_env(cls, **overrides) -> "TransportConfig":
        """Build a config from CACTUS_HTTP_* environment variables."""
        values = {
            "timeout": float(os.environ.get("CACTUS_HTTP_TIMEOUT", "30")),
            "max_retries": int(os.environ.get("CACTUS_HTTP_MAX_RETRIES", "3")),
            "max_elapsed_time": float(os.environ.get("CACTUS_HTTP_MAX_ELAPSED", "60")),
            "insecure_skip_verify": os.environ.get(
                "CACTUS_HTTP_INSECURE", "false"
            ).lower() in ("1", "true", "yes"),
        }
        values.update(overrides)
        return cls(**values)
