"""Configuration for the exchange and its service."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

import structlog

from cpamm.constants import DEFAULT_CUSTODY, DEFAULT_FEE_BPS, FEE_DENOMINATOR


@dataclass(frozen=True)
class FeeConfig:
    """Swap fee configuration.

    The fee is taken from the input amount and stays in the pool. The pricing
    formula multiplies the input by ``fee_multiplier`` and the input reserve
    by ``FEE_DENOMINATOR``:

        amount_out = in * m * r_out / (r_in * 10000 + in * m)

    With ``fee_bps=30`` this is the canonical 997/1000 formula; with
    ``fee_bps=0`` it reduces to ``in * r_out / (r_in + in)``.

    Attributes:
        fee_bps: Fee in basis points, in [0, 10000)
    """

    fee_bps: int = DEFAULT_FEE_BPS

    def __post_init__(self) -> None:
        if not isinstance(self.fee_bps, int) or isinstance(self.fee_bps, bool):
            raise ValueError(f"fee_bps must be an int: {self.fee_bps!r}")
        if not (0 <= self.fee_bps < FEE_DENOMINATOR):
            raise ValueError(f"fee_bps must be in [0, {FEE_DENOMINATOR}): {self.fee_bps}")

    @property
    def fee_multiplier(self) -> int:
        """Input multiplier after the fee (9970 for 30 bps)."""
        return FEE_DENOMINATOR - self.fee_bps

    @property
    def is_feeless(self) -> bool:
        return self.fee_bps == 0


# Default configuration instance (0.3%)
DEFAULT_FEE_CONFIG = FeeConfig()

# Fee-less variant of the pricing formula
FEELESS = FeeConfig(fee_bps=0)


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class Settings:
    """Service settings read from environment variables.

    - CPAMM_HOST: Host to bind to (default: 0.0.0.0)
    - CPAMM_PORT: Port to bind to (default: 8000)
    - CPAMM_DEBUG: Enable debug/reload mode (default: false)
    - CPAMM_FEE_BPS: Swap fee in basis points (default: 30)
    - CPAMM_LOG_LEVEL: Log level name (default: INFO)
    - CPAMM_CUSTODY: Custody account of the exchange on the ledger
    - CPAMM_GENESIS: Optional JSON file seeding the in-memory ledger
    """

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    fee: FeeConfig = field(default_factory=FeeConfig)
    log_level: str = "INFO"
    custody: str = DEFAULT_CUSTODY
    genesis_path: str | None = None

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            host=os.environ.get("CPAMM_HOST", "0.0.0.0"),
            port=int(os.environ.get("CPAMM_PORT", "8000")),
            debug=_env_bool("CPAMM_DEBUG", "false"),
            fee=FeeConfig(fee_bps=int(os.environ.get("CPAMM_FEE_BPS", str(DEFAULT_FEE_BPS)))),
            log_level=os.environ.get("CPAMM_LOG_LEVEL", "INFO").upper(),
            custody=os.environ.get("CPAMM_CUSTODY", DEFAULT_CUSTODY),
            genesis_path=os.environ.get("CPAMM_GENESIS") or None,
        )


def configure_logging(level: str = "INFO") -> None:
    """Configure structlog for console output at the given level."""
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        raise ValueError(f"Unknown log level: {level}")
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )
