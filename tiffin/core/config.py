"""Environment-driven configuration objects for the client core."""
from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from tiffin.core import constants
from tiffin.core.exceptions import ConfigurationException


def _env_number(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationException(f"{name} must be a number, got {raw!r}") from exc


@dataclass(slots=True, frozen=True)
class PricingConfig:
    """Fee and discount rules consumed by the pricing functions."""

    delivery_fee: float = constants.DELIVERY_FEE
    discount_threshold: float = constants.DISCOUNT_THRESHOLD
    discount_amount: float = constants.DISCOUNT_AMOUNT


@dataclass(slots=True)
class ApiConfig:
    base_url: str = constants.DEFAULT_API_URL
    timeout: float = constants.API_TIMEOUT_SECONDS
    headers: dict[str, str] = field(
        default_factory=lambda: {"Content-Type": "application/json"}
    )


@dataclass(slots=True)
class Settings:
    api: ApiConfig
    pricing: PricingConfig
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Load environment variables once and expose typed settings."""
    load_dotenv()

    base_url = os.getenv("TIFFIN_API_URL", constants.DEFAULT_API_URL).rstrip("/")
    timeout = _env_number("TIFFIN_API_TIMEOUT", constants.API_TIMEOUT_SECONDS)
    if timeout <= 0:
        raise ConfigurationException("TIFFIN_API_TIMEOUT must be positive")

    pricing = PricingConfig(
        delivery_fee=_env_number("TIFFIN_DELIVERY_FEE", constants.DELIVERY_FEE),
        discount_threshold=_env_number(
            "TIFFIN_DISCOUNT_THRESHOLD", constants.DISCOUNT_THRESHOLD
        ),
        discount_amount=_env_number("TIFFIN_DISCOUNT_AMOUNT", constants.DISCOUNT_AMOUNT),
    )

    return Settings(
        api=ApiConfig(base_url=base_url, timeout=timeout),
        pricing=pricing,
        log_level=os.getenv("TIFFIN_LOG_LEVEL", "INFO"),
    )
