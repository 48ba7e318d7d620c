"""Factory package - Dependency injection for provider-agnostic code"""

from .client_factory import (
    create_candle_store,
    create_market_data_client,
    create_reference_data_client,
)

__all__ = [
    "create_candle_store",
    "create_market_data_client",
    "create_reference_data_client",
]
