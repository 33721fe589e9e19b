"""Shared utilities for SPL Quick Wallet."""

from spl_quick_wallet.shared.logging import (
    ContextAdapter,
    LoggingConfig,
    LogLevel,
    format_error_for_user,
    get_logger,
    get_user_friendly_error,
    sanitize_dict,
    sanitize_message,
    setup_logging,
)
from spl_quick_wallet.shared.network import (
    NetworkError,
    NetworkErrorType,
    TimeoutConfig,
)
from spl_quick_wallet.shared.protocols import LedgerClient, TokenAccount, WalletProvider
from spl_quick_wallet.shared.validation import (
    AddressValidator,
    AmountValidator,
    ValidationResult,
)

__all__ = [
    "NetworkError",
    "NetworkErrorType",
    "TimeoutConfig",
    "AddressValidator",
    "AmountValidator",
    "ValidationResult",
    "LedgerClient",
    "TokenAccount",
    "WalletProvider",
    "ContextAdapter",
    "LoggingConfig",
    "LogLevel",
    "format_error_for_user",
    "get_logger",
    "get_user_friendly_error",
    "sanitize_dict",
    "sanitize_message",
    "setup_logging",
]
