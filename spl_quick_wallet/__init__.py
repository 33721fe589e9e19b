"""SPL Quick Wallet - A terminal-first TUI wallet for Solana SPL tokens.

This package is organized into feature-based modules:
- features.session: Wallet connection and observable session state
- features.token: SPL token mint and transfer
- shared: Shared utilities (network, validation, logging, protocols)
"""

from spl_quick_wallet.shared import (
    AddressValidator,
    AmountValidator,
    NetworkError,
    NetworkErrorType,
    TimeoutConfig,
    ValidationResult,
)

__version__ = "0.1.0"
__all__ = [
    "NetworkError",
    "NetworkErrorType",
    "TimeoutConfig",
    "AddressValidator",
    "AmountValidator",
    "ValidationResult",
]
