"""Wallet session feature module for SPL Quick Wallet."""

from spl_quick_wallet.features.session.controller import (
    SessionError,
    SessionErrorType,
    SessionState,
    TokenHolding,
    WalletSessionController,
)
from spl_quick_wallet.features.session.handlers import SessionHandlersMixin

__all__ = [
    "SessionError",
    "SessionErrorType",
    "SessionState",
    "TokenHolding",
    "WalletSessionController",
    "SessionHandlersMixin",
]
