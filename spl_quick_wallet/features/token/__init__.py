"""SPL token feature module for SPL Quick Wallet."""

from spl_quick_wallet.features.token.handlers import TokenHandlersMixin
from spl_quick_wallet.features.token.screen import OperationResultScreen
from spl_quick_wallet.features.token.service import OperationResult, TokenService

__all__ = [
    "TokenHandlersMixin",
    "OperationResultScreen",
    "OperationResult",
    "TokenService",
]
