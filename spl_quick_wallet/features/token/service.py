"""Token mint and transfer business logic for SPL Quick Wallet."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from spl_quick_wallet.config import DecimalsPolicy
from spl_quick_wallet.shared.protocols import LedgerClient, WalletProvider
from spl_quick_wallet.shared.validation import AmountValidator

logger = logging.getLogger(__name__)


@dataclass
class OperationResult:
    success: bool
    message: str
    signature: str | None = None
    token_account: str | None = None


class TokenService:
    """Service running the mint and transfer step sequences."""

    def __init__(
        self,
        ledger: LedgerClient,
        decimals_policy: DecimalsPolicy | None = None,
    ):
        self.ledger = ledger
        self.decimals_policy = decimals_policy or DecimalsPolicy()

    def to_base_units(self, mint_address: str, amount: str | Decimal) -> int:
        decimals = self.decimals_policy.decimals_for(mint_address)
        result = AmountValidator.validate_full(amount, decimals)
        if not result.is_valid:
            raise ValueError(result.error_message or "Invalid amount")
        return result.normalized_value

    def mint_tokens(
        self,
        wallet: WalletProvider,
        account: str,
        mint_address: str,
        amount: str | Decimal,
    ) -> OperationResult:
        base_units = self.to_base_units(mint_address, amount)

        destination = self.ledger.resolve_or_create_token_account(
            wallet, mint_address, account
        )
        signature = self.ledger.mint(wallet, mint_address, destination, base_units)

        logger.info("Mint of %s %s confirmed: %s", amount, mint_address, signature)
        return OperationResult(
            success=True,
            message=f"Minted {amount} tokens to {destination}",
            signature=signature,
            token_account=destination,
        )

    def transfer_tokens(
        self,
        wallet: WalletProvider,
        account: str,
        mint_address: str,
        recipient_address: str,
        amount: str | Decimal,
    ) -> OperationResult:
        base_units = self.to_base_units(mint_address, amount)

        # The sender's token account is only derived; a missing one makes the
        # transfer fail instead of being created.
        source = self.ledger.resolve_token_account_address(mint_address, account)
        destination = self.ledger.resolve_or_create_token_account(
            wallet, mint_address, recipient_address
        )
        signature = self.ledger.transfer(wallet, source, destination, base_units)

        logger.info(
            "Transfer of %s %s to %s confirmed: %s",
            amount,
            mint_address,
            recipient_address,
            signature,
        )
        return OperationResult(
            success=True,
            message=f"Transferred {amount} tokens to {recipient_address}",
            signature=signature,
            token_account=destination,
        )
