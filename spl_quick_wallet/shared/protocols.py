"""Collaborator interfaces shared by the session controller and services."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Protocol


@dataclass(frozen=True)
class TokenAccount:
    """One token account as reported by the ledger."""

    mint: str
    ui_amount: Decimal | None
    address: str = ""
    decimals: int | None = None


class WalletProvider(Protocol):
    """A wallet able to connect an account and sign transactions for it."""

    @property
    def public_key(self) -> str | None: ...

    def has_capability(self, marker: str) -> bool: ...
    def connect(self) -> str: ...
    def disconnect(self) -> None: ...
    def sign_transaction(self, transaction: Any, recent_blockhash: Any) -> Any: ...


class LedgerClient(Protocol):
    """Reads balances from and submits token instructions to a cluster."""

    def get_native_balance(self, account: str) -> int: ...
    def list_token_accounts(
        self, account: str, program_id: str | None = None
    ) -> list[TokenAccount]: ...
    def resolve_or_create_token_account(
        self, payer: WalletProvider, mint: str, owner: str
    ) -> str: ...
    def resolve_token_account_address(self, mint: str, owner: str) -> str: ...
    def mint(
        self,
        authority: WalletProvider,
        mint: str,
        destination: str,
        amount: int,
    ) -> str: ...
    def transfer(
        self,
        authority: WalletProvider,
        source: str,
        destination: str,
        amount: int,
    ) -> str: ...
