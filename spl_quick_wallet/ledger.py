"""Solana ledger access for SPL Quick Wallet.

``RpcLedgerClient`` implements the ``LedgerClient`` protocol on top of
``solana.rpc.api.Client``: balance and token account reads, associated
token account creation, SPL mint and transfer.
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, TypeVar

from solana.rpc.api import Client
from solana.rpc.commitment import Commitment
from solana.rpc.core import TransactionExpiredBlockheightExceededError, UnconfirmedTxError
from solana.rpc.types import TokenAccountOpts, TxOpts
from solders.instruction import Instruction
from solders.message import Message
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import Transaction
from spl.token.constants import TOKEN_PROGRAM_ID
from spl.token.instructions import (
    MintToParams,
    TransferParams,
    create_associated_token_account,
    get_associated_token_address,
    mint_to,
    transfer,
)

from spl_quick_wallet.shared.network import (
    RPC_EXCEPTIONS,
    TimeoutConfig,
    create_network_error,
)
from spl_quick_wallet.shared.protocols import TokenAccount, WalletProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LedgerError(Exception):
    """Raised when the cluster rejects or fails an operation."""


def parse_pubkey(value: str, label: str = "address") -> Pubkey:
    try:
        return Pubkey.from_string(value.strip())
    except ValueError as e:
        raise LedgerError(f"Invalid {label}: {value}") from e


def _parse_ui_amount(token_amount: dict[str, Any]) -> Decimal | None:
    raw = token_amount.get("uiAmountString")
    if raw is None:
        raw = token_amount.get("uiAmount")
    if raw is None:
        return None
    try:
        return Decimal(str(raw))
    except InvalidOperation:
        return None


class RpcLedgerClient:
    """LedgerClient backed by a Solana JSON-RPC endpoint.

    Writes build a single-instruction transaction, have the wallet provider
    sign it, submit it and wait until the configured commitment is reached
    or the blockhash expires.
    """

    def __init__(
        self,
        rpc_url: str,
        commitment: str = "confirmed",
        timeout_config: TimeoutConfig | None = None,
        client: Client | None = None,
        poll_interval_seconds: float = 0.5,
    ):
        self._rpc_url = rpc_url
        self.commitment = Commitment(commitment)
        self.timeout_config = timeout_config or TimeoutConfig()
        self.client = client or Client(
            rpc_url,
            commitment=self.commitment,
            timeout=self.timeout_config.request_timeout,
        )
        self.poll_interval_seconds = poll_interval_seconds

    @property
    def rpc_url(self) -> str:
        return self._rpc_url

    def _call(self, context: str, request: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        try:
            return request(*args, **kwargs)
        except RPC_EXCEPTIONS as e:
            raise create_network_error(e, self._rpc_url, context) from e

    def get_native_balance(self, account: str) -> int:
        owner = parse_pubkey(account, "account address")
        response = self._call(
            "Fetch SOL balance", self.client.get_balance, owner, commitment=self.commitment
        )
        return int(response.value)

    def list_token_accounts(
        self, account: str, program_id: str | None = None
    ) -> list[TokenAccount]:
        owner = parse_pubkey(account, "account address")
        program = parse_pubkey(program_id, "token program") if program_id else TOKEN_PROGRAM_ID
        response = self._call(
            "Fetch token accounts",
            self.client.get_token_accounts_by_owner_json_parsed,
            owner,
            TokenAccountOpts(program_id=program),
            commitment=self.commitment,
        )

        accounts = []
        for entry in response.value:
            info = entry.account.data.parsed["info"]
            token_amount = info.get("tokenAmount", {})
            accounts.append(
                TokenAccount(
                    mint=info["mint"],
                    ui_amount=_parse_ui_amount(token_amount),
                    address=str(entry.pubkey),
                    decimals=token_amount.get("decimals"),
                )
            )
        logger.info("Fetched %d token accounts for %s", len(accounts), owner)
        return accounts

    def account_exists(self, address: str) -> bool:
        response = self._call(
            "Fetch account info",
            self.client.get_account_info,
            parse_pubkey(address, "account address"),
            commitment=self.commitment,
        )
        return response.value is not None

    def resolve_token_account_address(self, mint: str, owner: str) -> str:
        mint_key = parse_pubkey(mint, "mint address")
        owner_key = parse_pubkey(owner, "owner address")
        return str(get_associated_token_address(owner_key, mint_key))

    def resolve_or_create_token_account(
        self, payer: WalletProvider, mint: str, owner: str
    ) -> str:
        address = self.resolve_token_account_address(mint, owner)
        if self.account_exists(address):
            return address

        logger.info("Creating token account %s for owner %s", address, owner)
        instruction = create_associated_token_account(
            payer=self._signer_pubkey(payer),
            owner=parse_pubkey(owner, "owner address"),
            mint=parse_pubkey(mint, "mint address"),
        )
        self._sign_and_send(payer, instruction)
        return address

    def mint(
        self,
        authority: WalletProvider,
        mint: str,
        destination: str,
        amount: int,
    ) -> str:
        instruction = mint_to(
            MintToParams(
                program_id=TOKEN_PROGRAM_ID,
                mint=parse_pubkey(mint, "mint address"),
                dest=parse_pubkey(destination, "destination account"),
                mint_authority=self._signer_pubkey(authority),
                amount=amount,
            )
        )
        signature = self._sign_and_send(authority, instruction)
        logger.info("Minted %d base units of %s to %s", amount, mint, destination)
        return signature

    def transfer(
        self,
        authority: WalletProvider,
        source: str,
        destination: str,
        amount: int,
    ) -> str:
        source_key = parse_pubkey(source, "source account")
        if not self.account_exists(str(source_key)):
            raise LedgerError(f"Source token account {source_key} does not exist")

        instruction = transfer(
            TransferParams(
                program_id=TOKEN_PROGRAM_ID,
                source=source_key,
                dest=parse_pubkey(destination, "destination account"),
                owner=self._signer_pubkey(authority),
                amount=amount,
            )
        )
        signature = self._sign_and_send(authority, instruction)
        logger.info("Transferred %d base units from %s to %s", amount, source, destination)
        return signature

    @staticmethod
    def _signer_pubkey(signer: WalletProvider) -> Pubkey:
        if not signer.public_key:
            raise LedgerError("Wallet is not connected")
        return parse_pubkey(signer.public_key, "wallet address")

    def _sign_and_send(self, signer: WalletProvider, instruction: Instruction) -> str:
        latest = self._call(
            "Fetch latest blockhash",
            self.client.get_latest_blockhash,
            commitment=self.commitment,
        ).value
        message = Message.new_with_blockhash(
            [instruction], self._signer_pubkey(signer), latest.blockhash
        )
        transaction = signer.sign_transaction(
            Transaction.new_unsigned(message), latest.blockhash
        )

        signature = self._call(
            "Send transaction",
            self.client.send_raw_transaction,
            bytes(transaction),
            opts=TxOpts(skip_confirmation=True, preflight_commitment=self.commitment),
        ).value
        logger.info("Transaction submitted: %s", signature)
        self.wait_for_confirmation(signature, latest.last_valid_block_height)
        return str(signature)

    def wait_for_confirmation(
        self, signature: Signature, last_valid_block_height: int | None = None
    ) -> Any:
        """Block until ``signature`` reaches the commitment or its blockhash expires."""
        try:
            response = self._call(
                "Confirm transaction",
                self.client.confirm_transaction,
                signature,
                self.commitment,
                sleep_seconds=self.poll_interval_seconds,
                last_valid_block_height=last_valid_block_height,
            )
        except (UnconfirmedTxError, TransactionExpiredBlockheightExceededError) as e:
            raise LedgerError(f"Transaction {signature} was not confirmed: {e}") from e

        status = response.value[0] if response.value else None
        if status is not None and status.err is not None:
            raise LedgerError(f"Transaction {signature} failed: {status.err}")
        return status
