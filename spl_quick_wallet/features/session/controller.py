"""Wallet session controller for SPL Quick Wallet.

Holds the observable session state (account, balances, pending flag and
the last error) and runs the connect -> query -> mutate -> re-query
workflow against a wallet provider and a ledger client.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum
from typing import Callable

from spl_quick_wallet.config import NATIVE_DECIMALS, DecimalsPolicy
from spl_quick_wallet.features.token.service import OperationResult, TokenService
from spl_quick_wallet.provider import REQUIRED_CAPABILITY
from spl_quick_wallet.shared.logging import ContextAdapter
from spl_quick_wallet.shared.protocols import LedgerClient, TokenAccount, WalletProvider
from spl_quick_wallet.shared.validation import from_base_units

logger = ContextAdapter(logging.getLogger(__name__))


class SessionErrorType(Enum):
    PROVIDER_MISSING = "provider_missing"
    PROVIDER_UNSUPPORTED = "provider_unsupported"
    CONNECTION_REJECTED = "connection_rejected"
    BALANCE_FETCH_FAILED = "balance_fetch_failed"
    TOKEN_FETCH_FAILED = "token_fetch_failed"
    NOT_CONNECTED = "not_connected"
    OPERATION_REJECTED = "operation_rejected"
    OPERATION_IN_PROGRESS = "operation_in_progress"
    INVALID_INPUT = "invalid_input"


PROVIDER_MISSING_MESSAGE = "Solana wallet not found!"
PROVIDER_UNSUPPORTED_MESSAGE = "Supported Solana wallet not installed!"
CONNECTION_FAILED_MESSAGE = "Failed to connect wallet."
BALANCE_FETCH_FAILED_MESSAGE = "Failed to fetch SOL balance."
TOKEN_FETCH_FAILED_MESSAGE = "Failed to fetch token balances."
NOT_CONNECTED_MESSAGE = "Connect wallet first!"
MINT_FAILED_MESSAGE = "Minting failed!"
TRANSFER_FAILED_MESSAGE = "Transfer failed!"
OPERATION_IN_PROGRESS_MESSAGE = "Another operation is still in progress."


@dataclass
class SessionError(Exception):
    error_type: SessionErrorType
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class TokenHolding:
    mint_address: str
    ui_amount: Decimal | None
    token_account: str = ""
    decimals: int | None = None

    @classmethod
    def from_token_account(cls, account: TokenAccount) -> "TokenHolding":
        return cls(
            mint_address=account.mint,
            ui_amount=account.ui_amount,
            token_account=account.address,
            decimals=account.decimals,
        )


@dataclass
class SessionState:
    account_address: str | None = None
    native_balance: Decimal = Decimal(0)
    token_holdings: list[TokenHolding] = field(default_factory=list)
    pending: bool = False
    error_message: str | None = None
    error_type: SessionErrorType | None = None

    @property
    def is_connected(self) -> bool:
        return self.account_address is not None

    def copy(self) -> "SessionState":
        return replace(self, token_holdings=list(self.token_holdings))


StateListener = Callable[[SessionState], None]


def _error_text(error: Exception, fallback: str) -> str:
    text = str(error).strip()
    return text or fallback


class WalletSessionController:
    """Single-session controller between the UI, the wallet and the ledger.

    Operations are blocking and meant to run off the UI thread. Only one
    connect, refresh, mint or transfer may be in flight at a time; a second
    one is rejected without touching the wallet or the ledger.

    Every connect and disconnect starts a new session generation. Results of
    work started under an older generation are dropped, so nothing written
    after ``disconnect()`` can resurrect the previous session's state.
    """

    def __init__(
        self,
        ledger: LedgerClient,
        locate_provider: Callable[[], WalletProvider | None],
        decimals_policy: DecimalsPolicy | None = None,
        token_program_id: str | None = None,
    ):
        self.ledger = ledger
        self.locate_provider = locate_provider
        self.token_service = TokenService(ledger, decimals_policy)
        self.token_program_id = token_program_id
        self._provider: WalletProvider | None = None
        self._generation = 0
        self._state = SessionState()
        self._state_lock = threading.Lock()
        self._operation_lock = threading.Lock()
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> SessionState:
        with self._state_lock:
            return self._state.copy()

    @property
    def is_connected(self) -> bool:
        with self._state_lock:
            return self._state.account_address is not None

    def display_native_balance(self) -> str:
        with self._state_lock:
            return f"{self._state.native_balance:.4f}"

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.state
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.error("Error in session state listener: %s", e)

    def _update(self, generation: int | None = None, **changes) -> bool:
        """Apply ``changes``; with a ``generation``, only if it is still current."""
        with self._state_lock:
            if generation is not None and generation != self._generation:
                logger.debug("Dropping stale session update: %s", sorted(changes))
                return False
            for name, value in changes.items():
                setattr(self._state, name, value)
        self._notify()
        return True

    def _set_error(
        self,
        error_type: SessionErrorType,
        message: str,
        generation: int | None = None,
    ) -> None:
        if self._update(generation, error_message=message, error_type=error_type):
            logger.with_context(error_type=error_type.value).warning(
                "Session error: %s", message
            )

    def _clear_error(self, generation: int | None = None) -> None:
        self._update(generation, error_message=None, error_type=None)

    def report_input_error(self, message: str) -> None:
        """Surface a rejected form value through the error slot."""
        self._set_error(SessionErrorType.INVALID_INPUT, message)

    def _begin_operation(self) -> bool:
        if not self._operation_lock.acquire(blocking=False):
            self._set_error(
                SessionErrorType.OPERATION_IN_PROGRESS, OPERATION_IN_PROGRESS_MESSAGE
            )
            return False
        self._update(pending=True)
        return True

    def _end_operation(self) -> None:
        self._update(pending=False)
        self._operation_lock.release()

    def _require_session(self) -> tuple[str, WalletProvider, int]:
        with self._state_lock:
            account = self._state.account_address
            provider = self._provider
            generation = self._generation
        if account is None or provider is None:
            raise SessionError(SessionErrorType.NOT_CONNECTED, NOT_CONNECTED_MESSAGE)
        return account, provider, generation

    def _is_current(self, generation: int) -> bool:
        with self._state_lock:
            return generation == self._generation

    def _acquire_provider(self) -> WalletProvider:
        provider = self.locate_provider()
        if provider is None:
            raise SessionError(SessionErrorType.PROVIDER_MISSING, PROVIDER_MISSING_MESSAGE)
        if not provider.has_capability(REQUIRED_CAPABILITY):
            raise SessionError(
                SessionErrorType.PROVIDER_UNSUPPORTED, PROVIDER_UNSUPPORTED_MESSAGE
            )
        return provider

    def _start_session(
        self, provider: WalletProvider, account: str, generation: int
    ) -> int | None:
        with self._state_lock:
            if generation != self._generation:
                return None
            self._generation += 1
            self._provider = provider
            self._state.account_address = account
            started = self._generation
        self._notify()
        return started

    def connect(self) -> bool:
        """Connect the wallet and load balances.

        Returns True when a session was established. Balance or token fetch
        failures are reported through the error slot but keep the session.
        """
        if not self._begin_operation():
            return False

        try:
            with self._state_lock:
                generation = self._generation
            self._clear_error()
            try:
                provider = self._acquire_provider()
            except SessionError as e:
                self._set_error(e.error_type, e.message, generation)
                return False

            try:
                account = str(provider.connect())
            except Exception as e:
                logger.error("Wallet connection rejected: %s", e)
                self._set_error(
                    SessionErrorType.CONNECTION_REJECTED,
                    _error_text(e, CONNECTION_FAILED_MESSAGE),
                    generation,
                )
                return False

            session = self._start_session(provider, account, generation)
            if session is None:
                logger.info("Wallet disconnected while connecting; session not started")
                return False
            logger.with_context(account=account).info("Wallet session established")

            self._load_native_balance(account, session)
            self._load_token_holdings(account, session)
            return True
        finally:
            self._end_operation()

    def _load_native_balance(self, account: str, generation: int) -> bool:
        try:
            lamports = self.ledger.get_native_balance(account)
        except Exception as e:
            logger.error("Failed to fetch SOL balance for %s: %s", account, e)
            self._set_error(
                SessionErrorType.BALANCE_FETCH_FAILED,
                BALANCE_FETCH_FAILED_MESSAGE,
                generation,
            )
            return False

        return self._update(
            generation, native_balance=from_base_units(lamports, NATIVE_DECIMALS)
        )

    def _load_token_holdings(self, account: str, generation: int) -> bool:
        try:
            accounts = self.ledger.list_token_accounts(account, self.token_program_id)
        except Exception as e:
            logger.error("Failed to fetch token accounts for %s: %s", account, e)
            self._set_error(
                SessionErrorType.TOKEN_FETCH_FAILED,
                TOKEN_FETCH_FAILED_MESSAGE,
                generation,
            )
            return False

        return self._update(
            generation,
            token_holdings=[TokenHolding.from_token_account(a) for a in accounts],
        )

    def refresh_native_balance(self, account: str | None = None) -> bool:
        """Reload the SOL balance; ``account`` defaults to the session account."""
        try:
            target, _, generation = self._require_session()
        except SessionError as e:
            self._set_error(e.error_type, e.message)
            return False
        return self._load_native_balance(account or target, generation)

    def refresh_token_holdings(self, account: str | None = None) -> bool:
        try:
            target, _, generation = self._require_session()
        except SessionError as e:
            self._set_error(e.error_type, e.message)
            return False
        return self._load_token_holdings(account or target, generation)

    def refresh(self) -> bool:
        """Refresh both SOL balance and token holdings for the session."""
        try:
            account, _, generation = self._require_session()
        except SessionError as e:
            self._set_error(e.error_type, e.message)
            return False

        if not self._begin_operation():
            return False
        try:
            balance_ok = self._load_native_balance(account, generation)
            tokens_ok = self._load_token_holdings(account, generation)
            return balance_ok and tokens_ok
        finally:
            self._end_operation()

    def _run_operation(
        self,
        fallback_message: str,
        operation: Callable[[WalletProvider, str], OperationResult],
    ) -> OperationResult:
        try:
            account, provider, generation = self._require_session()
        except SessionError as e:
            self._set_error(e.error_type, e.message)
            return OperationResult(success=False, message=e.message)

        if not self._begin_operation():
            return OperationResult(success=False, message=OPERATION_IN_PROGRESS_MESSAGE)

        try:
            try:
                result = operation(provider, account)
            except Exception as e:
                logger.error("Token operation failed: %s", e)
                message = _error_text(e, fallback_message)
                self._set_error(SessionErrorType.OPERATION_REJECTED, message, generation)
                return OperationResult(success=False, message=message)

            if not self._is_current(generation):
                logger.info("Wallet disconnected during operation; skipping refresh")
                return result

            self._clear_error(generation)
            self._load_token_holdings(account, generation)
            return result
        finally:
            self._end_operation()

    def submit_mint(self, mint_address: str, amount: str | Decimal) -> OperationResult:
        """Mint ``amount`` tokens of ``mint_address`` to the connected account."""
        return self._run_operation(
            MINT_FAILED_MESSAGE,
            lambda wallet, account: self.token_service.mint_tokens(
                wallet, account, mint_address, amount
            ),
        )

    def submit_transfer(
        self,
        mint_address: str,
        recipient_address: str,
        amount: str | Decimal,
    ) -> OperationResult:
        """Send ``amount`` tokens of ``mint_address`` to ``recipient_address``."""
        return self._run_operation(
            TRANSFER_FAILED_MESSAGE,
            lambda wallet, account: self.token_service.transfer_tokens(
                wallet, account, mint_address, recipient_address, amount
            ),
        )

    def disconnect(self) -> None:
        with self._state_lock:
            provider = self._provider
            self._provider = None
            self._generation += 1
            self._state.account_address = None
            self._state.native_balance = Decimal(0)
            self._state.token_holdings = []
            self._state.error_message = None
            self._state.error_type = None
        self._notify()

        provider = provider or self.locate_provider()
        if provider is not None:
            try:
                provider.disconnect()
            except Exception as e:
                logger.warning("Wallet provider disconnect failed: %s", e)

        logger.info("Wallet session closed")
