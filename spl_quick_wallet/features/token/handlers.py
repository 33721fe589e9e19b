"""Token mint and transfer event handlers for SPL Quick Wallet TUI."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, cast

from textual.widgets import Input, Static

from spl_quick_wallet.features.token.screen import OperationResultScreen
from spl_quick_wallet.features.token.service import OperationResult
from spl_quick_wallet.shared.validation import AddressValidator, AmountValidator

if TYPE_CHECKING:
    from spl_quick_wallet.__main__ import WalletApp
    from spl_quick_wallet.features.session.controller import WalletSessionController

logger = logging.getLogger(__name__)


class TokenHandlersMixin:
    """Mixin class providing mint and transfer handlers for WalletApp."""

    controller: WalletSessionController

    def _show_operation_error(self: "WalletApp", message: str) -> None:
        self.controller.report_input_error(message)
        result = cast(Static, self.main_screen.query_one("#operation-result"))
        result.update(f"[red]Error: {message}[/red]")

    def _read_mint_address(self: "WalletApp") -> str | None:
        mint_address = cast(Input, self.main_screen.query_one("#mint-address-input")).value.strip()
        validation = AddressValidator.validate(mint_address, "Token mint address")
        if not validation.is_valid:
            self._show_operation_error(validation.error_message or "Invalid mint")
            return None
        return validation.normalized_value

    def _read_amount(self: "WalletApp", input_id: str) -> str | None:
        amount = cast(Input, self.main_screen.query_one(input_id)).value.strip()
        validation = AmountValidator.parse_human_amount(amount)
        if not validation.is_valid:
            self._show_operation_error(validation.error_message or "Invalid amount")
            return None
        return amount

    def submit_mint_form(self: "WalletApp") -> None:
        mint_address = self._read_mint_address()
        if mint_address is None:
            return
        amount = self._read_amount("#mint-amount-input")
        if amount is None:
            return

        self._run_token_operation(
            "Minting",
            lambda: self.controller.submit_mint(mint_address, amount),
        )

    def submit_transfer_form(self: "WalletApp") -> None:
        mint_address = self._read_mint_address()
        if mint_address is None:
            return

        recipient = cast(Input, self.main_screen.query_one("#recipient-input")).value.strip()
        validation = AddressValidator.validate(recipient, "Recipient address")
        if not validation.is_valid:
            self._show_operation_error(validation.error_message or "Invalid recipient")
            return

        amount = self._read_amount("#transfer-amount-input")
        if amount is None:
            return

        self._run_token_operation(
            "Transferring",
            lambda: self.controller.submit_transfer(
                mint_address, validation.normalized_value, amount
            ),
        )

    def _run_token_operation(self: "WalletApp", label: str, operation) -> None:
        if self.controller.state.pending:
            return

        self._set_actions_enabled(False)
        cast(Static, self.main_screen.query_one("#operation-result")).update(
            f"[yellow]{label}... waiting for confirmation[/yellow]"
        )

        def worker() -> None:
            try:
                result = operation()
                self.call_from_thread(self._on_token_operation_finished, result)
            except Exception as e:
                logger.error("Unexpected token operation error: %s", e, exc_info=True)
                self.call_from_thread(
                    self._on_token_operation_finished,
                    OperationResult(success=False, message=self.format_error(e)),
                )

        threading.Thread(target=worker, daemon=True).start()

    def _on_token_operation_finished(
        self: "WalletApp", result: OperationResult
    ) -> None:
        self.render_session_state(self.controller.state)
        output = cast(Static, self.main_screen.query_one("#operation-result"))

        if not result.success:
            output.update(f"[red]Error: {result.message}[/red]")
            self.notify(result.message, severity="error")
            return

        output.update(f"[green]{result.message}[/green]")
        self.notify(result.message, severity="information")
        self.push_screen(OperationResultScreen(result, self.app_config.cluster))
