"""Session event handlers for SPL Quick Wallet TUI."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, cast

from textual.containers import Container
from textual.widgets import Button, DataTable, Label, Static

from spl_quick_wallet.features.session.controller import (
    SessionState,
    WalletSessionController,
)
from spl_quick_wallet.screens import LoadingScreen

if TYPE_CHECKING:
    from spl_quick_wallet.__main__ import WalletApp

logger = logging.getLogger(__name__)

ACTION_BUTTON_IDS = (
    "#connect-button",
    "#mint-button",
    "#transfer-button",
    "#refresh-button",
    "#disconnect-button",
)


class SessionHandlersMixin:
    """Mixin class providing connect/disconnect handlers for WalletApp."""

    controller: WalletSessionController
    _loading_screen: LoadingScreen | None

    def _on_session_state(self: "WalletApp", state: SessionState) -> None:
        try:
            self.call_from_thread(self.render_session_state, state)
        except RuntimeError:
            # Already on the app thread.
            self.render_session_state(state)

    def _set_actions_enabled(self: "WalletApp", enabled: bool) -> None:
        for button_id in ACTION_BUTTON_IDS:
            try:
                cast(Button, self.main_screen.query_one(button_id)).disabled = not enabled
            except Exception:
                continue

    def render_session_state(self: "WalletApp", state: SessionState) -> None:
        connected = state.is_connected
        cast(Container, self.main_screen.query_one("#connect-panel")).set_class(connected, "hidden")
        cast(Container, self.main_screen.query_one("#session-panel")).set_class(
            not connected, "hidden"
        )

        connect_button = cast(Button, self.main_screen.query_one("#connect-button"))
        connect_button.label = (
            "Connecting..." if state.pending and not connected else "🔌 Connect Wallet"
        )

        cast(Label, self.main_screen.query_one("#account-address")).update(
            state.account_address or ""
        )
        cast(Static, self.main_screen.query_one("#sol-balance")).update(
            f"SOL Balance: [b]{state.native_balance:.4f} SOL[/b]"
        )
        self.update_tokens_table(state)

        error_line = cast(Static, self.main_screen.query_one("#error-line"))
        error_line.update(state.error_message or "")

        self._set_actions_enabled(not state.pending)

    def update_tokens_table(self: "WalletApp", state: SessionState) -> None:
        table = cast(DataTable, self.main_screen.query_one("#tokens-table"))
        table.clear(columns=True)
        table.add_column("Mint", key="mint")
        table.add_column("Amount", key="amount")

        if not state.token_holdings:
            table.add_row("[dim]No SPL tokens found.[/dim]", "")
            return

        for holding in state.token_holdings:
            amount = "-" if holding.ui_amount is None else f"{holding.ui_amount}"
            table.add_row(holding.mint_address, amount)

    def connect_wallet(self: "WalletApp") -> None:
        if self.controller.state.pending:
            return

        self._set_actions_enabled(False)
        self._loading_screen = LoadingScreen("Connecting wallet...")
        self.push_screen(self._loading_screen)

        def worker() -> None:
            try:
                connected = self.controller.connect()
                self.call_from_thread(self._on_connect_finished, connected, None)
            except Exception as e:
                logger.error("Unexpected error during connect: %s", e, exc_info=True)
                self.call_from_thread(self._on_connect_finished, False, e)

        threading.Thread(target=worker, daemon=True).start()

    def _dismiss_loading(self: "WalletApp") -> None:
        if self._loading_screen is not None:
            try:
                self._loading_screen.dismiss()
            except Exception:
                pass
            self._loading_screen = None

    def _on_connect_finished(
        self: "WalletApp", connected: bool, error: Exception | None
    ) -> None:
        self._dismiss_loading()
        state = self.controller.state
        self.render_session_state(state)

        if error is not None:
            self.notify(self.format_error(error), severity="error")
        elif not connected:
            self.notify(state.error_message or "Failed to connect wallet.", severity="error")
        elif state.error_message:
            self.notify(
                f"Connected with warnings: {state.error_message}", severity="warning"
            )
        else:
            self.notify("Wallet connected", severity="information")

    def refresh_balances_async(self: "WalletApp") -> None:
        if self.controller.state.pending:
            return

        self._set_actions_enabled(False)

        def worker() -> None:
            try:
                ok = self.controller.refresh()
                self.call_from_thread(self._on_refresh_finished, ok, None)
            except Exception as e:
                logger.error("Unexpected error during refresh: %s", e, exc_info=True)
                self.call_from_thread(self._on_refresh_finished, False, e)

        threading.Thread(target=worker, daemon=True).start()

    def _on_refresh_finished(
        self: "WalletApp", ok: bool, error: Exception | None
    ) -> None:
        state = self.controller.state
        self.render_session_state(state)
        if error is not None:
            self.notify(self.format_error(error), severity="error")
        elif ok:
            self.notify("Balances refreshed", severity="information")

    def disconnect_wallet(self: "WalletApp") -> None:
        if self.controller.state.pending:
            self.notify("Wait for the current operation to finish", severity="warning")
            return
        self.controller.disconnect()
        self.render_session_state(self.controller.state)
        self.notify("Wallet disconnected", severity="information")
