"""Main application entry point for SPL Quick Wallet."""

import logging

from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal
from textual.screen import Screen
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Label,
    Static,
)

from spl_quick_wallet.config import AppConfig
from spl_quick_wallet.features.session.controller import WalletSessionController
from spl_quick_wallet.features.session.handlers import SessionHandlersMixin
from spl_quick_wallet.features.token.handlers import TokenHandlersMixin
from spl_quick_wallet.ledger import LedgerError, RpcLedgerClient
from spl_quick_wallet.provider import ProviderError, discover_provider
from spl_quick_wallet.screens import LoadingScreen
from spl_quick_wallet.shared.logging import (
    LoggingConfig,
    format_error_for_user,
    get_logger,
    setup_logging,
)
from spl_quick_wallet.shared.network import NetworkError, NetworkErrorType
from spl_quick_wallet.styles import CSS

logger = logging.getLogger(__name__)


class WalletApp(
    SessionHandlersMixin,
    TokenHandlersMixin,
    App,
):
    CSS = CSS
    TITLE = "SPL Quick Wallet"

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("r", "refresh", "Refresh"),
        ("tab", "focus_next", "Next"),
        ("shift+tab", "focus_previous", "Previous"),
    ]

    _loading_screen: LoadingScreen | None = None

    def __init__(self, app_config: AppConfig | None = None):
        super().__init__()
        self.app_config = app_config or AppConfig.from_environment()
        self.ledger = RpcLedgerClient(
            self.app_config.rpc_url,
            commitment=self.app_config.commitment,
            timeout_config=self.app_config.timeout_config,
        )
        self.controller = WalletSessionController(
            self.ledger,
            lambda: discover_provider(self.app_config),
            decimals_policy=self.app_config.decimals_policy,
        )
        self._unsubscribe = None

    @property
    def main_screen(self) -> Screen:
        """The default screen holding the wallet widgets, even under a modal."""
        return self.screen_stack[0]

    def format_error(self, error: Exception) -> str:
        """Format an unexpected error with a user-friendly message."""
        if isinstance(error, NetworkError):
            if error.error_type == NetworkErrorType.TIMEOUT:
                return f"Connection timeout. The RPC node at {self.ledger.rpc_url} is not responding."
            elif error.error_type == NetworkErrorType.CONNECTION_ERROR:
                return f"Cannot connect to RPC node. Check your internet connection and the RPC URL: {self.ledger.rpc_url}"
            elif error.error_type == NetworkErrorType.HTTP_ERROR:
                status_info = (
                    f" (HTTP {error.status_code})" if error.status_code else ""
                )
                return f"Server error{status_info}: {error.message}"
            return f"RPC error: {error.message}"
        if isinstance(error, (LedgerError, ProviderError)):
            return str(error)
        return format_error_for_user(error)

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(
            f"[dim]{self.app_config.cluster} · {self.app_config.rpc_url}[/dim]",
            id="cluster-status",
        )

        with Container(id="connect-panel"):
            yield Label("Solana Wallet & SPL Tokens", id="welcome-title")
            yield Static("Manage your SOL & SPL Tokens", id="welcome-helper")
            yield Button("🔌 Connect Wallet", id="connect-button", variant="primary")

        with Container(id="session-panel", classes="hidden"):
            yield Label("Wallet Address:")
            yield Label("", id="account-address")
            yield Static(id="sol-balance")

            yield Label("SPL Tokens", id="tokens-title")
            yield DataTable(id="tokens-table")

            yield Label("Mint Tokens", id="mint-title")
            yield Input(placeholder="Token Mint Address", id="mint-address-input")
            yield Input(placeholder="Amount to Mint", id="mint-amount-input")
            yield Button("🪙 Mint Tokens", id="mint-button")

            yield Label("Transfer Tokens", id="transfer-title")
            yield Input(placeholder="Recipient Wallet Address", id="recipient-input")
            yield Input(placeholder="Amount to Transfer", id="transfer-amount-input")
            yield Button("📤 Transfer Tokens", id="transfer-button")

            yield Static(id="operation-result")
            yield Horizontal(
                Button("🔄 Refresh", id="refresh-button"),
                Button("⏏ Disconnect Wallet", id="disconnect-button"),
                id="session-actions-row",
            )

        yield Static(id="error-line")
        yield Footer()

    def on_mount(self) -> None:
        logger.info(
            "Application mounted (cluster=%s, rpc=%s)",
            self.app_config.cluster,
            self.app_config.rpc_url,
        )
        self._unsubscribe = self.controller.subscribe(self._on_session_state)
        self.render_session_state(self.controller.state)

    def on_unmount(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    def action_refresh(self) -> None:
        if self.controller.is_connected:
            self.refresh_balances_async()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        logger.info("Button pressed: %s", button_id)

        if button_id == "connect-button":
            self.connect_wallet()
        elif button_id == "mint-button":
            self.submit_mint_form()
        elif button_id == "transfer-button":
            self.submit_transfer_form()
        elif button_id == "refresh-button":
            self.refresh_balances_async()
        elif button_id == "disconnect-button":
            self.disconnect_wallet()
        else:
            logger.warning("Unknown button ID: %s", button_id)


def main():
    """Entry point for the application."""
    setup_logging(LoggingConfig.from_environment())
    config = AppConfig.from_environment()
    get_logger(__name__, {"cluster": config.cluster}).info(
        "Starting SPL Quick Wallet against %s", config.rpc_url
    )
    app = WalletApp(config)
    app.run()


if __name__ == "__main__":
    main()
