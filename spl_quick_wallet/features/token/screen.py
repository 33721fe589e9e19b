"""Token operation screens for SPL Quick Wallet."""

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Button, Label, Static

from spl_quick_wallet.features.token.service import OperationResult
from spl_quick_wallet.screens import BaseModalScreen


def explorer_url(signature: str, cluster: str = "devnet") -> str:
    base = f"https://explorer.solana.com/tx/{signature}"
    if cluster == "mainnet-beta":
        return base
    return f"{base}?cluster={cluster}"


class OperationResultScreen(BaseModalScreen):
    def __init__(self, result: OperationResult, cluster: str = "devnet"):
        super().__init__()
        self.result = result
        self.cluster = cluster

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            yield Label("✅ Operation Confirmed!", id="result-title")
            yield Static(self.result.message, id="result-message")
            if self.result.signature:
                yield Label("Transaction Signature:")
                yield Static(self.result.signature, id="signature-display")
                yield Label(f"Explorer: {explorer_url(self.result.signature, self.cluster)}")
            yield Button("❌ Close", id="close-button")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "close-button":
            self.app.pop_screen()
