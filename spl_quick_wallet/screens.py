"""Modal screens shared across SPL Quick Wallet features."""

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Label


class BaseModalScreen(ModalScreen):
    """Base modal screen with common key bindings."""

    BINDINGS = [
        ("escape", "app.pop_screen", "Close"),
    ]


class LoadingScreen(ModalScreen):
    """Blocking overlay shown while a wallet or ledger call is in flight."""

    BINDINGS = []

    def __init__(self, message: str = "Loading..."):
        super().__init__()
        self.message = message

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            yield Label(f"⏳ {self.message}", id="loading-message")
