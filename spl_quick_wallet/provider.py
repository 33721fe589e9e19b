"""Keypair-backed wallet provider for SPL Quick Wallet."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import base58
from solders.keypair import Keypair
from solders.transaction import Transaction

from spl_quick_wallet.config import AppConfig

logger = logging.getLogger(__name__)

REQUIRED_CAPABILITY = "solana:signTransaction"


class ProviderError(Exception):
    """Raised when the wallet provider cannot connect or sign."""


class KeypairWalletProvider:
    """Wallet provider holding a local ed25519 keypair.

    The keypair is only loaded on ``connect()`` and is dropped again on
    ``disconnect()``. Never logs key material.
    """

    CAPABILITIES = frozenset({"solana:connect", "solana:disconnect", REQUIRED_CAPABILITY})

    def __init__(
        self,
        keypair_path: str | Path | None = None,
        private_key: str | None = None,
    ):
        if keypair_path is None and private_key is None:
            raise ValueError("A keypair path or a private key is required")
        self.keypair_path = Path(keypair_path).expanduser() if keypair_path else None
        self._private_key = private_key
        self._keypair: Keypair | None = None

    @property
    def public_key(self) -> str | None:
        if self._keypair is None:
            return None
        return str(self._keypair.pubkey())

    @property
    def is_connected(self) -> bool:
        return self._keypair is not None

    def has_capability(self, marker: str) -> bool:
        return marker in self.CAPABILITIES

    @staticmethod
    def load_keypair_file(path: Path) -> Keypair:
        """Load a Solana CLI keypair file (JSON array of 64 bytes)."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ProviderError(f"Keypair file not found: {path}") from e
        except (OSError, json.JSONDecodeError) as e:
            raise ProviderError(f"Cannot read keypair file {path}: {e}") from e

        if (
            not isinstance(data, list)
            or len(data) != 64
            or not all(isinstance(b, int) and 0 <= b <= 255 for b in data)
        ):
            raise ProviderError(
                f"Invalid keypair file {path}: expected a JSON array of 64 bytes"
            )

        try:
            return Keypair.from_bytes(bytes(data))
        except ValueError as e:
            raise ProviderError(f"Invalid keypair file {path}: {e}") from e

    def _load_keypair(self) -> Keypair:
        if self._private_key is not None:
            try:
                secret = base58.b58decode(self._private_key.strip())
                return Keypair.from_bytes(secret)
            except ValueError as e:
                raise ProviderError("Invalid base58 private key") from e
        if self.keypair_path is None:
            raise ProviderError("No keypair source configured")
        return self.load_keypair_file(self.keypair_path)

    def connect(self) -> str:
        if self._keypair is None:
            self._keypair = self._load_keypair()
        address = str(self._keypair.pubkey())
        logger.info("Wallet provider connected: %s", address)
        return address

    def disconnect(self) -> None:
        if self._keypair is not None:
            logger.info("Wallet provider disconnected: %s", self._keypair.pubkey())
        self._keypair = None

    def sign_transaction(self, transaction: Transaction, recent_blockhash: Any) -> Transaction:
        if self._keypair is None:
            raise ProviderError("Wallet is not connected")
        transaction.sign([self._keypair], recent_blockhash)
        return transaction


def discover_provider(config: AppConfig) -> KeypairWalletProvider | None:
    """Return the configured wallet provider, or ``None`` when none is set up."""
    if not config.has_wallet_source:
        logger.info("No wallet provider configured")
        return None
    return KeypairWalletProvider(
        keypair_path=config.keypair_path,
        private_key=config.private_key,
    )
