"""Runtime configuration for SPL Quick Wallet.

Configuration is read once from the environment at startup and is not
persisted.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from spl_quick_wallet.shared.network import TimeoutConfig

logger = logging.getLogger(__name__)

CLUSTER_URLS = {
    "devnet": "https://api.devnet.solana.com",
    "testnet": "https://api.testnet.solana.com",
    "mainnet-beta": "https://api.mainnet-beta.solana.com",
}

DEFAULT_CLUSTER = "devnet"
DEFAULT_COMMITMENT = "confirmed"
VALID_COMMITMENTS = ("processed", "confirmed", "finalized")

NATIVE_DECIMALS = 9
# Token amounts have always been scaled like SOL. Real mints declare their
# own decimals, so this default is wrong for most of them; override per mint.
DEFAULT_TOKEN_DECIMALS = 9

DEFAULT_KEYPAIR_PATH = Path.home() / ".config" / "solana" / "id.json"


@dataclass
class DecimalsPolicy:
    default_decimals: int = DEFAULT_TOKEN_DECIMALS
    overrides: dict[str, int] = field(default_factory=dict)

    def decimals_for(self, mint: str) -> int:
        return self.overrides.get(mint.strip(), self.default_decimals)

    @classmethod
    def parse(cls, value: str | None) -> "DecimalsPolicy":
        """Build a policy from ``MINT=decimals`` pairs separated by commas."""
        overrides: dict[str, int] = {}
        for item in (value or "").split(","):
            item = item.strip()
            if not item:
                continue
            mint, sep, decimals = item.partition("=")
            if not sep:
                logger.warning("Ignoring token decimals entry without '=': %s", item)
                continue
            try:
                parsed = int(decimals.strip())
            except ValueError:
                logger.warning("Ignoring non-integer token decimals for %s", mint)
                continue
            if parsed < 0:
                logger.warning("Ignoring negative token decimals for %s", mint)
                continue
            overrides[mint.strip()] = parsed
        return cls(overrides=overrides)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Invalid value for %s: %r, using %s", name, raw, default)
        return default


@dataclass
class AppConfig:
    cluster: str = DEFAULT_CLUSTER
    rpc_url: str = CLUSTER_URLS[DEFAULT_CLUSTER]
    commitment: str = DEFAULT_COMMITMENT
    keypair_path: Path | None = None
    private_key: str | None = None
    decimals_policy: DecimalsPolicy = field(default_factory=DecimalsPolicy)
    timeout_config: TimeoutConfig = field(default_factory=TimeoutConfig)

    @classmethod
    def from_environment(cls) -> "AppConfig":
        cluster = os.getenv("SPL_WALLET_CLUSTER", DEFAULT_CLUSTER).strip().lower()
        if cluster not in CLUSTER_URLS:
            logger.warning("Unknown cluster %r, falling back to %s", cluster, DEFAULT_CLUSTER)
            cluster = DEFAULT_CLUSTER

        rpc_url = os.getenv("SPL_WALLET_RPC_URL") or CLUSTER_URLS[cluster]

        commitment = os.getenv("SPL_WALLET_COMMITMENT", DEFAULT_COMMITMENT).lower()
        if commitment not in VALID_COMMITMENTS:
            logger.warning(
                "Unknown commitment %r, falling back to %s",
                commitment,
                DEFAULT_COMMITMENT,
            )
            commitment = DEFAULT_COMMITMENT

        keypair_env = os.getenv("SPL_WALLET_KEYPAIR")
        if keypair_env:
            keypair_path: Path | None = Path(keypair_env).expanduser()
        elif DEFAULT_KEYPAIR_PATH.exists():
            keypair_path = DEFAULT_KEYPAIR_PATH
        else:
            keypair_path = None

        timeout_config = TimeoutConfig(
            connect_timeout=_env_float("SPL_WALLET_CONNECT_TIMEOUT", 5.0),
            read_timeout=_env_float("SPL_WALLET_READ_TIMEOUT", 15.0),
        )

        return cls(
            cluster=cluster,
            rpc_url=rpc_url,
            commitment=commitment,
            keypair_path=keypair_path,
            private_key=os.getenv("SPL_WALLET_PRIVATE_KEY") or None,
            decimals_policy=DecimalsPolicy.parse(os.getenv("SPL_WALLET_TOKEN_DECIMALS")),
            timeout_config=timeout_config,
        )

    @property
    def has_wallet_source(self) -> bool:
        return self.private_key is not None or self.keypair_path is not None
