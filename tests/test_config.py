from pathlib import Path

import pytest

from spl_quick_wallet import config as config_module
from spl_quick_wallet.config import (
    CLUSTER_URLS,
    DEFAULT_TOKEN_DECIMALS,
    AppConfig,
    DecimalsPolicy,
)


@pytest.fixture(autouse=True)
def no_default_keypair(monkeypatch, tmp_path):
    monkeypatch.setattr(config_module, "DEFAULT_KEYPAIR_PATH", tmp_path / "missing.json")


class TestDecimalsPolicy:
    def test_default(self):
        policy = DecimalsPolicy()
        assert policy.decimals_for("AnyMint") == DEFAULT_TOKEN_DECIMALS == 9

    def test_parse_overrides(self):
        policy = DecimalsPolicy.parse("MintA=6, MintB = 0")
        assert policy.decimals_for("MintA") == 6
        assert policy.decimals_for("MintB") == 0
        assert policy.decimals_for("MintC") == 9

    def test_parse_skips_bad_entries(self):
        policy = DecimalsPolicy.parse("MintA,MintB=x,MintC=-1,MintD=2")
        assert policy.overrides == {"MintD": 2}

    def test_parse_empty(self):
        assert DecimalsPolicy.parse(None).overrides == {}
        assert DecimalsPolicy.parse("").overrides == {}


class TestAppConfig:
    def test_defaults(self):
        config = AppConfig.from_environment()
        assert config.cluster == "devnet"
        assert config.rpc_url == CLUSTER_URLS["devnet"]
        assert config.commitment == "confirmed"
        assert config.keypair_path is None
        assert config.private_key is None
        assert config.has_wallet_source is False

    def test_cluster_selects_url(self, monkeypatch):
        monkeypatch.setenv("SPL_WALLET_CLUSTER", "Mainnet-Beta")
        config = AppConfig.from_environment()
        assert config.cluster == "mainnet-beta"
        assert config.rpc_url == "https://api.mainnet-beta.solana.com"

    def test_unknown_cluster_falls_back(self, monkeypatch):
        monkeypatch.setenv("SPL_WALLET_CLUSTER", "localnet")
        assert AppConfig.from_environment().cluster == "devnet"

    def test_rpc_url_override(self, monkeypatch):
        monkeypatch.setenv("SPL_WALLET_RPC_URL", "http://127.0.0.1:8899")
        config = AppConfig.from_environment()
        assert config.cluster == "devnet"
        assert config.rpc_url == "http://127.0.0.1:8899"

    def test_invalid_commitment_falls_back(self, monkeypatch):
        monkeypatch.setenv("SPL_WALLET_COMMITMENT", "instant")
        assert AppConfig.from_environment().commitment == "confirmed"

    def test_keypair_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SPL_WALLET_KEYPAIR", str(tmp_path / "id.json"))
        config = AppConfig.from_environment()
        assert config.keypair_path == tmp_path / "id.json"
        assert config.has_wallet_source is True

    def test_default_keypair_used_when_present(self, monkeypatch, tmp_path):
        keypair_file = tmp_path / "id.json"
        keypair_file.write_text("[]")
        monkeypatch.setattr(config_module, "DEFAULT_KEYPAIR_PATH", keypair_file)
        assert AppConfig.from_environment().keypair_path == keypair_file

    def test_private_key_from_env(self, monkeypatch):
        monkeypatch.setenv("SPL_WALLET_PRIVATE_KEY", "secret")
        config = AppConfig.from_environment()
        assert config.private_key == "secret"
        assert config.has_wallet_source is True

    def test_timeouts(self, monkeypatch):
        monkeypatch.setenv("SPL_WALLET_CONNECT_TIMEOUT", "2")
        monkeypatch.setenv("SPL_WALLET_READ_TIMEOUT", "not-a-number")
        timeouts = AppConfig.from_environment().timeout_config
        assert timeouts.connect_timeout == 2.0
        assert timeouts.read_timeout == 15.0

    def test_token_decimals(self, monkeypatch):
        monkeypatch.setenv("SPL_WALLET_TOKEN_DECIMALS", "MintA=6")
        policy = AppConfig.from_environment().decimals_policy
        assert policy.decimals_for("MintA") == 6
