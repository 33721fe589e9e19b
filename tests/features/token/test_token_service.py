"""Tests for the token mint and transfer service."""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from spl_quick_wallet.config import DecimalsPolicy
from spl_quick_wallet.features.token.screen import explorer_url
from spl_quick_wallet.features.token.service import OperationResult, TokenService


@pytest.fixture
def service(fake_ledger):
    return TokenService(fake_ledger)


class TestToBaseUnits:
    def test_default_decimals(self, service):
        assert service.to_base_units("MintX", "5") == 5_000_000_000

    def test_decimal_amount(self, service):
        assert service.to_base_units("MintX", Decimal("0.000000001")) == 1

    def test_override_decimals(self, fake_ledger):
        service = TokenService(fake_ledger, DecimalsPolicy(overrides={"MintUSDC": 6}))
        assert service.to_base_units("MintUSDC", "2.5") == 2_500_000
        assert service.to_base_units("MintX", "2.5") == 2_500_000_000

    def test_too_many_decimal_places(self, fake_ledger):
        service = TokenService(fake_ledger, DecimalsPolicy(default_decimals=2))
        with pytest.raises(ValueError, match="decimal places"):
            service.to_base_units("MintX", "1.005")

    @pytest.mark.parametrize("amount", ["", "abc", "0", "-1", "NaN"])
    def test_invalid_amounts(self, service, amount):
        with pytest.raises(ValueError):
            service.to_base_units("MintX", amount)


@pytest.mark.unit
class TestMintTokens:
    def test_mints_to_resolved_account(self, service, fake_ledger, fake_provider):
        result = service.mint_tokens(fake_provider, "Addr1", "MintX", "5")

        assert isinstance(result, OperationResult)
        assert result.success is True
        assert result.signature == "sig-mint"
        assert result.token_account == "ata:Addr1:MintX"
        assert result.message == "Minted 5 tokens to ata:Addr1:MintX"
        assert fake_ledger.calls == [
            ("resolve_or_create_token_account", "MintX", "Addr1"),
            ("mint", "MintX", "ata:Addr1:MintX", 5_000_000_000),
        ]

    def test_ledger_failure_propagates(self, service, fake_ledger, fake_provider):
        fake_ledger.mint_error = RuntimeError("mint authority mismatch")

        with pytest.raises(RuntimeError, match="mint authority mismatch"):
            service.mint_tokens(fake_provider, "Addr1", "MintX", "5")

    def test_invalid_amount_skips_ledger(self, service, fake_ledger, fake_provider):
        with pytest.raises(ValueError):
            service.mint_tokens(fake_provider, "Addr1", "MintX", "zero")
        assert fake_ledger.calls == []


@pytest.mark.unit
class TestTransferTokens:
    def test_transfers_between_derived_accounts(self, service, fake_ledger, fake_provider):
        fake_ledger.existing_accounts.add("ata:Addr1:MintX")

        result = service.transfer_tokens(fake_provider, "Addr1", "MintX", "Addr2", "1.25")

        assert result.success is True
        assert result.message == "Transferred 1.25 tokens to Addr2"
        assert result.token_account == "ata:Addr2:MintX"
        assert fake_ledger.calls == [
            ("resolve_token_account_address", "MintX", "Addr1"),
            ("resolve_or_create_token_account", "MintX", "Addr2"),
            ("transfer", "ata:Addr1:MintX", "ata:Addr2:MintX", 1_250_000_000),
        ]

    def test_sender_account_is_never_created(self, service, fake_ledger, fake_provider):
        with pytest.raises(Exception, match="does not exist"):
            service.transfer_tokens(fake_provider, "Addr1", "MintX", "Addr2", "1")

        assert ("resolve_or_create_token_account", "MintX", "Addr1") not in fake_ledger.calls

    def test_uses_ledger_mock(self, fake_provider):
        ledger = MagicMock()
        ledger.resolve_token_account_address.return_value = "source"
        ledger.resolve_or_create_token_account.return_value = "dest"
        ledger.transfer.return_value = "sig"
        service = TokenService(ledger)

        result = service.transfer_tokens(fake_provider, "Addr1", "MintX", "Addr2", "3")

        ledger.transfer.assert_called_once_with(fake_provider, "source", "dest", 3_000_000_000)
        assert result.signature == "sig"


class TestExplorerUrl:
    def test_devnet(self):
        assert explorer_url("abc", "devnet") == "https://explorer.solana.com/tx/abc?cluster=devnet"

    def test_mainnet_has_no_cluster_param(self):
        assert explorer_url("abc", "mainnet-beta") == "https://explorer.solana.com/tx/abc"
