import pytest
from solders.keypair import Keypair

from spl_quick_wallet.config import CLUSTER_URLS
from spl_quick_wallet.ledger import RpcLedgerClient

DEVNET_RPC = CLUSTER_URLS["devnet"]


@pytest.fixture
def devnet_ledger():
    ledger = RpcLedgerClient(DEVNET_RPC)
    if not ledger.client.is_connected():
        pytest.skip("Devnet RPC unavailable")
    return ledger


@pytest.mark.integration
def test_fresh_account_has_no_balance(devnet_ledger):
    """A newly generated account holds no SOL on devnet"""
    assert devnet_ledger.get_native_balance(str(Keypair().pubkey())) == 0


@pytest.mark.integration
def test_fresh_account_has_no_token_accounts(devnet_ledger):
    assert devnet_ledger.list_token_accounts(str(Keypair().pubkey())) == []


@pytest.mark.integration
def test_token_program_account_exists(devnet_ledger):
    assert devnet_ledger.account_exists("TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA") is True
