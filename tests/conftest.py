from decimal import Decimal

import pytest
from solders.keypair import Keypair

from spl_quick_wallet.ledger import LedgerError
from spl_quick_wallet.provider import REQUIRED_CAPABILITY
from spl_quick_wallet.shared.protocols import TokenAccount


class FakeWalletProvider:
    """In-memory stand-in for a wallet provider."""

    def __init__(
        self,
        address="Addr1",
        capabilities=(REQUIRED_CAPABILITY,),
        connect_error=None,
        disconnect_error=None,
    ):
        self.address = address
        self.capabilities = set(capabilities)
        self.connect_error = connect_error
        self.disconnect_error = disconnect_error
        self.connected = False
        self.connect_calls = 0
        self.disconnect_calls = 0

    @property
    def public_key(self):
        return self.address if self.connected else None

    def has_capability(self, marker):
        return marker in self.capabilities

    def connect(self):
        self.connect_calls += 1
        if self.connect_error is not None:
            raise self.connect_error
        self.connected = True
        return self.address

    def disconnect(self):
        self.disconnect_calls += 1
        self.connected = False
        if self.disconnect_error is not None:
            raise self.disconnect_error

    def sign_transaction(self, transaction, recent_blockhash):
        return transaction


class FakeLedger:
    """Recording ledger client with configurable results and failures."""

    def __init__(self):
        self.balance = 0
        self.token_accounts = []
        self.existing_accounts = set()
        self.balance_error = None
        self.tokens_error = None
        self.mint_error = None
        self.transfer_error = None
        self.on_mint = None
        self.on_list_tokens = None
        self.calls = []

    def get_native_balance(self, account):
        self.calls.append(("get_native_balance", account))
        if self.balance_error is not None:
            raise self.balance_error
        return self.balance

    def list_token_accounts(self, account, program_id=None):
        self.calls.append(("list_token_accounts", account, program_id))
        if self.on_list_tokens is not None:
            self.on_list_tokens()
        if self.tokens_error is not None:
            raise self.tokens_error
        return list(self.token_accounts)

    def resolve_token_account_address(self, mint, owner):
        self.calls.append(("resolve_token_account_address", mint, owner))
        return f"ata:{owner}:{mint}"

    def resolve_or_create_token_account(self, payer, mint, owner):
        self.calls.append(("resolve_or_create_token_account", mint, owner))
        address = f"ata:{owner}:{mint}"
        self.existing_accounts.add(address)
        return address

    def mint(self, authority, mint, destination, amount):
        self.calls.append(("mint", mint, destination, amount))
        if self.on_mint is not None:
            self.on_mint()
        if self.mint_error is not None:
            raise self.mint_error
        return "sig-mint"

    def transfer(self, authority, source, destination, amount):
        self.calls.append(("transfer", source, destination, amount))
        if source not in self.existing_accounts:
            raise LedgerError(f"Source token account {source} does not exist")
        if self.transfer_error is not None:
            raise self.transfer_error
        return "sig-transfer"

    def method_calls(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def fake_provider():
    return FakeWalletProvider()


@pytest.fixture
def fake_ledger():
    return FakeLedger()


@pytest.fixture
def token_account():
    return TokenAccount(
        mint="MintX",
        ui_amount=Decimal("12.5"),
        address="ata:Addr1:MintX",
        decimals=9,
    )


@pytest.fixture
def keypair():
    return Keypair()


@pytest.fixture(autouse=True)
def isolate_wallet_environment(monkeypatch, tmp_path):
    """Keep tests away from the real home directory and wallet settings."""
    monkeypatch.setenv("HOME", str(tmp_path))
    for name in (
        "SPL_WALLET_CLUSTER",
        "SPL_WALLET_RPC_URL",
        "SPL_WALLET_COMMITMENT",
        "SPL_WALLET_KEYPAIR",
        "SPL_WALLET_PRIVATE_KEY",
        "SPL_WALLET_TOKEN_DECIMALS",
        "SPL_WALLET_CONNECT_TIMEOUT",
        "SPL_WALLET_READ_TIMEOUT",
        "SPL_WALLET_LOG_LEVEL",
        "SPL_WALLET_LOG_STDOUT",
        "SPL_WALLET_LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    yield
