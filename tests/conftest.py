"""
Pytest fixtures for the Tari Faucet SDK tests.
"""
import pytest

from tari_faucet_sdk import (
    Account, CallFunction, NetworkConfig, StubProvider, WaitPolicy, build_transaction,
    pay_fee_instruction
)
from tari_faucet_sdk._rate_limited_log import reset_rate_limits
from tari_faucet_sdk.provider import accept_payload

TEST_ACCOUNT_ADDRESS = "component_" + "a1" * 28
TEST_TEMPLATE = "e9afe3eda226a3c5e43ac9bd82adeea08677e562d3d286a3983277df1b9256ee"


def up_substate(tag, address):
    """One up_substates entry as the wallet reports it"""
    return [{tag: address}, {"version": 0, "substate": {}}]


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch):
    """Isolate every test from TARI_* variables, the network cache and log rate limits."""
    for name in ("TARI_NETWORK", "TARI_WALLET_DAEMON_URL", "TARI_WALLET_AUTH_TOKEN",
                 "TARI_FAUCET_TEMPLATE_ADDRESS", "TARI_POLL_INTERVAL", "TARI_WAIT_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    NetworkConfig._networks_cache = None
    reset_rate_limits()
    yield
    NetworkConfig._networks_cache = None


@pytest.fixture
def account():
    return Account(address=TEST_ACCOUNT_ADDRESS, account_id=1)


@pytest.fixture
def stub_provider(account):
    return StubProvider(account=account)


@pytest.fixture
def fast_policy():
    """Short poll interval with a generous deadline"""
    return WaitPolicy(poll_interval=0.01, timeout=2.0)


@pytest.fixture
def minted_pair_up_substates():
    """
    up_substates of a faucet pair deployment: resources at 2 and 5,
    their faucet components at 4 and 7.
    """
    return [
        up_substate("Vault", "vault_01"),
        up_substate("NonFungible", "nft_01"),
        up_substate("Resource", "R1"),
        up_substate("Vault", "vault_02"),
        up_substate("Component", "C1"),
        up_substate("Resource", "R2"),
        up_substate("Vault", "vault_03"),
        up_substate("Component", "C2"),
    ]


@pytest.fixture
def minted_pair_payload(minted_pair_up_substates):
    return accept_payload(minted_pair_up_substates)


@pytest.fixture
def simple_request(account):
    return build_transaction(
        [CallFunction(template_address=TEST_TEMPLATE, function="mint_with_symbol", args=("100000", "A"))],
        [pay_fee_instruction(account.address, "2000")],
    )
