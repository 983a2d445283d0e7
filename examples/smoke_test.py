#!/usr/bin/env python3
"""
Smoke test script for the Tari Faucet SDK.

Runs the faucet flow against the in-memory stub provider, without any
network connections or ledger transactions.

Usage:
    python smoke_test.py
"""
import asyncio
import sys

try:
    from tari_faucet_sdk import FaucetClient, StubProvider, WaitPolicy, __version__
    from tari_faucet_sdk.provider import accept_payload
except ImportError as e:
    print(f"❌ Import error: {e}")
    sys.exit(1)


def _minted_pair():
    tags = ["Vault", "NonFungible", "Resource", "Vault", "Component", "Resource", "Vault", "Component"]
    return [[{tag: f"{tag.lower()}_{i:02d}"}, {}] for i, tag in enumerate(tags)]


async def run_smoke_test():
    """Deploy a faucet pair and take coins through the stub provider."""
    print(f"🧪 Running Tari Faucet SDK smoke test (v{__version__})...")

    provider = StubProvider(balances={"resource_02": 1000})
    provider.queue_transaction(["Pending", "Accepted"], accept_payload(_minted_pair()))
    client = FaucetClient(provider, policy=WaitPolicy(poll_interval=0.01, timeout=5))

    try:
        response = await client.init_faucets()
        assert response.first_token.resource_address == "resource_02", "First token should be at index 2"
        assert response.second_token.component_address == "component_07", "Second faucet should be at index 7"

        outcomes = await client.take_coins_from_all(response.first_token, response.second_token)
        assert all(o.is_accepted for o in outcomes), "Both take_free_coins transactions should be accepted"

        await client.refresh_balances(response.first_token)
        assert response.first_token.balance == 1000, "Balance should be refreshed"

        print(f"✅ Smoke test passed! Tari Faucet SDK version {__version__} is working correctly.")
        return True
    except Exception as e:
        print(f"❌ Smoke test failed: {e}")
        return False

if __name__ == "__main__":
    success = asyncio.run(run_smoke_test())
    sys.exit(0 if success else 1)
