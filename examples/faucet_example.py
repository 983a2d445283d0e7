#!/usr/bin/env python3
"""
Faucet example for the Tari Faucet SDK.

Deploys a pair of token faucets through a running wallet daemon, takes free
coins from both and prints the resulting balances.

Usage:
    TARI_WALLET_AUTH_TOKEN=... python faucet_example.py
"""
import asyncio
import logging
import os

from tari_faucet_sdk import (
    FaucetClient, TariSdkError, TimedOut, WaitPolicy, default_tokens, get_provider
)


async def main():
    """
    Demonstrate the faucet flow.

    This example shows how to:
    1. Connect to the wallet daemon
    2. Deploy two faucets (or reuse the network's pre-deployed pair)
    3. Take free coins from both faucets
    4. Refresh the token balances
    """
    logging.basicConfig(level=logging.INFO)

    if not os.environ.get("TARI_WALLET_AUTH_TOKEN"):
        print("ERROR: TARI_WALLET_AUTH_TOKEN environment variable is required")
        return

    provider = get_provider()
    client = FaucetClient(provider, policy=WaitPolicy(poll_interval=1.0, timeout=120))

    try:
        account = await client.load_account()
        print(f"Account: {account.address}")

        if os.environ.get("DEPLOY_FAUCETS") == "1":
            response = await client.init_faucets()
            tokens = (response.first_token, response.second_token)
        else:
            tokens = default_tokens()

        for token in tokens:
            print(f"Token {token.symbol}: resource={token.resource_address} faucet={token.component_address}")

        outcomes = await client.take_coins_from_all(*tokens)
        for token, outcome in zip(tokens, outcomes):
            if isinstance(outcome, TimedOut):
                print(f"Still waiting on {token.symbol}; check transaction {outcome.transaction_id} later")
            elif not outcome.is_accepted:
                print(f"Taking {token.symbol} failed: {outcome.reason}")

        for token in await client.refresh_balances(*tokens):
            print(f"Balance {token.symbol}: {token.balance}")

    except TariSdkError as e:
        print(f"Error: {e}")
    finally:
        await client.close()

if __name__ == "__main__":
    asyncio.run(main())
