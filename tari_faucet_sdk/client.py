"""
FaucetClient - application context for the faucet flows.
"""
import asyncio
import logging
from typing import List, Optional, Tuple

from .builder import build_transaction, pay_fee_instruction
from .config import (
    FEE_AMOUNT, FIRST_TOKEN_SYMBOL, INIT_SUPPLY, SECOND_TOKEN_SYMBOL,
    NetworkConfig, WaitPolicy
)
from .decoder import MINTED_PAIR_SCHEMA_V1, DecodingSchema, decode_minted_pair, find_balance
from .models import (
    Account, CallFunction, CallMethod, InitTokensResponse, PutLastOutputOnWorkspace,
    Token, TransactionOptions, TransactionOutcome, workspace_arg
)
from .provider.base import TariProvider
from .waiter import submit_and_wait, submit_and_wait_for_transaction


def default_tokens(network: Optional[str] = None) -> Tuple[Token, Token]:
    """
    The pre-deployed faucet tokens of a network.

    Raises:
        ValueError: If the network has no pre-deployed token pair
    """
    tokens = NetworkConfig.get_network(network).get("tokens", [])
    if len(tokens) < 2:
        raise ValueError(f"Network '{network}' has no pre-deployed faucet tokens")
    first, second = [
        Token(resource_address=t["resource"], component_address=t["component"], symbol=t["symbol"])
        for t in tokens[:2]
    ]
    return first, second


class FaucetClient:
    """
    Client for deploying and using a pair of token faucets.

    The client owns no global state: every provider, account and wait policy
    is passed in, so independent clients can run side by side.

    To use this client, you'll need:
    - A provider (e.g. WalletDaemonProvider or StubProvider)
    - A network with a published faucet template
    """

    def __init__(
        self,
        provider: TariProvider,
        account: Optional[Account] = None,
        network: Optional[str] = None,
        policy: Optional[WaitPolicy] = None,
        layout: DecodingSchema = MINTED_PAIR_SCHEMA_V1,
        fee: str = FEE_AMOUNT,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the FaucetClient

        Args:
            provider: Provider used for every wallet call
            account: Account to act as (defaults to the provider's default account)
            network: Network name for the faucet template lookup
            policy: Poll interval and timeout for transaction waits
            layout: Substate layout of the faucet deployment transaction
            fee: Fee paid per transaction
            logger: Optional logger instance to use for debug/info logging
        """
        self.provider = provider
        self.account = account
        self.network = network
        self.policy = policy or WaitPolicy.from_env()
        self.layout = layout
        self.fee = fee
        self.logger = logger or logging.getLogger(__name__)

    async def load_account(self) -> Account:
        """Get the account, fetching the provider's default account on first use"""
        if self.account is None:
            self.account = await self.provider.get_account()
            self.logger.info(f"Using account {self.account.address}")
        return self.account

    async def init_faucets(self, cancel_event: Optional[asyncio.Event] = None) -> InitTokensResponse:
        """
        Deploy two faucets, each minting INIT_SUPPLY of a new token.

        Returns:
            The two minted tokens with their faucet components

        Raises:
            SubmitError: If the provider refuses the transaction
            TransactionRejectedError: If the ledger rejects it
            TransactionTimeoutError: If it is not final before the deadline
            DecodeError: If the accepted result does not match the layout
        """
        account = await self.load_account()
        template = NetworkConfig.get_faucet_template(self.network)
        request = build_transaction(
            [
                CallFunction(template_address=template, function="mint_with_symbol",
                             args=(INIT_SUPPLY, FIRST_TOKEN_SYMBOL)),
                CallFunction(template_address=template, function="mint_with_symbol",
                             args=(INIT_SUPPLY, SECOND_TOKEN_SYMBOL)),
            ],
            [pay_fee_instruction(account.address, self.fee)],
            options=TransactionOptions(account_id=account.account_id),
        )

        outcome = await submit_and_wait(self.provider, request, self.policy, cancel_event)
        changes = outcome.unwrap()
        first, second = decode_minted_pair(changes, self.layout, (FIRST_TOKEN_SYMBOL, SECOND_TOKEN_SYMBOL))
        self.logger.info(f"Deployed tokens: {first.resource_address}, {second.resource_address}")
        return InitTokensResponse(first_token=first, second_token=second)

    async def take_free_coins(
        self,
        faucet_component: str,
        cancel_event: Optional[asyncio.Event] = None
    ) -> TransactionOutcome:
        """
        Take free coins from a faucet and deposit them into the account.

        Returns:
            The transaction outcome; rejection and timeout are returned, not raised
        """
        account = await self.load_account()
        self.logger.debug(f"Taking free coins from {faucet_component}")
        instructions = [
            CallMethod(component_address=faucet_component, method="take_free_coins"),
            PutLastOutputOnWorkspace(key=(0,)),
            CallMethod(component_address=account.address, method="deposit", args=(workspace_arg(0),)),
        ]
        return await submit_and_wait_for_transaction(
            self.provider,
            account,
            instructions,
            [account.address, faucet_component],
            fee=self.fee,
            policy=self.policy,
            cancel_event=cancel_event,
        )

    async def take_coins_from_all(self, *tokens: Token) -> List[TransactionOutcome]:
        """
        Take free coins from every token's faucet concurrently.

        If one take raises, the others are cancelled and awaited before the
        error propagates.
        """
        tasks = [asyncio.ensure_future(self.take_free_coins(t.component_address)) for t in tokens]
        try:
            return list(await asyncio.gather(*tasks))
        except Exception:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def refresh_balances(self, *tokens: Token) -> List[Token]:
        """
        Update each token's balance from the account's current balances.

        Returns:
            The same token objects, with balance assigned
        """
        account = await self.load_account()
        balances = await self.provider.get_account_balances(account.address)
        for token in tokens:
            token.balance = find_balance(balances, token.resource_address)
            self.logger.debug(f"Balance of {token.symbol}: {token.balance}")
        return list(tokens)

    async def close(self) -> None:
        await self.provider.close()
