"""
Tari Faucet SDK - submit Tari transactions, wait for their result and
decode the minted tokens.
"""
from .version import __version__
from .builder import TransactionBuilder, build_transaction, pay_fee_instruction
from .client import FaucetClient, default_tokens
from .config import FEE_AMOUNT, INIT_SUPPLY, NetworkConfig, WaitPolicy
from .decoder import (
    MINTED_PAIR_SCHEMA_V1, DecodingSchema, SlotSpec, decode_minted_pair,
    extract_substate_changes
)
from .exceptions import (
    TariSdkError, SubmitError, TransactionRejectedError, TransactionTimeoutError,
    WaitCancelledError, DecodeError, MissingAcceptPayloadError, UnexpectedShapeError,
    ProviderError, ProviderConnectionError, ProviderResponseError, ProviderAuthError
)
from .models import (
    Accepted, Account, AccountBalance, CallFunction, CallMethod, InitTokensResponse,
    PutLastOutputOnWorkspace, Rejected, RequiredSubstate, SubstateChange, SubstateKind,
    TimedOut, Token, TransactionHandle, TransactionOptions, TransactionOutcome,
    TransactionRequest, TransactionStatus, TransactionStatusResponse, workspace_arg
)
from .provider import StubProvider, TariProvider, WalletDaemonProvider, get_provider
from .waiter import submit_and_wait, submit_and_wait_for_transaction, wait_for_transaction_result

__all__ = [
    '__version__',
    'FaucetClient', 'default_tokens',
    'TransactionBuilder', 'build_transaction', 'pay_fee_instruction',
    'submit_and_wait', 'submit_and_wait_for_transaction', 'wait_for_transaction_result',
    'decode_minted_pair', 'extract_substate_changes',
    'DecodingSchema', 'SlotSpec', 'MINTED_PAIR_SCHEMA_V1',
    'NetworkConfig', 'WaitPolicy', 'FEE_AMOUNT', 'INIT_SUPPLY',
    'TariProvider', 'StubProvider', 'WalletDaemonProvider', 'get_provider',
    'CallFunction', 'CallMethod', 'PutLastOutputOnWorkspace', 'workspace_arg',
    'RequiredSubstate', 'TransactionOptions', 'TransactionRequest', 'TransactionHandle',
    'TransactionStatus', 'TransactionStatusResponse', 'SubstateKind', 'SubstateChange',
    'TransactionOutcome', 'Accepted', 'Rejected', 'TimedOut',
    'Account', 'AccountBalance', 'Token', 'InitTokensResponse',
    'TariSdkError', 'SubmitError', 'TransactionRejectedError', 'TransactionTimeoutError',
    'WaitCancelledError', 'DecodeError', 'MissingAcceptPayloadError', 'UnexpectedShapeError',
    'ProviderError', 'ProviderConnectionError', 'ProviderResponseError', 'ProviderAuthError',
]
