"""
In-memory provider implementation.

Simulates a wallet for development and tests: every submission is assigned a
deterministic transaction id and reports a scripted sequence of statuses, one
per status query, repeating the last one once the script is exhausted.
"""
import asyncio
import logging
from collections import deque
from typing import Any, Deque, Dict, List, Optional, Sequence, Tuple, Union

from ..exceptions import ProviderResponseError, SubmitError
from ..models import (
    Account, AccountBalance, TransactionHandle, TransactionRequest,
    TransactionStatus, TransactionStatusResponse
)
from .base import TariProvider

logger = logging.getLogger(__name__)

STUB_ACCOUNT_ADDRESS = "component_" + "0" * 56

ScriptStep = Union[TransactionStatus, str, Exception]


def accept_payload(up_substates: Sequence[Any] = ()) -> Dict[str, Any]:
    """Finalize payload for an accepted transaction with the given up_substates"""
    return {"result": {"Accept": {"up_substates": [list(s) for s in up_substates], "down_substates": []}}}


def reject_payload(reason: Any) -> Dict[str, Any]:
    """Finalize payload for a rejected transaction"""
    return {"result": {"Reject": reason}}


class StubProvider(TariProvider):
    """
    A scripted provider with no external dependencies.

    Example:
        provider = StubProvider()
        provider.queue_transaction(["Pending", "Pending", "Accepted"], accept_payload(changes))
    """

    def __init__(
        self,
        account: Optional[Account] = None,
        balances: Optional[Dict[str, int]] = None,
        latency: float = 0.0
    ):
        """
        Initialize the stub provider.

        Args:
            account: Account returned by get_account
            balances: resource_address -> balance returned by get_account_balances
            latency: Simulated delay for every call, in seconds
        """
        self.account = account or Account(address=STUB_ACCOUNT_ADDRESS, account_id=1)
        self.balances: Dict[str, int] = dict(balances or {})
        self.latency = latency
        self.submitted: List[TransactionRequest] = []
        self.status_calls: Dict[str, int] = {}
        self._scripts: Deque[Tuple[List[ScriptStep], Optional[Dict[str, Any]]]] = deque()
        self._transactions: Dict[str, Tuple[Deque[ScriptStep], Optional[Dict[str, Any]]]] = {}
        self._refusal: Optional[str] = None
        self.closed = False

    def is_available(self) -> bool:
        """
        Check if stub provider is available.

        Returns:
            Always True since the stub has no dependencies
        """
        return True

    def queue_transaction(self, statuses: Sequence[ScriptStep], result: Optional[Dict[str, Any]] = None) -> None:
        """
        Script the next submission.

        Args:
            statuses: Status (or exception to raise) reported per status query
            result: Finalize payload attached to final statuses
        """
        if not statuses:
            raise ValueError("At least one status is required")
        self._scripts.append((list(statuses), result))

    def refuse_next_submission(self, message: str = "Transaction refused") -> None:
        """Make the next submit_transaction call fail with SubmitError"""
        self._refusal = message

    @property
    def total_status_calls(self) -> int:
        return sum(self.status_calls.values())

    async def _simulate_latency(self) -> None:
        if self.latency:
            await asyncio.sleep(self.latency)

    async def submit_transaction(self, request: TransactionRequest) -> TransactionHandle:
        await self._simulate_latency()
        if self._refusal is not None:
            message, self._refusal = self._refusal, None
            logger.warning(f"Stub provider refusing submission: {message}")
            raise SubmitError(message)

        self.submitted.append(request)
        transaction_id = f"{len(self.submitted):064x}"
        if self._scripts:
            statuses, result = self._scripts.popleft()
        else:
            statuses, result = [TransactionStatus.ACCEPTED], accept_payload()
        self._transactions[transaction_id] = (deque(statuses), result)
        self.status_calls[transaction_id] = 0
        logger.debug(f"Stub provider accepted submission {transaction_id}")
        return TransactionHandle(transaction_id=transaction_id)

    async def get_transaction_status(self, transaction_id: str) -> TransactionStatusResponse:
        if transaction_id not in self._transactions:
            raise ProviderResponseError(f"Transaction {transaction_id} not found", code=404)
        self.status_calls[transaction_id] += 1
        await self._simulate_latency()

        statuses, result = self._transactions[transaction_id]
        step = statuses.popleft() if len(statuses) > 1 else statuses[0]
        if isinstance(step, Exception):
            raise step
        status = TransactionStatus(step)
        return TransactionStatusResponse(
            transaction_id=transaction_id,
            status=status,
            result=result if status.is_final else None,
        )

    async def get_account(self) -> Account:
        await self._simulate_latency()
        return self.account

    async def get_account_balances(self, address: str) -> List[AccountBalance]:
        await self._simulate_latency()
        if address.lower() != self.account.address.lower():
            raise ProviderResponseError(f"Unknown account {address}", code=404)
        return [AccountBalance(resource_address=r, balance=b) for r, b in self.balances.items()]

    async def close(self) -> None:
        """Close the stub provider (no-op)."""
        self.closed = True
