"""
Transaction submission and confirmation.

Submits a request through a provider and polls for a final status. The wait
is bounded by a mandatory deadline and can be cancelled; both leave the
transaction handle usable for a later manual status check.
"""
import asyncio
import logging
from typing import Iterable, Optional, Sequence, Union

from ._rate_limited_log import rate_limited_log
from .builder import SubstateRef, build_transaction, pay_fee_instruction
from .config import FEE_AMOUNT, WaitPolicy
from .decoder import extract_substate_changes, rejection_reason
from .exceptions import ProviderConnectionError, ProviderError, SubmitError, WaitCancelledError
from .models import (
    Accepted, Account, Instruction, Rejected, TimedOut, TransactionHandle,
    TransactionOptions, TransactionOutcome, TransactionRequest, TransactionStatusResponse
)
from .provider.base import TariProvider

logger = logging.getLogger(__name__)


def outcome_from_status(response: TransactionStatusResponse) -> TransactionOutcome:
    """
    Convert a final status response to an outcome.

    Raises:
        MissingAcceptPayloadError: If an accepted result has no accept branch
    """
    if response.status.is_accepted:
        changes = extract_substate_changes(response.result)
        return Accepted(transaction_id=response.transaction_id, substate_changes=changes)

    reason = rejection_reason(response.result, default=response.status.value)
    return Rejected(transaction_id=response.transaction_id, reason=reason, status=response.status)


async def _sleep_or_cancel(delay: float, cancel_event: Optional[asyncio.Event]) -> bool:
    """Sleep for ``delay`` seconds. Returns True if ``cancel_event`` fired first."""
    if cancel_event is None:
        await asyncio.sleep(delay)
        return False
    try:
        await asyncio.wait_for(cancel_event.wait(), timeout=delay)
    except asyncio.TimeoutError:
        return cancel_event.is_set()
    return True


async def _poll_status(
    provider: TariProvider,
    transaction_id: str,
    timeout: float,
    cancel_event: Optional[asyncio.Event],
    polls: int
) -> Optional[TransactionStatusResponse]:
    """
    One status call, bounded by ``timeout`` and abandoned as soon as
    ``cancel_event`` is set. Returns None if the call did not finish in time.

    Raises:
        WaitCancelledError: If cancel_event fired before the call finished
    """
    poll_task = asyncio.ensure_future(provider.get_transaction_status(transaction_id))
    cancel_task = asyncio.ensure_future(cancel_event.wait()) if cancel_event is not None else None
    pending = {poll_task} if cancel_task is None else {poll_task, cancel_task}
    try:
        done, _ = await asyncio.wait(pending, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in pending:
            if not task.done():
                task.cancel()

    if poll_task in done:
        return poll_task.result()
    if cancel_task is not None and cancel_task in done:
        logger.info(f"Stopped waiting for transaction {transaction_id} during poll {polls}: cancelled")
        raise WaitCancelledError(transaction_id, polls)
    return None


async def wait_for_transaction_result(
    provider: TariProvider,
    handle: Union[TransactionHandle, str],
    policy: Optional[WaitPolicy] = None,
    cancel_event: Optional[asyncio.Event] = None
) -> TransactionOutcome:
    """
    Poll the provider until the transaction is final or the deadline passes.

    The first poll is immediate, later polls are ``policy.poll_interval``
    apart. Each status call is bounded by the time left, so nothing is sent to
    the provider once the deadline has fired, and an in-flight call is
    abandoned as soon as ``cancel_event`` is set.

    Args:
        provider: Provider the transaction was submitted through
        handle: Handle (or transaction id) of the submitted transaction
        policy: Poll interval and timeout (defaults to WaitPolicy())
        cancel_event: Setting this event stops polling promptly

    Returns:
        Accepted, Rejected or TimedOut

    Raises:
        WaitCancelledError: If cancel_event was set
        MissingAcceptPayloadError: If the accepted result has no accept branch
        ProviderError: For non-transient provider failures
    """
    policy = policy or WaitPolicy()
    transaction_id = handle.transaction_id if isinstance(handle, TransactionHandle) else handle
    loop = asyncio.get_running_loop()
    deadline = loop.time() + policy.timeout
    polls = 0

    while True:
        if cancel_event is not None and cancel_event.is_set():
            logger.info(f"Stopped waiting for transaction {transaction_id} after {polls} poll(s): cancelled")
            raise WaitCancelledError(transaction_id, polls)

        remaining = deadline - loop.time()
        if remaining <= 0:
            logger.warning(f"Timed out waiting for transaction {transaction_id} after {polls} poll(s)")
            return TimedOut(transaction_id=transaction_id)

        polls += 1
        try:
            response = await _poll_status(provider, transaction_id, remaining, cancel_event, polls)
        except ProviderConnectionError as e:
            rate_limited_log(
                f"Transient error polling transaction {transaction_id}: {e}",
                level="warning",
                interval=max(policy.poll_interval * 10, 10),
                logger_instance=logger,
                key=f"poll:{transaction_id}",
            )
        else:
            if response is None:
                logger.warning(f"Timed out waiting for transaction {transaction_id} during poll {polls}")
                return TimedOut(transaction_id=transaction_id)
            if response.status.is_final:
                logger.info(f"Transaction {transaction_id} finalized as {response.status.value} after {polls} poll(s)")
                return outcome_from_status(response)
            logger.debug(f"Transaction {transaction_id} is {response.status.value} (poll {polls})")

        delay = min(policy.poll_interval, max(deadline - loop.time(), 0))
        if await _sleep_or_cancel(delay, cancel_event):
            logger.info(f"Stopped waiting for transaction {transaction_id} after {polls} poll(s): cancelled")
            raise WaitCancelledError(transaction_id, polls)


async def submit_and_wait(
    provider: TariProvider,
    request: TransactionRequest,
    policy: Optional[WaitPolicy] = None,
    cancel_event: Optional[asyncio.Event] = None
) -> TransactionOutcome:
    """
    Submit a transaction and wait for its final outcome.

    Submission is never retried: a resubmitted transaction would be executed
    again.

    Raises:
        SubmitError: If the provider refuses or cannot take the submission
        WaitCancelledError: If cancel_event was set while waiting
        MissingAcceptPayloadError: If the accepted result has no accept branch
    """
    try:
        handle = await provider.submit_transaction(request)
    except SubmitError as e:
        logger.error(f"Transaction submission refused: {e}")
        raise
    except ProviderError as e:
        logger.error(f"Failed to submit transaction: {e}")
        raise SubmitError(f"Failed to submit transaction: {e}", code=getattr(e, "code", None)) from e

    if not handle or not handle.transaction_id:
        raise SubmitError("Provider returned no transaction id")

    logger.info(f"Transaction submitted: {handle.transaction_id}")
    return await wait_for_transaction_result(provider, handle, policy, cancel_event)


async def submit_and_wait_for_transaction(
    provider: TariProvider,
    account: Account,
    instructions: Sequence[Instruction],
    required_substates: Iterable[SubstateRef] = (),
    fee: Union[str, int] = FEE_AMOUNT,
    policy: Optional[WaitPolicy] = None,
    cancel_event: Optional[asyncio.Event] = None
) -> TransactionOutcome:
    """
    Build a transaction paying ``fee`` from ``account``, submit it and wait.

    Args:
        provider: Provider to submit through
        account: Account that signs and pays the fee
        instructions: Main instructions, in execution order
        required_substates: Substates the ledger must load
        fee: Fee amount passed to the account's pay_fee method
        policy: Poll interval and timeout
        cancel_event: Setting this event stops polling promptly

    Returns:
        Accepted, Rejected or TimedOut
    """
    request = build_transaction(
        instructions,
        [pay_fee_instruction(account.address, fee)],
        required_substates,
        TransactionOptions(account_id=account.account_id),
    )
    return await submit_and_wait(provider, request, policy, cancel_event)
