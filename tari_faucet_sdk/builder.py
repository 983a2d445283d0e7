"""
Transaction request construction.

Builds :class:`TransactionRequest` values from ordered instructions. Nothing
here performs I/O; addresses are treated as opaque strings and validated by
the provider.
"""
import logging
from typing import Any, Iterable, List, Optional, Sequence, Union

from .models import (
    CallFunction, CallMethod, Instruction, PutLastOutputOnWorkspace,
    RequiredSubstate, TransactionOptions, TransactionRequest
)

logger = logging.getLogger(__name__)

SubstateRef = Union[str, RequiredSubstate]


def pay_fee_instruction(account_address: str, amount: Union[str, int]) -> CallMethod:
    """Fee instruction that pays ``amount`` from the given account component"""
    return CallMethod(component_address=account_address, method="pay_fee", args=(str(amount),))


def _as_required_substate(ref: SubstateRef) -> RequiredSubstate:
    if isinstance(ref, RequiredSubstate):
        return ref
    return RequiredSubstate(substate_id=ref)


def build_transaction(
    instructions: Sequence[Instruction],
    fee_instructions: Sequence[Instruction],
    required_substates: Iterable[SubstateRef] = (),
    options: Optional[TransactionOptions] = None
) -> TransactionRequest:
    """
    Build a transaction request.

    Instruction, fee instruction and substate hint order is preserved exactly;
    the ledger executes instructions sequentially.

    Args:
        instructions: Main instructions, in execution order
        fee_instructions: Fee payment instructions (at least one is required)
        required_substates: Substates the ledger must load, as ids or RequiredSubstate
        options: Account id, dry-run flag and epoch bounds

    Returns:
        The transaction request

    Raises:
        ValueError: If instructions or fee_instructions is empty
    """
    if not instructions:
        raise ValueError("At least one instruction is required")
    if not fee_instructions:
        raise ValueError("At least one fee instruction is required to pay for the transaction")

    options = options or TransactionOptions()
    request = TransactionRequest(
        instructions=tuple(instructions),
        fee_instructions=tuple(fee_instructions),
        required_substates=tuple(_as_required_substate(s) for s in required_substates),
        account_id=options.account_id,
        is_dry_run=options.is_dry_run,
        min_epoch=options.min_epoch,
        max_epoch=options.max_epoch,
    )
    logger.debug(
        f"Built transaction with {len(request.instructions)} instruction(s), "
        f"{len(request.fee_instructions)} fee instruction(s)"
    )
    return request


class TransactionBuilder:
    """
    Fluent accumulator for transaction requests.

    Example:
        request = (
            TransactionBuilder()
            .call_method(faucet, "take_free_coins")
            .put_last_output_on_workspace(0)
            .call_method(account, "deposit", workspace_arg(0))
            .pay_fee(account, FEE_AMOUNT)
            .build()
        )
    """

    def __init__(self):
        self._instructions: List[Instruction] = []
        self._fee_instructions: List[Instruction] = []
        self._required_substates: List[SubstateRef] = []
        self._options = TransactionOptions()

    def call_function(self, template_address: str, function: str, *args: Any) -> "TransactionBuilder":
        self._instructions.append(CallFunction(template_address=template_address, function=function, args=args))
        return self

    def call_method(self, component_address: str, method: str, *args: Any) -> "TransactionBuilder":
        self._instructions.append(CallMethod(component_address=component_address, method=method, args=args))
        return self

    def put_last_output_on_workspace(self, *key: int) -> "TransactionBuilder":
        self._instructions.append(PutLastOutputOnWorkspace(key=key or (0,)))
        return self

    def fee_call_method(self, component_address: str, method: str, *args: Any) -> "TransactionBuilder":
        self._fee_instructions.append(CallMethod(component_address=component_address, method=method, args=args))
        return self

    def pay_fee(self, account_address: str, amount: Union[str, int]) -> "TransactionBuilder":
        self._fee_instructions.append(pay_fee_instruction(account_address, amount))
        return self

    def add_required_substate(self, substate: SubstateRef) -> "TransactionBuilder":
        self._required_substates.append(substate)
        return self

    def with_options(self, **kwargs: Any) -> "TransactionBuilder":
        self._options = TransactionOptions(**{**self._options.model_dump(), **kwargs})
        return self

    def build(self) -> TransactionRequest:
        return build_transaction(
            self._instructions,
            self._fee_instructions,
            self._required_substates,
            self._options,
        )
