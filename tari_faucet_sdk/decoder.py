"""
Decoding of accepted transaction results.

A transaction reports the substates it created as an ordered ``up_substates``
list. That list is not self-describing: which entry holds which resource
depends on the exact instruction sequence that produced it. The positions
are therefore declared once, as a versioned :class:`DecodingSchema`, and
every position is checked against its expected tag before use.
"""
import json
import logging
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, model_validator

from .exceptions import DecodeError, MissingAcceptPayloadError, UnexpectedShapeError
from .models import AccountBalance, SubstateChange, SubstateKind, Token

logger = logging.getLogger(__name__)


class SlotSpec(BaseModel):
    """Expected substate at a fixed position of the change list"""
    model_config = ConfigDict(frozen=True)

    index: int
    expected_tag: str
    role: str


class DecodingSchema(BaseModel):
    """
    Versioned positional layout of a transaction's substate change list.

    Validated on construction: slot indices must be non-negative and unique,
    roles must be unique.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    version: int
    slots: Tuple[SlotSpec, ...]

    @model_validator(mode="after")
    def _check_slots(self) -> "DecodingSchema":
        if not self.slots:
            raise ValueError(f"Decoding schema {self.name} v{self.version} has no slots")
        indices = [s.index for s in self.slots]
        if any(i < 0 for i in indices):
            raise ValueError(f"Decoding schema {self.name} v{self.version} has a negative index")
        if len(set(indices)) != len(indices):
            raise ValueError(f"Decoding schema {self.name} v{self.version} has duplicate indices")
        roles = [s.role for s in self.slots]
        if len(set(roles)) != len(roles):
            raise ValueError(f"Decoding schema {self.name} v{self.version} has duplicate roles")
        return self

    @property
    def min_length(self) -> int:
        return max(s.index for s in self.slots) + 1

    def slot(self, role: str) -> SlotSpec:
        for s in self.slots:
            if s.role == role:
                return s
        raise KeyError(f"Decoding schema {self.name} v{self.version} has no slot for role {role!r}")


MINTED_PAIR_ROLES = ("first_resource", "first_component", "second_resource", "second_component")

# Layout produced by: mint_with_symbol, mint_with_symbol (fee: pay_fee).
MINTED_PAIR_SCHEMA_V1 = DecodingSchema(
    name="minted_pair",
    version=1,
    slots=(
        SlotSpec(index=2, expected_tag=SubstateKind.RESOURCE.value, role="first_resource"),
        SlotSpec(index=4, expected_tag=SubstateKind.COMPONENT.value, role="first_component"),
        SlotSpec(index=5, expected_tag=SubstateKind.RESOURCE.value, role="second_resource"),
        SlotSpec(index=7, expected_tag=SubstateKind.COMPONENT.value, role="second_component"),
    ),
)


def extract_substate_changes(result_payload: Optional[Dict[str, Any]]) -> Tuple[SubstateChange, ...]:
    """
    Pull the ordered substate changes out of a finalize payload.

    Accepts either the finalize result itself (``{"result": {"Accept": ...}}``)
    or the bare transaction result (``{"Accept": ...}``).

    Raises:
        MissingAcceptPayloadError: If there is no well-formed accept branch
    """
    if not isinstance(result_payload, dict):
        raise MissingAcceptPayloadError("Transaction result payload is missing")

    tx_result = result_payload.get("result", result_payload)
    accept = tx_result.get("Accept") if isinstance(tx_result, dict) else None
    if not isinstance(accept, dict):
        branches = sorted(tx_result) if isinstance(tx_result, dict) else []
        raise MissingAcceptPayloadError(f"Transaction result has no Accept branch (found: {branches})")

    up_substates = accept.get("up_substates")
    if not isinstance(up_substates, list):
        raise MissingAcceptPayloadError("Accept branch has no up_substates list")

    try:
        return tuple(SubstateChange.from_wire(entry) for entry in up_substates)
    except DecodeError as e:
        raise MissingAcceptPayloadError(f"Malformed up_substates: {e}") from e


def rejection_reason(result_payload: Optional[Dict[str, Any]], default: str) -> str:
    """Best-effort human readable reason from a Reject / AcceptFeeRejectRest branch"""
    if not isinstance(result_payload, dict):
        return default
    tx_result = result_payload.get("result", result_payload)
    if not isinstance(tx_result, dict):
        return default

    reason: Any = None
    if "Reject" in tx_result:
        reason = tx_result["Reject"]
    elif "AcceptFeeRejectRest" in tx_result:
        branch = tx_result["AcceptFeeRejectRest"]
        reason = branch[1] if isinstance(branch, list) and len(branch) > 1 else branch
    if reason is None:
        return default
    if isinstance(reason, str):
        return reason
    return json.dumps(reason, sort_keys=True)


def _checked(changes: Sequence[SubstateChange], slot: SlotSpec) -> SubstateChange:
    if slot.index >= len(changes):
        raise UnexpectedShapeError(slot.index, slot.expected_tag, None)
    change = changes[slot.index]
    if change.tag != slot.expected_tag:
        raise UnexpectedShapeError(slot.index, slot.expected_tag, change.tag)
    return change


def decode_slots(changes: Sequence[SubstateChange], layout: DecodingSchema) -> Dict[str, str]:
    """
    Resolve every slot of ``layout`` to an address.

    Slots are checked in index order so the first offending position is
    reported.

    Raises:
        UnexpectedShapeError: If a position is missing or carries another tag
    """
    return {
        slot.role: _checked(changes, slot).address
        for slot in sorted(layout.slots, key=lambda s: s.index)
    }


def decode_minted_pair(
    substate_changes: Sequence[SubstateChange],
    layout: DecodingSchema = MINTED_PAIR_SCHEMA_V1,
    symbols: Tuple[str, str] = ("A", "B")
) -> Tuple[Token, Token]:
    """
    Decode the two tokens minted by a faucet deployment transaction.

    Args:
        substate_changes: Ordered substate changes of the accepted transaction
        layout: Schema with first/second resource and component roles
        symbols: Symbols the two tokens were minted with

    Returns:
        (first_token, second_token), both with balance 0

    Raises:
        ValueError: If the layout lacks one of the minted pair roles
        UnexpectedShapeError: If the list does not match the layout
    """
    roles = {s.role for s in layout.slots}
    missing = [r for r in MINTED_PAIR_ROLES if r not in roles]
    if missing:
        raise ValueError(f"Decoding schema {layout.name} v{layout.version} has no slot for roles: {', '.join(missing)}")

    addresses = decode_slots(substate_changes, layout)
    first = Token(
        resource_address=addresses["first_resource"],
        component_address=addresses["first_component"],
        symbol=symbols[0],
        balance=0,
    )
    second = Token(
        resource_address=addresses["second_resource"],
        component_address=addresses["second_component"],
        symbol=symbols[1],
        balance=0,
    )
    logger.debug(f"Decoded minted pair with {layout.name} v{layout.version}: {first.resource_address}, {second.resource_address}")
    return first, second


def find_balance(balances: Iterable[AccountBalance], resource_address: str) -> int:
    """Balance of ``resource_address`` (case-insensitive match), 0 if the account holds none"""
    wanted = resource_address.lower()
    for entry in balances:
        if entry.resource_address.lower() == wanted:
            return entry.balance
    return 0
