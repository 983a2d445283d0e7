"""
Data models for the Tari Faucet SDK.
"""
import json
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, Any, Optional, List, Tuple, Union, Sequence

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .exceptions import DecodeError, TransactionRejectedError, TransactionTimeoutError


def workspace_arg(key: Union[int, Sequence[int]]) -> Dict[str, List[int]]:
    """Argument that reads a value previously put on the transaction workspace"""
    if isinstance(key, int):
        key = [key]
    return {"Workspace": list(key)}


class CallFunction(BaseModel):
    """Call a template function (e.g. a constructor)"""
    model_config = ConfigDict(frozen=True)

    template_address: str
    function: str
    args: Tuple[Any, ...] = ()

    def to_wire(self) -> Dict[str, Any]:
        return {
            "CallFunction": {
                "template_address": self.template_address,
                "function": self.function,
                "args": list(self.args),
            }
        }


class CallMethod(BaseModel):
    """Call a method on an existing component"""
    model_config = ConfigDict(frozen=True)

    component_address: str
    method: str
    args: Tuple[Any, ...] = ()

    def to_wire(self) -> Dict[str, Any]:
        return {
            "CallMethod": {
                "component_address": self.component_address,
                "method": self.method,
                "args": list(self.args),
            }
        }


class PutLastOutputOnWorkspace(BaseModel):
    """Store the previous instruction's output in a workspace slot"""
    model_config = ConfigDict(frozen=True)

    key: Tuple[int, ...] = (0,)

    def to_wire(self) -> Dict[str, Any]:
        return {"PutLastInstructionOutputOnWorkspace": {"key": list(self.key)}}


Instruction = Union[CallFunction, CallMethod, PutLastOutputOnWorkspace]


class RequiredSubstate(BaseModel):
    """Substate the ledger must make available to the transaction"""
    model_config = ConfigDict(frozen=True)

    substate_id: str
    version: Optional[int] = None

    def to_wire(self) -> Dict[str, Any]:
        wire: Dict[str, Any] = {"substate_id": self.substate_id}
        if self.version is not None:
            wire["version"] = self.version
        return wire


class TransactionOptions(BaseModel):
    """Optional transaction settings"""
    model_config = ConfigDict(frozen=True)

    account_id: Optional[int] = None
    is_dry_run: bool = False
    min_epoch: Optional[int] = None
    max_epoch: Optional[int] = None

    @model_validator(mode="after")
    def _check_epochs(self) -> "TransactionOptions":
        if self.min_epoch is not None and self.max_epoch is not None and self.min_epoch > self.max_epoch:
            raise ValueError(f"min_epoch ({self.min_epoch}) must not exceed max_epoch ({self.max_epoch})")
        return self


class TransactionRequest(BaseModel):
    """Transaction request as accepted by a provider"""
    model_config = ConfigDict(frozen=True)

    instructions: Tuple[Instruction, ...]
    fee_instructions: Tuple[Instruction, ...]
    required_substates: Tuple[RequiredSubstate, ...] = ()
    input_refs: Tuple[str, ...] = ()
    inputs: Tuple[str, ...] = ()
    account_id: Optional[int] = None
    is_dry_run: bool = False
    min_epoch: Optional[int] = None
    max_epoch: Optional[int] = None

    def to_wire(self) -> Dict[str, Any]:
        """Render the request in the wallet's JSON shape"""
        return {
            "account_id": self.account_id,
            "instructions": [i.to_wire() for i in self.instructions],
            "fee_instructions": [i.to_wire() for i in self.fee_instructions],
            "input_refs": list(self.input_refs),
            "inputs": list(self.inputs),
            "required_substates": [s.to_wire() for s in self.required_substates],
            "is_dry_run": self.is_dry_run,
            "min_epoch": self.min_epoch,
            "max_epoch": self.max_epoch,
        }


class TransactionHandle(BaseModel):
    """Identifier of a submitted transaction"""
    model_config = ConfigDict(frozen=True)

    transaction_id: str


class TransactionStatus(str, Enum):
    """
    Transaction status codes as reported by the wallet.
    """
    NEW = "New"
    DRY_RUN = "DryRun"
    PENDING = "Pending"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"
    INVALID_TRANSACTION = "InvalidTransaction"
    ONLY_FEE_ACCEPTED = "OnlyFeeAccepted"

    @property
    def is_final(self) -> bool:
        return self not in (TransactionStatus.NEW, TransactionStatus.PENDING)

    @property
    def is_accepted(self) -> bool:
        return self in (TransactionStatus.ACCEPTED, TransactionStatus.DRY_RUN)


class TransactionStatusResponse(BaseModel):
    """Status of a submitted transaction, with the finalize payload once available"""
    transaction_id: str
    status: TransactionStatus
    result: Optional[Dict[str, Any]] = None


class SubstateKind(str, Enum):
    """Known substate id tags"""
    COMPONENT = "Component"
    RESOURCE = "Resource"
    VAULT = "Vault"
    NON_FUNGIBLE = "NonFungible"
    NON_FUNGIBLE_INDEX = "NonFungibleIndex"
    TRANSACTION_RECEIPT = "TransactionReceipt"
    UNCLAIMED_CONFIDENTIAL_OUTPUT = "UnclaimedConfidentialOutput"
    FEE_CLAIM = "FeeClaim"
    TEMPLATE = "Template"


class SubstateChange(BaseModel):
    """One entry of a transaction's ordered substate change list"""
    model_config = ConfigDict(frozen=True)

    tag: str
    address: str
    value: Optional[Any] = None

    @classmethod
    def from_wire(cls, entry: Any) -> "SubstateChange":
        """
        Parse a ``[{"<Tag>": <address>}, <substate>]`` pair.

        Raises:
            DecodeError: If the entry is not a tagged substate id pair
        """
        if isinstance(entry, (list, tuple)) and entry:
            substate_id = entry[0]
            value = entry[1] if len(entry) > 1 else None
        else:
            raise DecodeError(f"Malformed substate entry: {entry!r}")

        if not isinstance(substate_id, dict) or len(substate_id) != 1:
            raise DecodeError(f"Malformed substate id: {substate_id!r}")

        tag, address = next(iter(substate_id.items()))
        if not isinstance(address, str):
            address = json.dumps(address, sort_keys=True)
        return cls(tag=tag, address=address, value=value)


class TransactionOutcome(BaseModel, ABC):
    """Terminal result of waiting for a transaction"""
    model_config = ConfigDict(frozen=True)

    transaction_id: str

    @property
    def is_accepted(self) -> bool:
        return False

    @abstractmethod
    def unwrap(self) -> Tuple[SubstateChange, ...]:
        """Substate changes of an accepted transaction; raises for any other outcome"""


class Accepted(TransactionOutcome):
    substate_changes: Tuple[SubstateChange, ...]

    @property
    def is_accepted(self) -> bool:
        return True

    def unwrap(self) -> Tuple[SubstateChange, ...]:
        return self.substate_changes


class Rejected(TransactionOutcome):
    reason: str
    status: TransactionStatus = TransactionStatus.REJECTED

    def unwrap(self) -> Tuple[SubstateChange, ...]:
        raise TransactionRejectedError(self.transaction_id, self.reason)


class TimedOut(TransactionOutcome):
    def unwrap(self) -> Tuple[SubstateChange, ...]:
        raise TransactionTimeoutError(self.transaction_id)


class Account(BaseModel):
    """Wallet account"""
    address: str
    account_id: Optional[int] = None
    public_key: Optional[str] = None


class AccountBalance(BaseModel):
    """Balance of one resource held by an account"""
    resource_address: str
    balance: int = 0


class Token(BaseModel):
    """A minted fungible token and the faucet component that owns it"""
    model_config = ConfigDict(validate_assignment=True)

    resource_address: str = Field(frozen=True)
    component_address: str = Field(frozen=True)
    symbol: str = Field(frozen=True)
    balance: int = 0


class InitTokensResponse(BaseModel):
    """Tokens created by deploying the faucet pair"""
    first_token: Token
    second_token: Token
