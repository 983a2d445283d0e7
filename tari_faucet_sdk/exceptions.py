"""
Exceptions for the Tari Faucet SDK.
"""
from typing import Optional


class TariSdkError(Exception):
    """Base exception for all Tari Faucet SDK errors"""
    pass


class SubmitError(TariSdkError):
    """Raised when the provider refuses or cannot accept a transaction submission"""

    def __init__(self, message: str, code: Optional[int] = None):
        self.code = code
        super().__init__(message)


class TransactionRejectedError(TariSdkError):
    """Raised when the ledger rejects a submitted transaction"""

    def __init__(self, transaction_id: str, reason: str):
        self.transaction_id = transaction_id
        self.reason = reason
        super().__init__(f"Transaction {transaction_id} rejected: {reason}")


class TransactionTimeoutError(TariSdkError):
    """
    Raised when a transaction did not reach a final status before the deadline.

    The transaction may still be finalized later; ``transaction_id`` can be
    used for a manual status check.
    """

    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(f"Timed out waiting for transaction {transaction_id}")


class WaitCancelledError(TariSdkError):
    """Raised when the caller cancels an in-flight wait"""

    def __init__(self, transaction_id: str, polls: int):
        self.transaction_id = transaction_id
        self.polls = polls
        super().__init__(f"Wait for transaction {transaction_id} cancelled after {polls} poll(s)")


class DecodeError(TariSdkError):
    """Raised when an accepted result does not match the expected shape"""
    pass


class MissingAcceptPayloadError(DecodeError):
    """Raised when an accepted transaction result carries no accept branch"""
    pass


class UnexpectedShapeError(DecodeError):
    """Raised when a substate change at a schema position has the wrong tag or is missing"""

    def __init__(self, index: int, expected_tag: str, actual_tag: Optional[str]):
        self.index = index
        self.expected_tag = expected_tag
        self.actual_tag = actual_tag
        actual = actual_tag if actual_tag is not None else "<missing>"
        super().__init__(
            f"Unexpected substate at index {index}: expected {expected_tag}, got {actual}"
        )


class ProviderError(TariSdkError):
    """Base exception for provider-related errors."""
    pass


class ProviderConnectionError(ProviderError):
    """Raised when the provider cannot be reached. Treated as transient while polling."""
    pass


class ProviderResponseError(ProviderError):
    """Raised when the provider returns an error response."""

    def __init__(self, message: str, code: Optional[int] = None):
        self.code = code
        super().__init__(message)


class ProviderAuthError(ProviderError):
    """Raised when the provider auth token is missing, malformed or expired."""
    pass
