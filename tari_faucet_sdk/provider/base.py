"""
Provider abstraction.

A provider is the narrow request/response boundary to a Tari wallet: submit
a transaction, query its status, and read the account and its balances.
Every call is a coroutine so waiting on one transaction never blocks other
tasks on the same event loop.
"""
from abc import ABC, abstractmethod
from typing import List

from ..models import Account, AccountBalance, TransactionHandle, TransactionRequest, TransactionStatusResponse


class TariProvider(ABC):
    """
    Abstract base class for provider implementations.

    Implementations must be safe to use from concurrent tasks.
    """

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if this provider is usable.

        Returns:
            True if the provider is available, False otherwise
        """
        pass

    @abstractmethod
    async def submit_transaction(self, request: TransactionRequest) -> TransactionHandle:
        """
        Submit a transaction.

        Args:
            request: The transaction request

        Returns:
            Handle identifying the submitted transaction

        Raises:
            SubmitError: If the provider refuses the request
            ProviderError: If the provider cannot be reached
        """
        pass

    @abstractmethod
    async def get_transaction_status(self, transaction_id: str) -> TransactionStatusResponse:
        """
        Get the current status of a submitted transaction.

        Raises:
            ProviderConnectionError: For transient failures
            ProviderError: For other provider failures
        """
        pass

    @abstractmethod
    async def get_account(self) -> Account:
        """Get the provider's default account."""
        pass

    @abstractmethod
    async def get_account_balances(self, address: str) -> List[AccountBalance]:
        """Get resource balances held by the account at ``address``."""
        pass

    async def close(self) -> None:
        """Close any open connections or resources."""
        pass
