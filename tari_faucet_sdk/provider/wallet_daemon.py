"""
JSON-RPC provider for the Tari wallet daemon.

Talks JSON-RPC 2.0 over HTTP using a ``requests`` session with automatic
retries. Blocking HTTP calls run in a worker thread so that awaiting one call
does not stall the event loop.
"""
import asyncio
import itertools
import logging
import threading
import time
from typing import Any, List, Optional

import jwt
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..config import validate_provider_url
from ..exceptions import (
    ProviderAuthError, ProviderConnectionError, ProviderResponseError, SubmitError
)
from ..models import (
    Account, AccountBalance, TransactionHandle, TransactionRequest, TransactionStatusResponse
)
from .base import TariProvider

logger = logging.getLogger(__name__)


def _component_address(value: Any) -> str:
    """Unwrap ``{"Component": "component_..."}`` style addresses"""
    if isinstance(value, dict) and len(value) == 1:
        return str(next(iter(value.values())))
    return str(value)


class WalletDaemonProvider(TariProvider):
    """
    Provider backed by a running wallet daemon's JSON-RPC endpoint.

    The auth token is a JWT issued by the wallet after permissions were
    granted; obtaining it is outside the scope of this SDK.
    """

    def __init__(
        self,
        url: str,
        auth_token: Optional[str] = None,
        retry_count: int = 3,
        timeout: int = 30,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the provider.

        Args:
            url: JSON-RPC endpoint (e.g. "http://127.0.0.1:9000/json_rpc")
            auth_token: Wallet-issued JWT sent as a bearer token
            retry_count: Number of retries for HTTP requests
            timeout: Timeout for HTTP requests in seconds
            session: Optional pre-configured requests session

        Raises:
            ValueError: If the URL doesn't use https (unless it's localhost/127.0.0.1)
            ProviderAuthError: If the auth token is malformed or expired
        """
        self.url = validate_provider_url(url, "url")
        self.auth_token = auth_token
        self.timeout = timeout
        self._ids = itertools.count(1)
        self._id_lock = threading.Lock()
        if auth_token:
            self._check_token()

        if session is None:
            session = requests.Session()
            # Retry only failures where the request never reached the daemon
            retries = Retry(
                total=retry_count,
                connect=retry_count,
                read=0,
                status=0,
                backoff_factor=0.5,
                raise_on_status=False,
            )
            session.mount("http://", HTTPAdapter(max_retries=retries))
            session.mount("https://", HTTPAdapter(max_retries=retries))
        self.session = session
        self._closed = False

    def is_available(self) -> bool:
        return not self._closed

    def _check_token(self) -> None:
        """
        Read the token's claims (without verifying the signature) and fail
        fast on malformed or expired tokens.
        """
        try:
            claims = jwt.decode(self.auth_token, options={"verify_signature": False})
        except jwt.DecodeError as e:
            raise ProviderAuthError(f"Malformed wallet auth token: {e}") from e

        exp = claims.get("exp")
        if exp is not None and float(exp) <= time.time():
            raise ProviderAuthError("Wallet auth token has expired")

    def _next_id(self) -> int:
        with self._id_lock:
            return next(self._ids)

    def _call(self, method: str, params: Any) -> Any:
        """
        Perform one blocking JSON-RPC call.

        Raises:
            ProviderConnectionError: For network failures, timeouts and 5xx responses
            ProviderAuthError: For 401/403 responses or an expired token
            ProviderResponseError: For JSON-RPC errors and malformed responses
        """
        headers = {"Content-Type": "application/json"}
        if self.auth_token:
            self._check_token()
            headers["Authorization"] = f"Bearer {self.auth_token}"

        payload = {"jsonrpc": "2.0", "id": self._next_id(), "method": method, "params": params}
        logger.debug(f"JSON-RPC call {method} (id={payload['id']})")

        try:
            response = self.session.post(self.url, json=payload, headers=headers, timeout=self.timeout)
        except (requests.ConnectionError, requests.Timeout) as e:
            raise ProviderConnectionError(f"Wallet daemon unreachable during {method}: {e}") from e
        except requests.RequestException as e:
            raise ProviderResponseError(f"Request for {method} failed: {e}") from e

        if response.status_code in (401, 403):
            raise ProviderAuthError(f"Wallet daemon refused {method}: HTTP {response.status_code}")
        if response.status_code >= 500:
            raise ProviderConnectionError(f"Wallet daemon error during {method}: HTTP {response.status_code}")
        if response.status_code >= 400:
            raise ProviderResponseError(f"Wallet daemon rejected {method}: HTTP {response.status_code}", code=response.status_code)

        try:
            body = response.json()
        except ValueError as e:
            raise ProviderResponseError(f"Invalid JSON response for {method}: {e}") from e

        if not isinstance(body, dict):
            raise ProviderResponseError(f"Unexpected response for {method}: {body!r}")
        if body.get("error"):
            error = body["error"]
            message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            code = error.get("code") if isinstance(error, dict) else None
            raise ProviderResponseError(f"{method} failed: {message}", code=code)
        if "result" not in body:
            raise ProviderResponseError(f"Missing result in response for {method}")
        return body["result"]

    async def _rpc(self, method: str, params: Any) -> Any:
        return await asyncio.to_thread(self._call, method, params)

    async def submit_transaction(self, request: TransactionRequest) -> TransactionHandle:
        wire = request.to_wire()
        params = {
            "signing_key_index": wire["account_id"],
            "fee_instructions": wire["fee_instructions"],
            "instructions": wire["instructions"],
            "inputs": [
                {"substate_id": s["substate_id"], "version": s.get("version")}
                for s in wire["required_substates"]
            ],
            "input_refs": wire["input_refs"],
            "override_inputs": False,
            "is_dry_run": wire["is_dry_run"],
            "proof_ids": [],
            "min_epoch": wire["min_epoch"],
            "max_epoch": wire["max_epoch"],
        }
        try:
            result = await self._rpc("transactions.submit", params)
        except ProviderResponseError as e:
            raise SubmitError(str(e), code=e.code) from e

        transaction_id = result.get("transaction_id") if isinstance(result, dict) else None
        if not transaction_id:
            raise SubmitError(f"Wallet daemon returned no transaction id: {result!r}")
        logger.info(f"Transaction sent: {transaction_id}")
        return TransactionHandle(transaction_id=transaction_id)

    async def get_transaction_status(self, transaction_id: str) -> TransactionStatusResponse:
        result = await self._rpc("transactions.get_result", {"transaction_id": transaction_id})
        try:
            return TransactionStatusResponse(
                transaction_id=result.get("transaction_id", transaction_id),
                status=result["status"],
                result=result.get("result"),
            )
        except (AttributeError, KeyError, ValueError) as e:
            raise ProviderResponseError(f"Malformed transaction status for {transaction_id}: {e}") from e

    async def get_account(self) -> Account:
        result = await self._rpc("accounts.get_default", {})
        try:
            account = result["account"]
            return Account(
                address=_component_address(account["address"]),
                account_id=account.get("key_index"),
                public_key=result.get("public_key"),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderResponseError(f"Malformed account response: {e}") from e

    async def get_account_balances(self, address: str) -> List[AccountBalance]:
        result = await self._rpc(
            "accounts.get_balances",
            {"account": {"ComponentAddress": address}, "refresh": False},
        )
        try:
            return [
                AccountBalance(resource_address=b["resource_address"], balance=b.get("balance") or 0)
                for b in result.get("balances", [])
            ]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ProviderResponseError(f"Malformed balances response: {e}") from e

    async def close(self) -> None:
        self.session.close()
        self._closed = True
