"""
Tests for the in-memory stub provider.
"""
import pytest

from tari_faucet_sdk import (
    ProviderConnectionError, ProviderResponseError, StubProvider, SubmitError, TransactionStatus
)
from tari_faucet_sdk.provider import accept_payload


class TestStubProvider:
    """Tests for the StubProvider scripting behaviour."""

    def test_is_available(self):
        assert StubProvider().is_available()

    @pytest.mark.asyncio
    async def test_deterministic_transaction_ids(self, stub_provider, simple_request):
        first = await stub_provider.submit_transaction(simple_request)
        second = await stub_provider.submit_transaction(simple_request)

        assert first.transaction_id == "0" * 63 + "1"
        assert second.transaction_id == "0" * 63 + "2"

    @pytest.mark.asyncio
    async def test_default_script_is_accepted(self, stub_provider, simple_request):
        handle = await stub_provider.submit_transaction(simple_request)
        response = await stub_provider.get_transaction_status(handle.transaction_id)

        assert response.status == TransactionStatus.ACCEPTED
        assert response.result == accept_payload()

    @pytest.mark.asyncio
    async def test_script_repeats_last_status(self, stub_provider, simple_request):
        stub_provider.queue_transaction(["Pending", "Accepted"], accept_payload())
        handle = await stub_provider.submit_transaction(simple_request)

        statuses = [(await stub_provider.get_transaction_status(handle.transaction_id)).status for _ in range(3)]

        assert statuses == [TransactionStatus.PENDING, TransactionStatus.ACCEPTED, TransactionStatus.ACCEPTED]
        assert stub_provider.status_calls[handle.transaction_id] == 3

    @pytest.mark.asyncio
    async def test_result_only_on_final_status(self, stub_provider, simple_request):
        stub_provider.queue_transaction(["Pending", "Accepted"], accept_payload())
        handle = await stub_provider.submit_transaction(simple_request)

        pending = await stub_provider.get_transaction_status(handle.transaction_id)
        accepted = await stub_provider.get_transaction_status(handle.transaction_id)

        assert pending.result is None
        assert accepted.result is not None

    @pytest.mark.asyncio
    async def test_scripted_exception(self, stub_provider, simple_request):
        stub_provider.queue_transaction([ProviderConnectionError("reset"), "Accepted"])
        handle = await stub_provider.submit_transaction(simple_request)

        with pytest.raises(ProviderConnectionError):
            await stub_provider.get_transaction_status(handle.transaction_id)
        response = await stub_provider.get_transaction_status(handle.transaction_id)
        assert response.status == TransactionStatus.ACCEPTED

    @pytest.mark.asyncio
    async def test_refusal_applies_once(self, stub_provider, simple_request):
        stub_provider.refuse_next_submission("no funds")

        with pytest.raises(SubmitError, match="no funds"):
            await stub_provider.submit_transaction(simple_request)
        assert stub_provider.submitted == []

        await stub_provider.submit_transaction(simple_request)
        assert len(stub_provider.submitted) == 1

    @pytest.mark.asyncio
    async def test_unknown_transaction(self, stub_provider):
        with pytest.raises(ProviderResponseError) as excinfo:
            await stub_provider.get_transaction_status("f" * 64)
        assert excinfo.value.code == 404

    def test_queue_requires_statuses(self, stub_provider):
        with pytest.raises(ValueError):
            stub_provider.queue_transaction([])

    @pytest.mark.asyncio
    async def test_balances(self, account):
        provider = StubProvider(account=account, balances={"resource_a": 5})

        balances = await provider.get_account_balances(account.address.upper())

        assert [(b.resource_address, b.balance) for b in balances] == [("resource_a", 5)]

    @pytest.mark.asyncio
    async def test_close(self, stub_provider):
        await stub_provider.close()
        assert stub_provider.closed
