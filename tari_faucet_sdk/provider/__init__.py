"""
Provider module for the Tari Faucet SDK.

A provider submits transactions to a Tari wallet and reports their status.
``WalletDaemonProvider`` talks to a real wallet daemon over JSON-RPC;
``StubProvider`` simulates one in memory.
"""
import logging
import os
from typing import Optional

from ..config import ENV_WALLET_AUTH_TOKEN, NetworkConfig
from .base import TariProvider
from .stub import StubProvider, accept_payload, reject_payload
from .wallet_daemon import WalletDaemonProvider

__all__ = ['TariProvider', 'StubProvider', 'WalletDaemonProvider', 'get_provider',
           'accept_payload', 'reject_payload']

logger = logging.getLogger(__name__)


def get_provider(
    url: Optional[str] = None,
    auth_token: Optional[str] = None,
    network: Optional[str] = None,
    prefer_stub: bool = False
) -> TariProvider:
    """
    Get the best available provider implementation.

    Args:
        url: Wallet daemon JSON-RPC URL (defaults to TARI_WALLET_DAEMON_URL or the network's)
        auth_token: Wallet auth token (defaults to TARI_WALLET_AUTH_TOKEN)
        network: Network name used to look up the default URL
        prefer_stub: Return the in-memory stub provider

    Returns:
        Provider implementation
    """
    if prefer_stub:
        logger.info("Using in-memory stub provider")
        return StubProvider()

    url = url or NetworkConfig.get_wallet_daemon_url(network)
    auth_token = auth_token or os.environ.get(ENV_WALLET_AUTH_TOKEN)
    logger.info(f"Using wallet daemon provider at {url}")
    return WalletDaemonProvider(url, auth_token=auth_token)
