"""
Configuration for the Tari Faucet SDK.

Network definitions ship with the package in ``networks.json``; runtime
settings come from constructor arguments or environment variables.
"""
import json
import logging
import math
import os
import importlib.resources
import urllib.parse
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, model_validator

logger = logging.getLogger(__name__)

FEE_AMOUNT = "2000"
INIT_SUPPLY = "100000"
FIRST_TOKEN_SYMBOL = "A"
SECOND_TOKEN_SYMBOL = "B"

DEFAULT_NETWORK = "esmeralda"
DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_WAIT_TIMEOUT = 120.0

ENV_NETWORK = "TARI_NETWORK"
ENV_WALLET_DAEMON_URL = "TARI_WALLET_DAEMON_URL"
ENV_WALLET_AUTH_TOKEN = "TARI_WALLET_AUTH_TOKEN"
ENV_FAUCET_TEMPLATE = "TARI_FAUCET_TEMPLATE_ADDRESS"
ENV_POLL_INTERVAL = "TARI_POLL_INTERVAL"
ENV_WAIT_TIMEOUT = "TARI_WAIT_TIMEOUT"


def validate_provider_url(url: str, name: str = "url") -> str:
    """
    Require https:// unless the host is local.

    Raises:
        ValueError: If the URL is insecure and not local
    """
    parsed = urllib.parse.urlparse(url)
    host = parsed.hostname or ''
    is_local = host in ('localhost', '127.0.0.1')
    if parsed.scheme != 'https' and not (is_local and parsed.scheme == 'http'):
        raise ValueError(f"{name} must use https:// for security (got: {parsed.scheme}://)")
    return url


class WaitPolicy(BaseModel):
    """
    How long and how often to poll for a transaction result.

    Both values are in seconds. The timeout is mandatory and finite.
    """
    model_config = ConfigDict(frozen=True)

    poll_interval: float = DEFAULT_POLL_INTERVAL
    timeout: float = DEFAULT_WAIT_TIMEOUT

    @model_validator(mode="after")
    def _check_bounds(self) -> "WaitPolicy":
        if not math.isfinite(self.poll_interval) or self.poll_interval < 0:
            raise ValueError(f"poll_interval must be a finite, non-negative number (got {self.poll_interval})")
        if not math.isfinite(self.timeout) or self.timeout <= 0:
            raise ValueError(f"timeout must be a finite, positive number (got {self.timeout})")
        return self

    @classmethod
    def from_env(cls) -> "WaitPolicy":
        """Read TARI_POLL_INTERVAL / TARI_WAIT_TIMEOUT, falling back to defaults"""
        return cls(
            poll_interval=float(os.environ.get(ENV_POLL_INTERVAL, DEFAULT_POLL_INTERVAL)),
            timeout=float(os.environ.get(ENV_WAIT_TIMEOUT, DEFAULT_WAIT_TIMEOUT)),
        )


class NetworkConfig:
    """Access to the bundled network definitions"""

    _networks_cache: Optional[Dict[str, Dict[str, Any]]] = None

    @classmethod
    def load_networks(cls) -> Dict[str, Dict[str, Any]]:
        """
        Load network definitions, caching them after the first read.

        Returns:
            Mapping of network name to its definition
        """
        if cls._networks_cache is not None:
            return cls._networks_cache

        resource = importlib.resources.files("tari_faucet_sdk") / "networks.json"
        with resource.open("r", encoding="utf-8") as f:
            cls._networks_cache = json.load(f)
        logger.debug(f"Loaded {len(cls._networks_cache)} network definitions")
        return cls._networks_cache

    @classmethod
    def get_network(cls, name: Optional[str] = None) -> Dict[str, Any]:
        """
        Get a network definition.

        Args:
            name: Network name (defaults to TARI_NETWORK or esmeralda)

        Raises:
            ValueError: If the network is not defined
        """
        name = name or os.environ.get(ENV_NETWORK, DEFAULT_NETWORK)
        networks = cls.load_networks()
        if name not in networks:
            raise ValueError(f"Network '{name}' not found. Available networks: {', '.join(sorted(networks))}")
        return networks[name]

    @classmethod
    def get_faucet_template(cls, name: Optional[str] = None) -> str:
        """Faucet template address, overridable with TARI_FAUCET_TEMPLATE_ADDRESS"""
        override = os.environ.get(ENV_FAUCET_TEMPLATE)
        if override:
            return override
        return cls.get_network(name)["faucetTemplate"]

    @classmethod
    def get_wallet_daemon_url(cls, name: Optional[str] = None) -> str:
        """Wallet daemon JSON-RPC URL, overridable with TARI_WALLET_DAEMON_URL"""
        return os.environ.get(ENV_WALLET_DAEMON_URL) or cls.get_network(name)["walletDaemon"]
