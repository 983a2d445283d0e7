"""
Tests for network configuration and provider selection.
"""
import os
from unittest.mock import patch

import pytest

from tari_faucet_sdk import NetworkConfig, StubProvider, WalletDaemonProvider, get_provider
from tari_faucet_sdk.config import validate_provider_url


class TestNetworkConfig:
    def test_load_networks_is_cached(self):
        networks = NetworkConfig.load_networks()
        assert "esmeralda" in networks
        assert NetworkConfig.load_networks() is networks

    def test_default_network(self):
        network = NetworkConfig.get_network()
        assert network["faucetTemplate"] == "d2b005c94e5120d3680819a6caf475ab72e18a6e94289486294ff509c87d4a42"

    def test_network_from_environment(self):
        with patch.dict(os.environ, {"TARI_NETWORK": "localnet"}):
            network = NetworkConfig.get_network()
        assert network["faucetTemplate"].startswith("e9afe3")

    def test_unknown_network(self):
        with pytest.raises(ValueError, match="Network 'nope' not found"):
            NetworkConfig.get_network("nope")

    def test_faucet_template_override(self):
        with patch.dict(os.environ, {"TARI_FAUCET_TEMPLATE_ADDRESS": "my_template"}):
            assert NetworkConfig.get_faucet_template("localnet") == "my_template"
        assert NetworkConfig.get_faucet_template("localnet").startswith("e9afe3")

    def test_wallet_daemon_url_override(self):
        assert NetworkConfig.get_wallet_daemon_url() == "http://127.0.0.1:9000/json_rpc"
        with patch.dict(os.environ, {"TARI_WALLET_DAEMON_URL": "https://wallet.example.com/json_rpc"}):
            assert NetworkConfig.get_wallet_daemon_url() == "https://wallet.example.com/json_rpc"


class TestValidateProviderUrl:
    @pytest.mark.parametrize("url", [
        "https://wallet.example.com/json_rpc",
        "http://localhost:9000/json_rpc",
        "http://127.0.0.1:9000/json_rpc",
    ])
    def test_accepted(self, url):
        assert validate_provider_url(url) == url

    @pytest.mark.parametrize("url", [
        "http://wallet.example.com/json_rpc",
        "ftp://127.0.0.1/json_rpc",
    ])
    def test_rejected(self, url):
        with pytest.raises(ValueError, match="must use https"):
            validate_provider_url(url)


class TestGetProvider:
    def test_prefer_stub(self):
        assert isinstance(get_provider(prefer_stub=True), StubProvider)

    def test_wallet_daemon_from_network(self):
        provider = get_provider()
        assert isinstance(provider, WalletDaemonProvider)
        assert provider.url == "http://127.0.0.1:9000/json_rpc"
        assert provider.auth_token is None

    def test_explicit_url(self):
        provider = get_provider(url="https://wallet.example.com/json_rpc")
        assert provider.url == "https://wallet.example.com/json_rpc"

    def test_insecure_url(self):
        with pytest.raises(ValueError):
            get_provider(url="http://wallet.example.com/json_rpc")
