"""
Tests for the version module of the Tari Faucet SDK.
"""
import importlib
import re
from importlib import metadata as importlib_metadata
from unittest.mock import mock_open, patch

from tari_faucet_sdk import __version__
import tari_faucet_sdk.version as vmod


def _not_installed(name):
    raise importlib_metadata.PackageNotFoundError(name)


def test_version_format():
    """Test that the version string follows semantic versioning"""
    assert re.match(r'^\d+\.\d+\.\d+$', __version__), "Version should follow semantic versioning"


@patch('importlib.metadata.version')
def test_version_from_metadata(mock_metadata_version):
    """When metadata lookup succeeds, version comes from metadata"""
    mock_metadata_version.return_value = "2.3.4"
    importlib.reload(vmod)
    assert vmod.__version__ == "2.3.4"


def test_version_from_file(monkeypatch):
    """When metadata lookup fails, pyproject.toml is read"""
    monkeypatch.setattr(importlib_metadata, 'version', _not_installed)
    monkeypatch.setattr('pathlib.Path.open', mock_open(read_data=b'[project]\nversion = "1.2.3"\n'))
    importlib.reload(vmod)
    assert vmod.__version__ == "1.2.3"


def test_version_file_not_found(tmp_path):
    assert vmod._version_from_pyproject(tmp_path / "pyproject.toml") == vmod.DEFAULT_VERSION


def test_version_key_error(tmp_path):
    path = tmp_path / "pyproject.toml"
    path.write_text('[project]\nname = "tari-faucet-sdk"\n')
    assert vmod._version_from_pyproject(path) == vmod.DEFAULT_VERSION


def test_version_toml_decode_error(tmp_path):
    path = tmp_path / "pyproject.toml"
    path.write_text("not = [valid toml")
    assert vmod._version_from_pyproject(path) == vmod.DEFAULT_VERSION
