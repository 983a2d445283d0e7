"""
Version information for the Tari Faucet SDK.
"""
import importlib.metadata
import pathlib

import tomli

DEFAULT_VERSION = "0.1.0"


def _version_from_pyproject(path: pathlib.Path) -> str:
    """Read the version of a source checkout; DEFAULT_VERSION if unreadable"""
    try:
        with path.open("rb") as f:
            return tomli.load(f)["project"]["version"]
    except (FileNotFoundError, KeyError, tomli.TOMLDecodeError):
        return DEFAULT_VERSION


try:
    __version__ = importlib.metadata.version("tari-faucet-sdk")
except importlib.metadata.PackageNotFoundError:
    __version__ = _version_from_pyproject(pathlib.Path(__file__).parent.parent / "pyproject.toml")
