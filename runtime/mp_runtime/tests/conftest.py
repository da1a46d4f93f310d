"""Shared fixtures for the Mp runtime tests"""

import os
import sys

import pytest

# Add grandparent directory to path for imports (to find mp_runtime package)
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from mp_runtime import BufferedHost, MpRuntime, RuntimeConfig


@pytest.fixture
def host():
    """In-memory host capturing print() output"""
    return BufferedHost()


@pytest.fixture
def runtime(host):
    """Runtime with default config writing to the buffered host"""
    return MpRuntime(host=host)


@pytest.fixture
def yielding_runtime(host):
    """Runtime whose while loops yield arrays of iteration values"""
    return MpRuntime(config=RuntimeConfig(while_yields_values=True), host=host)


@pytest.fixture(autouse=True)
def clean_mp_environ(monkeypatch):
    """Keep MP_* variables from the outer shell out of the tests"""
    for name in ('MP_WHILE_YIELDS', 'MP_RECURSION_LIMIT', 'MP_ECHO_RESULT'):
        monkeypatch.delenv(name, raising=False)
