"""Shared test fixtures for the PalGate client tests."""

import os
import sys

import pytest

# Ensure palgate/ is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch, tmp_path):
    """Keep tests away from the real ~/.palgate-cli.json and env overrides."""
    monkeypatch.setenv("PALGATE_CLI_CONFIG", str(tmp_path / "palgate-cli.json"))
    monkeypatch.delenv("PALGATE_MASTER_KEY", raising=False)
    monkeypatch.delenv("PALGATE_TIMESTAMP_OFFSET", raising=False)
