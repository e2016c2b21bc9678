"""Shared fixtures for club_nlq tests."""

import pytest

from club_nlq.config import reset_config


@pytest.fixture(autouse=True)
def fresh_config():
    """Each test reads configuration from its own environment."""
    reset_config()
    yield
    reset_config()
