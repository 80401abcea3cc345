"""Pytest configuration and shared fixtures."""

import logging

import pytest


@pytest.fixture(autouse=True)
def _quiet_third_party_loggers() -> None:
    """Keep SQLite and HTTP client debug chatter out of test output."""
    for name in ("aiosqlite", "httpx"):
        logging.getLogger(name).setLevel(logging.WARNING)
