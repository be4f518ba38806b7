"""Shared fixtures for the runtime-sync test suite."""

import logging

import pytest

from common import logging_utils
from constants import Constants


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by configure_logging after each test."""
    yield
    root = logging.getLogger()
    for handler in list(logging_utils._managed_handlers):  # pylint: disable=protected-access
        root.removeHandler(handler)
        handler.close()
    logging_utils._managed_handlers.clear()  # pylint: disable=protected-access


@pytest.fixture(autouse=True)
def restore_http_constants(monkeypatch):
    """Config files may override HTTP tunables on Constants; undo that per test."""
    monkeypatch.setattr(Constants, "REQUEST_TIMEOUT", Constants.REQUEST_TIMEOUT)
    monkeypatch.setattr(Constants, "HTTP_RETRY_MAX", Constants.HTTP_RETRY_MAX)


@pytest.fixture
def node_index():
    """A trimmed Node.js dist index.json."""
    return [
        {"version": "v24.17.1", "date": "2025-07-08", "lts": False},
        {"version": "v23.0.0", "date": "2024-10-16", "lts": False},
        {"version": "v22.17.1", "date": "2025-07-15", "lts": "Jod"},
        {"version": "v21.0.0", "date": "2023-10-17", "lts": False},
        {"version": "v20.17.1", "date": "2024-08-21", "lts": "Iron"},
    ]


@pytest.fixture
def dotnet_index():
    """A trimmed .NET releases-index.json."""
    return {
        "releases-index": [
            {
                "channel-version": "10.0",
                "latest-sdk": "10.0.100-preview.6.25358.103",
                "release-type": "lts",
                "support-phase": "preview",
            },
            {
                "channel-version": "9.0",
                "latest-sdk": "9.0.303",
                "release-type": "sts",
                "support-phase": "active",
            },
            {
                "channel-version": "8.0",
                "latest-sdk": "8.0.412",
                "release-type": "lts",
                "support-phase": "active",
            },
            {
                "channel-version": "7.0",
                "latest-sdk": "7.0.410",
                "release-type": "sts",
                "support-phase": "eol",
            },
            {
                "channel-version": "6.0",
                "latest-sdk": "6.0.428",
                "release-type": "lts",
                "support-phase": "eol",
            },
        ]
    }
