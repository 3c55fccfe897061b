# Copyright (c) 2026 Heureum AI. All rights reserved.

"""Shared fixtures for the response engine tests."""

import pytest

from bridge_agent.config import settings

# ---------------------------------------------------------------------------
# Sample responses
# ---------------------------------------------------------------------------


@pytest.fixture
def verbose_text() -> str:
    """A short answer padded with assistant filler phrases."""
    return (
        "I'll help you with that. Based on your request, I understand that you want to "
        "check the status of the service. Let me analyze that for you. As you can see, "
        "the service is running normally. It's important to note that there were no "
        "errors in the last 24 hours. I hope this helps! Feel free to ask if you have "
        "any questions. Let me know if you need anything else."
    )


@pytest.fixture
def key_points_text() -> str:
    """An answer with a lead sentence and a numbered list."""
    return (
        "Here's what I found about the service health after reviewing the dashboards.\n"
        "\n"
        "1. Service is healthy\n"
        "2. No errors in 24 hours\n"
        "3. Response time is normal\n"
        "\n"
        "Overall the system is performing well and no further action is required today."
    )


@pytest.fixture
def code_text() -> str:
    """An answer containing a fenced code block."""
    return (
        "Use this snippet to restart the worker. It handles retries for you.\n"
        "\n"
        "```python\n"
        "def restart():\n"
        "    pass  # keep  spacing\n"
        "```\n"
        "\n"
        "That should fix it. Let me know if you need anything else."
    )


# ---------------------------------------------------------------------------
# Settings isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def patch_settings(monkeypatch):
    """Factory fixture that overrides attributes of the settings singleton."""

    def _patch(**overrides):
        for name, value in overrides.items():
            monkeypatch.setattr(settings, name, value)
        return settings

    return _patch
