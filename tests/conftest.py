"""Shared fixtures for board tests."""

import pytest

from mdboard.commands import BoardCommands
from mdboard.config import Config
from mdboard.store import BoardStore

TODAY = "2026-01-02"

SAMPLE_BOARD = """---
kanban-plugin: basic
---

## Backlog

- [ ] Write docs #agent-task ^doc001

## Ready

- [ ] Fix bug ^abc123
- [ ] Ship release [priority::high] #agent-task ^rel001

## In Progress

## Done

## Failed

%% kanban:settings
{"kanban-plugin":"basic"}
%%
"""


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep a developer's own config and vault out of the tests."""
    monkeypatch.setenv("MDBOARD_CONFIG", str(tmp_path / "no-such-config.yaml"))
    monkeypatch.delenv("MDBOARD_VAULT_PATH", raising=False)


@pytest.fixture
def sample_text():
    return SAMPLE_BOARD


@pytest.fixture
def store(tmp_path):
    return BoardStore(tmp_path)


@pytest.fixture
def board_file(tmp_path):
    path = tmp_path / "board.md"
    path.write_text(SAMPLE_BOARD)
    return path


@pytest.fixture
def cmds(store, board_file):
    return BoardCommands(store, Config(), today=lambda: TODAY)
