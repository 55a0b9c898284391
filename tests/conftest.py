"""Shared fixtures: a puppet-backed controller and the log buffer."""

from __future__ import annotations

from typing import Iterator

import pytest

from strata.tui import logger as log_buffer
from strata.tui.backend.puppet import PuppetBackend
from strata.tui.theme import load_default
from strata.tui.tui import TUI


@pytest.fixture
def backend() -> PuppetBackend:
    return PuppetBackend(size=(40, 12))


@pytest.fixture
def tui(backend: PuppetBackend) -> Iterator[TUI]:
    with TUI(backend=backend, autorefresh=False, theme=load_default()) as app:
        yield app


@pytest.fixture
def log_records() -> Iterator[log_buffer.BufferHandler]:
    handler = log_buffer.init()
    try:
        yield handler
    finally:
        log_buffer.shutdown()
