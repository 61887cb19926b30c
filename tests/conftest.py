"""Shared fixtures: in-memory outputs, headless terminals and screens."""

import io
import logging

import pytest

from celltui.render.frame import Screen
from celltui.terminal.device import Terminal


@pytest.fixture
def output() -> io.StringIO:
    """Captures everything written to the terminal."""
    return io.StringIO()


@pytest.fixture
def terminal(output: io.StringIO) -> Terminal:
    """80x24 terminal with no input device."""
    return Terminal.headless(80, 24, output)


@pytest.fixture
def screen(output: io.StringIO) -> Screen:
    """Small screen writing to the captured output."""
    return Screen(10, 3, output)


@pytest.fixture
def flushed_screen(screen: Screen, output: io.StringIO) -> Screen:
    """Screen whose first full repaint has already happened, with output cleared."""
    screen.end_frame(screen.begin_frame())
    output.seek(0)
    output.truncate()
    return screen


@pytest.fixture
def clean_logger():
    """Detach handlers added to the package logger during a test."""
    logger = logging.getLogger("celltui")
    before = list(logger.handlers)
    level = logger.level
    yield logger
    for handler in list(logger.handlers):
        if handler not in before:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)
