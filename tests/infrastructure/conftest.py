import logging

import pytest


@pytest.fixture
def restore_logging():
    """Undo ``setup_logging``'s root-logger changes after a test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
