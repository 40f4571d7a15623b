import logging

import pytest


@pytest.fixture(autouse=True)
def _restore_package_logger():
    """Undo logger state left behind by ``setup_logging`` in CLI tests."""
    logger = logging.getLogger("ccr_model_manager")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
