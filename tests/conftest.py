import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_storeinit_logger():
    yield
    # handlers bound to a previous test's captured stdout must not leak
    logging.getLogger("storeinit").handlers.clear()
