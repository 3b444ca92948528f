# tests/conftest.py
import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def silence_logger():
    logger.remove()
    logger.add(lambda msg: None)
    yield
