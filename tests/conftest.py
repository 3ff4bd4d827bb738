import io

import pytest
from loguru import logger


@pytest.fixture
def log_messages():
    """Capture loguru records as ``(level, message)`` tuples."""
    records: list[tuple[str, str]] = []
    sink_id = logger.add(
        lambda message: records.append((message.record["level"].name, message.record["message"])),
        level="DEBUG",
    )
    yield records
    logger.remove(sink_id)


@pytest.fixture
def display():
    """Stream standing in for the operator console."""
    return io.StringIO()
