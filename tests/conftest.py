import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from couchbase_dns_discovery.discovery.models import SRVRecord
from couchbase_dns_discovery.logging import Logger, LoggingConfig


RECORD_NAME = "_couchbase._tcp.services.local"


@pytest.fixture(autouse=True)
def configure_logging():
    config = LoggingConfig()
    config.update(log_level="info", log_output="stderr", disabled_loggers=[])
    yield
    config.update(log_level="info", log_output="stderr", disabled_loggers=[])


@pytest.fixture
def record_name() -> str:
    return RECORD_NAME


@pytest.fixture
def srv_record_factory():
    def create_record(
        target: str,
        priority: int = 10,
        port: int = 8091,
        weight: int = 10,
    ) -> SRVRecord:
        return SRVRecord(
            priority=priority,
            weight=weight,
            port=port,
            target=target,
        )

    return create_record


@pytest.fixture
def mock_lookup_client() -> MagicMock:
    lookup_client = MagicMock()
    lookup_client.query_srv = AsyncMock(return_value=[])
    return lookup_client


@pytest.fixture
def mock_logger() -> MagicMock:
    logger = MagicMock(spec=Logger)
    logger.log = AsyncMock()
    logger.close = AsyncMock()
    return logger


def create_mock_stream_writer() -> MagicMock:
    mock_writer = MagicMock(spec=asyncio.StreamWriter)
    mock_writer.write = MagicMock()
    mock_writer.drain = AsyncMock()
    mock_writer.close = MagicMock()
    mock_writer.wait_closed = AsyncMock()
    mock_writer.is_closing = MagicMock(return_value=False)
    return mock_writer


@pytest.fixture
def mock_stdout_writer() -> MagicMock:
    return create_mock_stream_writer()


@pytest.fixture
def mock_stderr_writer() -> MagicMock:
    return create_mock_stream_writer()
