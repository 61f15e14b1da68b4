"""
Global pytest fixtures and configuration for test suite.

This module provides reusable fixtures for:
- HTTP clients
- Mock settings/configuration
- Sample email data
- Temporary files
"""

import os
from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio
import structlog
from httpx import ASGITransport, AsyncClient

from eml_reader.api.app import app
from eml_reader.config import Settings
from eml_reader.models.options import EmlOptions
from .fixtures.emails import SAMPLE_EMAILS


@pytest_asyncio.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """
    Create async HTTP client for testing FastAPI endpoints.

    Yields:
        AsyncClient instance
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def mock_settings() -> Settings:
    """
    Create mock settings for testing with safe defaults.

    Returns:
        Settings instance with test configuration
    """
    return Settings(
        max_email_size_mb=1,
        log_level="INFO",
        log_json=False,  # Easier to read in tests
    )


@pytest.fixture
def default_options() -> EmlOptions:
    """Options with every flag off."""
    return EmlOptions(headers_only=False, verbose=False, unwrap_double_base64=False)


@pytest.fixture
def verbose_options() -> EmlOptions:
    """Options with verbose diagnostics enabled."""
    return EmlOptions(verbose=True)


@pytest.fixture
def sample_eml() -> str:
    """
    Get simple plain text email for basic tests.

    Returns:
        Text of a simple .eml file
    """
    return SAMPLE_EMAILS["simple_plain_text"]


@pytest.fixture
def multipart_alternative_eml() -> str:
    """
    Get multipart email with both HTML and plain text.

    Returns:
        Text of a multipart/alternative email
    """
    return SAMPLE_EMAILS["multipart_alternative"]


@pytest.fixture
def attachment_eml() -> str:
    """
    Get multipart/mixed email with one text part and one attachment.

    Returns:
        Text of email with an f.txt attachment
    """
    return SAMPLE_EMAILS["mixed_with_attachment"]


@pytest.fixture
def nested_eml() -> str:
    """
    Get mixed > related > alternative email.

    Returns:
        Text of a three-level nested multipart email
    """
    return SAMPLE_EMAILS["nested_related"]


@pytest.fixture
def tmp_eml_file(tmp_path) -> Generator[str, None, None]:
    """
    Create temporary .eml file for file-based tests.

    Args:
        tmp_path: pytest's temporary directory fixture

    Yields:
        Path to temporary .eml file
    """
    eml_path = tmp_path / "test_email.eml"
    eml_path.write_text(SAMPLE_EMAILS["simple_plain_text"], encoding="utf-8")
    yield str(eml_path)


@pytest.fixture(autouse=True)
def reset_env_vars():
    """
    Reset environment variables before each test.

    This prevents test pollution from env var changes.
    """
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture(autouse=True)
def reset_logging():
    """
    Restore structlog defaults after each test.

    The CLI binds its loggers to the captured stderr of the running test,
    which is closed once the test ends.
    """
    yield
    structlog.reset_defaults()


def pytest_configure(config):
    """
    Configure pytest with custom markers and settings.
    """
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (API, CLI, end-to-end)"
    )
