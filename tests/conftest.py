# ==============================================
# Pytest Configuration and Fixtures
# ==============================================
#
# Shared fixtures for all tests.
#
# FIXTURES:
# ---------
# - app_config       → AppConfig with a temporary metadata dir
# - sample_document  → One realistic user document
# - city_documents   → Small batch with an optional nested field
# - clean_env        → Config singleton reset + logging handlers removed
#
# ==============================================

import logging

import pytest

from schema_parser.config import AppConfig, ParserConfig, reset_config
from schema_parser.logging_setup import LOGGER_NAME


@pytest.fixture(autouse=True)
def clean_env():
    """Reset the config singleton and drop handlers added by the CLI."""
    reset_config()
    yield
    reset_config()
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True


@pytest.fixture
def app_config(tmp_path):
    """Default configuration writing metadata under tmp_path."""
    return AppConfig(
        parser=ParserConfig(),
        metadata_dir=str(tmp_path / "metadata"),
    )


@pytest.fixture
def sample_document():
    """A user document with scalars, an array and a nested document."""
    return {
        "name": "Lena Schmidt",
        "age": 34,
        "score": 97.5,
        "active": True,
        "tags": ["admin", "beta", "admin"],
        "address": {
            "street": "Oranienstr. 123",
            "city": "Berlin",
        },
        "nickname": None,
    }


@pytest.fixture
def city_documents():
    """Four documents; 'address' appears in three, 'address.zip' in one."""
    return [
        {"name": "Lena", "address": {"city": "Berlin", "zip": "10999"}},
        {"name": "Jonas", "address": {"city": "Hamburg"}},
        {"name": "Mia"},
        {"name": "Lena", "address": {"city": "Berlin"}},
    ]
