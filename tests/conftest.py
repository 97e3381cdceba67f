"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Drop cached settings so env changes in a test take effect."""
    from multi_tenant.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def patterns():
    """Pattern store with the default tenant pattern."""
    from multi_tenant.patterns import PatternStore

    return PatternStore.compile()


@pytest.fixture
def team_client():
    """A client of team `acme`."""
    from multi_tenant.models import ClientSession

    return ClientSession(client_id="client1", username="alice@acme")


@pytest.fixture
def anonymous_client():
    """A client without a username."""
    from multi_tenant.models import ClientSession

    return ClientSession(client_id="anon1")


@pytest.fixture
def plugin(patterns):
    """Plugin with default patterns and no metrics."""
    from multi_tenant.plugin import MultiTenantPlugin

    return MultiTenantPlugin(patterns)
