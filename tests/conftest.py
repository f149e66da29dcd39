import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Start every test from default settings, unaffected by the environment."""
    from capwire.config.settings import reset_settings
    for name in ("PROPERTIES_KEY", "REGISTER_METHOD", "UNREGISTER_METHOD",
                 "CONSTRUCTOR_CACHE_SIZE", "LOG_LEVEL"):
        monkeypatch.delenv(f"CAPWIRE_{name}", raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture(autouse=True)
def clean_constructor_cache():
    """Reset the shared constructor cache before and after each test."""
    from capwire.reflection.instantiation import reset_default_context
    reset_default_context()
    yield
    reset_default_context()
