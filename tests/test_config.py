"""Tests for runtime settings."""

import pytest

from pymemmap.config import DEFAULT_PROC_ROOT, DEFAULT_TOP_N, Settings


def test_defaults():
    """Test the default settings."""
    settings = Settings()
    assert settings.proc_root == DEFAULT_PROC_ROOT == "/proc"
    assert settings.counter == "Rss"
    assert settings.top_n == DEFAULT_TOP_N
    assert settings.detailed


def test_from_env_empty():
    """Test no variables keeps the defaults."""
    assert Settings.from_env({}) == Settings()


def test_from_env_overrides():
    """Test PYMEMMAP_* variables override the defaults."""
    settings = Settings.from_env(
        {
            "PYMEMMAP_PROC_ROOT": "/tmp/proc",
            "PYMEMMAP_COUNTER": "Pss",
            "PYMEMMAP_TOP": "3",
        }
    )
    assert settings == Settings(proc_root="/tmp/proc", counter="Pss", top_n=3)


@pytest.mark.parametrize("value", ["many", "-1"])
def test_from_env_bad_top(value):
    """Test an invalid PYMEMMAP_TOP is rejected."""
    with pytest.raises(ValueError):
        Settings.from_env({"PYMEMMAP_TOP": value})


def test_settings_is_frozen():
    """Test Settings is immutable."""
    with pytest.raises(AttributeError):
        Settings().top_n = 1  # type: ignore[misc]
