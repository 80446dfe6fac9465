"""
Unit tests for the locking module.

Tests cover:
- Lock directory selection
- Run lock acquisition and release
- Timeout behavior
- Release on exception
"""

import pytest
from unittest.mock import patch

from toolsetkit.core.exceptions import RunLockTimeout
from toolsetkit.core.locking import LockManager, get_global_cache_dir


class TestGlobalCacheDir:
    """Tests for get_global_cache_dir."""

    def test_unix_location(self, tmp_path):
        with patch("toolsetkit.core.locking.platform.system", return_value="Linux"):
            with patch("toolsetkit.core.locking.Path.home", return_value=tmp_path):
                assert get_global_cache_dir() == tmp_path / ".toolsetkit"

    def test_windows_location(self, tmp_path):
        with patch("toolsetkit.core.locking.platform.system", return_value="Windows"):
            with patch("toolsetkit.core.locking.Path.home", return_value=tmp_path):
                assert (
                    get_global_cache_dir()
                    == tmp_path / "AppData" / "Local" / "toolsetkit"
                )


class TestLockManager:
    """Tests for LockManager class."""

    def test_init_default_lock_dir(self, tmp_path):
        """Test initialization with default lock directory."""
        with patch(
            "toolsetkit.core.locking.get_global_cache_dir", return_value=tmp_path
        ):
            manager = LockManager()

            expected_lock_dir = tmp_path / "lock"
            assert manager.lock_dir == expected_lock_dir
            assert expected_lock_dir.exists()

    def test_init_custom_lock_dir(self, tmp_path):
        """Test initialization with custom lock directory."""
        custom_dir = tmp_path / "custom_locks"
        manager = LockManager(lock_dir=custom_dir)

        assert manager.lock_dir == custom_dir
        assert custom_dir.exists()

    def test_run_lock_acquire_and_release(self, tmp_path):
        """Test acquiring and releasing the run lock."""
        manager = LockManager(lock_dir=tmp_path)

        with manager.run_lock(timeout=5):
            assert manager.run_lock_path.exists()

        # Released, so it can be taken again
        with manager.run_lock(timeout=1):
            pass

    def test_run_lock_timeout(self, tmp_path):
        """Test run lock timeout when another holder exists."""
        manager = LockManager(lock_dir=tmp_path)

        with manager.run_lock(timeout=5):
            with pytest.raises(RunLockTimeout) as exc_info:
                with LockManager(lock_dir=tmp_path).run_lock(timeout=0.1):
                    pass

            assert "Could not acquire run lock" in str(exc_info.value)

    def test_lock_released_on_exception(self, tmp_path):
        """Test lock is released even when exception occurs."""
        manager = LockManager(lock_dir=tmp_path)

        with pytest.raises(ValueError):
            with manager.run_lock(timeout=5):
                raise ValueError("Test exception")

        with manager.run_lock(timeout=1):
            pass
