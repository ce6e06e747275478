"""Safety tests to ensure test suite doesn't modify production data.

These tests verify that running the test suite does NOT touch:
- ./data directory (default location of the examdesk database)
- ./config/examdesk.yaml (user's configuration)

All tests MUST use temporary directories via pytest fixtures.
"""

import hashlib
import os
from pathlib import Path

import pytest


def _hash_directory(path: Path) -> str | None:
    """Create a hash of directory structure and file contents.

    Returns None if directory doesn't exist.
    """
    if not path.exists():
        return None

    hasher = hashlib.sha256()

    for root, dirs, files in os.walk(path):
        # Sort for consistent ordering
        dirs.sort()
        files.sort()

        for filename in files:
            filepath = Path(root) / filename
            rel_path = filepath.relative_to(path)
            hasher.update(str(rel_path).encode())

            # Size and mtime only, not content
            stat = filepath.stat()
            hasher.update(str(stat.st_size).encode())
            hasher.update(str(int(stat.st_mtime)).encode())

    return hasher.hexdigest()


class TestDataDirectorySafety:
    """Tests ensuring ./data is never modified by test suite."""

    @pytest.fixture(scope="class")
    def data_dir_state_before(self):
        """Capture state of ./data before tests."""
        data_path = Path("data")
        return {
            "exists": data_path.exists(),
            "hash": _hash_directory(data_path),
        }

    def test_data_directory_not_created(self, data_dir_state_before):
        """Test suite should not create ./data if it didn't exist."""
        if not data_dir_state_before["exists"] and Path("data").exists():
            pytest.fail(
                "./data directory was created during test run. "
                "All tests MUST use temporary directories for databases."
            )

    def test_data_directory_not_modified(self, data_dir_state_before):
        """Test suite should not modify ./data if it existed."""
        if data_dir_state_before["exists"]:
            current_hash = _hash_directory(Path("data"))
            if current_hash != data_dir_state_before["hash"]:
                pytest.fail(
                    "./data directory was modified during test run. "
                    "All tests MUST use temporary directories for databases."
                )


class TestConfigSafety:
    """Tests ensuring the user's config file is never read or written."""

    def test_config_env_points_at_temp(self, tmp_path):
        """The autouse fixture redirects configuration into tmp_path."""
        assert os.environ["EXAMDESK_CONFIG"].startswith(str(tmp_path))
        assert os.environ["EXAMDESK_DB_PATH"].startswith(str(tmp_path))


class TestTestIsolation:
    """Meta-tests ensuring test fixtures use temp directories."""

    def test_phase_tests_use_temp_fixtures(self):
        """Test files that open databases do so under tmp_path."""
        test_files = sorted(Path("tests").glob("f*/test_*.py"))

        violations = []

        for test_file in test_files:
            content = test_file.read_text(encoding="utf-8")

            opens_db = "Database(" in content or "open_database(" in content
            if opens_db and "tmp_path" not in content and "db_path" not in content:
                violations.append(f"{test_file}: Opens a database without temp fixtures")

            if 'Database("data' in content or "Database('data" in content:
                violations.append(f"{test_file}: Opens the default ./data database")

        if violations:
            pytest.fail(
                "Test files may not be properly isolated:\n" +
                "\n".join(f"  - {v}" for v in violations)
            )
