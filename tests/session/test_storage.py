"""
Durable Storage Unit Tests
==========================
"""

import json

import pytest

from contacerta.session.storage import FileStorage, MemoryStorage


pytestmark = pytest.mark.session


class TestMemoryStorage:
    """Tests for MemoryStorage."""

    def test_set_get_remove(self):
        # Arrange
        storage = MemoryStorage({"a": "1"})

        # Act
        storage.set("b", "2")
        storage.remove("a")
        storage.remove("missing")

        # Assert
        assert storage.get("a") is None
        assert storage.get("b") == "2"


class TestFileStorage:
    """Tests for FileStorage."""

    def test_survives_new_instance(self, tmp_path):
        """Test that values persist across instances, like a restart."""
        # Arrange
        path = tmp_path / "nested" / "storage.json"
        FileStorage(path).set("contacerta:org:1", '{"organizationId": "x"}')

        # Act
        value = FileStorage(path).get("contacerta:org:1")

        # Assert
        assert value == '{"organizationId": "x"}'

    def test_missing_file_is_empty(self, tmp_path):
        # Assert
        assert FileStorage(tmp_path / "absent.json").get("key") is None

    @pytest.mark.parametrize("content", ["{not json", "[1, 2]", '"text"'])
    def test_corrupt_file_is_empty_and_overwritten(self, tmp_path, content):
        # Arrange
        path = tmp_path / "storage.json"
        path.write_text(content, encoding="utf-8")
        storage = FileStorage(path)

        # Act
        before = storage.get("key")
        storage.set("key", "value")

        # Assert
        assert before is None
        assert json.loads(path.read_text(encoding="utf-8")) == {"key": "value"}

    def test_non_string_values_ignored(self, tmp_path):
        # Arrange
        path = tmp_path / "storage.json"
        path.write_text(json.dumps({"good": "1", "bad": 2}), encoding="utf-8")

        # Assert
        assert FileStorage(path).get("good") == "1"
        assert FileStorage(path).get("bad") is None

    def test_remove(self, tmp_path):
        # Arrange
        storage = FileStorage(tmp_path / "storage.json")
        storage.set("a", "1")
        storage.set("b", "2")

        # Act
        storage.remove("a")

        # Assert
        assert storage.get("a") is None
        assert storage.get("b") == "2"
        assert not list(tmp_path.glob(".storage-*"))
