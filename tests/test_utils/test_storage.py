"""
Unit tests for StorageManager (credential file and artifacts).
"""

import json
import os
import tempfile

from reviewlens.utils.storage import StorageManager


def test_no_saved_key():
    with tempfile.TemporaryDirectory() as tmpdir:
        storage = StorageManager(tmpdir)
        assert storage.load_api_key() is None


def test_save_and_load_key():
    with tempfile.TemporaryDirectory() as tmpdir:
        storage = StorageManager(tmpdir)
        storage.save_api_key("secret-123")

        assert storage.load_api_key() == "secret-123"
        with open(os.path.join(tmpdir, "credentials.json")) as f:
            assert json.load(f) == {"gemini-api-key": "secret-123"}
        # Temp file is renamed away
        assert not os.path.exists(storage.credentials_path + ".tmp")


def test_overwrite_key():
    with tempfile.TemporaryDirectory() as tmpdir:
        storage = StorageManager(tmpdir)
        storage.save_api_key("old")
        storage.save_api_key("new")

        assert StorageManager(tmpdir).load_api_key() == "new"


def test_corrupt_credentials_treated_as_missing():
    with tempfile.TemporaryDirectory() as tmpdir:
        storage = StorageManager(tmpdir)
        with open(storage.credentials_path, "w") as f:
            f.write("{not json")

        assert storage.load_api_key() is None


def test_save_artifact_creates_directory():
    with tempfile.TemporaryDirectory() as tmpdir:
        storage = StorageManager(tmpdir, output_root=os.path.join(tmpdir, "out"))
        path = storage.save_artifact("report.txt", b"hello")

        assert path == os.path.join(tmpdir, "out", "report.txt")
        with open(path, "rb") as f:
            assert f.read() == b"hello"


def test_save_artifact_explicit_directory():
    with tempfile.TemporaryDirectory() as tmpdir:
        storage = StorageManager(tmpdir)
        target = os.path.join(tmpdir, "exports")
        path = storage.save_artifact("a.csv", b"x,y\n", output_dir=target)

        assert os.path.dirname(path) == target
