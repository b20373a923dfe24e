"""
Tests for content digests.
"""
import hashlib

import pytest

from cmdguard.utils.hashing import calculate_file_hash


def test_matches_sha256_of_content(tmp_path):
    path = tmp_path / "data.bin"
    content = bytes(range(256)) * 1000
    path.write_bytes(content)

    assert calculate_file_hash(path) == hashlib.sha256(content).hexdigest()


def test_empty_file(tmp_path):
    path = tmp_path / "empty"
    path.write_bytes(b"")

    assert calculate_file_hash(str(path)) == hashlib.sha256(b"").hexdigest()


def test_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        calculate_file_hash(tmp_path / "nope")
