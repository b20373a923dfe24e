# cmdguard/utils/hashing.py
"""
Content digests for backed-up files.
"""
import hashlib
from pathlib import Path
from typing import Union

from cmdguard.constants import HASH_CHUNK_SIZE


def calculate_file_hash(path: Union[str, Path]) -> str:
    """
    Generate the SHA-256 digest of a file's bytes.
    
    Args:
        path: Path to the file
        
    Returns:
        Hex digest of the file content
        
    Raises:
        OSError: If the file cannot be read.
    """
    sha256 = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(HASH_CHUNK_SIZE), b""):
            sha256.update(chunk)
    return sha256.hexdigest()
