# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from __future__ import annotations

import hashlib
from abc import abstractmethod
from pathlib import Path
from typing import BinaryIO, Dict, Type, Union

import xxhash

from ...domain.errors import ConfigurationError, HashingError
from ...ports.hasher import HasherPort

BLOCK_SIZE = 1 << 20  # 1 MiB
DEFAULT_ALGORITHM = "xxh128"


class _BlockHasher(HasherPort):
    """Feeds a stream through an incremental digest one block at a time."""

    def __init__(self, block_size: int = BLOCK_SIZE) -> None:
        self._block_size = int(block_size)

    @abstractmethod
    def _new(self):
        """Return a fresh incremental digest object with update/hexdigest."""
        raise NotImplementedError

    def hash_stream(self, stream: BinaryIO) -> str:
        h = self._new()
        while True:
            chunk = stream.read(self._block_size)
            if not chunk:
                break
            h.update(chunk)
        return h.hexdigest()


class XXH128Hasher(_BlockHasher):
    """Fast non-cryptographic 128-bit xxHash; the default deduplication key."""

    @property
    def name(self) -> str:
        return "xxh128"

    def _new(self):
        return xxhash.xxh128()


class MD5Hasher(_BlockHasher):
    @property
    def name(self) -> str:
        return "md5"

    def _new(self):
        return hashlib.md5()


class SHA256Hasher(_BlockHasher):
    """Cryptographic strong hash (full-file SHA-256)."""

    @property
    def name(self) -> str:
        return "sha256"

    def _new(self):
        return hashlib.sha256()


ALGORITHMS: Dict[str, Type[_BlockHasher]] = {
    "xxh128": XXH128Hasher,
    "md5": MD5Hasher,
    "sha256": SHA256Hasher,
}


def get_hasher(algorithm: str = DEFAULT_ALGORITHM, block_size: int = BLOCK_SIZE) -> HasherPort:
    try:
        cls = ALGORITHMS[algorithm.lower()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown algorithm: {algorithm}. Valid options: {', '.join(sorted(ALGORITHMS))}"
        ) from None
    return cls(block_size=block_size)


def digest(
    path: Union[str, Path],
    algorithm: Union[str, HasherPort] = DEFAULT_ALGORITHM,
    block_size: int = BLOCK_SIZE,
) -> str:
    """
    Stream the file at `path` through `algorithm` and return its hex fingerprint.

    The file is read through a buffered reader in `block_size` blocks, so memory
    use does not grow with file size.

    Raises:
        HashingError: if the file cannot be opened or a read fails.
        ConfigurationError: if `algorithm` names no known hasher.
    """
    hasher = algorithm if isinstance(algorithm, HasherPort) else get_hasher(algorithm, block_size)
    try:
        with open(path, "rb", buffering=block_size) as fh:
            return hasher.hash_stream(fh)
    except OSError as e:
        raise HashingError(f"cannot hash {path}: {e}") from e
