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

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterator

from ..domain.models import FileEntry


class FilesystemPort(ABC):
    """Abstract interface for filesystem access."""

    @abstractmethod
    def walk(self, root: Path) -> Iterator[FileEntry]:
        """
        Recursively yield every entry under the given root, directories included.
        Errors are yielded as entries carrying `error`, never raised or dropped.
        """
        raise NotImplementedError

    @abstractmethod
    def canonical(self, path: Path) -> Path:
        """Return the absolute, symlink-resolved form of `path`; raise OSError if it cannot be resolved."""
        raise NotImplementedError

    @abstractmethod
    def is_file(self, path: Path) -> bool:
        """True if `path` currently exists as a regular file."""
        raise NotImplementedError

    @abstractmethod
    def remove(self, path: Path) -> None:
        """Remove a single file. Raises OSError on failure."""
        raise NotImplementedError
