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

import os
import stat
from pathlib import Path
from typing import Iterator

from ...domain.models import FileEntry
from ...ports.filesystem import FilesystemPort


class LocalFS(FilesystemPort):
    """
    Local filesystem adapter built on `os.scandir`.

    Symlinked directories are reported as entries but not descended into.
    """

    def walk(self, root: Path) -> Iterator[FileEntry]:
        root = Path(root)
        try:
            st = root.stat()
        except OSError as e:
            yield FileEntry(root, error=e)
            return
        if not stat.S_ISDIR(st.st_mode):
            yield FileEntry(root)
            return

        yield FileEntry(root, is_dir=True)
        pending = [root]
        while pending:
            current = pending.pop()
            try:
                with os.scandir(current) as it:
                    children = list(it)
            except OSError as e:
                yield FileEntry(current, is_dir=True, error=e)
                continue
            for child in children:
                path = Path(child.path)
                try:
                    is_dir = child.is_dir(follow_symlinks=False)
                except OSError as e:
                    yield FileEntry(path, error=e)
                    continue
                yield FileEntry(path, is_dir=is_dir)
                if is_dir:
                    pending.append(path)

    def canonical(self, path: Path) -> Path:
        try:
            return Path(path).resolve(strict=True)
        except RuntimeError as e:
            # symlink loop on interpreters that don't raise OSError for it
            raise OSError(f"cannot resolve {path}: {e}") from e

    def is_file(self, path: Path) -> bool:
        return Path(path).is_file()

    def remove(self, path: Path) -> None:
        os.remove(path)
