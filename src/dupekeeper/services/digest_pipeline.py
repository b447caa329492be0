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

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from ..adapters.hashing.hashers import BLOCK_SIZE, digest
from ..domain.errors import FilesystemError, HashingError
from ..domain.models import DigestPair, FileEntry
from ..ports.filesystem import FilesystemPort
from ..ports.hasher import HasherPort
from .ignore_filter import IgnoreFilter

logger = logging.getLogger(__name__)

ProgressObserver = Callable[[int, int], None]


@dataclass
class ScanOutcome:
    pairs: List[DigestPair] = field(default_factory=list)
    walked: int = 0
    skipped: int = 0


class DigestPipeline:
    """
    Turns a directory tree into (canonical path, digest) pairs:
      - walks the tree through the FilesystemPort
      - drops walker errors, directories, names the IgnoreFilter matches
        and anything at or under an excluded path
      - canonicalizes and hashes every remaining entry on a thread pool

    Workers share nothing but the read-only filter and hasher. Results are
    collected here and handed back whole; merging them into an index is the
    caller's job and happens on one thread.
    """

    def __init__(
        self,
        fs: FilesystemPort,
        hasher: HasherPort,
        ignore: Optional[IgnoreFilter] = None,
        *,
        workers: Optional[int] = None,
        block_size: int = BLOCK_SIZE,
        exclude: Iterable[Path] = (),
    ) -> None:
        self._fs = fs
        self._hasher = hasher
        self._ignore = ignore if ignore is not None else IgnoreFilter()
        self._workers = max(1, int(workers or os.cpu_count() or 1))
        self._block_size = int(block_size)
        self._exclude = tuple(Path(p).resolve() for p in exclude)

    @property
    def workers(self) -> int:
        return self._workers

    def _excluded(self, path: Path) -> bool:
        return any(path == p or p in path.parents for p in self._exclude)

    def _process(self, entry: FileEntry) -> Optional[DigestPair]:
        if entry.error is not None:
            logger.warning("Skipping %s: %s", entry.path, entry.error)
            return None
        if entry.is_dir:
            return None

        try:
            if self._ignore.matches(entry.path):
                logger.debug("Ignoring %s", entry.path)
                return None
        except FilesystemError as e:
            logger.warning("Skipping %s: %s", entry.path, e)
            return None

        try:
            canonical = self._fs.canonical(entry.path)
        except OSError as e:
            logger.warning("Cannot canonicalize %s: %s", entry.path, e)
            return None

        if self._excluded(canonical):
            logger.debug("Excluding %s", canonical)
            return None

        try:
            fingerprint = digest(canonical, self._hasher, self._block_size)
        except HashingError as e:
            logger.warning("Skipping %s: %s", canonical, e)
            return None

        return DigestPair(path=str(canonical), digest=fingerprint)

    def run(self, root: Path, progress: Optional[ProgressObserver] = None) -> ScanOutcome:
        """
        Scan the tree rooted at `root`.

        `progress`, if given, is called as `progress(done, total)` from this
        thread after each candidate entry finishes. It has no effect on results.
        """
        entries = list(self._fs.walk(Path(root)))
        candidates = [e for e in entries if not (e.is_dir and e.error is None)]
        total = len(candidates)
        outcome = ScanOutcome(walked=len(entries))
        logger.debug(
            "Hashing %d of %d entries under %s with %d workers (%s)",
            total,
            len(entries),
            root,
            self._workers,
            self._hasher.name,
        )

        with ThreadPoolExecutor(max_workers=self._workers) as pool:
            futures = [pool.submit(self._process, e) for e in candidates]
            for done, fut in enumerate(as_completed(futures), start=1):
                pair = fut.result()
                if pair is not None:
                    outcome.pairs.append(pair)
                if progress is not None:
                    progress(done, total)

        outcome.skipped = total - len(outcome.pairs)
        return outcome
