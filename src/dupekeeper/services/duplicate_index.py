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
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

from ..domain.models import DigestPair
from ..ports.store import JobRecords

Group = Tuple[str, List[str]]


class DuplicateIndex:
    """
    In-memory mapping digest -> set of canonical paths.

    Not thread-safe; only ever mutated from the sequential merge and
    decision phases.
    """

    def __init__(self) -> None:
        self._groups: Dict[str, Set[str]] = {}
        self._owners: Dict[str, Set[str]] = {}  # path -> digests it is filed under

    @classmethod
    def from_records(cls, records: JobRecords) -> DuplicateIndex:
        index = cls()
        index.load(records)
        return index

    # --- mutation -----------------------------------------------------------

    def add(self, digest: str, path: str) -> bool:
        """Insert `path` under `digest`; returns False if it was already there."""
        group = self._groups.setdefault(digest, set())
        if path in group:
            return False
        group.add(path)
        self._owners.setdefault(path, set()).add(digest)
        return True

    def merge(self, pairs: Iterable[DigestPair]) -> int:
        """
        Merge freshly computed pairs; returns how many were new.

        A fresh pair is the current content of its path, so the path leaves
        every other group it was filed under.
        """
        added = 0
        for pair in pairs:
            for old in self._owners.get(pair.path, set()) - {pair.digest}:
                self.discard(old, pair.path)
            if self.add(pair.digest, pair.path):
                added += 1
        return added

    def load(self, records: JobRecords) -> None:
        """Merge persisted `{"hash", "files"}` records. Repeated digests are unioned."""
        for rec in records:
            for path in rec["files"]:
                self.add(rec["hash"], path)

    def discard(self, digest: str, path: str) -> None:
        group = self._groups.get(digest)
        if group is None:
            return
        group.discard(path)
        if not group:
            del self._groups[digest]
        owners = self._owners.get(path)
        if owners is not None:
            owners.discard(digest)
            if not owners:
                del self._owners[path]

    def prune_missing(self, exists: Callable[[str], bool] = os.path.isfile) -> int:
        """Drop paths for which `exists` is False, and any group left empty. Returns paths removed."""
        removed = 0
        for path in [p for p in self._owners if not exists(p)]:
            for digest in list(self._owners[path]):
                self.discard(digest, path)
            removed += 1
        return removed

    # --- queries ------------------------------------------------------------

    def get(self, digest: str) -> Optional[FrozenSet[str]]:
        group = self._groups.get(digest)
        return frozenset(group) if group is not None else None

    def groups(self) -> List[Group]:
        return [(d, sorted(self._groups[d])) for d in sorted(self._groups)]

    def duplicates(self) -> List[Group]:
        """Groups with more than one member, sorted by digest then path."""
        return [(d, paths) for d, paths in self.groups() if len(paths) > 1]

    def as_dict(self) -> Dict[str, FrozenSet[str]]:
        return {d: frozenset(paths) for d, paths in self._groups.items()}

    def snapshot(self) -> JobRecords:
        return [{"hash": d, "files": paths} for d, paths in self.groups()]

    def __len__(self) -> int:
        return len(self._groups)
