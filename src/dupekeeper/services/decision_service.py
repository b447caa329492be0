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

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

from ..adapters.hashing.hashers import digest as content_digest
from ..domain.errors import HashingError
from ..domain.models import DigestPair
from ..ports.filesystem import FilesystemPort
from ..ports.hasher import HasherPort
from ..ports.sink import ReportSink
from .duplicate_index import DuplicateIndex

logger = logging.getLogger(__name__)

DELETED_LINE = "Deleted hash {digest} at {path}"


class DecisionService:
    """
    Removes redundant copies among the files hashed in this run.

    A path is removed only when another member of its digest group is on
    disk and still holds that content: either it was hashed to the same
    digest in this run, or it is re-hashed and matches just before the
    removal. Members known only from earlier runs are never trusted as is.
    Decisions are taken one path at a time against a working copy of each
    group, so no two members of one group can both go.
    Candidates are visited in reverse path order; with no outside copy, the
    lexicographically smallest path of a group is the one that stays.
    """

    def __init__(
        self,
        index: DuplicateIndex,
        fs: FilesystemPort,
        sink: ReportSink,
        *,
        hasher: Optional[HasherPort] = None,
        dry_run: bool = False,
    ) -> None:
        self._index = index
        self._fs = fs
        self._sink = sink
        self._hasher = hasher
        self._dry_run = bool(dry_run)

    def _holds(self, path: str, digest: str, fresh: Set[DigestPair]) -> bool:
        """True if `path` is on disk and its content still has `digest`."""
        if not self._fs.is_file(Path(path)):
            return False
        if DigestPair(path=path, digest=digest) in fresh:
            return True
        if self._hasher is None:
            return False
        try:
            return content_digest(path, self._hasher) == digest
        except HashingError as e:
            logger.warning("Cannot verify %s: %s", path, e)
            return False

    def delete_redundant(self, pairs: Iterable[DigestPair]) -> List[str]:
        """
        Returns:
            Paths deleted (or, in a dry run, that would have been deleted).
        """
        fresh = set(pairs)
        remaining: Dict[str, Set[str]] = {}
        deleted: List[str] = []

        for pair in sorted(fresh, reverse=True):
            group = self._index.get(pair.digest)
            if group is None:
                continue
            members = remaining.setdefault(pair.digest, set(group))
            if pair.path not in members:
                continue

            others = members - {pair.path}
            if not others:
                logger.debug("Keeping %s: only copy of %s", pair.path, pair.digest)
                continue
            if not any(self._holds(p, pair.digest, fresh) for p in sorted(others)):
                logger.warning(
                    "Keeping %s: no other verified copy of %s on disk", pair.path, pair.digest
                )
                continue

            if not self._dry_run:
                try:
                    self._fs.remove(Path(pair.path))
                except FileNotFoundError:
                    logger.warning("Cannot delete %s: already removed", pair.path)
                    members.discard(pair.path)
                    self._index.discard(pair.digest, pair.path)
                    continue
                except OSError as e:
                    logger.warning("Cannot delete %s: %s", pair.path, e)
                    continue
                self._index.discard(pair.digest, pair.path)

            members.discard(pair.path)
            line = DELETED_LINE.format(digest=pair.digest, path=pair.path)
            logger.info(line)
            self._sink.write_line(line)
            deleted.append(pair.path)

        return deleted
