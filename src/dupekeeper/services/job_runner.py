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
from pathlib import Path
from typing import Iterable, Optional

from ..adapters.filesystem.local_fs import LocalFS
from ..adapters.hashing.hashers import get_hasher
from ..domain.models import RunMode, RunResult, RunState
from ..ports.filesystem import FilesystemPort
from ..ports.hasher import HasherPort
from ..ports.sink import ReportSink
from ..ports.store import JobStorePort
from .decision_service import DecisionService
from .digest_pipeline import DigestPipeline, ProgressObserver
from .duplicate_index import DuplicateIndex
from .ignore_filter import IgnoreFilter
from .report_service import ReportService

logger = logging.getLogger(__name__)


class JobRunner:
    """
    Drives one run of a job:
      IDLE -> POPULATING -> MERGED -> REPORTING | DELETING -> PERSISTED -> DONE

    The prior index is loaded before anything is scanned, so a corrupt job
    file stops the run early. The index is saved once, after the decision
    phase; a run that dies before that leaves the job file untouched.
    """

    def __init__(
        self,
        store: JobStorePort,
        fs: Optional[FilesystemPort] = None,
        hasher: Optional[HasherPort] = None,
        *,
        workers: Optional[int] = None,
    ) -> None:
        self._store = store
        self._fs = fs or LocalFS()
        self._hasher = hasher or get_hasher()
        self._workers = workers
        self._state = RunState.IDLE

    @property
    def state(self) -> RunState:
        return self._state

    def _load_index(self, job: str, clear_cache: bool, prune_missing: bool) -> DuplicateIndex:
        index = DuplicateIndex()
        if clear_cache:
            logger.info("Ignoring saved state of job %r", job)
        else:
            records = self._store.load(job)
            if records:
                index.load(records)
                logger.info("Loaded %d digests for job %r", len(index), job)
        if prune_missing:
            removed = index.prune_missing(lambda p: self._fs.is_file(Path(p)))
            logger.info("Pruned %d paths no longer on disk", removed)
        return index

    def run(
        self,
        mode: RunMode,
        root: Path,
        job: str,
        sink: ReportSink,
        *,
        ignore: Optional[IgnoreFilter] = None,
        exclude: Iterable[Path] = (),
        clear_cache: bool = False,
        dry_run: bool = False,
        prune_missing: bool = False,
        fmt: str = "text",
        progress: Optional[ProgressObserver] = None,
    ) -> RunResult:
        mode = RunMode(mode)
        self._state = RunState.IDLE
        result = RunResult(mode=mode)

        index = self._load_index(job, clear_cache, prune_missing)

        self._state = RunState.POPULATING
        # the job files and the report never take part in their own scan
        excluded = [self._store.path_for(job).parent, *exclude]
        pipeline = DigestPipeline(
            self._fs, self._hasher, ignore, workers=self._workers, exclude=excluded
        )
        outcome = pipeline.run(Path(root), progress=progress)
        result.scanned = len(outcome.pairs)
        result.skipped = outcome.skipped

        added = index.merge(outcome.pairs)
        self._state = RunState.MERGED
        logger.info(
            "Hashed %d files under %s (%d new, %d skipped)",
            result.scanned,
            root,
            added,
            result.skipped,
        )

        if mode is RunMode.ANALYZE:
            self._state = RunState.REPORTING
            result.duplicate_groups = ReportService(index).write_duplicates(sink, fmt=fmt)
        else:
            self._state = RunState.DELETING
            decisions = DecisionService(
                index, self._fs, sink, hasher=self._hasher, dry_run=dry_run
            )
            result.deleted = decisions.delete_redundant(outcome.pairs)
            result.duplicate_groups = len(index.duplicates())

        result.job_file = self._store.save(job, index.snapshot())
        self._state = RunState.PERSISTED
        logger.debug("Persisted job %r to %s", job, result.job_file)

        self._state = RunState.DONE
        return result
