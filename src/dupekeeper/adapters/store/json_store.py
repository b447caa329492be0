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

import json
import logging
import os
from pathlib import Path
from typing import Any, List, Optional, Union

from ...domain.errors import ConfigurationError, PersistenceError
from ...ports.store import JobRecords, JobStorePort

logger = logging.getLogger(__name__)

JOBS_DIR = "jobs"
SUFFIX = ".json"


def _check_job_name(job: str) -> str:
    if not job or not job.strip():
        raise ConfigurationError("job name must not be empty")
    if job in (".", "..") or "/" in job or "\\" in job:
        raise ConfigurationError(f"invalid job name: {job!r}")
    return job


def _check_records(data: Any, path: Path) -> JobRecords:
    if not isinstance(data, list):
        raise PersistenceError(f"job file {path} must hold a JSON array")
    for i, rec in enumerate(data):
        if not isinstance(rec, dict):
            raise PersistenceError(f"job file {path}: record {i} is not an object")
        if not isinstance(rec.get("hash"), str):
            raise PersistenceError(f"job file {path}: record {i} has no string 'hash'")
        files = rec.get("files")
        if not isinstance(files, list) or not all(isinstance(f, str) for f in files):
            raise PersistenceError(f"job file {path}: record {i} 'files' must be a list of strings")
    return data


class JsonJobStore(JobStorePort):
    """
    Job state as JSON under `<base_dir>/jobs/<job>.json`.

    File shape: `[{"hash": "<digest>", "files": ["/abs/path", ...]}, ...]`.
    Saves go through a temporary file and `os.replace`, so an interrupted save
    leaves the previous job file intact.
    """

    def __init__(self, base_dir: Union[str, Path]) -> None:
        self._base_dir = Path(base_dir)

    def path_for(self, job: str) -> Path:
        return self._base_dir / JOBS_DIR / f"{_check_job_name(job)}{SUFFIX}"

    def load(self, job: str) -> Optional[JobRecords]:
        path = self.path_for(job)
        if not path.exists():
            logger.debug("No job file at %s", path)
            return None
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"cannot read job file {path}: {e}") from e
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise PersistenceError(f"job file {path} is not valid JSON: {e}") from e
        return _check_records(data, path)

    def save(self, job: str, records: JobRecords) -> Path:
        path = self.path_for(job)
        tmp = path.with_name(path.name + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2)
            os.replace(tmp, path)
        except OSError as e:
            raise PersistenceError(f"cannot write job file {path}: {e}") from e
        logger.debug("Saved %d records to %s", len(records), path)
        return path

    def jobs(self) -> List[str]:
        """Names of all saved jobs, sorted."""
        directory = self._base_dir / JOBS_DIR
        if not directory.is_dir():
            return []
        return sorted(p.stem for p in directory.glob(f"*{SUFFIX}") if p.is_file())
