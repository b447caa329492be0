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

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


@dataclass(frozen=True)
class FileEntry:
    """
    One walked filesystem entry.

    `error` is set when the walker could not produce the entry cleanly; such
    entries are never eligible for hashing.
    """
    path: Path
    is_dir: bool = False
    error: Optional[OSError] = None


@dataclass(frozen=True, order=True)
class DigestPair:
    """A canonical absolute path and the fingerprint of its content."""
    path: str
    digest: str


class RunMode(str, Enum):
    ANALYZE = "analyze"
    DELETE = "delete"


class RunState(str, Enum):
    IDLE = "idle"
    POPULATING = "populating"
    MERGED = "merged"
    REPORTING = "reporting"
    DELETING = "deleting"
    PERSISTED = "persisted"
    DONE = "done"


@dataclass
class RunResult:
    mode: RunMode
    scanned: int = 0
    skipped: int = 0
    duplicate_groups: int = 0
    deleted: List[str] = field(default_factory=list)
    job_file: Optional[Path] = None
