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
from typing import Any, Dict, List, Optional

JobRecords = List[Dict[str, Any]]


class JobStorePort(ABC):
    """Loads and saves the persisted duplicate index of a named job."""

    @abstractmethod
    def load(self, job: str) -> Optional[JobRecords]:
        """Return the stored `{"hash", "files"}` records, or None if the job has never been saved."""
        raise NotImplementedError

    @abstractmethod
    def save(self, job: str, records: JobRecords) -> Path:
        """Overwrite the job with `records` and return where it was written."""
        raise NotImplementedError

    @abstractmethod
    def path_for(self, job: str) -> Path:
        raise NotImplementedError
