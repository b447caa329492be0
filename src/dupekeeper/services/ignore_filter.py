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

import re
from pathlib import Path
from typing import Iterable, Tuple, Union

from ..domain.errors import ConfigurationError, NonUtf8NameError

# Same entries as the shipped dedup_ignore.txt.
DEFAULT_PATTERNS: Tuple[str, ...] = (
    r"^desktop\.ini$",
    r"^Thumbs\.db$",
    r"^\.DS_Store$",
)


def _pattern_lines(lines: Iterable[str]) -> Iterable[str]:
    for line in lines:
        if not line.strip() or line.startswith("#"):
            continue
        yield line


class IgnoreFilter:
    """
    Compiled set of file-name patterns.

    Each pattern is a regular expression searched for in the base name of a
    path (never the full path). Immutable once built.
    """

    __slots__ = ("_patterns", "_compiled")

    def __init__(self, patterns: Iterable[str] = ()) -> None:
        self._patterns = tuple(patterns)
        compiled = []
        for pat in self._patterns:
            try:
                compiled.append(re.compile(pat))
            except re.error as e:
                raise ConfigurationError(f"invalid ignore pattern {pat!r}: {e}") from e
        self._compiled = tuple(compiled)

    @classmethod
    def from_patterns(cls, patterns: Iterable[str]) -> IgnoreFilter:
        return cls(_pattern_lines(patterns))

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> IgnoreFilter:
        """
        Build a filter from a pattern file: one regex per line, `#` comments
        and blank lines skipped.

        Raises:
            ConfigurationError: if the file cannot be read or a pattern does not compile.
        """
        try:
            text = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"cannot read ignore file {path}: {e}") from e
        return cls(_pattern_lines(text.splitlines()))

    @classmethod
    def default(cls) -> IgnoreFilter:
        return cls(DEFAULT_PATTERNS)

    @property
    def patterns(self) -> Tuple[str, ...]:
        return self._patterns

    def __len__(self) -> int:
        return len(self._patterns)

    def matches(self, path: Union[str, Path]) -> bool:
        """
        True if the base name of `path` matches any pattern.

        Raises:
            NonUtf8NameError: the name cannot be represented as text, so no decision is possible.
        """
        name = Path(path).name
        if not name:
            raise NonUtf8NameError(f"{path!s} has no file name to match")
        try:
            name.encode("utf-8")
        except UnicodeEncodeError as e:
            raise NonUtf8NameError(f"file name is not valid UTF-8: {name!r}") from e
        return any(p.search(name) for p in self._compiled)
