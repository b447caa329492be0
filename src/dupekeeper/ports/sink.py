# Licensed under the Apache License, Version 2.0
from __future__ import annotations

from typing import Protocol


class ReportSink(Protocol):
    """
    One writable report destination, chosen once at startup.
    Implementations append the newline themselves.
    """

    def write_line(self, line: str) -> None: ...

    def close(self) -> None: ...
