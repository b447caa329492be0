# Licensed under the Apache License, Version 2.0
from __future__ import annotations

from pathlib import Path
from typing import Optional, TextIO, Union

import typer

from ...domain.errors import ConfigurationError
from ...ports.sink import ReportSink

STDOUT = "-"


class StdoutSink:
    def write_line(self, line: str) -> None:
        typer.echo(line)

    def close(self) -> None:
        pass


class FileSink:
    """Writes report lines to a file, creating parent directories as needed."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._fh: Optional[TextIO] = open(
                self.path, "w", encoding="utf-8", errors="backslashreplace"
            )
        except OSError as e:
            raise ConfigurationError(f"cannot open report output {self.path}: {e}") from e

    def write_line(self, line: str) -> None:
        if self._fh is None:
            raise ValueError(f"report sink {self.path} is closed")
        self._fh.write(line + "\n")

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None

    def __enter__(self) -> FileSink:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def open_sink(destination: Optional[Union[str, Path]]) -> ReportSink:
    """Pick the report destination once: `None` or `-` is stdout, anything else a file."""
    if destination is None or str(destination) == STDOUT:
        return StdoutSink()
    return FileSink(destination)
