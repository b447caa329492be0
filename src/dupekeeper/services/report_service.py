# Licensed under the Apache License, Version 2.0 (the "License");
# ...
from __future__ import annotations

import json

from ..domain.errors import ConfigurationError
from ..ports.sink import ReportSink
from .duplicate_index import DuplicateIndex

FORMATS = ("text", "json", "ndjson")


class ReportService:
    """
    Writes the duplicate groups of an index to a sink (text/JSON/NDJSON).

    Notes:
      - text (default): `File signature <digest> discovered <n> times:` then one
        tab-indented line per member path.
      - JSON: one array of `{"hash", "files"}` records, same shape as a job file.
      - NDJSON: one record per line.
      - Groups of size 1 are never reported.
    """

    def __init__(self, index: DuplicateIndex) -> None:
        self._index = index

    def write_duplicates(self, sink: ReportSink, fmt: str = "text") -> int:
        """
        Write every duplicate group to `sink`.

        Returns:
            The number of groups written.

        Raises:
            ConfigurationError: if an unsupported format is requested.
        """
        fmt = (fmt or "text").lower()
        if fmt not in FORMATS:
            raise ConfigurationError(f"Unsupported format: {fmt}")

        groups = self._index.duplicates()

        if fmt == "text":
            for digest, paths in groups:
                sink.write_line(f"File signature {digest} discovered {len(paths)} times:")
                for path in paths:
                    sink.write_line(f"\t{path}")
            return len(groups)

        records = [{"hash": d, "files": paths} for d, paths in groups]
        if fmt == "json":
            sink.write_line(json.dumps(records, ensure_ascii=False, indent=2))
        else:
            for rec in records:
                sink.write_line(json.dumps(rec, ensure_ascii=False))
        return len(groups)
