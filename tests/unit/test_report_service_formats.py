# tests/unit/test_report_service_formats.py
import json

import pytest

from dupekeeper.domain.errors import ConfigurationError
from dupekeeper.domain.models import DigestPair
from dupekeeper.services.duplicate_index import DuplicateIndex
from dupekeeper.services.report_service import ReportService


class ListSink:
    def __init__(self):
        self.lines = []

    def write_line(self, line: str) -> None:
        self.lines.append(line)

    def close(self) -> None:
        pass


def _seed_two_dupes_one_unique() -> DuplicateIndex:
    idx = DuplicateIndex()
    idx.merge(
        [
            DigestPair("/d/b.txt", "dup"),
            DigestPair("/d/a.txt", "dup"),
            DigestPair("/d/c.txt", "unique"),
        ]
    )
    return idx


def test_text_report_lists_each_duplicate_group():
    sink = ListSink()
    n = ReportService(_seed_two_dupes_one_unique()).write_duplicates(sink)

    assert n == 1
    assert sink.lines == [
        "File signature dup discovered 2 times:",
        "\t/d/a.txt",
        "\t/d/b.txt",
    ]


def test_text_report_with_no_duplicates_is_empty():
    idx = DuplicateIndex()
    idx.merge([DigestPair("/x.txt", "X"), DigestPair("/y.txt", "Y")])
    sink = ListSink()
    assert ReportService(idx).write_duplicates(sink, fmt="text") == 0
    assert sink.lines == []


def test_json_report_uses_job_record_shape():
    sink = ListSink()
    ReportService(_seed_two_dupes_one_unique()).write_duplicates(sink, fmt="JSON")

    payload = json.loads("\n".join(sink.lines))
    assert payload == [{"hash": "dup", "files": ["/d/a.txt", "/d/b.txt"]}]


def test_ndjson_report_one_group_per_line():
    idx = _seed_two_dupes_one_unique()
    idx.merge([DigestPair("/e/1", "other"), DigestPair("/e/2", "other")])
    sink = ListSink()
    assert ReportService(idx).write_duplicates(sink, fmt="ndjson") == 2

    records = [json.loads(line) for line in sink.lines]
    assert [r["hash"] for r in records] == ["dup", "other"]


def test_unknown_format_rejected():
    with pytest.raises(ConfigurationError, match="Unsupported format"):
        ReportService(DuplicateIndex()).write_duplicates(ListSink(), fmt="csv")
