# tests/integration/test_scan_and_report.py
from pathlib import Path

from dupekeeper.adapters.hashing.hashers import digest
from dupekeeper.adapters.store.json_store import JsonJobStore
from dupekeeper.domain.models import RunMode
from dupekeeper.services import DuplicateIndex, JobRunner


class ListSink:
    def __init__(self):
        self.lines = []

    def write_line(self, line: str) -> None:
        self.lines.append(line)

    def close(self) -> None:
        pass


def write_file(p: Path, data: bytes) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_bytes(data)


def _hello_world_tree(root: Path) -> None:
    write_file(root / "a" / "1.txt", b"hello")
    write_file(root / "b" / "1.txt", b"hello")  # exact duplicate of a
    write_file(root / "c" / "2.txt", b"world")


def test_analyze_reports_exactly_the_hello_group(tmp_path: Path):
    root = tmp_path / "data"
    _hello_world_tree(root)
    store = JsonJobStore(tmp_path / "state")
    sink = ListSink()

    result = JobRunner(store).run(RunMode.ANALYZE, root, "scenario", sink)

    hello = digest(root / "a" / "1.txt")
    world = digest(root / "c" / "2.txt")
    assert result.duplicate_groups == 1
    assert sink.lines == [
        f"File signature {hello} discovered 2 times:",
        f"\t{(root / 'a' / '1.txt').resolve()}",
        f"\t{(root / 'b' / '1.txt').resolve()}",
    ]
    assert not any(world in line for line in sink.lines)


def test_delete_leaves_one_copy_and_never_touches_unique_file(tmp_path: Path):
    root = tmp_path / "data"
    _hello_world_tree(root)
    store = JsonJobStore(tmp_path / "state")
    sink = ListSink()

    result = JobRunner(store).run(RunMode.DELETE, root, "scenario", sink)

    survivors = [p for p in ("a/1.txt", "b/1.txt") if (root / p).exists()]
    assert len(survivors) == 1
    assert (root / "c" / "2.txt").read_bytes() == b"world"
    assert len(result.deleted) == 1
    hello = digest(root / survivors[0])
    assert sink.lines == [f"Deleted hash {hello} at {result.deleted[0]}"]


def test_dry_run_and_real_run_report_identically(tmp_path: Path):
    root = tmp_path / "data"
    _hello_world_tree(root)
    store = JsonJobStore(tmp_path / "state")

    dry, real = ListSink(), ListSink()
    JobRunner(store).run(RunMode.DELETE, root, "scenario", dry, dry_run=True)
    assert (root / "a" / "1.txt").exists() and (root / "b" / "1.txt").exists()

    JobRunner(store).run(RunMode.DELETE, root, "scenario", real)
    assert dry.lines == real.lines
    assert len(real.lines) == 1


def test_incremental_run_sees_earlier_discoveries(tmp_path: Path):
    root = tmp_path / "data"
    _hello_world_tree(root)
    store = JsonJobStore(tmp_path / "state")

    JobRunner(store).run(RunMode.ANALYZE, root, "scenario", ListSink())
    assert store.path_for("scenario").exists()

    write_file(root / "d" / "1.txt", b"hello")
    sink = ListSink()
    JobRunner(store).run(RunMode.ANALYZE, root, "scenario", sink)

    hello = digest(root / "a" / "1.txt")
    assert sink.lines[0] == f"File signature {hello} discovered 3 times:"
    assert len(sink.lines) == 4


def test_incremental_run_across_separate_roots(tmp_path: Path):
    first = tmp_path / "first"
    second = tmp_path / "second"
    write_file(first / "x.bin", b"payload")
    write_file(second / "y.bin", b"payload")
    store = JsonJobStore(tmp_path / "state")

    JobRunner(store).run(RunMode.ANALYZE, first, "multi", ListSink())
    sink = ListSink()
    result = JobRunner(store).run(RunMode.ANALYZE, second, "multi", sink)

    assert result.duplicate_groups == 1
    assert sink.lines[1:] == [f"\t{(first / 'x.bin').resolve()}", f"\t{(second / 'y.bin').resolve()}"]


def test_rescanning_unchanged_tree_is_idempotent(tmp_path: Path):
    root = tmp_path / "data"
    _hello_world_tree(root)
    store = JsonJobStore(tmp_path / "state")

    JobRunner(store).run(RunMode.ANALYZE, root, "again", ListSink())
    once = DuplicateIndex.from_records(store.load("again")).as_dict()
    JobRunner(store).run(RunMode.ANALYZE, root, "again", ListSink())
    twice = DuplicateIndex.from_records(store.load("again")).as_dict()

    assert once == twice


def test_changed_file_is_not_taken_for_a_surviving_copy(tmp_path: Path):
    root = tmp_path / "data"
    a, b = root / "a.txt", root / "b.txt"
    write_file(a, b"hello")
    store = JsonJobStore(tmp_path / "state")
    JobRunner(store).run(RunMode.ANALYZE, root, "edits", ListSink())
    hello = digest(a)

    a.write_bytes(b"world")
    write_file(b, b"hello")
    sink = ListSink()
    result = JobRunner(store).run(RunMode.DELETE, root, "edits", sink)

    assert result.deleted == []
    assert sink.lines == []
    assert b.read_bytes() == b"hello"
    index = DuplicateIndex.from_records(store.load("edits"))
    assert index.get(hello) == frozenset({str(b.resolve())})
    assert index.get(digest(a)) == frozenset({str(a.resolve())})
