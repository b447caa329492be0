from pathlib import Path
from typer.testing import CliRunner
from dupekeeper.cli.app import app

runner = CliRunner()


def _tree(root: Path) -> None:
    (root / "a").mkdir(parents=True)
    (root / "b").mkdir(parents=True)
    (root / "c").mkdir(parents=True)
    (root / "a" / "1.txt").write_text("hello")
    (root / "b" / "1.txt").write_text("hello")
    (root / "c" / "2.txt").write_text("world")


def test_cli_analyze_then_delete_roundtrip(tmp_path: Path):
    # Arrange
    root = tmp_path / "data"
    _tree(root)
    state = tmp_path / "state"
    report = tmp_path / "report.txt"
    common = ["--job", "photos", "--working-directory", str(root), "--data-dir", str(state), "--quiet"]

    # Act
    result_analyze = runner.invoke(app, ["analyze", *common, "--output", str(report)])
    assert result_analyze.exit_code == 0, result_analyze.output

    lines = report.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 3
    assert lines[0].startswith("File signature ")
    assert lines[0].endswith(" discovered 2 times:")
    assert lines[1] == f"\t{(root / 'a' / '1.txt').resolve()}"
    assert (state / "jobs" / "photos.json").exists()

    deletions = tmp_path / "deleted.txt"
    result_delete = runner.invoke(app, ["delete", *common, "-o", str(deletions)])
    assert result_delete.exit_code == 0, result_delete.output

    # Assert
    assert (root / "a" / "1.txt").exists()
    assert not (root / "b" / "1.txt").exists()
    assert (root / "c" / "2.txt").exists()
    assert deletions.read_text(encoding="utf-8").splitlines() == [
        f"Deleted hash {lines[0].split()[2]} at {(root / 'b' / '1.txt').resolve()}"
    ]

    result_jobs = runner.invoke(app, ["jobs", "--data-dir", str(state)])
    assert result_jobs.exit_code == 0
    assert result_jobs.stdout.splitlines() == ["photos"]


def test_cli_dry_run_keeps_files(tmp_path: Path):
    root = tmp_path / "data"
    _tree(root)
    out = tmp_path / "dry.txt"

    result = runner.invoke(
        app,
        ["delete", "-j", "dry", "-w", str(root), "--dry-run", "-o", str(out), "--quiet"],
        env={"DUPEKEEPER_DATA_DIR": str(tmp_path / "state")},
    )

    assert result.exit_code == 0, result.output
    assert (root / "b" / "1.txt").exists()
    assert out.read_text(encoding="utf-8").startswith("Deleted hash ")
    assert (tmp_path / "state" / "jobs" / "dry.json").exists()
