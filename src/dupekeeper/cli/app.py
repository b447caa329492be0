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

import sys
from contextlib import ExitStack
from pathlib import Path
from typing import Optional
import logging

import typer

from ..adapters.hashing.hashers import ALGORITHMS, DEFAULT_ALGORITHM, get_hasher
from ..adapters.report.sinks import STDOUT, open_sink
from ..adapters.store.json_store import JsonJobStore
from ..domain.errors import DupekeeperError
from ..domain.models import RunMode, RunResult
from ..services import IgnoreFilter, JobRunner
from ..services.report_service import FORMATS

from ..logging_config import setup_logging

setup_logging()

APP_NAME = "dupekeeper"

app = typer.Typer(help="dupekeeper CLI - content-addressed duplicate detection and removal")

logger = logging.getLogger(__name__)


# ------------------------------
# Wiring
# ------------------------------


def _data_dir(data_dir: Optional[Path]) -> Path:
    """Explicit --data-dir, else Click's per-user app directory (~/.config/dupekeeper on Linux)."""
    return Path(data_dir) if data_dir else Path(typer.get_app_dir(APP_NAME))


def _check_format(fmt: str) -> str:
    """Validate --fmt before any scanning happens."""
    fmt = (fmt or "text").lower()
    if fmt not in FORMATS:
        raise typer.BadParameter(
            f"Unknown format: {fmt}. Valid options: {', '.join(FORMATS)}"
        )
    return fmt


class _ProgressObserver:
    """Renders pipeline progress on stderr; the bar is opened once the total is known."""

    def __init__(self, stack: ExitStack) -> None:
        self._stack = stack
        self._bar = None

    def __call__(self, done: int, total: int) -> None:
        if self._bar is None:
            self._bar = self._stack.enter_context(
                typer.progressbar(length=total, label="Hashing", file=sys.stderr)
            )
        self._bar.update(1)


def _execute(
    mode: RunMode,
    *,
    job: str,
    working_directory: Path,
    ignore_file: Optional[Path],
    clear_cache: bool,
    output: Optional[str],
    algorithm: str,
    workers: Optional[int],
    data_dir: Optional[Path],
    prune_missing: bool,
    progress: bool,
    quiet: bool,
    verbose: bool,
    fmt: str = "text",
    dry_run: bool = False,
) -> RunResult:
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Verbose logging enabled")

    try:
        ignore = IgnoreFilter.from_file(ignore_file) if ignore_file else IgnoreFilter.default()
        hasher = get_hasher(algorithm)
        store = JsonJobStore(_data_dir(data_dir))
        store.path_for(job)  # reject a bad job name before scanning

        with ExitStack() as stack:
            sink = open_sink(output)
            stack.callback(sink.close)
            observer = _ProgressObserver(stack) if progress else None
            runner = JobRunner(store, hasher=hasher, workers=workers)
            result = runner.run(
                mode,
                working_directory,
                job,
                sink,
                ignore=ignore,
                exclude=[] if output in (None, STDOUT) else [Path(output)],
                clear_cache=clear_cache,
                dry_run=dry_run,
                prune_missing=prune_missing,
                fmt=fmt,
                progress=observer,
            )
    except DupekeeperError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e

    if not quiet:
        if mode is RunMode.ANALYZE:
            summary = f"{result.duplicate_groups} duplicate groups"
        else:
            verb = "would delete" if dry_run else "deleted"
            summary = f"{verb} {len(result.deleted)} files"
        typer.echo(
            f"Scanned {working_directory}; hashed {result.scanned} files; "
            f"{summary}; job: {result.job_file}",
            err=True,
        )
    return result


# ------------------------------
# CLI Commands
# ------------------------------

_JOB = typer.Option(..., "--job", "-j", help="Name of the job whose index is loaded and saved")
_ROOT = typer.Option(
    ...,
    "--working-directory",
    "-w",
    exists=True,
    file_okay=False,
    dir_okay=True,
    resolve_path=True,
    help="Directory to scan",
)
_IGNORE = typer.Option(
    None,
    "--ignore-file",
    "-i",
    exists=True,
    file_okay=True,
    dir_okay=False,
    help="File of regex patterns (one per line) for file names to skip. "
    "Defaults to desktop.ini, Thumbs.db and .DS_Store.",
)
_CLEAR = typer.Option(False, "--clear-cache", help="Start from an empty index instead of the saved one")
_OUTPUT = typer.Option(None, "--output", "-o", help="Write the report to this file ('-' for stdout, the default)")
_ALGO = typer.Option(
    DEFAULT_ALGORITHM, "--algorithm", help=f"Digest: {', '.join(sorted(ALGORITHMS))}"
)
_WORKERS = typer.Option(None, "--workers", min=1, help="Hashing threads (default: CPU count)")
_DATA_DIR = typer.Option(
    None,
    "--data-dir",
    envvar="DUPEKEEPER_DATA_DIR",
    file_okay=False,
    help="Where job files live (default: the per-user application directory, e.g. ~/.config/dupekeeper)",
)
_PRUNE = typer.Option(False, "--prune-missing", help="Drop saved paths that no longer exist before scanning")
_PROGRESS = typer.Option(False, "--progress", help="Show a progress bar on stderr")
_QUIET = typer.Option(False, "--quiet", help="Suppress the final summary line.")
_VERBOSE = typer.Option(False, "--verbose", help="Enable verbose logging")


@app.command()
def analyze(
    job: str = _JOB,
    working_directory: Path = _ROOT,
    ignore_file: Optional[Path] = _IGNORE,
    clear_cache: bool = _CLEAR,
    output: Optional[str] = _OUTPUT,
    fmt: str = typer.Option("text", "--fmt", help=f"Report format: {', '.join(FORMATS)}"),
    algorithm: str = _ALGO,
    workers: Optional[int] = _WORKERS,
    data_dir: Optional[Path] = _DATA_DIR,
    prune_missing: bool = _PRUNE,
    progress: bool = _PROGRESS,
    quiet: bool = _QUIET,
    verbose: bool = _VERBOSE,
):
    """
    Scan a directory, update the job index, and report duplicate groups.
    """
    _execute(
        RunMode.ANALYZE,
        job=job,
        working_directory=working_directory,
        ignore_file=ignore_file,
        clear_cache=clear_cache,
        output=output,
        algorithm=algorithm,
        workers=workers,
        data_dir=data_dir,
        prune_missing=prune_missing,
        progress=progress,
        quiet=quiet,
        verbose=verbose,
        fmt=_check_format(fmt),
    )


@app.command()
def delete(
    job: str = _JOB,
    working_directory: Path = _ROOT,
    ignore_file: Optional[Path] = _IGNORE,
    clear_cache: bool = _CLEAR,
    output: Optional[str] = _OUTPUT,
    dry_run: bool = typer.Option(False, "--dry-run", help="Log deletions without removing anything"),
    algorithm: str = _ALGO,
    workers: Optional[int] = _WORKERS,
    data_dir: Optional[Path] = _DATA_DIR,
    prune_missing: bool = _PRUNE,
    progress: bool = _PROGRESS,
    quiet: bool = _QUIET,
    verbose: bool = _VERBOSE,
):
    """
    Scan a directory, update the job index, and delete all but one copy of each duplicate.
    """
    _execute(
        RunMode.DELETE,
        job=job,
        working_directory=working_directory,
        ignore_file=ignore_file,
        clear_cache=clear_cache,
        output=output,
        algorithm=algorithm,
        workers=workers,
        data_dir=data_dir,
        prune_missing=prune_missing,
        progress=progress,
        quiet=quiet,
        verbose=verbose,
        dry_run=dry_run,
    )


@app.command()
def jobs(
    data_dir: Optional[Path] = _DATA_DIR,
):
    """
    List saved jobs.
    """
    store = JsonJobStore(_data_dir(data_dir))
    for name in store.jobs():
        typer.echo(name)
