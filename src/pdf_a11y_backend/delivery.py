"""
Result delivery: persist reports and write script-mode outputs.

Reports are written under a directory created on demand, one file per
request, named ``<unix-ms>-accessibility-report.json``. Files are never
cleaned up.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .errors import ReportStorageError
from .models import DeliveredReport, JobOutcome
from .utils import ensure_directory, unix_millis

logger = logging.getLogger(__name__)


class ReportStore:
    """
    Writes report bytes to timestamped files.

    Files are created exclusively; when a name is already taken (two reports
    in the same millisecond) the timestamp is bumped until a free name is
    found, so names never collide and their numeric prefixes never go
    backwards for sequential requests.
    """

    def __init__(self, directory: Path | str = "reports", suffix: str = "accessibility-report.json") -> None:
        self.directory = Path(directory)
        self.suffix = suffix

    def _open_new_file(self):
        timestamp = unix_millis()
        while True:
            path = self.directory / f"{timestamp}-{self.suffix}"
            try:
                return path, path.open("xb")
            except FileExistsError:
                timestamp += 1

    def save(self, content: bytes) -> DeliveredReport:
        try:
            ensure_directory(self.directory)
            path, handle = self._open_new_file()
            with handle:
                handle.write(content)
        except OSError as exc:
            raise ReportStorageError(f"Could not write report to {self.directory}: {exc}") from exc

        logger.info(f"Saved report to {path} ({len(content)} bytes)")
        return DeliveredReport(path=path, content=content)


def write_script_outputs(outcome: JobOutcome, tagged_pdf_path: Path, report_path: Path) -> list[Path]:
    """
    Write the auto-tag results to fixed paths, overwriting previous runs.

    The tagged PDF is written first; each file is fully written and closed
    before the next one is started.

    Raises:
        ReportStorageError: If an expected asset is missing or a write fails
    """
    written = []
    for asset, destination in ((outcome.tagged_pdf, tagged_pdf_path), (outcome.report, report_path)):
        if asset is None:
            raise ReportStorageError(f"{outcome.kind.value} job returned no asset for {destination}")
        try:
            destination.write_bytes(asset.content)
        except OSError as exc:
            raise ReportStorageError(f"Could not write {destination}: {exc}") from exc
        logger.info(f"Saved {asset.name} to {destination}")
        written.append(destination)
    return written
