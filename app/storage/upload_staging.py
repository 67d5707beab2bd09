"""
app/storage/upload_staging.py

Temporary on-disk staging for uploaded spreadsheet files.

An upload lives on disk only for the duration of one ingestion; ``staged()``
guarantees the file is removed exactly once whichever way the block exits.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


class UploadStagingError(RuntimeError):
    """Raised when an upload cannot be written to the staging directory."""


@dataclass(frozen=True)
class StagedUpload:
    """
    One upload written to the staging directory.
    """

    file_name: str
    path: Path
    size_bytes: int

    @property
    def extension(self) -> str:
        return Path(self.file_name).suffix.lower()


def _sanitize_file_name(file_name: str) -> str:
    safe_name = Path(file_name or "").name.strip()
    if not safe_name:
        raise UploadStagingError("Invalid file name.")
    return safe_name


class UploadStagingArea:
    """
    Local filesystem directory holding in-flight uploads.
    """

    def __init__(self, root_dir: str | Path = "data/uploads") -> None:
        self._root_dir = Path(root_dir)

    @property
    def root_dir(self) -> Path:
        return self._root_dir

    def save(self, *, file_name: str, content: bytes) -> StagedUpload:
        safe_file_name = _sanitize_file_name(file_name)
        target = self._root_dir / f"upload-{uuid.uuid4().hex}{Path(safe_file_name).suffix.lower()}"
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with target.open("wb") as handle:
                handle.write(content)
        except OSError as exc:
            if target.exists():
                target.unlink(missing_ok=True)
            raise UploadStagingError("Failed to write uploaded file to staging.") from exc

        return StagedUpload(file_name=safe_file_name, path=target, size_bytes=len(content))

    def release(self, staged: StagedUpload) -> None:
        """
        Delete a staged upload. A failed delete is logged, never raised.
        """

        try:
            staged.path.unlink(missing_ok=True)
        except OSError:
            logger.warning("Failed to delete staged upload path=%s", staged.path, exc_info=True)

    @contextmanager
    def staged(self, *, file_name: str, content: bytes) -> Iterator[StagedUpload]:
        staged_upload = self.save(file_name=file_name, content=content)
        try:
            yield staged_upload
        finally:
            self.release(staged_upload)
