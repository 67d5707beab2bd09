from __future__ import annotations

from pathlib import Path

import pytest

from app.storage.upload_staging import UploadStagingArea, UploadStagingError


def test_staged_file_exists_inside_block_and_is_removed_after(tmp_path: Path) -> None:
    area = UploadStagingArea(tmp_path / "uploads")

    with area.staged(file_name="Sales Report.CSV", content=b"a,b\n1,2\n") as staged:
        assert staged.path.is_file()
        assert staged.path.read_bytes() == b"a,b\n1,2\n"
        assert staged.extension == ".csv"
        assert staged.size_bytes == 8
        assert staged.file_name == "Sales Report.CSV"

    assert not staged.path.exists()
    assert list((tmp_path / "uploads").iterdir()) == []


def test_staged_file_is_removed_when_block_raises(tmp_path: Path) -> None:
    area = UploadStagingArea(tmp_path)

    with pytest.raises(ValueError):
        with area.staged(file_name="sales.xlsx", content=b"x") as staged:
            raise ValueError("boom")

    assert not staged.path.exists()


def test_client_path_components_are_discarded(tmp_path: Path) -> None:
    area = UploadStagingArea(tmp_path / "uploads")

    staged = area.save(file_name="../../etc/sales.csv", content=b"")

    assert staged.file_name == "sales.csv"
    assert staged.path.parent == tmp_path / "uploads"
    area.release(staged)


def test_release_twice_is_harmless(tmp_path: Path) -> None:
    area = UploadStagingArea(tmp_path)
    staged = area.save(file_name="a.csv", content=b"1")

    area.release(staged)
    area.release(staged)

    assert not staged.path.exists()


def test_empty_file_name_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(UploadStagingError):
        UploadStagingArea(tmp_path).save(file_name="", content=b"1")
