from __future__ import annotations

import struct
import tempfile
from pathlib import Path

import pandas as pd
import pytest

from pst_scanner.analysis.checksum import pst_checksum
from pst_scanner.scripts.scan import main


def _write_store(path: Path, size: int = 2048) -> Path:
    buf = bytearray(size)
    struct.pack_into("<IIHH", buf, 0, 0x4E444221, 0, 0x534D, 36)
    struct.pack_into("<Q", buf, 0xA4, size)
    struct.pack_into("<I", buf, 4, pst_checksum(buf, 8, 471))
    path.write_bytes(bytes(buf))
    return path


def test_healthy_file_exit_code_zero(capsys) -> None:
    with tempfile.TemporaryDirectory() as d:
        p = _write_store(Path(d) / "good.ost")
        assert main(["--file", str(p)]) == 0
        out = capsys.readouterr().out
        assert "HEALTHY" in out
        assert "Scanned: 1 file(s)" in out
        assert "Healthy: 1 file(s)" in out


def test_corrupt_file_exit_code_and_csv(capsys) -> None:
    with tempfile.TemporaryDirectory() as d:
        good = _write_store(Path(d) / "good.ost")
        bad = Path(d) / "bad.pst"
        bad.write_bytes(b"\x00" * 1000)
        csv_path = Path(d) / "out" / "results.csv"

        rc = main(["-f", str(good), "-f", str(bad), "--jobs", "2", "--csv", str(csv_path)])
        assert rc == 1
        out = capsys.readouterr().out
        assert "CORRUPTED" in out
        assert "Use --delete" in out
        assert bad.exists()

        df = pd.read_csv(csv_path)
        assert df["valid"].tolist() == [True, False]
        assert df["path"].tolist() == [str(good), str(bad)]


def test_delete_backs_up_corrupt_file(capsys) -> None:
    with tempfile.TemporaryDirectory() as d:
        bad = Path(d) / "bad.ost"
        bad.write_bytes(b"\x00" * 10)
        assert main(["--file", str(bad), "--delete"]) == 1
        assert not bad.exists()
        backups = list(Path(d).glob("bad.ost.corrupted.*.bak"))
        assert len(backups) == 1
        assert "Backup location" in capsys.readouterr().out


def test_delete_no_backup(capsys) -> None:
    with tempfile.TemporaryDirectory() as d:
        bad = Path(d) / "bad.ost"
        bad.write_bytes(b"\x00" * 10)
        assert main(["--file", str(bad), "--delete", "--no-backup"]) == 1
        assert list(Path(d).iterdir()) == []
        assert "File deleted" in capsys.readouterr().out


def test_invalid_jobs_is_usage_error() -> None:
    with pytest.raises(SystemExit) as exc:
        main(["--jobs", "0"])
    assert exc.value.code == 2
