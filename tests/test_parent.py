import io
import sys
import tempfile

import pytest

from mmapsum.child import process_data
from mmapsum.parent import ParentError, main, run
from mmapsum.shared import CAPACITY


def _write(tmp_path, content: bytes, name="input.txt"):
    path = tmp_path / name
    path.write_bytes(content)
    return path


def test_run_pins_simple_sums(tmp_path):
    path = _write(tmp_path, b"1 2 3\n4.5 5.5\n")
    assert run(path) == b"Sum: 6.00\nSum: 10.00\n"


def test_run_matches_worker_processing(tmp_path):
    data = b"1.25 -3\n\n0.5\t0.25\n-7 2 1.75"
    path = _write(tmp_path, data)
    assert run(path) == process_data(data)


def test_run_empty_file_gives_empty_result(tmp_path):
    path = _write(tmp_path, b"")
    assert run(path) == b""


def test_run_missing_file(tmp_path):
    with pytest.raises(ParentError, match="Cannot open file"):
        run(tmp_path / "missing.txt")


def test_run_directory_is_rejected(tmp_path):
    with pytest.raises(ParentError, match="file"):
        run(tmp_path)


def test_run_reports_worker_parse_failure(tmp_path):
    path = _write(tmp_path, b"1 abc\n")
    with pytest.raises(ParentError, match="child process failed"):
        run(path)


def test_run_reports_worker_exit_code(tmp_path):
    path = _write(tmp_path, b"1 2\n")
    command = [sys.executable, "-c", "import sys; sys.exit(3)"]
    with pytest.raises(ParentError, match="exit code 3"):
        run(path, command)


def test_run_unstartable_worker(tmp_path):
    path = _write(tmp_path, b"1\n")
    with pytest.raises(ParentError, match="exec error"):
        run(path, [str(tmp_path / "no-such-program")])


def test_run_removes_region_file(tmp_path, monkeypatch):
    region_dir = tmp_path / "regions"
    region_dir.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(region_dir))
    path = _write(tmp_path, b"2 2\n")
    assert run(path) == process_data(b"2 2\n")
    assert list(region_dir.iterdir()) == []


def test_run_removes_region_file_on_error(tmp_path, monkeypatch):
    region_dir = tmp_path / "regions"
    region_dir.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(region_dir))
    with pytest.raises(ParentError):
        run(tmp_path / "missing.txt")
    assert list(region_dir.iterdir()) == []


def test_main_prints_result(tmp_path, monkeypatch, capsys):
    data = b"3 4\n10\n"
    path = _write(tmp_path, data)
    monkeypatch.setattr(sys, "stdin", io.StringIO(f"{path}\n"))
    assert main([]) == 0
    out = capsys.readouterr().out
    assert out == "Enter filename: Result:\n" + process_data(data).decode()


def test_main_missing_file(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO(f"{tmp_path / 'nope'}\n"))
    assert main([]) == 1
    captured = capsys.readouterr()
    assert "Cannot open file" in captured.err
    assert "Result:" not in captured.out


def test_main_no_filename(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO(""))
    assert main([]) == 1
    assert "Error reading filename" in capsys.readouterr().err