# tests/test_cli.py
from pathlib import Path

import pytest

from ctxfile.cli import main


def _make_file(p: Path, content: str = "x"):
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(content, encoding="utf-8")


def test_success_writes_output_inside_dir(tmp_path: Path, capsys):
    _make_file(tmp_path / "x.txt", "A")
    _make_file(tmp_path / "y.md", "B")

    main(["--dir", str(tmp_path), "--include", "*.txt", "--output", "ctx.txt"])

    out = tmp_path / "ctx.txt"
    assert out.read_bytes() == b"x.txt\n\n\n=== File: x.txt ===\nA\n"
    assert "Output file created at:" in capsys.readouterr().out


def test_default_output_name(tmp_path: Path):
    _make_file(tmp_path / "a.py", "pass")

    main(["--dir", str(tmp_path)])

    assert (tmp_path / "context.txt").is_file()


def test_no_matches_exits_zero(tmp_path: Path, capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--dir", str(tmp_path)])

    assert exc.value.code == 0
    assert "No matching files found" in capsys.readouterr().out
    assert not (tmp_path / "context.txt").exists()


def test_exclude_list_is_split_and_trimmed(tmp_path: Path):
    _make_file(tmp_path / "a.log")
    _make_file(tmp_path / "b.tmp")
    _make_file(tmp_path / "c.py", "ok")

    main(["--dir", str(tmp_path), "--exclude", "*.log , *.tmp"])

    text = (tmp_path / "context.txt").read_text(encoding="utf-8")
    assert text.startswith("c.py\n\n")
    assert "a.log" not in text
    assert "b.tmp" not in text


def test_missing_dir_exits_one(tmp_path: Path, capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--dir", str(tmp_path / "nope")])

    assert exc.value.code == 1
    assert "Error walking directory" in capsys.readouterr().err


def test_write_failure_exits_one(tmp_path: Path, capsys):
    _make_file(tmp_path / "a.txt")

    with pytest.raises(SystemExit) as exc:
        main(["--dir", str(tmp_path), "--output", "no/such/dir.txt"])

    assert exc.value.code == 1
    assert "Error writing output file" in capsys.readouterr().err


def test_read_failure_keeps_exit_code(tmp_path: Path, capsys, monkeypatch):
    _make_file(tmp_path / "bad.txt", "secret")
    _make_file(tmp_path / "good.txt", "fine")
    real_read_bytes = Path.read_bytes

    def fake_read_bytes(self):
        if self.name == "bad.txt":
            raise PermissionError(13, "Permission denied", str(self))
        return real_read_bytes(self)

    monkeypatch.setattr(Path, "read_bytes", fake_read_bytes)

    main(["--dir", str(tmp_path)])

    captured = capsys.readouterr()
    assert "Error reading file bad.txt" in captured.err
    assert "Output file created at:" in captured.out
    monkeypatch.undo()
    text = (tmp_path / "context.txt").read_text(encoding="utf-8")
    assert "=== File: good.txt ===\nfine\n" in text
    assert "=== File: bad.txt ===" not in text
    assert text.startswith("bad.txt\ngood.txt\n\n")


def test_gitignore_flag(tmp_path: Path):
    _make_file(tmp_path / ".gitignore", "*.log\n")
    _make_file(tmp_path / "app.log")
    _make_file(tmp_path / "app.py", "run()")

    main(["--dir", str(tmp_path), "--gitignore", "--exclude", ".gitignore"])

    text = (tmp_path / "context.txt").read_text(encoding="utf-8")
    assert text.startswith("app.py\n\n")


def test_verbose_reports_progress(tmp_path: Path, capsys):
    _make_file(tmp_path / "a.txt")

    main(["--dir", str(tmp_path), "-v"])

    assert "[ctxfile] Scanning" in capsys.readouterr().out
