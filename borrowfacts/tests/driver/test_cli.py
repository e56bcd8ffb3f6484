# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import json
from pathlib import Path

import pytest

from borrowfacts.cli import main as borrowfacts_main


def _write_file(path: Path, text: str) -> Path:
	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_text(text, encoding="utf-8")
	return path


def _run_json(argv: list[str], capsys: pytest.CaptureFixture[str]) -> tuple[int, dict]:
	rc = borrowfacts_main([*argv, "--json"])
	out = capsys.readouterr().out
	return rc, json.loads(out)


_GOOD = """
universal_regions { 'a }
block B0 {
	borrow_region_at('a, L0);
	goto B1;
}
block B1 {
	region_live_at('a);
}
"""


def test_ok_file_human_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write_file(tmp_path / "good.facts", _GOOD)
	rc = borrowfacts_main([str(src)])
	captured = capsys.readouterr()
	assert rc == 0
	assert captured.out.strip() == f"[ok] {src}"
	assert captured.err == ""


def test_emit_facts_human_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write_file(tmp_path / "good.facts", _GOOD)
	rc = borrowfacts_main([str(src), "--emit", "facts"])
	lines = capsys.readouterr().out.splitlines()
	assert rc == 0
	assert "borrow_region\t'a\tL0\tMid(B0[0])" in lines
	assert "cfg_edge\tMid(B0[0])\tStart(B1[0])" in lines


def test_emit_ast_json(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write_file(tmp_path / "good.facts", _GOOD)
	rc, payload = _run_json([str(src), "--emit", "ast"], capsys)
	assert rc == 0
	assert payload["exit_code"] == 0
	assert payload["diagnostics"] == []
	(result,) = payload["files"]
	assert result["ok"] is True
	ast_json = result["ast"]
	assert ast_json["kind"] == "Input"
	assert ast_json["universal_regions"] == ["'a"]
	assert [b["name"] for b in ast_json["blocks"]] == ["B0", "B1"]
	assert ast_json["blocks"][0]["goto"] == ["B1"]


def test_syntax_error_json(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write_file(tmp_path / "bad.facts", "universal_regions { 'a 'b }\n")
	rc, payload = _run_json([str(src)], capsys)
	assert rc == 1
	assert payload["exit_code"] == 1
	(diag,) = payload["diagnostics"]
	assert diag["phase"] == "parser"
	assert diag["code"] == "E-SYNTAX"
	assert diag["file"] == str(src)
	assert diag["line"] == 1
	assert diag["column"] == 24
	assert payload["files"] == [{"file": str(src), "ok": False}]


def test_lexical_error_human_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write_file(tmp_path / "bad.facts", "universal_regions { }\nblock B0 { kill(X0); }\n")
	rc = borrowfacts_main([str(src)])
	err = capsys.readouterr().err
	assert rc == 1
	assert err.startswith(f"{src}:2:17: error: unrecognized input 'X'")


def test_mixed_files_fail_overall(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	good = _write_file(tmp_path / "good.facts", _GOOD)
	bad = _write_file(tmp_path / "bad.facts", "block B0 { }")
	rc, payload = _run_json([str(good), str(bad)], capsys)
	assert rc == 1
	assert [f["ok"] for f in payload["files"]] == [True, False]
	assert len(payload["diagnostics"]) == 1


def test_missing_file_reported(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	rc, payload = _run_json([str(tmp_path / "missing.facts")], capsys)
	assert rc == 1
	(diag,) = payload["diagnostics"]
	assert diag["phase"] == "io"
	assert diag["file"] == str(tmp_path / "missing.facts")


def test_facts_dir_written(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write_file(tmp_path / "prog.facts", _GOOD)
	out_dir = tmp_path / "out"
	rc = borrowfacts_main([str(src), "--facts-dir", str(out_dir)])
	capsys.readouterr()
	assert rc == 0
	region_live_at = (out_dir / "prog" / "region_live_at.facts").read_text().splitlines()
	assert region_live_at == ['"\'a"\t"Start(B1[0])"', '"\'a"\t"Mid(B1[0])"']


def test_facts_dir_refuses_duplicate_stem(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	first = _write_file(tmp_path / "a" / "prog.txt", "universal_regions { } block B0 { kill(L0); }")
	second = _write_file(tmp_path / "b" / "prog.txt", "universal_regions { } block B9 { kill(L9); }")
	out_dir = tmp_path / "out"
	rc, payload = _run_json([str(first), str(second), "--facts-dir", str(out_dir)], capsys)
	assert rc == 1
	assert [f["ok"] for f in payload["files"]] == [True, False]
	(diag,) = payload["diagnostics"]
	assert diag["phase"] == "io"
	assert diag["file"] == str(second)
	assert str(first) in diag["message"]
	killed = (out_dir / "prog" / "killed.facts").read_text()
	assert killed == '"L0"\t"Mid(B0[0])"\n'
