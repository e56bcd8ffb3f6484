# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Command-line driver: parse fact program files and report the outcome.

Human-readable mode prints `[ok] <file>` per parsed file and
`file:line:column: error: message` lines on stderr for failures. With
--json a single structured payload (exit_code, diagnostics, per-file results)
is printed on stdout instead.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

from borrowfacts.core.diagnostics import Diagnostic, has_errors
from borrowfacts.core.span import Span
from borrowfacts.facts import lower_input
from borrowfacts.parser import try_parse_input
from borrowfacts.parser.ast import to_jsonable
from borrowfacts.tab_delim import write_tab_delimited_facts


def _build_arg_parser() -> argparse.ArgumentParser:
	ap = argparse.ArgumentParser(
		prog="borrowfacts",
		description="Parse borrow-checking fact programs and lower them to analysis input facts",
	)
	ap.add_argument("source", type=Path, nargs="+", help="Fact program file(s)")
	ap.add_argument(
		"--emit",
		choices=("none", "ast", "facts"),
		default="none",
		help="What to print for each successfully parsed file (default: none)",
	)
	ap.add_argument(
		"--facts-dir",
		type=Path,
		help="Write tab-delimited <relation>.facts files here (one subdirectory per source file stem; stems must be distinct)",
	)
	ap.add_argument(
		"--json",
		action="store_true",
		help="Print a structured JSON payload (diagnostics and per-file results) on stdout",
	)
	return ap


def main(argv: list[str] | None = None) -> int:
	args = _build_arg_parser().parse_args(argv)

	diagnostics: List[Diagnostic] = []
	results: List[Dict[str, Any]] = []
	written_dirs: Dict[Path, Path] = {}
	for path in args.source:
		result: Dict[str, Any] = {"file": str(path), "ok": False}
		results.append(result)
		try:
			text = path.read_text(encoding="utf-8")
		except OSError as err:
			diag = Diagnostic(message=f"cannot read file: {err.strerror or err}", phase="io", span=Span(file=str(path)))
			diagnostics.append(diag)
			_report(args, [diag])
			continue

		program, parse_diags = try_parse_input(text, file=str(path))
		if program is None:
			diagnostics.extend(parse_diags)
			_report(args, parse_diags)
			continue

		if args.facts_dir is not None:
			out_dir = args.facts_dir / path.stem
			previous = written_dirs.get(out_dir)
			if previous is not None:
				diag = Diagnostic(
					message=f"facts directory {out_dir} already written for {previous}",
					phase="io",
					span=Span(file=str(path)),
					notes=["source files passed with --facts-dir must have distinct stems"],
				)
				diagnostics.append(diag)
				_report(args, [diag])
				continue
			written_dirs[out_dir] = path

		result["ok"] = True
		facts = None
		if args.emit == "facts" or args.facts_dir is not None:
			facts = lower_input(program)
		if args.facts_dir is not None:
			write_tab_delimited_facts(facts, out_dir)
			result["facts_dir"] = str(out_dir)

		if args.emit == "ast":
			result["ast"] = to_jsonable(program)
		elif args.emit == "facts":
			result["facts"] = {name: [list(row) for row in rows] for name, rows in facts.relations().items()}

		if not args.json:
			print(f"[ok] {path}")
			if args.emit == "ast":
				print(json.dumps(result["ast"], indent=2))
			elif args.emit == "facts":
				for name, rows in facts.relations().items():
					for row in rows:
						print("\t".join([name, *row]))

	exit_code = 1 if has_errors(diagnostics) else 0
	if args.json:
		payload = {
			"exit_code": exit_code,
			"diagnostics": [d.to_json("parser") for d in diagnostics],
			"files": results,
		}
		print(json.dumps(payload))
	return exit_code


def _report(args: argparse.Namespace, diagnostics: List[Diagnostic]) -> None:
	if args.json:
		return
	for d in diagnostics:
		print(d.render(), file=sys.stderr)
		for note in d.notes:
			print(f"  note: {note}", file=sys.stderr)


__all__ = ["main"]
