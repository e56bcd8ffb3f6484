# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Tab-delimited fact files, one `<relation>.facts` per relation.

Each row is a line of tab-separated, double-quoted fields:

	"'a"	"L0"	"Mid(B0[0])"

This is the layout the borrow-checking analysis loads its inputs from.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Tuple

from .facts import AllFacts

FACTS_SUFFIX = ".facts"


class FactFileError(ValueError):
	pass


def write_tab_delimited_facts(facts: AllFacts, directory: Path) -> List[Path]:
	"""Write every relation (empty ones included); returns the written paths."""
	directory.mkdir(parents=True, exist_ok=True)
	written: List[Path] = []
	for name, rows in facts.relations().items():
		path = directory / f"{name}{FACTS_SUFFIX}"
		path.write_text("".join(_format_row(row) + "\n" for row in rows), encoding="utf-8")
		written.append(path)
	return written


def load_tab_delimited_facts(directory: Path) -> AllFacts:
	"""Load relations from `directory`; a missing file is an empty relation."""
	if not directory.is_dir():
		raise FactFileError(f"facts directory not found: {directory}")
	facts = AllFacts()
	for name in AllFacts.relation_names():
		path = directory / f"{name}{FACTS_SUFFIX}"
		if not path.exists():
			continue
		rows = getattr(facts, name)
		for lineno, line in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
			if not line.strip():
				continue
			rows.append(_parse_row(line, path, lineno))
	return facts


def _format_row(row: Tuple[str, ...]) -> str:
	return "\t".join(f'"{value}"' for value in row)


def _parse_row(line: str, path: Path, lineno: int) -> Tuple[str, ...]:
	values = []
	for raw in line.split("\t"):
		if len(raw) < 2 or not (raw.startswith('"') and raw.endswith('"')):
			raise FactFileError(f"{path}:{lineno}: expected a double-quoted field, got {raw!r}")
		values.append(raw[1:-1])
	return tuple(values)


__all__ = ["FACTS_SUFFIX", "FactFileError", "write_tab_delimited_facts", "load_tab_delimited_facts"]
