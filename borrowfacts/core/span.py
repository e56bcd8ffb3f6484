# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source span representation used by parse errors and diagnostics.

A Span carries best-effort file/line/column (1-based) plus the character
offset into the parsed text. The parser-specific location object (a lark
token or exception) is kept in `raw` so richer renderers can recover it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Represents a source span (best-effort file/line/column plus raw parser loc)."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	end_line: Optional[int] = None
	end_column: Optional[int] = None
	offset: Optional[int] = None
	raw: Any = None

	@classmethod
	def from_loc(cls, loc: Any, *, file: Optional[str] = None) -> "Span":
		"""
		Construct a Span from a lark Token/exception or an existing Span.

		Lark reports unknown positions as -1 (e.g. on an empty input), which we
		normalize to None.
		"""
		if loc is None:
			return cls(file=file)
		if isinstance(loc, cls):
			if file is not None and loc.file is None:
				return cls(
					file=file,
					line=loc.line,
					column=loc.column,
					end_line=loc.end_line,
					end_column=loc.end_column,
					offset=loc.offset,
					raw=loc.raw,
				)
			return loc
		offset = getattr(loc, "start_pos", None)
		if offset is None:
			offset = getattr(loc, "pos_in_stream", None)
		return cls(
			file=file or getattr(loc, "file", None) or None,
			line=_known(getattr(loc, "line", None)),
			column=_known(getattr(loc, "column", None)),
			end_line=_known(getattr(loc, "end_line", None)),
			end_column=_known(getattr(loc, "end_column", None)),
			offset=_known(offset),
			raw=loc,
		)

	@classmethod
	def end_of(cls, text: str, *, file: Optional[str] = None, raw: Any = None) -> "Span":
		"""Span pointing just past the last character of `text`."""
		line = text.count("\n") + 1
		column = len(text) - (text.rfind("\n") + 1) + 1
		return cls(file=file, line=line, column=column, offset=len(text), raw=raw)

	def short(self) -> str:
		"""Format as `file:line:column`, with `?` for unknown parts."""
		f = self.file or "<unknown>"
		l = self.line if self.line is not None else "?"
		c = self.column if self.column is not None else "?"
		return f"{f}:{l}:{c}"


def _known(value: Optional[int]) -> Optional[int]:
	if value is None or value < 0:
		return None
	return value


__all__ = ["Span"]
