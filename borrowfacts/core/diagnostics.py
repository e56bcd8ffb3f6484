"""
Common diagnostic structure for the parser and its command-line driver.

A diagnostic is a message plus a span and optional metadata. Parse errors are
converted into diagnostics so callers that prefer a sink of findings over
exceptions (the CLI, batch loaders) can collect them uniformly.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .span import Span


@dataclass
class Diagnostic:
	"""Represents a diagnostic (error/warning/etc.)."""

	message: str
	code: str | None = None
	# Optional phase label ("lexer", "parser", "facts"); used by JSON output.
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Source location (Span() denotes unknown).
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		# Normalize missing spans to the sentinel Span() so downstream tooling
		# can rely on a structured object instead of None.
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	def to_json(self, default_phase: str | None = None) -> dict:
		"""Render to a structured JSON-friendly dict."""
		return {
			"phase": self.phase or default_phase,
			"code": self.code,
			"message": self.message,
			"severity": self.severity,
			"file": self.span.file,
			"line": self.span.line,
			"column": self.span.column,
			"offset": self.span.offset,
			"notes": list(self.notes),
		}

	def render(self) -> str:
		"""Human-readable single line: `file:line:column: severity: message`."""
		return f"{self.span.short()}: {self.severity}: {self.message}"


def has_errors(diagnostics: list[Diagnostic]) -> bool:
	return any(d.severity == "error" for d in diagnostics)


__all__ = ["Diagnostic", "has_errors"]
