# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Fact program parser.

The grammar lives in `grammar.lark` next to this module and is compiled once
into an LALR(1) parser with a basic (context-free) lexer. `parse_input` runs
it and walks the resulting lark tree into the frozen dataclasses of `ast`.

Failures surface as `ParseError` subclasses carrying a `Span`:
  * `LexicalError`: no terminal matches the text at some position;
  * `ProgramSyntaxError`: a valid token appears where the grammar does not
    allow it (including premature end of input).
There is no recovery; the first error aborts the parse.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken
from lark.lexer import PatternStr

from borrowfacts.core.diagnostics import Diagnostic
from borrowfacts.core.span import Span

from .ast import (
	Block,
	BlockName,
	BorrowRegionAt,
	DefineVariable,
	Effect,
	Input,
	Invalidates,
	Kill,
	Loan,
	Located,
	Outlives,
	Region,
	RegionLiveAt,
	Statement,
	Use,
	UseVariable,
	Variable,
	VarRegion,
)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
)


class ParseError(ValueError):
	"""Base class for fact program parse failures."""

	code = "E-PARSE"
	phase = "parser"

	def __init__(self, message: str, span: Span, notes: Optional[List[str]] = None) -> None:
		super().__init__(message)
		self.message = message
		self.span = span
		self.notes = list(notes or [])

	@property
	def raw(self) -> object:
		"""Underlying lark exception (or None when raised directly)."""
		return self.span.raw

	def __str__(self) -> str:
		if self.span.line is None:
			return self.message
		return f"{self.message} at line {self.span.line}, column {self.span.column}"

	def to_diagnostic(self) -> Diagnostic:
		return Diagnostic(
			message=self.message,
			code=self.code,
			phase=self.phase,
			severity="error",
			span=self.span,
			notes=list(self.notes),
		)


class LexicalError(ParseError):
	"""Input text that matches no token (unknown sigil, stray character)."""

	code = "E-LEX"
	phase = "lexer"

	def __init__(self, message: str, span: Span, char: str, notes: Optional[List[str]] = None) -> None:
		super().__init__(message, span, notes)
		self.char = char


class ProgramSyntaxError(ParseError):
	"""A token sequence no grammar production accepts."""

	code = "E-SYNTAX"

	def __init__(
		self,
		message: str,
		span: Span,
		token: Optional[str],
		expected: Tuple[str, ...],
		notes: Optional[List[str]] = None,
	) -> None:
		super().__init__(message, span, notes)
		self.token = token
		self.expected = expected


def parse_input(source: str, *, file: Optional[str] = None) -> Input:
	"""
	Parse a complete fact program.

	Raises `LexicalError` or `ProgramSyntaxError` (both `ParseError`) on the
	first problem found; no partial AST is returned.
	"""
	try:
		tree = _PARSER.parse(source)
	except UnexpectedInput as err:
		raise _convert_error(err, source, file) from None
	return _build_input(tree)


def try_parse_input(source: str, *, file: Optional[str] = None) -> Tuple[Optional[Input], List[Diagnostic]]:
	"""
	Diagnostics-sink variant of `parse_input`.

	Returns `(input, [])` on success and `(None, [diagnostic])` on failure.
	"""
	try:
		return parse_input(source, file=file), []
	except ParseError as err:
		return None, [err.to_diagnostic()]


# Error conversion


def _convert_error(err: UnexpectedInput, source: str, file: Optional[str]) -> ParseError:
	if isinstance(err, UnexpectedCharacters):
		char = source[err.pos_in_stream] if 0 <= err.pos_in_stream < len(source) else ""
		span = Span.from_loc(err, file=file)
		return LexicalError(f"unrecognized input {char!r}", span, char)
	if isinstance(err, UnexpectedToken):
		expected = _describe_expected(err.expected)
		token = err.token
		if token.type == "$END":
			span = Span.end_of(source, file=file, raw=err)
			message = "unexpected end of input"
			found: Optional[str] = None
		else:
			span = replace(Span.from_loc(token, file=file), raw=err)
			message = f"unexpected {_describe_token(token)}"
			found = str(token)
		return ProgramSyntaxError(message, span, found, expected, notes=_expected_notes(expected))
	if isinstance(err, UnexpectedEOF):
		expected = _describe_expected(err.expected)
		span = Span.end_of(source, file=file, raw=err)
		return ProgramSyntaxError("unexpected end of input", span, None, expected, notes=_expected_notes(expected))
	raise TypeError(f"Unexpected lark error type: {type(err)}")


def _describe_token(token: Token) -> str:
	if token.type in _IDENT_KINDS:
		return f"{_IDENT_KINDS[token.type]} {str(token)!r}"
	return f"token {str(token)!r}"


def _describe_expected(names: object) -> Tuple[str, ...]:
	out = []
	for name in sorted(names or ()):
		if name == "$END":
			out.append("end of input")
			continue
		if name in _IDENT_KINDS:
			out.append(_IDENT_KINDS[name])
			continue
		try:
			term = _PARSER.get_terminal(name)
		except KeyError:
			out.append(name)
			continue
		if isinstance(term.pattern, PatternStr):
			out.append(repr(term.pattern.value))
		else:
			out.append(name)
	return tuple(sorted(set(out)))


def _expected_notes(expected: Tuple[str, ...]) -> List[str]:
	if not expected:
		return []
	return ["expected one of: " + ", ".join(expected)]


_IDENT_KINDS: Dict[str, str] = {
	"REGION": "region",
	"BLOCK_NAME": "block name",
	"LOAN": "loan",
	"VARIABLE": "variable",
}


# Tree -> AST


def _build_input(tree: Tree) -> Input:
	universal_regions: Tuple[Region, ...] = ()
	var_uses_region: Tuple[VarRegion, ...] = ()
	var_drops_region: Tuple[VarRegion, ...] = ()
	blocks: List[Block] = []
	for child in tree.children:
		kind = _name(child)
		if kind == "universal_regions":
			universal_regions = tuple(Region(tok) for tok in child.children)
		elif kind == "var_uses_region":
			var_uses_region = _build_var_regions(child)
		elif kind == "var_drops_region":
			var_drops_region = _build_var_regions(child)
		elif kind == "block_defn":
			blocks.append(_build_block(child))
		else:
			raise TypeError(f"Unexpected top-level node: {kind}")
	return Input(
		universal_regions=universal_regions,
		var_uses_region=var_uses_region,
		var_drops_region=var_drops_region,
		blocks=tuple(blocks),
	)


def _build_var_regions(tree: Tree) -> Tuple[VarRegion, ...]:
	pairs = []
	for mapping in tree.children:
		variable, region = mapping.children
		pairs.append((Variable(variable), Region(region)))
	return tuple(pairs)


def _build_block(tree: Tree) -> Block:
	children = list(tree.children)
	name_token = children[0]
	statements: List[Statement] = []
	goto: Tuple[BlockName, ...] = ()
	for child in children[1:]:
		kind = _name(child)
		if kind in ("statement", "split_statement"):
			statements.append(_build_statement(child))
		elif kind == "goto":
			goto = tuple(BlockName(tok) for tok in child.children)
		else:
			raise TypeError(f"Unexpected block child: {kind}")
	return Block(
		name=BlockName(name_token),
		statements=tuple(statements),
		goto=goto,
		loc=_loc(tree),
	)


def _build_statement(tree: Tree) -> Statement:
	groups = [_build_effects(child) for child in tree.children]
	if _name(tree) == "split_statement":
		effects_start, effects = groups
		return Statement(effects=effects, effects_start=effects_start, loc=_loc(tree))
	(effects,) = groups
	return Statement(effects=effects, loc=_loc(tree))


def _build_effects(tree: Tree) -> Tuple[Effect, ...]:
	if _name(tree) != "effects":
		raise TypeError(f"Unexpected effects node: {_name(tree)}")
	return tuple(_build_effect(child) for child in tree.children)


def _build_effect(tree: Tree) -> Effect:
	kind = _name(tree)
	builder = _EFFECT_BUILDERS.get(kind)
	if builder is None:
		raise TypeError(f"Unexpected effect node: {kind}")
	return builder([str(tok) for tok in tree.children])


# Keyword -> constructor over the identifier texts. `var_used` and
# `var_drop_used` intentionally build the same fact.
_EFFECT_BUILDERS: Dict[str, Callable[[List[str]], Effect]] = {
	"outlives": lambda a: Outlives(a=Region(a[0]), b=Region(a[1])),
	"borrow_region_at": lambda a: BorrowRegionAt(region=Region(a[0]), loan=Loan(a[1])),
	"invalidates": lambda a: Invalidates(loan=Loan(a[0])),
	"kill": lambda a: Kill(loan=Loan(a[0])),
	"var_used": lambda a: UseVariable(variable=Variable(a[0])),
	"var_drop_used": lambda a: UseVariable(variable=Variable(a[0])),
	"var_defined": lambda a: DefineVariable(variable=Variable(a[0])),
	"region_live_at": lambda a: RegionLiveAt(region=Region(a[0])),
	"use": lambda a: Use(regions=tuple(Region(r) for r in a)),
}


def _loc(tree: Tree) -> Optional[Located]:
	meta = tree.meta
	if getattr(meta, "empty", True):
		return None
	return Located(line=meta.line, column=meta.column)


def _name(node: Tree | Token) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	if isinstance(node, Token):
		return node.type
	return str(node)


__all__ = [
	"ParseError",
	"LexicalError",
	"ProgramSyntaxError",
	"parse_input",
	"try_parse_input",
]
